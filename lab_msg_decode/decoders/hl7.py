"""
Decoder for the hospital interface protocol (format B, tag "hl7").

Input structure:
  - One segment per line; any run of CR/LF separates lines.
  - The first three characters are the segment code (MSH, PID, OBR, ...).
  - The MSH header is self-describing: its fourth character is the field
    separator for the rest of that line, and MSH-2 declares the encoding
    characters (component, repetition, escape, subcomponent) that apply
    to every following line of the message.
  - Every other segment uses the fixed ``|`` separator.

Field numbering differs between the header and everything else:

  MSH|^~\\&|LIS|...     token 0 ("MSH") is not surfaced;
                        token n becomes field n (MSH-1 is "|").
  PID|1||12345|...      token 0 ("PID") becomes field 1 "Segment Type";
                        token n becomes field n + 1.

Catalogue names and annotations are keyed by the protocol's own field
number (the token position), so PID token 1 is "Set ID" whatever index
it is surfaced under.

Each field value is decomposed into components (split on the component
separator) and each component into subcomponents (split on the
subcomponent separator).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from lab_msg_decode.catalogue_registry import extract_header_summary
from lab_msg_decode.config import DEFAULT_ENCODING_CHARACTERS
from lab_msg_decode.decoders.base import BaseDecoder, count_segment_types
from lab_msg_decode.detect import HL7
from lab_msg_decode.exceptions import SegmentDecodeError, UnknownSegmentTypeError
from lab_msg_decode.models import (
    Component,
    DecodeMetadata,
    DecodeResult,
    Field,
    ParseError,
    Segment,
    ValidationResult,
    ValidationSummary,
)

logger = logging.getLogger(__name__)

_LINE_SPLIT = re.compile(r"[\r\n]+")

SEGMENT_TYPE_FIELD_NAME = "Segment Type"

# MSH field carrying the declared encoding characters
_ENCODING_CHARACTERS_FIELD = 2


@dataclass(frozen=True)
class EncodingCharacters:
    """The four separators declared in MSH-2."""
    component: str = "^"
    repetition: str = "~"
    escape: str = "\\"
    subcomponent: str = "&"

    @classmethod
    def from_declaration(
        cls,
        declared: str | None,
        default: str = DEFAULT_ENCODING_CHARACTERS,
    ) -> EncodingCharacters:
        """Build from a declared string, completing a short one from *default*.

        Characters past the fourth (e.g. a truncation character) are ignored.
        """
        declared = declared or ""
        chars = (declared + default[len(declared):])[:4]
        return cls(*chars)

    @property
    def declaration(self) -> str:
        return f"{self.component}{self.repetition}{self.escape}{self.subcomponent}"


def parse_components(value: str, encoding: EncodingCharacters) -> tuple[Component, ...]:
    """Split a field value into components and subcomponents.

    An empty value has no components. A component without the
    subcomponent separator has a single subcomponent equal to itself.
    """
    if not value:
        return ()
    return tuple(
        Component(
            index=position + 1,
            value=part,
            subcomponents=tuple(part.split(encoding.subcomponent)),
        )
        for position, part in enumerate(value.split(encoding.component))
    )


class Hl7Decoder(BaseDecoder):
    """Decoder for format B messages."""

    format_tag = HL7

    def split_lines(self, data: str) -> list[str]:
        return _LINE_SPLIT.split(data.strip())

    def _encoding(self, encoding_characters: str | None) -> EncodingCharacters:
        return EncodingCharacters.from_declaration(
            encoding_characters, self.config.default_encoding_characters
        )

    def _build_field(
        self,
        segment_type: str,
        field_number: int,
        index: int,
        token: str,
        encoding: EncodingCharacters,
    ) -> Field:
        value = token.strip()
        return Field(
            index=index,
            name=self.catalogue.field_name(segment_type, field_number, display_index=index),
            value=value,
            description=self.catalogue.field_description(segment_type, field_number),
            components=parse_components(value, encoding),
        )

    def decode_segment(
        self,
        line: str,
        line_number: int,
        encoding_characters: str | None = None,
    ) -> Segment:
        """Decode one trimmed line.

        Args:
            line: The segment text.
            line_number: 1-based line number within the message.
            encoding_characters: Active separators; the configured default
                when ``None``.

        Raises:
            SegmentDecodeError: If the line is too short to carry a
                segment code, or a header line has no field separator.
            UnknownSegmentTypeError: If the segment code is not known.
        """
        if len(line) < 3:
            raise SegmentDecodeError(
                f"Segment too short to carry an HL7 segment type: {line!r}"
            )

        segment_type = line[:3]
        if not self.catalogue.is_known(segment_type):
            raise UnknownSegmentTypeError(f"Unknown HL7 segment type: {segment_type}")

        encoding = self._encoding(encoding_characters)

        if segment_type == self.catalogue.header_segment:
            if len(line) < 4:
                raise SegmentDecodeError(
                    f"{segment_type} segment is missing its field separator"
                )
            separator = line[3]
            tokens = [segment_type, separator, *line[4:].split(separator)]
            fields = tuple(
                self._build_field(segment_type, position, position, token, encoding)
                for position, token in enumerate(tokens)
                if position > 0
            )
        else:
            tokens = line.split(self.catalogue.field_delimiter)
            type_token = tokens[0].strip()
            first = Field(
                index=1,
                name=SEGMENT_TYPE_FIELD_NAME,
                value=type_token,
                description=self.catalogue.default_description,
                components=parse_components(type_token, encoding),
            )
            fields = (first,) + tuple(
                self._build_field(segment_type, position, position + 1, token, encoding)
                for position, token in enumerate(tokens)
                if position > 0
            )

        return Segment(
            line_number=line_number,
            segment_type=segment_type,
            description=self.catalogue.segment_description(segment_type),
            raw_data=line,
            fields=fields,
        )

    def parse(self, data: str) -> DecodeResult:
        try:
            lines = self.split_lines(data)
            segments: list[Segment] = []
            errors: list[ParseError] = []
            header: dict[str, str] = {}
            encoding_characters = self.config.default_encoding_characters

            for line_number, raw_line in enumerate(lines, start=1):
                line = raw_line.strip()
                if not line:
                    continue
                try:
                    segment = self.decode_segment(line, line_number, encoding_characters)
                except SegmentDecodeError as exc:
                    errors.append(self._line_error(line_number, exc, raw_line))
                    continue
                segments.append(segment)

                if self.is_header(segment):
                    header = extract_header_summary(self.catalogue, segment)
                    declared = segment.get_field(_ENCODING_CHARACTERS_FIELD)
                    encoding_characters = self._encoding(
                        declared.value if declared is not None else None
                    ).declaration
                    logger.debug(
                        "Line %d: header declares encoding characters %r",
                        line_number, encoding_characters,
                    )

            result = DecodeResult(
                format=self.format_tag,
                segments=tuple(segments),
                errors=tuple(errors),
                metadata=DecodeMetadata(total_segments=len(lines), header=header),
            )
        except Exception as exc:
            return self._failed_result(data, exc)

        logger.info(
            "Decoded HL7 message %s: %d lines, %d segments, %d errors",
            header.get("control_id") or "(no control id)",
            len(lines), len(result.segments), len(result.errors),
        )
        return result

    def validate(self, data: str) -> ValidationResult:
        """Parse *data* and check the header segment.

        Unlike format A, a missing header segment is an error here, not
        a warning. A header that is present but not on line 1 is a warning,
        including when line 1 failed to decode.
        """
        result = self.parse(data)
        errors = list(result.errors)
        warnings: list[str] = []

        header_segment = self.catalogue.header_segment
        first_header = next((seg for seg in result.segments if self.is_header(seg)), None)
        if first_header is None:
            errors.append(
                ParseError(
                    line=0,
                    message=(
                        f"{header_segment} (Message Header) segment is required "
                        "as first segment in HL7 messages"
                    ),
                )
            )
        elif first_header.line_number != 1:
            warnings.append(
                f"{header_segment} segment should be the first segment in the message"
            )

        return ValidationResult(
            is_valid=not errors,
            errors=tuple(errors),
            warnings=tuple(warnings),
            summary=ValidationSummary(
                total_segments=len(result.segments),
                segment_types=count_segment_types(result.segments),
                header={"message_type": "", **result.metadata.header},
            ),
        )
