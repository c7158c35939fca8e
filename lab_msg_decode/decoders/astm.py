"""
Decoder for the clinical instrument protocol (format A, tag "astm").

Input structure:
  - One record per line, separated by LF (a trailing CR is trimmed).
  - The first character of each line is the record type: H (header),
    P (patient), O (order), R (result), C (comment), M (manufacturer),
    L (terminator). Lowercase letters are accepted.
  - Fields are separated by ``|``; there is no component decomposition.

Field numbering: the n-th token (0-based) becomes field n + 1, so the
record type letter is always field 1.

A header record is recommended but not required: validate() warns when
it is missing and still reports the message as valid.
"""

from __future__ import annotations

import logging

from lab_msg_decode.catalogue_registry import extract_header_summary
from lab_msg_decode.decoders.base import BaseDecoder, count_segment_types
from lab_msg_decode.detect import ASTM
from lab_msg_decode.exceptions import SegmentDecodeError, UnknownSegmentTypeError
from lab_msg_decode.models import (
    DecodeMetadata,
    DecodeResult,
    Field,
    ParseError,
    Segment,
    ValidationResult,
    ValidationSummary,
)

logger = logging.getLogger(__name__)


class AstmDecoder(BaseDecoder):
    """Decoder for format A messages."""

    format_tag = ASTM

    def split_lines(self, data: str) -> list[str]:
        return data.strip().split("\n")

    def decode_segment(self, line: str, line_number: int) -> Segment:
        """Decode one non-empty trimmed line.

        Raises:
            UnknownSegmentTypeError: If the first character is not a
                known record type.
        """
        if not line:
            raise SegmentDecodeError("Empty line")

        record_type = line[0].upper()
        if not self.catalogue.is_known(record_type):
            raise UnknownSegmentTypeError(f"Unknown ASTM segment type: {record_type}")

        tokens = line.split(self.catalogue.field_delimiter)
        fields = tuple(
            Field(
                index=position + 1,
                name=self.catalogue.field_name(record_type, position + 1),
                value=token.strip(),
                description=self.catalogue.field_description(record_type, position + 1),
            )
            for position, token in enumerate(tokens)
        )
        return Segment(
            line_number=line_number,
            segment_type=record_type,
            description=self.catalogue.segment_description(record_type),
            raw_data=line,
            fields=fields,
        )

    def parse(self, data: str) -> DecodeResult:
        try:
            lines = self.split_lines(data)
            segments: list[Segment] = []
            errors: list[ParseError] = []
            header: dict[str, str] = {}

            for line_number, raw_line in enumerate(lines, start=1):
                line = raw_line.strip()
                if not line:
                    continue
                try:
                    segment = self.decode_segment(line, line_number)
                except SegmentDecodeError as exc:
                    errors.append(self._line_error(line_number, exc, raw_line))
                    continue
                segments.append(segment)
                if self.is_header(segment):
                    header = extract_header_summary(self.catalogue, segment)

            result = DecodeResult(
                format=self.format_tag,
                segments=tuple(segments),
                errors=tuple(errors),
                metadata=DecodeMetadata(total_segments=len(lines), header=header),
            )
        except Exception as exc:
            return self._failed_result(data, exc)

        logger.info(
            "Decoded ASTM message: %d lines, %d segments, %d errors",
            len(lines), len(result.segments), len(result.errors),
        )
        return result

    def validate(self, data: str) -> ValidationResult:
        result = self.parse(data)
        warnings: list[str] = []

        if not any(self.is_header(seg) for seg in result.segments):
            warnings.append(
                "No Header (H) segment found - recommended for valid ASTM messages"
            )

        return ValidationResult(
            is_valid=not result.errors,
            errors=result.errors,
            warnings=tuple(warnings),
            summary=ValidationSummary(
                total_segments=len(result.segments),
                segment_types=count_segment_types(result.segments),
                header=dict(result.metadata.header),
            ),
        )
