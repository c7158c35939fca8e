"""
Base decoder protocol / ABC for lab-msg-decode.

All format decoders implement this interface. The contract is:
1. decode_segment() turns one trimmed line into a Segment, or raises a
   SegmentDecodeError that the caller records and moves past.
2. parse() splits a whole message into lines and accumulates segments
   and per-line errors into one DecodeResult. It never raises for
   malformed input.
3. validate() re-runs parse() and layers structural checks on top.

Decoders hold only their immutable config and the read-only catalogue,
so one instance can serve any number of concurrent calls.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import Counter

from lab_msg_decode.catalogue_registry import FormatCatalogue, get_catalogue
from lab_msg_decode.config import DecoderConfig
from lab_msg_decode.models import (
    DecodeMetadata,
    DecodeResult,
    ParseError,
    Segment,
    ValidationResult,
)

logger = logging.getLogger(__name__)


def snippet(data: object, length: int) -> str:
    """Leading *length* characters of *data*, for whole-message error reports."""
    text = data if isinstance(data, str) else repr(data)
    return text[:length]


def count_segment_types(segments: tuple[Segment, ...] | list[Segment]) -> dict[str, int]:
    """Occurrence count per segment code, in order of first appearance."""
    return dict(Counter(seg.segment_type for seg in segments))


class BaseDecoder(ABC):
    """Abstract base class for the format decoders.

    Subclasses set ``format_tag`` to the catalogue they decode with and
    implement the line splitting, segment decoding, parse and validate
    steps.
    """

    format_tag: str = ""

    def __init__(self, config: DecoderConfig | None = None) -> None:
        self.config = config or DecoderConfig()
        self.catalogue: FormatCatalogue = get_catalogue(
            self.format_tag, self.config.catalogue_dir
        )

    @abstractmethod
    def split_lines(self, data: str) -> list[str]:
        """Split a trimmed message into raw (untrimmed) lines."""

    @abstractmethod
    def parse(self, data: str) -> DecodeResult:
        """Decode a whole message.

        Returns:
            DecodeResult with every decodable segment plus one ParseError
            per line that failed. Never raises for malformed input.
        """

    @abstractmethod
    def validate(self, data: str) -> ValidationResult:
        """Parse *data* and check message structure."""

    def is_header(self, segment: Segment) -> bool:
        return segment.segment_type == self.catalogue.header_segment

    def _line_error(self, line_number: int, exc: Exception, raw_line: str) -> ParseError:
        logger.warning("%s line %d: %s", self.format_tag, line_number, exc)
        return ParseError(line=line_number, message=str(exc), data=raw_line)

    def _failed_result(self, data: object, exc: Exception) -> DecodeResult:
        """Degrade a whole-message fault into a single-error result."""
        logger.exception("%s decode failed for the whole message", self.format_tag)
        return DecodeResult(
            format=self.format_tag,
            errors=(
                ParseError(
                    line=0,
                    message=f"Parse error: {exc}",
                    data=snippet(data, self.config.error_snippet_length),
                ),
            ),
            metadata=DecodeMetadata(total_segments=0),
        )
