"""
Single entry point that dispatches to the right format decoder.

``MessageDecoder`` holds one decoder per format tag and selects among
them by tag; there is no shared mutable state, so one instance can be
reused across calls and threads.

Format resolution for parse() and validate():
  1. If a format hint is given and names a registered format
     (case-insensitive), use it.
  2. Otherwise auto-detect with ``detect_format``.
  3. If the effective format is "unknown", return a result carrying a
     single descriptive error instead of raising.
"""

from __future__ import annotations

import logging

from lab_msg_decode.config import DecoderConfig
from lab_msg_decode.decoders.astm import AstmDecoder
from lab_msg_decode.decoders.base import BaseDecoder, snippet
from lab_msg_decode.decoders.hl7 import Hl7Decoder
from lab_msg_decode.detect import UNKNOWN, detect_format
from lab_msg_decode.display import format_for_display
from lab_msg_decode.models import (
    DecodeMetadata,
    DecodeResult,
    DisplayRow,
    ParseError,
    ValidationResult,
    ValidationSummary,
)
from lab_msg_decode.samples import SampleMessage, get_sample_messages

logger = logging.getLogger(__name__)


class MessageDecoder:
    """Facade over the format A and format B decoders."""

    def __init__(self, config: DecoderConfig | None = None) -> None:
        self.config = config or DecoderConfig()
        decoders: list[BaseDecoder] = [AstmDecoder(self.config), Hl7Decoder(self.config)]
        self._decoders: dict[str, BaseDecoder] = {d.format_tag: d for d in decoders}

    @property
    def formats(self) -> list[str]:
        return list(self._decoders)

    def get_decoder(self, format_tag: str) -> BaseDecoder | None:
        return self._decoders.get(format_tag.lower())

    def detect_format(self, data: object) -> str:
        return detect_format(data)

    def resolve_format(self, data: object, format_hint: str | None = None) -> str:
        """Pick the effective format tag for *data*."""
        if format_hint:
            hint = str(format_hint).strip().lower()
            if hint in self._decoders:
                return hint
            logger.warning(
                "Unrecognized format hint %r, falling back to auto-detection", format_hint
            )
        detected = detect_format(data)
        logger.info("Detected format: %s", detected)
        return detected

    def parse(self, data: str, format_hint: str | None = None) -> DecodeResult:
        """Decode *data* with the hinted or detected format's decoder."""
        fmt = self.resolve_format(data, format_hint)
        decoder = self._decoders.get(fmt)
        if decoder is None:
            return DecodeResult(
                format=UNKNOWN,
                errors=(
                    ParseError(
                        line=0,
                        message=f"Unknown format: {fmt}. Expected ASTM or HL7 format.",
                        data=snippet(data, self.config.error_snippet_length),
                    ),
                ),
                metadata=DecodeMetadata(detected_format=fmt),
            )
        return decoder.parse(data)

    def validate(self, data: str, format_hint: str | None = None) -> ValidationResult:
        """Validate *data* with the hinted or detected format's decoder."""
        fmt = self.resolve_format(data, format_hint)
        decoder = self._decoders.get(fmt)
        if decoder is None:
            return ValidationResult(
                is_valid=False,
                errors=(ParseError(line=0, message=f"Cannot validate unknown format: {fmt}"),),
                summary=ValidationSummary(),
            )
        return decoder.validate(data)

    def format_for_display(self, result: DecodeResult | None) -> list[DisplayRow]:
        return format_for_display(result)

    def get_sample_messages(self) -> dict[str, SampleMessage]:
        return get_sample_messages()
