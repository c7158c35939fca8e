"""
lab-msg-decode: decoder for pipe-delimited laboratory messages.

Two formats are understood:

- ``"astm"`` -- clinical instrument protocol, single-letter records
  (H/P/O/R/C/M/L).
- ``"hl7"`` -- hospital interface protocol, three-letter segments
  (MSH/PID/ORC/OBR/OBX/...) with component and subcomponent
  decomposition.

Public API surface:

- ``detect_format(text)`` -- guess the format: "hl7", "astm" or "unknown".
- ``parse(text, format_hint=None)`` -- decode into a ``DecodeResult``.
  Bad lines become ``ParseError`` entries; good lines still decode.
- ``validate(text, format_hint=None)`` -- structural checks, returns a
  ``ValidationResult``.
- ``format_for_display(result)`` -- flatten to one row per field.

None of these raise for malformed input; inspect ``errors`` /
``is_valid`` on the returned objects instead. Use ``MessageDecoder``
directly to pass a custom ``DecoderConfig``.
"""

from __future__ import annotations

from lab_msg_decode.config import DecoderConfig, load_config, save_config
from lab_msg_decode.facade import MessageDecoder
from lab_msg_decode.models import (
    Component,
    DecodeResult,
    DisplayRow,
    Field,
    ParseError,
    Segment,
    ValidationResult,
)

__all__ = [
    "detect_format",
    "parse",
    "validate",
    "format_for_display",
    "MessageDecoder",
    "DecoderConfig",
    "load_config",
    "save_config",
    "Component",
    "DecodeResult",
    "DisplayRow",
    "Field",
    "ParseError",
    "Segment",
    "ValidationResult",
]

_default_decoder: MessageDecoder | None = None


def _get_default_decoder() -> MessageDecoder:
    """Lazily build the shared default-config facade."""
    global _default_decoder
    if _default_decoder is None:
        _default_decoder = MessageDecoder()
    return _default_decoder


def detect_format(text: str) -> str:
    """Return "hl7", "astm" or "unknown" for *text*. Never raises."""
    return _get_default_decoder().detect_format(text)


def parse(text: str, format_hint: str | None = None) -> DecodeResult:
    """Decode *text* using *format_hint* or the auto-detected format.

    Examples::

        result = lab_msg_decode.parse("H|||LIS\\nP|1||12345\\nL|1|N")
        result.format            # "astm"
        len(result.segments)     # 3
    """
    return _get_default_decoder().parse(text, format_hint)


def validate(text: str, format_hint: str | None = None) -> ValidationResult:
    """Parse *text* and run the format's structural checks."""
    return _get_default_decoder().validate(text, format_hint)


def format_for_display(result: DecodeResult | None) -> list[DisplayRow]:
    """Flatten *result* to one ``DisplayRow`` per (segment, field) pair."""
    return _get_default_decoder().format_for_display(result)
