"""
Decoders sub-package for lab-msg-decode.

Contains one decoder per message format. Each turns raw text into a
DecodeResult (segments + per-line errors) and runs structural
validation on top of it.

Design: Strategy Pattern
- base.py defines the BaseDecoder ABC (protocol).
- astm.py implements AstmDecoder for format A (single-letter records).
- hl7.py implements Hl7Decoder for format B (three-letter segments with
  component/subcomponent decomposition).

The facade (facade.py) holds one instance per format tag and dispatches
by tag at runtime.
"""

from lab_msg_decode.decoders.astm import AstmDecoder
from lab_msg_decode.decoders.base import BaseDecoder
from lab_msg_decode.decoders.hl7 import EncodingCharacters, Hl7Decoder, parse_components

__all__ = [
    "AstmDecoder",
    "BaseDecoder",
    "EncodingCharacters",
    "Hl7Decoder",
    "parse_components",
]
