"""
Custom exception hierarchy for lab-msg-decode.

Two tiers:
- Line-level faults (``SegmentDecodeError`` and subclasses) are raised by
  the segment decoders and caught inside the format decoders' line loop,
  where they become ``ParseError`` records on the result.
- Everything else signals misuse at the calling layer (an unregistered
  format tag, a broken config file, a failed export).

The public decode/validate API never lets line-level faults escape.
"""


class LabMsgDecodeError(Exception):
    """Base exception for all lab-msg-decode errors."""


class SegmentDecodeError(LabMsgDecodeError):
    """Raised when a single line cannot be decoded into a Segment.

    For example, a format B line shorter than its three-character
    segment code, or a header line missing its field separator.
    """


class UnknownSegmentTypeError(SegmentDecodeError):
    """Raised when a line's segment code is not in the format's catalogue."""


class UnknownFormatError(LabMsgDecodeError):
    """Raised when a catalogue is requested for an unregistered format tag."""


class ConfigValidationError(LabMsgDecodeError):
    """Raised when a decoder config file fails validation.

    This can happen if:
    - The file is empty.
    - The top level of the YAML document is not a mapping.
    """


class ExportError(LabMsgDecodeError):
    """Raised when the exporter fails to write output files.

    For example, permission errors or an unsupported output format.
    """
