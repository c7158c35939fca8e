"""
Result records produced by the decoders.

Every record is a frozen dataclass, every ordered collection is a
tuple and every mapping is a read-only snapshot, so a ``DecodeResult``
cannot be mutated after the decoder hands it back. Each decode call
builds its records from scratch; nothing is cached or shared between
calls.

Field numbering:
- Format A: ``Field.index`` is the token position + 1.
- Format B header segment: ``Field.index`` is the token position
  (position 0 repeats the segment code and is not surfaced).
- Format B other segments: ``Field.index`` is the token position + 1,
  and index 1 carries the segment code itself.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType


@dataclass(frozen=True)
class Component:
    """One ``^``-separated part of a format B field value."""
    index: int
    value: str
    subcomponents: tuple[str, ...] = ()


@dataclass(frozen=True)
class Field:
    """One delimiter-separated value within a segment.

    ``components`` is ``None`` for format A, which has no component
    decomposition, and a (possibly empty) tuple for format B.
    """
    index: int
    name: str
    value: str
    description: str
    components: tuple[Component, ...] | None = None


@dataclass(frozen=True)
class Segment:
    """One decoded line of a message."""
    line_number: int
    segment_type: str
    description: str
    raw_data: str
    fields: tuple[Field, ...] = ()

    @property
    def field_count(self) -> int:
        return len(self.fields)

    def get_field(self, index: int) -> Field | None:
        """Return the field with the given surfaced index, or ``None``."""
        for f in self.fields:
            if f.index == index:
                return f
        return None


@dataclass(frozen=True)
class ParseError:
    """A recovered decoding failure.

    ``line`` is the 1-based source line, or 0 for whole-message failures
    and validation-level errors.
    """
    line: int
    message: str
    data: str = ""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _read_only(mapping: Mapping) -> Mapping:
    """Snapshot *mapping* behind a read-only proxy."""
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class DecodeMetadata:
    """Facts about a decode call.

    Attributes:
        total_segments: Number of lines in the trimmed input, counted
            before blank lines are dropped and regardless of how many
            lines decoded successfully.
        parsed_at: When the decode ran (UTC).
        header: Format-specific summary pulled from the header segment,
            e.g. ``message_type`` and ``control_id`` for format B.
        detected_format: The tag the facade resolved, when the facade
            produced this result for an unrecognized format.
    """
    total_segments: int = 0
    parsed_at: datetime = field(default_factory=_utcnow)
    header: Mapping[str, str] = field(default_factory=dict)
    detected_format: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "header", _read_only(self.header))


@dataclass(frozen=True)
class DecodeResult:
    """Output of one decode call.

    ``segments`` and ``errors`` accumulate in the same pass, so a result
    can carry both: nine good segments and one error is a normal outcome.
    """
    format: str
    segments: tuple[Segment, ...] = ()
    errors: tuple[ParseError, ...] = ()
    metadata: DecodeMetadata = field(default_factory=DecodeMetadata)

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def segment_types(self) -> list[str]:
        """Distinct segment codes in order of first appearance."""
        seen: list[str] = []
        for seg in self.segments:
            if seg.segment_type not in seen:
                seen.append(seg.segment_type)
        return seen


@dataclass(frozen=True)
class ValidationSummary:
    total_segments: int = 0
    segment_types: Mapping[str, int] = field(default_factory=dict)
    header: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "segment_types", _read_only(self.segment_types))
        object.__setattr__(self, "header", _read_only(self.header))

    @property
    def message_type(self) -> str | None:
        return self.header.get("message_type")


@dataclass(frozen=True)
class ValidationResult:
    """Structural validation outcome; ``is_valid`` is true iff ``errors`` is empty."""
    is_valid: bool
    errors: tuple[ParseError, ...] = ()
    warnings: tuple[str, ...] = ()
    summary: ValidationSummary = field(default_factory=ValidationSummary)


@dataclass(frozen=True)
class DisplayRow:
    """One (segment, field) pair flattened for tabular display."""
    segment: str
    field: str
    value: str
    description: str
    line_number: int
