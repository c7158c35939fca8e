"""
Field catalogue loader for lab-msg-decode.

Loads catalogue YAML files from lab_msg_decode/catalogues/ and provides
structured access via Pydantic models. Each catalogue defines:
- format_tag: unique identifier ("astm", "hl7")
- default_description: the sentinel returned when a field has no annotation
- header_segment: the segment code that opens a message
- header_summary: summary key -> field number, read from the header segment
- segments: code -> description, field names and sparse annotations

Lookups are total: an unknown segment or an out-of-range field number
falls back to a synthesized ``"Field N"`` name and the format's sentinel
description instead of raising.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING

import yaml
from pydantic import BaseModel, Field

from lab_msg_decode.exceptions import UnknownFormatError

if TYPE_CHECKING:
    from lab_msg_decode.models import Segment

logger = logging.getLogger(__name__)

# Directory containing catalogue YAML files (sibling package)
_CATALOGUES_DIR = Path(__file__).parent / "catalogues"

# Loaded catalogues keyed by directory, then by format tag
_CATALOGUE_CACHE: dict[Path, dict[str, FormatCatalogue]] = {}
_CATALOGUE_LOCK = threading.Lock()


class SegmentDefinition(BaseModel):
    """Names and annotations for one segment code."""
    description: str
    fields: list[str] = Field(default_factory=list)
    annotations: dict[int, str] = Field(default_factory=dict)


class FormatCatalogue(BaseModel):
    """A complete catalogue loaded from YAML."""
    format_tag: str
    display_name: str = ""
    default_description: str
    field_delimiter: str = "|"
    header_segment: str
    header_summary: dict[str, int] = Field(default_factory=dict)
    segments: dict[str, SegmentDefinition]

    @property
    def known_segment_types(self) -> list[str]:
        return list(self.segments)

    def is_known(self, segment_type: str) -> bool:
        return segment_type in self.segments

    def segment_description(self, segment_type: str) -> str:
        definition = self.segments.get(segment_type)
        return definition.description if definition else segment_type

    def field_name(
        self,
        segment_type: str,
        field_number: int,
        display_index: int | None = None,
    ) -> str:
        """Resolve a 1-based field number to its modeled name.

        Falls back to ``"Field N"``, where N is *display_index* when the
        caller surfaces the field under a different index than its
        catalogue number.
        """
        definition = self.segments.get(segment_type)
        if definition and 1 <= field_number <= len(definition.fields):
            return definition.fields[field_number - 1]
        return f"Field {field_number if display_index is None else display_index}"

    def field_description(self, segment_type: str, field_number: int) -> str:
        definition = self.segments.get(segment_type)
        if definition and field_number in definition.annotations:
            return definition.annotations[field_number]
        return self.default_description


def load_catalogue(path: Path) -> FormatCatalogue:
    """Load a single catalogue YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    segments = {
        str(code): SegmentDefinition(**(entry or {}))
        for code, entry in raw.get("segments", {}).items()
    }
    return FormatCatalogue(
        format_tag=raw["format_tag"],
        display_name=raw.get("display_name", ""),
        default_description=raw["default_description"],
        field_delimiter=raw.get("field_delimiter", "|"),
        header_segment=str(raw["header_segment"]),
        header_summary=raw.get("header_summary", {}),
        segments=segments,
    )


def load_all_catalogues(catalogue_dir: str | Path | None = None) -> dict[str, FormatCatalogue]:
    """Load every catalogue YAML file in a directory, keyed by format tag.

    Args:
        catalogue_dir: Directory to scan for .yaml files. Defaults to
            the built-in catalogues/ directory.

    Returns:
        Dict mapping format_tag -> FormatCatalogue. Files that fail to
        load are logged and skipped.
    """
    catalogue_dir = Path(catalogue_dir) if catalogue_dir else _CATALOGUES_DIR
    catalogues: dict[str, FormatCatalogue] = {}
    for yaml_path in sorted(catalogue_dir.glob("*.yaml")):
        try:
            catalogue = load_catalogue(yaml_path)
        except Exception as e:
            logger.warning("Failed to load catalogue from %s: %s", yaml_path, e)
            continue
        catalogues[catalogue.format_tag] = catalogue
        logger.debug(
            "Loaded catalogue: %s (%d segment types) from %s",
            catalogue.format_tag, len(catalogue.segments), yaml_path,
        )
    logger.info("Loaded %d catalogues", len(catalogues))
    return catalogues


def get_catalogue(format_tag: str, catalogue_dir: str | Path | None = None) -> FormatCatalogue:
    """Return the catalogue for *format_tag*, loading the directory once.

    Raises:
        UnknownFormatError: If no catalogue is registered for the tag.
    """
    key = Path(catalogue_dir) if catalogue_dir else _CATALOGUES_DIR
    with _CATALOGUE_LOCK:
        if key not in _CATALOGUE_CACHE:
            _CATALOGUE_CACHE[key] = load_all_catalogues(key)
        catalogues = _CATALOGUE_CACHE[key]
    try:
        return catalogues[format_tag]
    except KeyError:
        raise UnknownFormatError(
            f"No catalogue registered for format '{format_tag}'. "
            f"Available: {sorted(catalogues)}"
        ) from None


def field_name(
    format_tag: str,
    segment_type: str,
    field_number: int,
    display_index: int | None = None,
) -> str:
    """Module-level shortcut for ``get_catalogue(format_tag).field_name(...)``."""
    return get_catalogue(format_tag).field_name(segment_type, field_number, display_index)


def field_description(format_tag: str, segment_type: str, field_number: int) -> str:
    """Module-level shortcut for ``get_catalogue(format_tag).field_description(...)``."""
    return get_catalogue(format_tag).field_description(segment_type, field_number)


def segment_description(format_tag: str, segment_type: str) -> str:
    """Module-level shortcut for ``get_catalogue(format_tag).segment_description(...)``."""
    return get_catalogue(format_tag).segment_description(segment_type)


def extract_header_summary(catalogue: FormatCatalogue, segment: Segment) -> dict[str, str]:
    """Read the catalogue's header summary fields from a decoded header segment.

    Args:
        catalogue: The format's catalogue.
        segment: A decoded ``Segment`` of the catalogue's header type.

    Returns:
        Dict mapping summary key -> field value, ``""`` when the header
        is shorter than the field's position.
    """
    result: dict[str, str] = {}
    for key, index in catalogue.header_summary.items():
        found = segment.get_field(index)
        result[key] = found.value if found is not None else ""
    return result
