"""
Flattening of decode results for tabular display.

``format_for_display`` turns a DecodeResult into one row per
(segment, field) pair, in message order. ``display_frame`` wraps the
same rows in a DataFrame for callers that render or export tables.
"""

from __future__ import annotations

from dataclasses import asdict

import pandas as pd

from lab_msg_decode.models import DecodeResult, DisplayRow

DISPLAY_COLUMNS = ["segment", "field", "value", "description", "line_number"]

_FALLBACK_DESCRIPTION = "Standard field"


def format_for_display(result: DecodeResult | None) -> list[DisplayRow]:
    """Project a decode result onto flat display rows.

    Returns an empty list for ``None`` or a result without segments.
    """
    if result is None or not result.segments:
        return []

    rows: list[DisplayRow] = []
    for segment in result.segments:
        label = f"{segment.segment_type} ({segment.description})"
        for f in segment.fields:
            rows.append(
                DisplayRow(
                    segment=label,
                    field=f.name,
                    value=f.value,
                    description=f.description or _FALLBACK_DESCRIPTION,
                    line_number=segment.line_number,
                )
            )
    return rows


def display_frame(result: DecodeResult | None) -> pd.DataFrame:
    """Display rows as a DataFrame with columns ``DISPLAY_COLUMNS``."""
    rows = [asdict(row) for row in format_for_display(result)]
    return pd.DataFrame(rows, columns=DISPLAY_COLUMNS)
