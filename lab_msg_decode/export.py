"""
Exporter for lab-msg-decode.

Writes the flattened display rows of a decode result to disk as CSV or
Parquet, one row per (segment, field) pair.

CSV files are written with ``utf-8-sig`` (BOM) so that spreadsheet tools
pick up the encoding; Parquet goes through ``pyarrow``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from lab_msg_decode.display import display_frame
from lab_msg_decode.exceptions import ExportError
from lab_msg_decode.models import DecodeResult

logger = logging.getLogger(__name__)

_SUPPORTED_FORMATS = {"csv", "parquet"}


def export_display(
    result: DecodeResult,
    path: str | Path,
    output_format: Literal["csv", "parquet"] = "csv",
) -> str:
    """Write a decode result's display rows to *path*.

    The parent directory is created if it does not exist.

    Args:
        result: The decode result to flatten.
        path: Destination file path (extension is not altered).
        output_format: "csv" or "parquet".

    Returns:
        The written file path as a string.

    Raises:
        ExportError: If *output_format* is unsupported, or if the write fails.
    """
    if output_format not in _SUPPORTED_FORMATS:
        raise ExportError(
            f"Unsupported output format: '{output_format}'. "
            f"Supported formats: {sorted(_SUPPORTED_FORMATS)}"
        )

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df = display_frame(result)

    try:
        if output_format == "csv":
            df.to_csv(path, index=False, encoding="utf-8-sig")
        else:  # parquet
            df.to_parquet(path, index=False, engine="pyarrow")
    except Exception as exc:
        raise ExportError(
            f"Failed to write {path.name} as {output_format}: {exc}"
        ) from exc

    logger.info(
        "Exported %s result -> %s (%d rows)", result.format, path.name, len(df)
    )
    return str(path)
