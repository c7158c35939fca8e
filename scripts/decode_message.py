"""
Demo script: decode and validate lab message files via the public API.

Usage:
    uv run python scripts/decode_message.py                    # bundled samples
    uv run python scripts/decode_message.py msg1.txt msg2.hl7  # files on disk
    uv run python scripts/decode_message.py msg.txt --export   # also write CSV

Each input is auto-detected, parsed and validated. With --export the
flattened field rows are written next to each input as ``<name>.fields.csv``
(samples go under outputs/).
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

OUTPUT_ROOT = Path("outputs")

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("decode_message")


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------

def _report(name: str, text: str, export_path: Path | None) -> None:
    import lab_msg_decode
    from lab_msg_decode.export import export_display

    log.info("=" * 70)
    log.info("Message: %s", name)

    fmt = lab_msg_decode.detect_format(text)
    result = lab_msg_decode.parse(text, fmt)
    validation = lab_msg_decode.validate(text, fmt)

    log.info("  format      : %s", result.format)
    log.info("  segments    : %d of %d lines", len(result.segments), result.metadata.total_segments)
    for key, value in result.metadata.header.items():
        log.info("  header      : %s = %s", key, value)
    for seg_type, count in validation.summary.segment_types.items():
        log.info("  segment     : %s x%d", seg_type, count)
    for err in validation.errors:
        log.warning("  error       : line %d: %s", err.line, err.message)
    for warning in validation.warnings:
        log.warning("  warning     : %s", warning)
    log.info("  valid       : %s", validation.is_valid)

    if export_path is not None:
        written = export_display(result, export_path, output_format="csv")
        log.info("  exported    : %s", written)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> None:
    from lab_msg_decode.samples import get_sample_messages

    export = "--export" in sys.argv
    paths = [a for a in sys.argv[1:] if not a.startswith("--")]

    if not paths:
        for tag, sample in get_sample_messages().items():
            out = OUTPUT_ROOT / f"sample_{tag}.fields.csv" if export else None
            _report(sample.name, sample.data, out)
        return

    for path_str in paths:
        path = Path(path_str)
        if not path.exists():
            log.warning("SKIP  %s  (file not found)", path)
            continue
        out = path.with_suffix(".fields.csv") if export else None
        _report(path.name, path.read_text(encoding="utf-8"), out)

    log.info("All messages processed.")


if __name__ == "__main__":
    main()
