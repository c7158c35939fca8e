"""
Format detection for lab messages.

Guesses whether an unlabeled text blob is format A ("astm") or
format B ("hl7"). The rules are tested in a fixed order and the first
match wins:

1. The text starts with the format B header prefix ``MSH|`` -> hl7.
2. Any line starts with a format A record letter followed by ``|``
   (``^[HPOCRML]\\|``) -> astm.
3. The first line starts with a known format B segment code followed
   by ``|`` -> hl7.
4. The first line contains at least two ``|`` -> astm.
5. Otherwise -> unknown.

Rule 2 is checked before rule 3 so a format A message whose first line
happens to look like a three-letter code still resolves to astm. Rule 4
only looks at the first line, so a one-line format A message with fewer
than three fields and no known record letter comes back unknown.

Detection never raises: "unknown" is a normal outcome.
"""

from __future__ import annotations

import logging
import re

from lab_msg_decode.catalogue_registry import get_catalogue

logger = logging.getLogger(__name__)

ASTM = "astm"
HL7 = "hl7"
UNKNOWN = "unknown"

FORMAT_TAGS = (HL7, ASTM, UNKNOWN)

_HL7_HEADER_PREFIX = "MSH|"
_ASTM_RECORD_LINE = re.compile(r"^[HPOCRML]\|", re.MULTILINE)
_LINE_SPLIT = re.compile(r"[\r\n]+")


def _hl7_segment_codes() -> set[str]:
    return set(get_catalogue(HL7).known_segment_types)


def detect_format(data: object) -> str:
    """Return ``"hl7"``, ``"astm"`` or ``"unknown"`` for *data*.

    Args:
        data: Raw message text, possibly with surrounding whitespace.
            Non-string input is reported as unknown.

    Returns:
        One of the tags in ``FORMAT_TAGS``.
    """
    if not isinstance(data, str):
        logger.debug("detect_format() -- non-string input (%s)", type(data).__name__)
        return UNKNOWN

    trimmed = data.strip()
    if not trimmed:
        return UNKNOWN

    if trimmed.startswith(_HL7_HEADER_PREFIX):
        return HL7

    if _ASTM_RECORD_LINE.search(trimmed):
        return ASTM

    first_line = _LINE_SPLIT.split(trimmed)[0]

    if len(first_line) > 3 and first_line[3] == "|":
        if first_line[:3] in _hl7_segment_codes():
            return HL7

    if first_line.count("|") >= 2:
        return ASTM

    logger.debug("detect_format() -- no rule matched: %r", first_line[:40])
    return UNKNOWN
