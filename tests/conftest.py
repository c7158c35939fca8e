"""
Shared test fixtures and message constants for lab-msg-decode tests.

All sample messages are defined here as module-level constants for
easy discovery and modification.
"""

import pytest

# ---------------------------------------------------------------------------
# Format A (astm) messages
# ---------------------------------------------------------------------------
ASTM_MESSAGE = (
    "H|\\^&|||LIS^LIS|||||||P|E 1394-97|20231201120000\n"
    "P|1||12345||Smith^John^A||19850315|M\n"
    "O|1|ORD123|12345^001|^^^Complete Blood Count^L||R\n"
    "R|1|^^^WBC|7.2|10^3/uL|4.0-11.0|N||F\n"
    "C|1|I|Sample slightly hemolyzed|G\n"
    "L|1|N"
)

ASTM_NO_HEADER = (
    "P|1||12345||Smith^John^A\n"
    "O|1|ORD123||^^^CBC\n"
    "L|1|N"
)

# ---------------------------------------------------------------------------
# Format B (hl7) messages
# ---------------------------------------------------------------------------
HL7_MESSAGE = (
    "MSH|^~\\&|LIS|HOSPITAL|LAB|HOSPITAL|20231201120000||ORU^R01|MSG001|P|2.5\r"
    "PID|1||12345^^^HOSPITAL^MR||Smith^John^A||19850315|M\r"
    "OBR|1|ORD123|ORD123|^^^CBC^Complete Blood Count^L\r"
    "OBX|1|NM|WBC^White Blood Count||7.2|10^3/uL|4.0-11.0|N|||F"
)

HL7_NO_HEADER = (
    "PID|1||12345||Smith^John^A\n"
    "OBX|1|NM|WBC||7.2"
)


@pytest.fixture
def astm_message() -> str:
    return ASTM_MESSAGE


@pytest.fixture
def hl7_message() -> str:
    return HL7_MESSAGE


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (runs the public API end to end)",
    )
