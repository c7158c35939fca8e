"""
Canned sample messages, one per format.

Useful for demos and smoke tests: both samples decode without errors
and pass validation.
"""

from __future__ import annotations

from dataclasses import dataclass

from lab_msg_decode.detect import ASTM, HL7


@dataclass(frozen=True)
class SampleMessage:
    name: str
    data: str


ASTM_CBC_ORDER = SampleMessage(
    name="ASTM Complete Blood Count Order",
    data=(
        "H|\\^&|||LIS^LIS|||||||P|E 1394-97|20231201120000\n"
        "P|1||12345||Smith^John^A||19850315|M|||123 Main St^Any City^CA^90210|||||||||||||||||||||\n"
        "O|1|ORD123|12345^001|^^^Complete Blood Count^L||R||||||A||||||||||F||||||||\n"
        "L|1|N"
    ),
)

HL7_LAB_ORDER = SampleMessage(
    name="HL7 Laboratory Order Message",
    data=(
        "MSH|^~\\&|LIS|HOSPITAL|LAB|HOSPITAL|20231201120000||ORM^O01^ORM_O01|MSG001|P|2.5\n"
        "PID|1||12345^^^HOSPITAL^MR||Smith^John^A||19850315|M|||123 Main St^^Any City^CA^90210^USA\n"
        "ORC|NW|ORD123|ORD123|||||||^Smith^John^A\n"
        "OBR|1|ORD123|ORD123|CBC^Complete Blood Count^L||20231201120000|||||||||^Smith^John^A||||||||||||F"
    ),
)


def get_sample_messages() -> dict[str, SampleMessage]:
    """Sample messages keyed by format tag."""
    return {ASTM: ASTM_CBC_ORDER, HL7: HL7_LAB_ORDER}
