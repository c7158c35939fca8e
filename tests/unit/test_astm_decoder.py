"""
Unit tests for the format A decoder (lab_msg_decode.decoders.astm).
"""

import pytest

from lab_msg_decode.config import DecoderConfig
from lab_msg_decode.decoders.astm import AstmDecoder
from lab_msg_decode.exceptions import UnknownSegmentTypeError
from tests.conftest import ASTM_MESSAGE, ASTM_NO_HEADER


@pytest.fixture
def decoder() -> AstmDecoder:
    return AstmDecoder()


# ---------------------------------------------------------------------------
# decode_segment
# ---------------------------------------------------------------------------

class TestDecodeSegment:
    """Tests for AstmDecoder.decode_segment()."""

    def test_header_record(self, decoder):
        line = "H|\\^&|||LIS^LIS|||||||P|E 1394-97|20231201120000"
        seg = decoder.decode_segment(line, 1)
        assert seg.segment_type == "H"
        assert seg.description == "Header"
        assert seg.line_number == 1
        assert seg.raw_data == line
        assert seg.fields[0].name == "Record Type"
        assert seg.fields[0].value == "H"
        assert seg.fields[1].name == "Delimiter Definition"
        assert seg.fields[1].value == "\\^&"

    def test_every_token_becomes_a_field(self, decoder):
        line = "P|1||12345||||"
        seg = decoder.decode_segment(line, 2)
        assert len(seg.fields) == len(line.split("|")) == 8
        assert seg.field_count == 8
        assert seg.fields[-1].value == ""

    def test_indices_are_contiguous_from_one(self, decoder):
        seg = decoder.decode_segment("O|1|ORD123|12345^001|^^^CBC", 3)
        assert [f.index for f in seg.fields] == [1, 2, 3, 4, 5]

    def test_values_are_trimmed(self, decoder):
        seg = decoder.decode_segment("R|1| ^^^WBC | 7.2 |", 4)
        assert seg.fields[2].value == "^^^WBC"
        assert seg.fields[3].value == "7.2"

    def test_lowercase_record_type(self, decoder):
        seg = decoder.decode_segment("p|1||12345", 1)
        assert seg.segment_type == "P"
        assert seg.description == "Patient Information"

    def test_no_component_decomposition(self, decoder):
        seg = decoder.decode_segment("O|1|ORD123||^^^Complete Blood Count^L", 1)
        assert all(f.components is None for f in seg.fields)

    def test_names_and_descriptions(self, decoder):
        seg = decoder.decode_segment("P|1||12345||Smith^John||19850315|M", 1)
        name_field = seg.get_field(6)
        assert name_field.name == "Patient Name"
        assert name_field.value == "Smith^John"
        assert name_field.description == "Patient name in last name^first name format"
        assert seg.get_field(2).description == "Standard ASTM field"

    def test_past_catalogue_synthesizes_name(self, decoder):
        seg = decoder.decode_segment("L|1|N|extra", 1)
        assert seg.fields[3].name == "Field 4"

    def test_unknown_record_type_raises(self, decoder):
        with pytest.raises(UnknownSegmentTypeError, match="Unknown ASTM segment type: X"):
            decoder.decode_segment("X|1|2", 5)


# ---------------------------------------------------------------------------
# parse
# ---------------------------------------------------------------------------

class TestParse:
    """Tests for AstmDecoder.parse()."""

    def test_well_formed_message(self, decoder):
        result = decoder.parse(ASTM_MESSAGE)
        assert result.format == "astm"
        assert len(result.segments) == 6
        assert result.errors == ()
        assert result.success is True
        assert [s.segment_type for s in result.segments] == ["H", "P", "O", "R", "C", "L"]

    def test_line_numbers(self, decoder):
        result = decoder.parse(ASTM_MESSAGE)
        assert [s.line_number for s in result.segments] == [1, 2, 3, 4, 5, 6]

    def test_bad_line_does_not_drop_neighbours(self, decoder):
        text = "H|\\^&\nP|1\nX|bogus\nO|1|ORD1\nL|1|N"
        result = decoder.parse(text)
        assert len(result.segments) == 4
        assert len(result.errors) == 1
        err = result.errors[0]
        assert err.line == 3
        assert "Unknown ASTM segment type: X" in err.message
        assert err.data == "X|bogus"
        assert result.success is False

    def test_blank_lines_skipped_but_counted(self, decoder):
        text = "H|\\^&\n\n   \nL|1|N"
        result = decoder.parse(text)
        assert len(result.segments) == 2
        assert result.errors == ()
        assert result.metadata.total_segments == 4
        assert [s.line_number for s in result.segments] == [1, 4]

    def test_crlf_lines(self, decoder):
        result = decoder.parse("H|\\^&\r\nP|1\r\nL|1|N\r\n")
        assert len(result.segments) == 3
        assert result.segments[1].raw_data == "P|1"

    def test_total_segments_counts_lines_not_successes(self, decoder):
        result = decoder.parse("H|a\nZ|b\nL|1")
        assert result.metadata.total_segments == 3
        assert len(result.segments) == 2

    def test_header_summary(self, decoder):
        result = decoder.parse(ASTM_MESSAGE)
        assert result.metadata.header == {
            "sender": "LIS^LIS",
            "processing_id": "P",
            "version": "E 1394-97",
            "timestamp": "20231201120000",
        }

    def test_no_header_summary_without_header(self, decoder):
        result = decoder.parse(ASTM_NO_HEADER)
        assert result.metadata.header == {}

    def test_non_string_degrades_to_single_error(self, decoder):
        result = decoder.parse(None)
        assert result.format == "astm"
        assert result.segments == ()
        assert len(result.errors) == 1
        assert result.errors[0].line == 0
        assert result.errors[0].message.startswith("Parse error:")

    def test_whole_message_error_data_is_truncated(self):
        decoder = AstmDecoder(DecoderConfig(error_snippet_length=5))
        result = decoder.parse(12345678)
        assert result.errors[0].data == "12345"

    def test_fresh_result_per_call(self, decoder):
        first = decoder.parse(ASTM_MESSAGE)
        second = decoder.parse(ASTM_MESSAGE)
        assert first is not second
        assert first.segments == second.segments


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------

class TestValidate:
    """Tests for AstmDecoder.validate()."""

    def test_valid_message(self, decoder):
        validation = decoder.validate(ASTM_MESSAGE)
        assert validation.is_valid is True
        assert validation.warnings == ()
        assert validation.summary.total_segments == 6
        assert validation.summary.segment_types == {
            "H": 1, "P": 1, "O": 1, "R": 1, "C": 1, "L": 1,
        }

    def test_missing_header_is_only_a_warning(self, decoder):
        validation = decoder.validate(ASTM_NO_HEADER)
        assert validation.is_valid is True
        assert validation.errors == ()
        assert len(validation.warnings) == 1
        assert "No Header (H) segment found" in validation.warnings[0]

    def test_line_errors_invalidate(self, decoder):
        validation = decoder.validate("H|x\nQ|1\nL|1")
        assert validation.is_valid is False
        assert validation.errors[0].line == 2

    def test_histogram_counts_repeats(self, decoder):
        validation = decoder.validate("H|x\nR|1|a\nR|2|b\nR|3|c\nL|1")
        assert validation.summary.segment_types["R"] == 3
