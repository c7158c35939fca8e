"""
Unit tests for the MessageDecoder facade (lab_msg_decode.facade) and
the module-level API in lab_msg_decode.
"""

import pytest

import lab_msg_decode
from lab_msg_decode.config import DecoderConfig
from lab_msg_decode.decoders.astm import AstmDecoder
from lab_msg_decode.decoders.hl7 import Hl7Decoder
from lab_msg_decode.facade import MessageDecoder
from tests.conftest import ASTM_MESSAGE, ASTM_NO_HEADER, HL7_MESSAGE, HL7_NO_HEADER


@pytest.fixture
def facade() -> MessageDecoder:
    return MessageDecoder()


class TestDispatch:
    """Tests for format resolution and decoder dispatch."""

    def test_registered_formats(self, facade):
        assert facade.formats == ["astm", "hl7"]
        assert isinstance(facade.get_decoder("astm"), AstmDecoder)
        assert isinstance(facade.get_decoder("HL7"), Hl7Decoder)
        assert facade.get_decoder("x12") is None

    def test_auto_detect(self, facade):
        assert facade.parse(ASTM_MESSAGE).format == "astm"
        assert facade.parse(HL7_MESSAGE).format == "hl7"

    def test_hint_overrides_detection(self, facade):
        # Read as astm, each segment's first letter becomes the record type.
        result = facade.parse(HL7_MESSAGE.replace("\r", "\n"), "astm")
        assert result.format == "astm"
        assert result.errors == ()
        assert [s.segment_type for s in result.segments] == ["M", "P", "O", "O"]

    def test_hint_is_case_insensitive(self, facade):
        assert facade.parse(HL7_MESSAGE, "HL7").format == "hl7"
        assert facade.resolve_format(ASTM_MESSAGE, " Astm ") == "astm"

    def test_unrecognized_hint_falls_back_to_detection(self, facade):
        assert facade.resolve_format(HL7_MESSAGE, "fhir") == "hl7"
        assert facade.parse(ASTM_MESSAGE, "fhir").format == "astm"


class TestUnknownFormat:
    """Unknown input yields structured results, never exceptions."""

    def test_parse_unknown(self, facade):
        result = facade.parse("just some text")
        assert result.format == "unknown"
        assert result.segments == ()
        assert len(result.errors) == 1
        err = result.errors[0]
        assert err.line == 0
        assert err.message == "Unknown format: unknown. Expected ASTM or HL7 format."
        assert err.data == "just some text"
        assert result.metadata.detected_format == "unknown"

    def test_parse_unknown_truncates_data(self):
        facade = MessageDecoder(DecoderConfig(error_snippet_length=4))
        result = facade.parse("just some text")
        assert result.errors[0].data == "just"

    def test_parse_non_string(self, facade):
        result = facade.parse(None)
        assert result.format == "unknown"
        assert result.errors[0].line == 0

    def test_validate_unknown(self, facade):
        validation = facade.validate("just some text")
        assert validation.is_valid is False
        assert validation.errors[0].message == "Cannot validate unknown format: unknown"
        assert validation.warnings == ()
        assert validation.summary.total_segments == 0
        assert validation.summary.segment_types == {}


class TestValidateAsymmetry:
    """Missing header: warning for astm, error for hl7."""

    def test_astm_missing_header(self, facade):
        validation = facade.validate(ASTM_NO_HEADER)
        assert validation.is_valid is True
        assert len(validation.warnings) == 1

    def test_hl7_missing_header(self, facade):
        validation = facade.validate(HL7_NO_HEADER)
        assert validation.is_valid is False
        assert "required" in validation.errors[0].message


class TestConfigPropagation:
    """Custom config reaches the decoders."""

    def test_default_encoding_characters(self):
        facade = MessageDecoder(DecoderConfig(default_encoding_characters="#~\\$"))
        result = facade.parse("PID|1||A#B^C", "hl7")
        field = result.segments[0].get_field(4)
        assert [c.value for c in field.components] == ["A", "B^C"]


class TestModuleApi:
    """Module-level functions delegate to a default MessageDecoder."""

    def test_detect_format(self):
        assert lab_msg_decode.detect_format(HL7_MESSAGE) == "hl7"

    def test_parse(self):
        result = lab_msg_decode.parse(ASTM_MESSAGE)
        assert result.format == "astm"
        assert len(result.segments) == 6

    def test_validate(self):
        assert lab_msg_decode.validate(HL7_MESSAGE, "hl7").is_valid is True

    def test_format_for_display(self):
        rows = lab_msg_decode.format_for_display(lab_msg_decode.parse(ASTM_MESSAGE))
        assert rows[0].segment == "H (Header)"

    def test_samples(self, facade):
        samples = facade.get_sample_messages()
        assert set(samples) == {"astm", "hl7"}
