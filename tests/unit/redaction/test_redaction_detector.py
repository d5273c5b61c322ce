"""Unit tests for redaction marker detection."""

import re

import pytest

from forensic_evidence.services.redaction import (
    detect_redactions,
    generate_redaction_id,
    is_redaction_placeholder,
    looks_like_personal_name,
)


class TestDetectRedactions:
    """Tests for detect_redactions."""

    @pytest.mark.parametrize(
        "marker",
        ["[REDACTED]", "[redacted_name]", "[███]", "████", "*****", "XXXX", "______", "[CLASSIFIED]", "[WITHHELD]"],
    )
    def test_detects_marker(self, marker):
        text = f"Passenger: {marker} boarded."
        spans = detect_redactions(text)

        assert len(spans) == 1
        assert text[spans[0].start:spans[0].end] == marker

    def test_overlaps_removed(self):
        """Test bracketed blocks are not also reported as bare block runs."""
        spans = detect_redactions("Name: [███] and [REDACTED]")

        assert [s.marker for s in spans] == ["[███]", "[REDACTED]"]

    def test_sorted_by_position(self):
        spans = detect_redactions("***** then [WITHHELD] then XXX")

        assert [s.start for s in spans] == sorted(s.start for s in spans)
        assert len(spans) == 3

    def test_no_markers(self):
        assert detect_redactions("Plain text with a name, Jane Doe.") == []
        assert detect_redactions("") == []


def test_generate_redaction_id():
    first = generate_redaction_id()

    assert re.fullmatch(r"REDACTED_0x[0-9A-F]{8}", first)
    assert is_redaction_placeholder(first)


@pytest.mark.parametrize("name", ["REDACTED_0x1A2B3C4D", "[REDACTED]", "[REDACTED_PERSON]", "unknown"])
def test_placeholders(name):
    assert is_redaction_placeholder(name)


@pytest.mark.parametrize("name", ["Jane Doe", "John F. Smith", "Mary O'Neil"])
def test_personal_names(name):
    assert looks_like_personal_name(name)
    assert not is_redaction_placeholder(name)


@pytest.mark.parametrize("name", ["pilot", "ACME CORP", "Jane", "REDACTED_0x1A2B3C4D"])
def test_not_personal_names(name):
    assert not looks_like_personal_name(name)
