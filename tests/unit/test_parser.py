# SPDX-License-Identifier: MIT
"""Tests for the Extra field and date parsing helpers."""

import pytest

from zotero_md.parser import extract_year, normalize_extra_key, parse_extra_field


class TestParseExtraField:
    """Test cases for parse_extra_field."""

    def test_parses_key_value_lines(self):
        """Test that each Key: Value line becomes an entry."""
        fields = parse_extra_field("Abbreviation: GPT2 (2019)\nOrganization: OpenAI")
        assert fields == {"abbreviation": "GPT2 (2019)", "organization": "OpenAI"}

    def test_keys_are_lowercase_without_whitespace(self):
        """Test key normalization regardless of casing and spacing."""
        fields = parse_extra_field("Event Short: ICML\n  ORIGINAL  Date : 1999")
        assert set(fields) == {"eventshort", "originaldate"}
        assert fields["eventshort"] == "ICML"

    def test_value_keeps_later_colons(self):
        """Test that only the first colon separates key and value."""
        fields = parse_extra_field("tex.url: https://example.org/a:b")
        assert fields == {"tex.url": "https://example.org/a:b"}

    def test_last_occurrence_wins(self):
        """Test that duplicate normalized keys keep the later value."""
        fields = parse_extra_field("Organization: First\norganization: Second")
        assert fields == {"organization": "Second"}

    def test_ignores_lines_without_key_value(self):
        """Test that free text and empty values are skipped."""
        text = "Some free text\nPMID: 12345\nEmpty:   \n\r\n: no key"
        assert parse_extra_field(text) == {"pmid": "12345"}

    def test_handles_windows_line_endings(self):
        """Test CRLF separated Extra text."""
        fields = parse_extra_field("A: 1\r\nB: 2")
        assert fields == {"a": "1", "b": "2"}

    @pytest.mark.parametrize("extra", [None, ""])
    def test_empty_input(self, extra):
        """Test that missing Extra text yields an empty mapping."""
        assert parse_extra_field(extra) == {}

    def test_parsing_is_idempotent(self):
        """Test that parsing the same text twice gives identical mappings."""
        text = "Event Short: NeurIPS\nOrganization: Google\nevent short: ICLR"
        assert parse_extra_field(text) == parse_extra_field(text)

    def test_normalize_extra_key(self):
        """Test the key normalization helper directly."""
        assert normalize_extra_key(" Event\tShort ") == "eventshort"


class TestExtractYear:
    """Test cases for extract_year."""

    @pytest.mark.parametrize(
        "date, expected",
        [
            ("2017-06-12", "2017"),
            ("February 2019", "2019"),
            ("2019-00-00 2019", "2019"),
            ("12/05/98", ""),
            ("", ""),
            (None, ""),
        ],
    )
    def test_extract_year(self, date, expected):
        """Test year extraction from free-form dates."""
        assert extract_year(date) == expected
