# SPDX-License-Identifier: MIT
"""Tests for the core data models."""

import pytest
from pydantic import ValidationError

from zotero_md.enums import LoadStatus
from zotero_md.models import (
    CacheEntry,
    Creator,
    LoadResult,
    ReferenceRecord,
    format_authors,
)


def _creators(*names: str) -> list[Creator]:
    return [Creator(last_name=name) for name in names]


class TestFormatAuthors:
    """Test cases for the author display string."""

    def test_no_authors(self):
        """Test that no authors gives an empty string."""
        assert format_authors([]) == ""

    def test_single_author(self):
        """Test that one author gives the family name."""
        assert format_authors(_creators("Doe")) == "Doe"

    def test_two_authors(self):
        """Test that two authors are joined with an ampersand."""
        assert format_authors(_creators("Doe", "Roe")) == "Doe & Roe"

    @pytest.mark.parametrize("count", [3, 4, 10])
    def test_three_or_more_authors(self, count):
        """Test that three or more authors use et al. with the first name only."""
        names = [f"Author{i}" for i in range(count)]
        assert format_authors(_creators(*names)) == "Author0 et al."


class TestReferenceRecord:
    """Test cases for ReferenceRecord."""

    def test_defaults(self):
        """Test default values of optional fields."""
        record = ReferenceRecord(item_key="KEY1")
        assert record.title == "Untitled"
        assert record.year == ""
        assert record.authors_display == ""
        assert record.extra_fields == {}

    def test_item_key_required(self):
        """Test that an empty key is rejected."""
        with pytest.raises(ValidationError):
            ReferenceRecord(item_key="")

    def test_authors_display_follows_authors(self):
        """Test that the display string is derived from the author list."""
        record = ReferenceRecord(item_key="KEY1", authors=_creators("Doe", "Roe"))
        assert record.authors_display == "Doe & Roe"

    def test_promoted_extra_fields(self, sample_reference):
        """Test abbreviation, organization and eventshort promotion."""
        assert sample_reference.abbreviation == "FOO"
        assert sample_reference.organization == "ACME"
        assert sample_reference.eventshort == ""

    def test_deep_link_uri(self):
        """Test the deep-link formula."""
        record = ReferenceRecord(item_key="ABCD1234")
        assert record.deep_link_uri == "zotero://select/library/items/ABCD1234"

    def test_dump_includes_derived_fields(self, sample_reference):
        """Test that derived values are written out for consumers."""
        data = sample_reference.model_dump()
        assert data["authors_display"] == "Doe"
        assert data["deep_link_uri"].endswith("ABCD1234")


class TestCacheEntry:
    """Test cases for the persisted cache entry."""

    def test_json_round_trip(self, sample_reference):
        """Test that a dumped entry validates back to an equal entry."""
        entry = CacheEntry(timestamp=1700000000, references=[sample_reference])
        restored = CacheEntry.model_validate_json(entry.model_dump_json())
        assert restored == entry
        assert restored.references[0].authors_display == "Doe"


class TestLoadResult:
    """Test cases for LoadResult."""

    def test_ok_statuses(self):
        """Test which statuses count as a usable result."""
        assert LoadResult(status=LoadStatus.SUCCESS).ok
        assert LoadResult(status=LoadStatus.EMPTY).ok
        assert not LoadResult(status=LoadStatus.FAILED, error="boom").ok
        assert not LoadResult(status=LoadStatus.ALREADY_LOADING).ok
