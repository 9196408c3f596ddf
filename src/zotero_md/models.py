# SPDX-License-Identifier: MIT
"""Core data models for zotero-md."""

from dataclasses import dataclass, field

from pydantic import BaseModel, Field, computed_field

from .constants import DEEP_LINK_PREFIX, UNTITLED
from .enums import HighlightGroup, LoadSource, LoadStatus


class Creator(BaseModel):
    """A single creator (author, editor, ...) of an item."""

    last_name: str = Field(..., description="Family name")
    first_name: str = Field("", description="Given name")


def format_authors(authors: list[Creator]) -> str:
    """Build the compact author string used in citations and pickers.

    Empty for no authors, the sole family name for one, ``"A & B"`` for
    two and ``"A et al."`` for three or more.
    """
    if not authors:
        return ""
    if len(authors) == 1:
        return authors[0].last_name
    if len(authors) == 2:
        return f"{authors[0].last_name} & {authors[1].last_name}"
    return f"{authors[0].last_name} et al."


class ReferenceRecord(BaseModel):
    """A normalized Zotero item ready for caching and formatting."""

    item_id: str = Field("", description="Source row id, only valid within one load")
    item_key: str = Field(..., min_length=1, description="Stable Zotero item key")
    title: str = Field(UNTITLED, description="Item title")
    year: str = Field("", description="Four digit year taken from the date")
    date: str = Field("", description="Raw date string as stored by Zotero")
    authors: list[Creator] = Field(
        default_factory=list, description="Highest priority creators, at most three"
    )
    publication: str = Field("", description="Journal, book, proceedings, ...")
    url: str = Field("", description="Item URL")
    abstract: str = Field("", description="Abstract note")
    item_type: str = Field("", description="Zotero item type name")
    extra_fields: dict[str, str] = Field(
        default_factory=dict, description="Key/value pairs parsed from Extra"
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def authors_display(self) -> str:
        return format_authors(self.authors)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def abbreviation(self) -> str:
        return self.extra_fields.get("abbreviation", "")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def organization(self) -> str:
        return self.extra_fields.get("organization", "")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def eventshort(self) -> str:
        return self.extra_fields.get("eventshort", "")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def deep_link_uri(self) -> str:
        return f"{DEEP_LINK_PREFIX}{self.item_key}"


class CacheEntry(BaseModel):
    """Persisted form of a complete load."""

    timestamp: int = Field(..., description="Epoch seconds of the load")
    references: list[ReferenceRecord] = Field(default_factory=list)


class HighlightSpan(BaseModel):
    """Character range of a substituted value inside rendered text."""

    start: int = Field(..., ge=0, description="Inclusive start offset")
    end: int = Field(..., ge=0, description="Exclusive end offset")
    group: HighlightGroup
    placeholder: str = Field(..., description="Placeholder name that produced it")


class RenderResult(BaseModel):
    """Rendered text plus highlight spans."""

    text: str
    highlights: list[HighlightSpan] = Field(default_factory=list)


@dataclass
class LoadResult:
    """Tagged outcome of a load request.

    ``EMPTY`` means the query succeeded but the library has no items, which
    callers should report as a warning. ``FAILED`` carries the error message
    and leaves any previous cache entry in place. The reference list is the
    cache's own list, not a copy.
    """

    status: LoadStatus
    references: list[ReferenceRecord] = field(default_factory=list)
    source: LoadSource | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status in (LoadStatus.SUCCESS, LoadStatus.EMPTY)
