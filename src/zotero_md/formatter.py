# SPDX-License-Identifier: MIT
"""Template rendering for citations and previews.

Templates contain ``{placeholder}`` tokens. Rendering happens in one
structured pass: the template is split into literal pieces and value
pieces, empty values are dropped, the cleanup rules run on literal pieces
only, and highlight spans are computed from the final pieces. Values are
never rewritten, so spans stay exact whatever the cleanup removed.
"""

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from .constants import DEFAULT_CITATION_FORMAT, DEEP_LINK_PREFIX, UNTITLED
from .enums import HighlightGroup
from .models import HighlightSpan, ReferenceRecord, RenderResult


class Placeholder(str, Enum):
    """The fixed placeholder vocabulary."""

    TITLE = "title"
    YEAR = "year"
    AUTHORS = "authors"
    PUBLICATION = "publication"
    TYPE = "type"
    ABBREVIATION = "abbreviation"
    ORGANIZATION = "organization"
    EVENTSHORT = "eventshort"
    ABSTRACT = "abstract"
    URL = "url"
    KEY = "key"


PLACEHOLDER_GROUPS: dict[Placeholder, HighlightGroup] = {
    Placeholder.TITLE: HighlightGroup.TITLE,
    Placeholder.YEAR: HighlightGroup.NUMBER,
    Placeholder.AUTHORS: HighlightGroup.IDENTIFIER,
    Placeholder.PUBLICATION: HighlightGroup.INCLUDE,
    Placeholder.TYPE: HighlightGroup.COMMENT,
    Placeholder.ABBREVIATION: HighlightGroup.STRING,
    Placeholder.ORGANIZATION: HighlightGroup.COMMENT,
    Placeholder.EVENTSHORT: HighlightGroup.INCLUDE,
    Placeholder.ABSTRACT: HighlightGroup.COMMENT,
    Placeholder.URL: HighlightGroup.UNDERLINED,
    Placeholder.KEY: HighlightGroup.SPECIAL,
}

# Extra-field keys used as placeholders
EXTRA_FIELD_GROUP = HighlightGroup.STRING

_ACCESSORS: dict[Placeholder, Callable[[ReferenceRecord], str]] = {
    Placeholder.TITLE: lambda r: r.title,
    Placeholder.YEAR: lambda r: r.year,
    Placeholder.AUTHORS: lambda r: r.authors_display,
    Placeholder.PUBLICATION: lambda r: r.publication,
    Placeholder.TYPE: lambda r: r.item_type,
    Placeholder.ABBREVIATION: lambda r: r.abbreviation,
    Placeholder.ORGANIZATION: lambda r: r.organization,
    Placeholder.EVENTSHORT: lambda r: r.eventshort,
    Placeholder.ABSTRACT: lambda r: r.abstract,
    Placeholder.URL: lambda r: r.url,
    Placeholder.KEY: lambda r: r.item_key,
}

_TOKEN_PATTERN = re.compile(r"\{([^{}\s]+)\}")

_LINK_PATTERN = re.compile(
    r"\[([^\]]+)\]\(" + re.escape(DEEP_LINK_PREFIX) + r"([A-Za-z0-9]+)\)"
)


def resolve_placeholder(
    name: str, record: ReferenceRecord
) -> tuple[str, HighlightGroup] | None:
    """Look up a placeholder by name.

    Known placeholders come first; any other name is looked up in the
    record's Extra fields. Returns None when the name is neither.
    """
    try:
        placeholder = Placeholder(name)
    except ValueError:
        if name in record.extra_fields:
            return record.extra_fields[name], EXTRA_FIELD_GROUP
        return None
    return _ACCESSORS[placeholder](record), PLACEHOLDER_GROUPS[placeholder]


@dataclass
class _Piece:
    text: str
    group: HighlightGroup | None = None
    placeholder: str | None = None

    @property
    def is_literal(self) -> bool:
        return self.group is None


# (pattern, replacement, anchor); anchored rules only see the first or last piece
_CLEANUP_RULES: list[tuple[re.Pattern[str], str, str | None]] = [
    (re.compile(r"\s+"), " ", None),
    (re.compile(r"^\s+"), "", "start"),
    (re.compile(r"\s*\(\s*\)"), "", None),
    (re.compile(r"\s*\[\s*\]"), "", None),
    (re.compile(r"\s*\{\s*\}"), "", None),
    (re.compile(r",(?:\s*,)+"), ",", None),
    (re.compile(r"^\s*,"), "", "start"),
    (re.compile(r",\s*$"), "", "end"),
    (re.compile(r"\s+"), " ", None),
    (re.compile(r"^\s+"), "", "start"),
    (re.compile(r"\s+$"), "", "end"),
]


def _split_template(template: str, record: ReferenceRecord) -> list[_Piece]:
    pieces: list[_Piece] = []
    literal: list[str] = []
    position = 0

    for match in _TOKEN_PATTERN.finditer(template):
        literal.append(template[position : match.start()])
        position = match.end()
        name = match.group(1)
        resolved = resolve_placeholder(name, record)
        if resolved is None:
            # Unknown token: keep it verbatim
            literal.append(match.group(0))
            continue
        value, group = resolved
        if not value:
            continue
        pieces.append(_Piece("".join(literal)))
        literal = []
        pieces.append(_Piece(value, group, name))

    literal.append(template[position:])
    pieces.append(_Piece("".join(literal)))
    return pieces


def _cleanup(pieces: list[_Piece]) -> None:
    first, last = 0, len(pieces) - 1
    for pattern, replacement, anchor in _CLEANUP_RULES:
        for index, piece in enumerate(pieces):
            if not piece.is_literal:
                continue
            if anchor == "start" and index != first:
                continue
            if anchor == "end" and index != last:
                continue
            piece.text = pattern.sub(replacement, piece.text)


def _assemble(pieces: list[_Piece], offset: int = 0) -> RenderResult:
    parts: list[str] = []
    highlights: list[HighlightSpan] = []
    position = offset
    for piece in pieces:
        if piece.group is not None:
            highlights.append(
                HighlightSpan(
                    start=position,
                    end=position + len(piece.text),
                    group=piece.group,
                    placeholder=piece.placeholder or "",
                )
            )
        parts.append(piece.text)
        position += len(piece.text)
    return RenderResult(text="".join(parts), highlights=highlights)


def render(template: str, record: ReferenceRecord) -> RenderResult:
    """Substitute placeholders and tidy up what empty ones leave behind.

    Empty placeholders are removed, then empty ``()``/``[]``/``{}`` groups,
    doubled commas, leading or trailing commas and runs of whitespace are
    collapsed in the surrounding literal text.

    Args:
        template: Template with ``{placeholder}`` tokens
        record: Reference supplying the values

    Returns:
        Rendered text and one highlight span per substituted value
    """
    pieces = _split_template(template, record)
    _cleanup(pieces)
    return _assemble(pieces)


def render_preview(template: str, record: ReferenceRecord) -> RenderResult:
    """Render preview text; no link wrapping."""
    return render(template, record)


def render_citation(template: str, record: ReferenceRecord) -> RenderResult:
    """Render a Markdown link citation for ``record``.

    Falls back to ``"{title} ({year})"`` (title defaulting to "Untitled")
    when the configured template renders to blank text, so a citation
    always has visible link text.

    Returns:
        ``[text](zotero://select/library/items/KEY)`` with spans pointing
        into the link text
    """
    body = render(template, record)
    if not body.text.strip():
        fallback = record if record.title else record.model_copy(update={"title": UNTITLED})
        body = render(DEFAULT_CITATION_FORMAT, fallback)

    text = f"[{body.text}]({record.deep_link_uri})"
    highlights = [
        span.model_copy(update={"start": span.start + 1, "end": span.end + 1})
        for span in body.highlights
    ]
    return RenderResult(text=text, highlights=highlights)


def find_citation_key(line: str, column: int) -> str | None:
    """Return the item key of the citation link covering ``column``.

    Args:
        line: A line of Markdown text
        column: 0-based character position

    Returns:
        The Zotero item key, or None when no citation link covers the column
    """
    for match in _LINK_PATTERN.finditer(line):
        if match.start() <= column <= match.end():
            return match.group(2)
    return None


def build_search_text(record: ReferenceRecord, fields: Iterable[str]) -> str:
    """Join the non-empty values of ``fields`` for fuzzy matching."""
    parts = []
    for name in fields:
        resolved = resolve_placeholder(name, record)
        if resolved and resolved[0]:
            parts.append(resolved[0])
    return " ".join(parts)
