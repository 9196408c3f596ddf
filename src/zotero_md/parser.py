# SPDX-License-Identifier: MIT
"""Parsing helpers for raw Zotero field values."""

import re


_EXTRA_LINE_PATTERN = re.compile(r"^([^:]+):\s*(.+)$")
_YEAR_PATTERN = re.compile(r"(\d{4})")
_WHITESPACE = re.compile(r"\s+")


def normalize_extra_key(key: str) -> str:
    """Lowercase a key and drop all whitespace (``"Event Short"`` -> ``"eventshort"``)."""
    return _WHITESPACE.sub("", key.lower())


def parse_extra_field(extra: str | None) -> dict[str, str]:
    """Parse Zotero's free-form Extra field into a mapping.

    Each line of the form ``Key: Value`` contributes one entry. Keys are
    normalized with `normalize_extra_key`; when two lines normalize to the
    same key the later line wins. Lines without a colon or without a value
    are ignored.

    Args:
        extra: Raw Extra text, possibly None

    Returns:
        Mapping of normalized keys to values

    Example:
        >>> parse_extra_field("Abbreviation: GPT2\\nOrganization: OpenAI")
        {'abbreviation': 'GPT2', 'organization': 'OpenAI'}
    """
    fields: dict[str, str] = {}
    if not extra:
        return fields

    for line in extra.splitlines():
        match = _EXTRA_LINE_PATTERN.match(line)
        if not match:
            continue
        key = normalize_extra_key(match.group(1))
        value = match.group(2).strip()
        if key and value:
            fields[key] = value

    return fields


def extract_year(date: str | None) -> str:
    """Return the first four-digit run in a Zotero date string, or ``""``."""
    if not date:
        return ""
    match = _YEAR_PATTERN.search(date)
    return match.group(1) if match else ""
