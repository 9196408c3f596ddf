# SPDX-License-Identifier: MIT
"""Constants used throughout zotero-md.

This module centralizes:

- **Database settings**: snapshot file name, query batch ceiling and the
  out-of-band separators used when talking to the sqlite3 command line tool
- **Cache settings**: default expiration and refresh intervals
- **Formatting defaults**: citation and preview templates, fallback title
- **Extraction rules**: creator-role priority and publication fallback chain
"""

# Database access
SNAPSHOT_FILE_NAME: str = "zotero-md-temp.sqlite"
DEFAULT_BATCH_LIMIT: int = 1000
DEFAULT_QUERY_TIMEOUT: float = 30.0
DEFAULT_SQLITE_BINARY: str = "sqlite3"

# ASCII unit separator (fields) and record separator (rows)
FIELD_SEPARATOR: str = "\x1f"
RECORD_SEPARATOR: str = "\x1e"

# Cache
DEFAULT_CACHE_EXPIRATION: int = 3600  # seconds
CACHE_FILE_NAME: str = "cache.json"

# Refresh scheduling
DEFAULT_PRELOAD_DELAY_MS: int = 1000
DEFAULT_AUTO_UPDATE_INTERVAL: int = 300  # seconds

# Formatting
DEFAULT_CITATION_FORMAT: str = "{title} ({year})"
DEFAULT_PREVIEW_FORMAT: str = "{title}, {year}, {authors}, {publication}, {abstract}"
DEFAULT_SEARCH_FIELDS: tuple[str, ...] = ("title", "year", "authors")
UNTITLED: str = "Untitled"
DEEP_LINK_PREFIX: str = "zotero://select/library/items/"
INFO_WRAP_WIDTH: int = 80

# Extraction
MAX_AUTHORS: int = 3

# Creator roles ranked for author display; unlisted roles sort last (99)
CREATOR_TYPE_PRIORITY: tuple[str, ...] = (
    "author",
    "artist",
    "performer",
    "director",
    "composer",
    "sponsor",
    "contributor",
    "interviewee",
    "cartographer",
    "inventor",
    "podcaster",
    "presenter",
    "programmer",
    "recipient",
    "editor",
    "seriesEditor",
    "translator",
)
UNRANKED_CREATOR_PRIORITY: int = 99

# Zotero fields tried in order for the "publication" column
PUBLICATION_FIELDS: tuple[str, ...] = (
    "publicationTitle",
    "bookTitle",
    "publisher",
    "proceedingsTitle",
    "conferenceName",
    "programTitle",
    "blogTitle",
    "code",
    "dictionaryTitle",
    "encyclopediaTitle",
    "forumTitle",
    "websiteTitle",
    "seriesTitle",
)

EXCLUDED_ITEM_TYPES: tuple[str, ...] = ("attachment", "note", "annotation")

# Diagnostics
DIAGNOSTIC_SAMPLE_SIZE: int = 5
DIAGNOSTIC_ABSTRACT_PREVIEW: int = 100
