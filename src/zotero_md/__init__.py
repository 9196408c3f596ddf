# SPDX-License-Identifier: MIT
"""zotero-md - Fast Zotero reference lookup and Markdown citation rendering."""

from importlib.metadata import PackageNotFoundError, version

from .context import ZoteroContext as ZoteroContext


__all__: list[str] = ["ZoteroContext", "__version__"]

# Get version from installed package metadata
__version__: str
try:
    __version__ = version("zotero-md")
except PackageNotFoundError:
    # Package is not installed, use development fallback
    __version__ = "development"
