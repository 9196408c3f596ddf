# SPDX-License-Identifier: MIT
"""Layered reference cache.

- CacheFileStore: persisted JSON snapshot of the last load
- ReferenceCache: in-memory list, file fallback and single-flight loading
"""

from .reference_cache import ReferenceCache
from .store import CacheFileStore


__all__ = [
    "CacheFileStore",
    "ReferenceCache",
]
