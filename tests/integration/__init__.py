# SPDX-License-Identifier: MIT
"""Integration tests for zotero-md.

These tests drive the full pipeline (snapshot, extraction, cache and
rendering) against generated Zotero-shaped databases.
"""
