# SPDX-License-Identifier: MIT
"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from tests.zotero_library import ZoteroItem, build_zotero_db
from zotero_md.config import AppConfig, CacheConfig, DatabaseConfig
from zotero_md.models import Creator, ReferenceRecord


@pytest.fixture
def sample_items() -> list[ZoteroItem]:
    """A small library covering the interesting extraction cases."""
    return [
        ZoteroItem(
            key="ATTN2017",
            fields={
                "title": "Attention Is All You Need",
                "date": "2017-06-12",
                "proceedingsTitle": "Advances in Neural Information Processing Systems",
                "url": "https://arxiv.org/abs/1706.03762",
                "extra": "Abbreviation: Transformer\nEvent Short: NeurIPS 2017",
                "abstractNote": "The dominant sequence transduction models...",
            },
            creators=[
                ("Vaswani", "Ashish", "author"),
                ("Shazeer", "Noam", "author"),
                ("Parmar", "Niki", "author"),
                ("Uszkoreit", "Jakob", "author"),
            ],
            date_modified="2024-03-01 10:00:00",
        ),
        ZoteroItem(
            key="GPT2REPORT",
            item_type="report",
            fields={
                "title": "Language Models are Unsupervised Multitask Learners",
                "date": "February 2019",
                "publisher": "OpenAI",
                "extra": "Organization: OpenAI",
            },
            creators=[
                ("Smith", "Ed", "editor"),
                ("Radford", "Alec", "author"),
            ],
            date_modified="2024-02-01 10:00:00",
        ),
        ZoteroItem(
            key="NOTITLE1",
            item_type="webpage",
            fields={"websiteTitle": "Example Site"},
            date_modified="2024-01-01 10:00:00",
        ),
        ZoteroItem(
            key="TRASHED1",
            fields={"title": "Deleted paper"},
            deleted=True,
        ),
        ZoteroItem(key="ATTACH01", item_type="attachment", fields={"title": "paper.pdf"}),
        ZoteroItem(key="NOTE0001", item_type="note"),
    ]


@pytest.fixture
def zotero_db(tmp_path, sample_items) -> Path:
    """Zotero-shaped SQLite database with the sample library."""
    return build_zotero_db(tmp_path / "zotero" / "zotero.sqlite", sample_items)


@pytest.fixture
def app_config(tmp_path, zotero_db) -> AppConfig:
    """Configuration pointing every path into the test's tmp_path."""
    return AppConfig(
        database=DatabaseConfig(path=zotero_db, snapshot_dir=tmp_path / "snapshots"),
        cache=CacheConfig(file=tmp_path / "data" / "cache.json", expiration=3600),
    )


@pytest.fixture
def sample_reference() -> ReferenceRecord:
    """A fully populated reference."""
    return ReferenceRecord(
        item_id="1",
        item_key="ABCD1234",
        title="Foo",
        year="2020",
        date="2020-05-01",
        authors=[Creator(last_name="Doe", first_name="Jane")],
        publication="Journal of Foo",
        url="https://example.org/foo",
        abstract="An abstract.",
        item_type="journalArticle",
        extra_fields={"organization": "ACME", "abbreviation": "FOO"},
    )
