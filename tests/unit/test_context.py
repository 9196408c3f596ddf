# SPDX-License-Identifier: MIT
"""Tests for the application context."""

import pytest

from zotero_md.config import AppConfig, FormatConfig, RefreshConfig
from zotero_md.context import ZoteroContext
from zotero_md.enums import LoadSource, LoadStatus


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def context(app_config, clock):
    return ZoteroContext(app_config, clock=clock)


class TestZoteroContext:
    """Test cases for ZoteroContext."""

    @pytest.mark.asyncio
    async def test_get_references(self, context, app_config):
        """Test a first load through every layer."""
        result = await context.get_references()

        assert result.status == LoadStatus.SUCCESS
        assert result.source == LoadSource.DATABASE
        assert [r.item_key for r in result.references] == [
            "ATTN2017",
            "GPT2REPORT",
            "NOTITLE1",
        ]
        assert app_config.cache.file.exists()
        assert (app_config.database.snapshot_dir / "zotero-md-temp.sqlite").exists()

    @pytest.mark.asyncio
    async def test_separate_contexts_do_not_share_state(self, app_config, clock):
        """Test that each context owns its own cache."""
        first = ZoteroContext(app_config, clock=clock)
        second = ZoteroContext(app_config, clock=clock)

        await first.get_references()

        assert second.cache.references is None
        assert second.find_by_key("ATTN2017") is None

    @pytest.mark.asyncio
    async def test_find_and_render(self, context):
        """Test key lookup and the configured templates."""
        await context.get_references()
        reference = context.find_by_key("ATTN2017")

        assert reference is not None
        assert context.render_citation(reference).text == (
            "[Attention Is All You Need (2017)](zotero://select/library/items/ATTN2017)"
        )
        assert context.render_preview(reference).text.startswith(
            "Attention Is All You Need, 2017, Vaswani et al., Advances in Neural"
        )
        assert context.search_text(reference) == (
            "Attention Is All You Need 2017 Vaswani et al."
        )
        assert context.find_by_key("MISSING") is None

    @pytest.mark.asyncio
    async def test_custom_formats(self, app_config, clock):
        """Test that format settings flow into rendering."""
        config = app_config.model_copy(
            update={
                "format": FormatConfig(
                    citation="{authors} ({organization}) {year}",
                    preview="{type}: {title}",
                    search_fields=["key", "publication"],
                )
            }
        )
        context = ZoteroContext(config, clock=clock)
        await context.get_references()
        reference = context.find_by_key("GPT2REPORT")

        assert context.render_citation(reference).text == (
            "[Radford & Smith (OpenAI) 2019](zotero://select/library/items/GPT2REPORT)"
        )
        assert context.render_preview(reference).text == (
            "report: Language Models are Unsupervised Multitask Learners"
        )
        assert context.search_text(reference) == "GPT2REPORT OpenAI"

    @pytest.mark.asyncio
    async def test_missing_database_fails(self, app_config, clock, tmp_path):
        """Test that a missing source yields a FAILED result."""
        database = app_config.database.model_copy(
            update={"path": tmp_path / "nowhere.sqlite"}
        )
        context = ZoteroContext(
            app_config.model_copy(update={"database": database}), clock=clock
        )

        result = await context.get_references()

        assert result.status == LoadStatus.FAILED
        assert "Zotero database not found at:" in result.error

    @pytest.mark.asyncio
    async def test_refresh_forces_reload(self, context):
        """Test that refresh goes back to the database."""
        await context.get_references()
        result = await context.refresh()
        assert result.source == LoadSource.DATABASE

    @pytest.mark.asyncio
    async def test_preload(self, app_config, clock):
        """Test the start-up preload with no delay."""
        config = app_config.model_copy(
            update={"refresh": RefreshConfig(preload=True, preload_delay=0)}
        )
        context = ZoteroContext(config, clock=clock)

        result = await context.preload()

        assert result.status == LoadStatus.SUCCESS
        assert context.find_by_key("NOTITLE1") is not None

    @pytest.mark.asyncio
    async def test_preload_disabled(self, app_config, clock):
        """Test that preload does nothing when switched off."""
        config = app_config.model_copy(update={"refresh": RefreshConfig(preload=False)})
        context = ZoteroContext(config, clock=clock)
        assert await context.preload() is None
        assert context.cache.references is None

    @pytest.mark.asyncio
    async def test_refresh_if_due_throttles(self, app_config, clock):
        """Test that activity-driven refreshes respect the interval."""
        config = app_config.model_copy(
            update={"refresh": RefreshConfig(auto_update_interval=300)}
        )
        context = ZoteroContext(config, clock=clock)

        first = context.refresh_if_due()
        assert first is not None
        await first
        assert context.refresh_if_due(now=clock.now + 100) is None

        later = context.refresh_if_due(now=clock.now + 300)
        assert later is not None
        await later

    @pytest.mark.asyncio
    async def test_refresh_if_due_disabled(self, app_config, clock):
        """Test that auto-update can be switched off."""
        config = app_config.model_copy(
            update={"refresh": RefreshConfig(auto_update=False)}
        )
        assert ZoteroContext(config, clock=clock).refresh_if_due() is None

    def test_default_config(self, monkeypatch, tmp_path):
        """Test construction without an explicit configuration."""
        monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
        context = ZoteroContext()
        assert context.config == AppConfig()
        assert context.cache.expiration == 3600

    def test_diagnostics(self, context):
        """Test that diagnostics use the configured database."""
        report = context.diagnostics("ATTN2017")
        assert report.load_ok is True
        assert report.match.authors_display == "Vaswani et al."
