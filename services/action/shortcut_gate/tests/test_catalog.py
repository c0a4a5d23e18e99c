"""Tests for cache-first shortcut discovery against a fake CLI."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from packages.shortcut_shared.config import ShortcutsSettings
from services.action.shortcut_gate.cache import TTLCache
from services.action.shortcut_gate.catalog import ShortcutCatalog, compose_info
from services.action.shortcut_gate.domain import (
    ShortcutCategory,
    ShortcutDescriptor,
    ShortcutFilter,
)
from services.action.shortcut_gate.errors import CatalogUnavailableError
from services.action.shortcut_gate.invoker import ShortcutsCli


class _CountingCli(ShortcutsCli):
    """Real CLI wrapper that counts discovery calls."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.list_calls = 0

    async def list_names(self, timeout_s: float) -> list[str]:
        self.list_calls += 1
        return await super().list_names(timeout_s)


def _catalog(fake_shortcuts, clock, **settings) -> tuple[ShortcutCatalog, _CountingCli]:
    cli = _CountingCli(
        executable=str(fake_shortcuts),
        info_command=[str(fake_shortcuts), "view", "{name}"],
    )
    catalog = ShortcutCatalog(
        cli=cli,
        cache=TTLCache(clock=clock),
        settings=ShortcutsSettings(executable=str(fake_shortcuts), **settings),
    )
    return catalog, cli


@pytest.mark.asyncio
async def test_list_discovers_once_per_ttl(fake_shortcuts, clock, shortcut_names) -> None:
    catalog, cli = _catalog(fake_shortcuts, clock, cache_timeout_ms=60_000)

    first = await catalog.list()
    await catalog.list()
    await catalog.list(ShortcutFilter(search="photo"))
    assert cli.list_calls == 1
    assert [item.name for item in first] == shortcut_names

    clock.advance(60)
    await catalog.list()
    assert cli.list_calls == 2


@pytest.mark.asyncio
async def test_disabled_cache_discovers_every_time(fake_shortcuts, clock) -> None:
    catalog, cli = _catalog(fake_shortcuts, clock, enable_cache=False)

    await catalog.list()
    await catalog.list()

    assert cli.list_calls == 2
    assert catalog.cache.stats().size == 0


@pytest.mark.asyncio
async def test_list_applies_category_search_and_limit(fake_shortcuts, clock) -> None:
    catalog, _ = _catalog(fake_shortcuts, clock)

    media = await catalog.list(ShortcutFilter(category=ShortcutCategory.MEDIA))
    searched = await catalog.list(ShortcutFilter(search="SHORTCUT"))
    limited = await catalog.list(ShortcutFilter(search="shortcut", limit=2))

    assert [item.name for item in media] == ["Photo Backup"]
    assert [item.name for item in searched] == [
        "Slow Shortcut",
        "Broken Shortcut",
        "Noisy Shortcut",
        "JSON Shortcut",
    ]
    assert [item.name for item in limited] == ["Slow Shortcut", "Broken Shortcut"]


@pytest.mark.asyncio
async def test_search_text_with_separator_does_not_share_cached_listing(
    fake_shortcuts, clock
) -> None:
    catalog, _ = _catalog(fake_shortcuts, clock)

    limited = await catalog.list(ShortcutFilter(search="e", limit=1))
    literal = await catalog.list(ShortcutFilter(search="e|limit:1"))

    assert len(limited) == 1
    assert literal == []


@pytest.mark.asyncio
async def test_find_is_case_sensitive(fake_shortcuts, clock) -> None:
    catalog, _ = _catalog(fake_shortcuts, clock)

    assert (await catalog.find("Weather Report")) is not None
    assert (await catalog.find("weather report")) is None


@pytest.mark.asyncio
async def test_get_info_merges_detail_and_caches(fake_shortcuts, clock) -> None:
    catalog, _ = _catalog(fake_shortcuts, clock)

    info = await catalog.get_info("System Configuration")
    again = await catalog.get_info("System Configuration")

    assert info is not None
    assert info.action_count == 3
    assert info.size == 2048
    assert info.description == "Details for System Configuration"
    assert info.is_system_shortcut is True
    assert info.category == ShortcutCategory.SYSTEM
    assert again == info
    assert catalog.cache.stats().hits >= 1


@pytest.mark.asyncio
async def test_get_info_unknown_returns_none(fake_shortcuts, clock) -> None:
    catalog, _ = _catalog(fake_shortcuts, clock)

    assert await catalog.get_info("Nope") is None


@pytest.mark.asyncio
async def test_discovery_failure_raises(fake_shortcuts, clock, monkeypatch) -> None:
    monkeypatch.setenv("FAKE_SHORTCUTS_FAIL_LIST", "1")
    catalog, _ = _catalog(fake_shortcuts, clock)

    with pytest.raises(CatalogUnavailableError) as exc_info:
        await catalog.list()

    assert "list unavailable" in str(exc_info.value)
    assert exc_info.value.code == "CATALOG_UNAVAILABLE"


@pytest.mark.asyncio
async def test_warm_and_clear(fake_shortcuts, clock, shortcut_names) -> None:
    catalog, cli = _catalog(fake_shortcuts, clock)

    assert await catalog.warm() == len(shortcut_names)
    catalog.clear()
    await catalog.list()

    assert cli.list_calls == 2


def test_compose_info_with_text_detail() -> None:
    descriptor = ShortcutDescriptor(name="Weather Report", discovered_at=datetime.now(UTC))

    info = compose_info(descriptor, "3 actions")

    assert info.metadata == {"details": "3 actions"}
    assert info.action_count is None
    assert info.is_system_shortcut is False
