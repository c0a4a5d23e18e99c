"""Shortcut discovery with cache-first listings and metadata lookups."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from packages.shortcut_shared.config import ShortcutsSettings
from packages.shortcut_shared.logging import get_logger

from services.action.shortcut_gate.cache import TTLCache
from services.action.shortcut_gate.classification import categorize, is_system_shortcut
from services.action.shortcut_gate.domain import ShortcutDescriptor, ShortcutFilter, ShortcutInfo
from services.action.shortcut_gate.invoker import ShortcutsCli

_LOGGER = get_logger(__name__)

INFO_KEY_PREFIX = "info:"
_ALL = ShortcutFilter()


class ShortcutCatalog:
    """Serves shortcut listings and details, discovering at most once per TTL."""

    def __init__(self, *, cli: ShortcutsCli, cache: TTLCache, settings: ShortcutsSettings) -> None:
        self._cli = cli
        self._cache = cache
        self._enabled = settings.enable_cache
        self._ttl_s = settings.cache_timeout_ms / 1000.0
        self._discovery_timeout_s = settings.default_timeout_ms / 1000.0

    @property
    def cache(self) -> TTLCache:
        return self._cache

    async def list(self, shortcut_filter: ShortcutFilter | None = None) -> list[ShortcutDescriptor]:
        """Return descriptors matching ``shortcut_filter``.

        Raises ``CatalogUnavailableError`` when discovery is needed and fails.
        """
        selected = shortcut_filter or _ALL
        key = selected.cache_key()
        cached = self._cached(key)
        if cached is not None:
            return list(cached)

        if selected == _ALL:
            result = await self._discover()
        else:
            result = apply_filter(await self.list(), selected)
        self._store(key, result)
        return list(result)

    async def find(self, name: str) -> ShortcutDescriptor | None:
        """Resolve one shortcut by exact, case-sensitive name."""
        for descriptor in await self.list():
            if descriptor.name == name:
                return descriptor
        return None

    async def get_info(self, name: str) -> ShortcutInfo | None:
        """Return the listing entry for ``name`` merged with detail metadata."""
        key = f"{INFO_KEY_PREFIX}{name}"
        cached = self._cached(key)
        if cached is not None:
            return cached

        descriptor = await self.find(name)
        if descriptor is None:
            return None

        detail = await self._cli.describe(name, self._discovery_timeout_s)
        info = compose_info(descriptor, detail)
        self._store(key, info)
        return info

    async def warm(self) -> int:
        """Populate the listing cache; return the number of shortcuts found."""
        shortcuts = await self.list()
        _LOGGER.info("Shortcut catalog warmed with %d shortcuts", len(shortcuts))
        return len(shortcuts)

    def clear(self) -> None:
        self._cache.invalidate_all()

    async def _discover(self) -> list[ShortcutDescriptor]:
        names = await self._cli.list_names(self._discovery_timeout_s)
        now = datetime.now(UTC)
        _LOGGER.debug("Discovered %d shortcuts", len(names))
        return [
            ShortcutDescriptor(name=name, category=categorize(name), discovered_at=now)
            for name in names
        ]

    def _cached(self, key: str) -> Any:
        if not self._enabled:
            return None
        return self._cache.get(key)

    def _store(self, key: str, value: object) -> None:
        if self._enabled:
            self._cache.set(key, value, self._ttl_s)


def apply_filter(
    shortcuts: list[ShortcutDescriptor], shortcut_filter: ShortcutFilter
) -> list[ShortcutDescriptor]:
    """Apply category, case-insensitive search and limit, in that order."""
    result = shortcuts
    if shortcut_filter.category is not None:
        result = [item for item in result if item.category == shortcut_filter.category]
    if shortcut_filter.search is not None:
        needle = shortcut_filter.search.lower()
        result = [
            item
            for item in result
            if needle in item.name.lower() or needle in (item.description or "").lower()
        ]
    if shortcut_filter.limit is not None:
        result = result[: shortcut_filter.limit]
    return result


def compose_info(descriptor: ShortcutDescriptor, detail: Any) -> ShortcutInfo:
    """Merge a descriptor with detail output from the info command."""
    base = descriptor.model_dump()
    base["is_system_shortcut"] = is_system_shortcut(descriptor.name)
    if isinstance(detail, Mapping):
        description = detail.get("description")
        if isinstance(description, str) and description and base["description"] is None:
            base["description"] = description
        base["action_count"] = _int_or_none(detail.get("action_count", detail.get("actionCount")))
        base["size"] = _int_or_none(detail.get("size"))
        base["metadata"] = dict(detail)
    elif isinstance(detail, str) and detail:
        base["metadata"] = {"details": detail}
    return ShortcutInfo(**base)


def _int_or_none(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    return None
