"""Keyword classification of shortcut names.

Both tables are ordered; the first matching row wins. Matching is a
case-insensitive substring test over the shortcut name (and description, for
categories).
"""

from __future__ import annotations

from services.action.shortcut_gate.domain import ShortcutCategory

CATEGORY_KEYWORDS: tuple[tuple[ShortcutCategory, tuple[str, ...]], ...] = (
    (ShortcutCategory.COMMUNICATION, ("email", "message", "call")),
    (ShortcutCategory.MEDIA, ("photo", "video", "music")),
    (ShortcutCategory.PRODUCTIVITY, ("note", "task", "calendar")),
    (ShortcutCategory.SYSTEM, ("system", "setting")),
)

SYSTEM_KEYWORDS: tuple[str, ...] = (
    "system",
    "setting",
    "preference",
    "config",
    "admin",
    "security",
    "password",
    "keychain",
    "permission",
)


def categorize(name: str, description: str | None = None) -> ShortcutCategory:
    """Derive a category from name and description keywords."""
    haystack = f"{name} {description or ''}".lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in haystack for keyword in keywords):
            return category
    return ShortcutCategory.UTILITIES


def is_system_shortcut(name: str) -> bool:
    """Return True when the name touches system-level functionality."""
    lowered = name.lower()
    return any(keyword in lowered for keyword in SYSTEM_KEYWORDS)
