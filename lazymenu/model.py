"""Menu and entry model shared by the engine, loader, and renderer.

Instances are built once at startup and never mutated afterwards. Menu
display order is ``order`` ascending, ties kept in declaration order.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .errors import ConfigError


@dataclass(frozen=True)
class Entry:
    name: str
    value: str


@dataclass(frozen=True)
class Menu:
    name: str
    prompt: str
    entries: tuple[Entry, ...] = ()
    order: int = 0


def order_menus(menus: Iterable[Menu]) -> tuple[Menu, ...]:
    """Return menus sorted by ``order`` with declaration order as tie-break."""
    indexed = list(enumerate(menus))
    indexed.sort(key=lambda item: (item[1].order, item[0]))
    return tuple(menu for _, menu in indexed)


def validate_menus(menus: Iterable[Menu]) -> tuple[Menu, ...]:
    """Check model invariants and return menus in display order.

    Raises ``ConfigError`` for an empty menu set, duplicate menu names,
    duplicate entry names within a menu, or empty entry values.
    """
    menus = tuple(menus)
    if not menus:
        raise ConfigError("at least one menu must be defined")

    seen_menus: set[str] = set()
    for menu in menus:
        if menu.name in seen_menus:
            raise ConfigError(f"duplicate menu name {menu.name!r}")
        seen_menus.add(menu.name)

        seen_entries: set[str] = set()
        for entry in menu.entries:
            if entry.name in seen_entries:
                raise ConfigError(f"menu {menu.name!r}: duplicate entry name {entry.name!r}")
            seen_entries.add(entry.name)
            if not entry.value.strip():
                raise ConfigError(f"menu {menu.name!r}: entry {entry.name!r} has an empty value")

    return order_menus(menus)
