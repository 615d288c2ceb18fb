"""TOML configuration loading for menus, keybinds, and theme.

Produces a validated, normalized ``Config``; any problem is a ``ConfigError``
raised before the terminal is touched. A ``[keybinds]`` section replaces
the default keybinds entirely, while ``[theme]`` overrides tags one by one.
"""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigError
from .keybinds import KeybindTable, default_keybinds
from .model import Entry, Menu, validate_menus
from .theme import Theme, build_theme

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Config:
    """Normalized launcher configuration; menus are in display order."""

    menus: tuple[Menu, ...]
    keybinds: KeybindTable
    theme: Theme


def _parse_entries(menu_name: str, raw: object) -> tuple[Entry, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, Mapping):
        raise ConfigError(f"menus.{menu_name}.entries must be a table of names to commands")
    entries: list[Entry] = []
    for name, value in raw.items():
        if not isinstance(value, str):
            raise ConfigError(f"menus.{menu_name}.entries.{name}: command must be a string")
        entries.append(Entry(name=str(name), value=value))
    return tuple(entries)


def _parse_menu(name: str, raw: object) -> Menu:
    if not isinstance(raw, Mapping):
        raise ConfigError(f"menus.{name} must be a table")
    prompt = raw.get("prompt")
    if not isinstance(prompt, str):
        raise ConfigError(f"menus.{name}.prompt must be a string")
    order = raw.get("order", 0)
    if isinstance(order, bool) or not isinstance(order, int):
        raise ConfigError(f"menus.{name}.order must be an integer")
    unknown = set(raw) - {"prompt", "order", "entries"}
    if unknown:
        raise ConfigError(f"menus.{name}: unknown keys {sorted(unknown)!r}")
    return Menu(name=str(name), prompt=prompt, entries=_parse_entries(name, raw.get("entries")), order=order)


def parse_config(data: Mapping[str, object]) -> Config:
    """Normalize a decoded TOML document into a ``Config``."""
    raw_menus = data.get("menus")
    if raw_menus is None:
        raise ConfigError("at least one menu must be defined")
    if not isinstance(raw_menus, Mapping):
        raise ConfigError("menus must be a table of menu tables")
    menus = validate_menus(_parse_menu(name, raw) for name, raw in raw_menus.items())

    raw_keybinds = data.get("keybinds")
    keybinds = KeybindTable.build(default_keybinds() if raw_keybinds is None else raw_keybinds)
    theme = build_theme(data.get("theme"))

    unknown = set(data) - {"menus", "keybinds", "theme"}
    if unknown:
        logger.warning("ignoring unknown config sections: %s", ", ".join(sorted(unknown)))
    return Config(menus=menus, keybinds=keybinds, theme=theme)


def load_config(path: Path) -> Config:
    """Read and validate the TOML config file at ``path``."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read config {path}: {exc.strerror or exc}") from exc
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid config {path}: {exc}") from exc
    config = parse_config(data)
    logger.debug("loaded %d menus from %s", len(config.menus), path)
    return config
