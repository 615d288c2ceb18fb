"""Style tags for the launcher UI and their ANSI rendering.

A theme maps each UI element to a ``ThemeStyle`` of optional foreground and
background colors plus text attributes. Colors are parsed with ``rich`` so
hex, ``rgb(...)``, named, and 256-color forms are all accepted.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields, replace

from rich.color import Color, ColorParseError

from .errors import ConfigError

RESET = "\033[0m"

ATTRIBUTE_CODES = {
    "bold": "1",
    "dim": "2",
    "italic": "3",
    "underlined": "4",
    "hidden": "8",
}


@dataclass(frozen=True)
class ThemeStyle:
    """One style tag: optional colors and a set of attributes."""

    fg: Color | None = None
    bg: Color | None = None
    attrs: frozenset[str] = field(default_factory=frozenset)

    def sgr(self) -> str:
        """Return the ANSI SGR prefix for this style, or ``""`` when unstyled."""
        codes: list[str] = [ATTRIBUTE_CODES[name] for name in ATTRIBUTE_CODES if name in self.attrs]
        if self.fg is not None:
            codes.extend(self.fg.get_ansi_codes(foreground=True))
        if self.bg is not None:
            codes.extend(self.bg.get_ansi_codes(foreground=False))
        if not codes:
            return ""
        return f"\033[{';'.join(codes)}m"

    def paint(self, text: str) -> str:
        prefix = self.sgr()
        if not prefix or not text:
            return text
        return f"{prefix}{text}{RESET}"


@dataclass(frozen=True)
class Theme:
    """Styles for every element drawn by the renderer."""

    prompt: ThemeStyle = ThemeStyle()
    input: ThemeStyle = ThemeStyle()
    entry_name: ThemeStyle = ThemeStyle()
    entry_value: ThemeStyle = ThemeStyle()
    entry_match: ThemeStyle = ThemeStyle()
    entry_hidden: ThemeStyle = ThemeStyle()
    entry_cursor: ThemeStyle = ThemeStyle()
    entry_cursor_match: ThemeStyle = ThemeStyle()
    menu_name: ThemeStyle = ThemeStyle()
    menu_cursor: ThemeStyle = ThemeStyle()
    overflow: ThemeStyle = ThemeStyle()


STYLE_TAGS = tuple(f.name for f in fields(Theme))


def parse_color(value: str, where: str) -> Color:
    if not isinstance(value, str):
        raise ConfigError(f"{where}: color must be a string, got {value!r}")
    try:
        return Color.parse(value.strip())
    except ColorParseError as exc:
        raise ConfigError(f"{where}: invalid color {value!r}") from exc


def parse_attributes(value: str | Iterable[str], where: str) -> frozenset[str]:
    """Parse a comma-separated string (or list) of attribute names."""
    if isinstance(value, str):
        names = [part.strip().lower() for part in value.split(",")]
    elif isinstance(value, Iterable):
        names = [str(part).strip().lower() for part in value]
    else:
        raise ConfigError(f"{where}: attributes must be a string or list, got {value!r}")
    attrs: set[str] = set()
    for name in names:
        if not name:
            continue
        if name not in ATTRIBUTE_CODES:
            raise ConfigError(f"{where}: invalid attribute {name!r}")
        attrs.add(name)
    return frozenset(attrs)


def parse_style(raw: Mapping[str, object], where: str, base: ThemeStyle | None = None) -> ThemeStyle:
    """Build a style from a ``{fg, bg, attrs}`` table, overriding ``base``."""
    if not isinstance(raw, Mapping):
        raise ConfigError(f"{where}: style must be a table")
    unknown = set(raw) - {"fg", "bg", "attrs"}
    if unknown:
        raise ConfigError(f"{where}: unknown style keys {sorted(unknown)!r}")
    style = base if base is not None else ThemeStyle()
    if "fg" in raw:
        style = replace(style, fg=parse_color(raw["fg"], f"{where}.fg"))
    if "bg" in raw:
        style = replace(style, bg=parse_color(raw["bg"], f"{where}.bg"))
    if "attrs" in raw:
        style = replace(style, attrs=parse_attributes(raw["attrs"], f"{where}.attrs"))
    return style


def default_theme() -> Theme:
    """Return the built-in theme."""
    return Theme(
        prompt=ThemeStyle(fg=Color.parse("cyan"), attrs=frozenset({"bold"})),
        input=ThemeStyle(),
        entry_name=ThemeStyle(),
        entry_value=ThemeStyle(attrs=frozenset({"dim"})),
        entry_match=ThemeStyle(fg=Color.parse("yellow"), attrs=frozenset({"bold"})),
        entry_hidden=ThemeStyle(attrs=frozenset({"dim"})),
        entry_cursor=ThemeStyle(fg=Color.parse("black"), bg=Color.parse("cyan")),
        entry_cursor_match=ThemeStyle(
            fg=Color.parse("black"), bg=Color.parse("cyan"), attrs=frozenset({"bold", "underlined"})
        ),
        menu_name=ThemeStyle(attrs=frozenset({"dim"})),
        menu_cursor=ThemeStyle(fg=Color.parse("cyan"), attrs=frozenset({"bold", "underlined"})),
        overflow=ThemeStyle(attrs=frozenset({"dim", "italic"})),
    )


def plain_theme() -> Theme:
    """Return a theme with no styling, used for ``--no-color``."""
    return Theme()


def build_theme(raw: Mapping[str, object] | None, base: Theme | None = None) -> Theme:
    """Overlay a ``[theme]`` config table on ``base`` (the default theme)."""
    theme = base if base is not None else default_theme()
    if raw is None:
        return theme
    if not isinstance(raw, Mapping):
        raise ConfigError("theme must be a table of style tags")
    overrides: dict[str, ThemeStyle] = {}
    for tag, raw_style in raw.items():
        if tag not in STYLE_TAGS:
            raise ConfigError(f"unknown theme style {tag!r}")
        overrides[tag] = parse_style(raw_style, f"theme.{tag}", getattr(theme, tag))
    return replace(theme, **overrides)
