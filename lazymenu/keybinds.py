"""Key chords, command tokens, and the keybind lookup table.

A chord is a set of modifiers plus exactly one non-modifier key. Chords are
parsed from plus-separated config strings such as ``"ctrl+c"`` and looked
up by logical identity, so ``del`` and ``delete`` name the same key.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from .errors import ConfigError

logger = logging.getLogger(__name__)

MODIFIERS = ("shift", "control", "alt")

_MODIFIER_ALIASES = {
    "shift": "shift",
    "control": "control",
    "ctrl": "control",
    "alt": "alt",
}

_NAMED_KEYS = {
    "backspace": "backspace",
    "back": "backspace",
    "enter": "enter",
    "return": "enter",
    "ret": "enter",
    "left": "left",
    "right": "right",
    "up": "up",
    "down": "down",
    "home": "home",
    "end": "end",
    "pageup": "pageup",
    "pgup": "pageup",
    "pagedown": "pagedown",
    "pgdn": "pagedown",
    "tab": "tab",
    "delete": "delete",
    "del": "delete",
    "insert": "insert",
    "ins": "insert",
    "escape": "escape",
    "esc": "escape",
    "space": " ",
}

MAX_FUNCTION_KEY = 24


class CommandToken(Enum):
    """Abstract actions the selection engine performs."""

    EXIT = "exit"
    SUBMIT = "submit"
    CLEAR = "clear"
    DELETE_NEXT = "delete_next"
    DELETE_BACK = "delete_back"
    INPUT_NEXT = "input_next"
    INPUT_BACK = "input_back"
    ENTRY_NEXT = "entry_next"
    ENTRY_BACK = "entry_back"
    MENU_NEXT = "menu_next"
    MENU_BACK = "menu_back"


@dataclass(frozen=True)
class KeyChord:
    """One non-modifier ``key`` plus an unordered set of modifiers."""

    key: str
    modifiers: frozenset[str] = field(default_factory=frozenset)

    def normalized(self) -> KeyChord:
        """Return the lookup form: lowercase key, ``backtab`` folded into ``shift+tab``."""
        key = self.key
        modifiers = frozenset(self.modifiers)
        if key == "backtab":
            key = "tab"
            modifiers = modifiers | {"shift"}
        elif len(key) == 1:
            key = key.lower()
        return KeyChord(key, modifiers)

    def label(self) -> str:
        parts = [name for name in MODIFIERS if name in self.modifiers]
        parts.append("space" if self.key == " " else self.key)
        return "+".join(parts)


def _parse_key_token(token: str) -> str | None:
    """Map a lowercase non-modifier token to its canonical key name."""
    named = _NAMED_KEYS.get(token)
    if named is not None:
        return named
    if len(token) == 1:
        return token
    if token.startswith("f") and token[1:].isdigit():
        number = int(token[1:])
        if 1 <= number <= MAX_FUNCTION_KEY:
            return f"f{number}"
    return None


def parse_chord(text: str) -> KeyChord:
    """Parse a plus-separated chord string such as ``"shift+tab"``.

    Raises ``ConfigError`` when a token is empty or unknown, or when the
    chord has zero or several non-modifier keys.
    """
    if not isinstance(text, str):
        raise ConfigError(f"keybind must be a string, got {text!r}")
    # A lone "+" is the plus key itself.
    if text.strip() == "+":
        return KeyChord("+")

    key: str | None = None
    modifiers: set[str] = set()
    for raw_token in text.split("+"):
        token = raw_token.strip().lower()
        if not token:
            raise ConfigError(f"keybind {text!r}: empty key name")
        modifier = _MODIFIER_ALIASES.get(token)
        if modifier is not None:
            modifiers.add(modifier)
            continue
        parsed = _parse_key_token(token)
        if parsed is None:
            raise ConfigError(f"keybind {text!r}: unknown key {token!r}")
        if key is not None:
            raise ConfigError(f"keybind {text!r}: multiple non-modifier keys")
        key = parsed

    if key is None:
        raise ConfigError(f"keybind {text!r}: must include one non-modifier key")
    return KeyChord(key, frozenset(modifiers))


def default_keybinds() -> dict[str, list[str]]:
    """Return the default keybinds in config form (command name to chords)."""
    return {
        "exit": ["esc", "ctrl+c"],
        "submit": ["enter"],
        "clear": ["ctrl+u"],
        "delete_next": ["delete", "ctrl+d"],
        "delete_back": ["backspace"],
        "input_next": ["right"],
        "input_back": ["left"],
        "entry_next": ["down", "ctrl+n"],
        "entry_back": ["up", "ctrl+p"],
        "menu_next": ["tab", "pagedown"],
        "menu_back": ["shift+tab", "pageup"],
    }


class KeybindTable:
    """Immutable chord-to-command lookup built from config-form bindings."""

    def __init__(self, bindings: Mapping[KeyChord, CommandToken]) -> None:
        self._bindings: dict[KeyChord, CommandToken] = {
            chord.normalized(): command for chord, command in bindings.items()
        }

    @classmethod
    def build(cls, raw_bindings: Mapping[str, Iterable[str] | str]) -> KeybindTable:
        """Validate config-form bindings and return a lookup table.

        Two different commands claiming the same chord is a ``ConfigError``;
        repeating a chord for the same command is accepted.
        """
        if not isinstance(raw_bindings, Mapping):
            raise ConfigError("keybinds must be a table of command names to key lists")

        bindings: dict[KeyChord, CommandToken] = {}
        for command_name, chords in raw_bindings.items():
            try:
                command = CommandToken(str(command_name).strip().lower())
            except ValueError:
                raise ConfigError(f"unknown keybind command {command_name!r}") from None
            if isinstance(chords, str):
                chords = [chords]
            elif not isinstance(chords, Iterable):
                raise ConfigError(f"keybinds.{command_name}: expected a list of keys")
            for text in chords:
                chord = parse_chord(text).normalized()
                existing = bindings.get(chord)
                if existing is not None and existing is not command:
                    raise ConfigError(
                        f"keybind {chord.label()!r} is bound to both "
                        f"{existing.value!r} and {command.value!r}"
                    )
                bindings[chord] = command
        logger.debug("built keybind table with %d chords", len(bindings))
        return cls(bindings)

    @classmethod
    def defaults(cls) -> KeybindTable:
        return cls.build(default_keybinds())

    def resolve(self, chord: KeyChord) -> CommandToken | None:
        """Return the command bound to ``chord``, if any."""
        return self._bindings.get(chord.normalized())

    def chords_for(self, command: CommandToken) -> tuple[KeyChord, ...]:
        """Return all chords bound to ``command`` in insertion order."""
        return tuple(chord for chord, bound in self._bindings.items() if bound is command)


@dataclass(frozen=True)
class KeyEvent:
    """A decoded key press: its chord plus any printable text it produced."""

    chord: KeyChord
    text: str = ""

    def is_plain_text(self) -> bool:
        """True for a single printable character typed with at most ``shift``."""
        return (
            len(self.text) == 1
            and self.text.isprintable()
            and self.chord.modifiers <= {"shift"}
        )
