"""Low-level terminal input decoding.

Reads raw bytes from the tty and translates them into ``KeyEvent`` values.
Handles ESC-sequence timing, xterm modifier parameters, UTF-8 text, and
focus reports. Sequences that cannot be decoded are dropped.
"""

from __future__ import annotations

import os
import select
from typing import Union

from .keybinds import KeyChord, KeyEvent

ESC_SEQUENCE_TIMEOUT_MS = 25
MAX_SEQUENCE_BYTES = 64

FOCUS_GAINED = "FOCUS_GAINED"
FOCUS_LOST = "FOCUS_LOST"

InputEvent = Union[KeyEvent, str]

_CSI_LETTER_KEYS = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
    "P": "f1",
    "Q": "f2",
    "R": "f3",
    "S": "f4",
}

_CSI_TILDE_KEYS = {
    1: "home",
    2: "insert",
    3: "delete",
    4: "end",
    5: "pageup",
    6: "pagedown",
    7: "home",
    8: "end",
    11: "f1",
    12: "f2",
    13: "f3",
    14: "f4",
    15: "f5",
    17: "f6",
    18: "f7",
    19: "f8",
    20: "f9",
    21: "f10",
    23: "f11",
    24: "f12",
}

_SS3_KEYS = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
    "P": "f1",
    "Q": "f2",
    "R": "f3",
    "S": "f4",
}


def _key(key: str, *modifiers: str, text: str = "") -> KeyEvent:
    return KeyEvent(KeyChord(key, frozenset(modifiers)), text)


def _modifiers_from_param(param: str) -> frozenset[str]:
    """Decode an xterm modifier parameter (``1 + bitmask``)."""
    try:
        mask = int(param) - 1
    except ValueError:
        return frozenset()
    modifiers: set[str] = set()
    if mask & 1:
        modifiers.add("shift")
    if mask & 2:
        modifiers.add("alt")
    if mask & 4:
        modifiers.add("control")
    return frozenset(modifiers)


def char_event(ch: str, *extra_modifiers: str) -> KeyEvent:
    """Build the event for a typed character; uppercase letters imply ``shift``."""
    modifiers = set(extra_modifiers)
    key = ch
    if ch.isalpha() and ch != ch.lower() and len(ch.lower()) == 1:
        key = ch.lower()
        modifiers.add("shift")
    return KeyEvent(KeyChord(key, frozenset(modifiers)), ch)


def decode_control_byte(byte: int) -> KeyEvent | None:
    """Map a C0 control byte (or DEL) to a key event."""
    if byte in (0x0D, 0x0A):
        return _key("enter")
    if byte == 0x09:
        return _key("tab")
    if byte in (0x08, 0x7F):
        return _key("backspace")
    if byte == 0x00:
        return _key(" ", "control")
    if 0x01 <= byte <= 0x1A:
        return _key(chr(byte + 0x60), "control")
    if 0x1C <= byte <= 0x1F:
        return _key(chr(byte + 0x40), "control")
    return None


class KeyReader:
    """Decode key events from a raw-mode file descriptor."""

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self._pending: list[int] = []

    def _read_byte(self, timeout_ms: int | None) -> int | None:
        if self._pending:
            return self._pending.pop(0)
        if timeout_ms is not None:
            ready, _, _ = select.select([self.fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return None
        data = os.read(self.fd, 1)
        if not data:
            return None
        return data[0]

    def _read_utf8(self, lead: int) -> str:
        if lead < 0x80:
            return chr(lead)
        if lead >= 0xF0:
            needed = 3
        elif lead >= 0xE0:
            needed = 2
        elif lead >= 0xC0:
            needed = 1
        else:
            return ""
        raw = bytearray([lead])
        for _ in range(needed):
            nxt = self._read_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if nxt is None:
                break
            raw.append(nxt)
        return raw.decode("utf-8", errors="ignore")

    def read(self, timeout_ms: int | None = None) -> InputEvent | None:
        """Return the next decoded event, or ``None`` on timeout or garbage."""
        byte = self._read_byte(timeout_ms)
        if byte is None:
            return None
        if byte == 0x1B:
            return self._read_escape()
        if byte < 0x20 or byte == 0x7F:
            return decode_control_byte(byte)
        text = self._read_utf8(byte)
        if len(text) != 1:
            return None
        return char_event(text)

    def _read_escape(self) -> InputEvent | None:
        nxt = self._read_byte(ESC_SEQUENCE_TIMEOUT_MS)
        if nxt is None:
            return _key("escape")
        if nxt == ord("["):
            return self._read_csi()
        if nxt == ord("O"):
            final = self._read_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if final is None:
                return char_event("O", "alt")
            key = _SS3_KEYS.get(chr(final))
            return _key(key) if key is not None else None
        if nxt == 0x1B:
            self._pending.append(nxt)
            return _key("escape")
        if nxt < 0x20 or nxt == 0x7F:
            event = decode_control_byte(nxt)
            if event is None:
                return None
            return KeyEvent(KeyChord(event.chord.key, event.chord.modifiers | {"alt"}), "")
        text = self._read_utf8(nxt)
        if len(text) != 1:
            return None
        return char_event(text, "alt")

    def _read_csi(self) -> InputEvent | None:
        params = bytearray()
        while True:
            byte = self._read_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if byte is None:
                return None
            if 0x40 <= byte <= 0x7E:
                final = chr(byte)
                break
            params.append(byte)
            if len(params) > MAX_SEQUENCE_BYTES:
                return None
        return decode_csi(params.decode("ascii", errors="replace"), final)


def decode_csi(params: str, final: str) -> InputEvent | None:
    """Decode ``ESC [ params final`` into an event."""
    if params.startswith("<"):
        # SGR mouse report; mouse input is not used.
        return None
    parts = params.split(";") if params else []
    modifiers = _modifiers_from_param(parts[1]) if len(parts) > 1 else frozenset()

    if not params and final == "I":
        return FOCUS_GAINED
    if not params and final == "O":
        return FOCUS_LOST
    if final == "Z":
        return _key("tab", "shift", *modifiers)
    if final in _CSI_LETTER_KEYS:
        return _key(_CSI_LETTER_KEYS[final], *modifiers)
    if final == "~" and parts:
        try:
            code = int(parts[0])
        except ValueError:
            return None
        key = _CSI_TILDE_KEYS.get(code)
        if key is None:
            return None
        return _key(key, *modifiers)
    return None
