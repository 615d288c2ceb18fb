"""Mutable interaction state: filter text buffer and navigation cursors.

Each method applies one transition and reports whether anything changed.
All moves clamp at their bounds; there is no wraparound.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class InputBuffer:
    """Filter text plus an edit cursor in ``[0, len(text)]``."""

    text: str = ""
    cursor: int = 0

    def move_back(self) -> bool:
        if self.cursor <= 0:
            return False
        self.cursor -= 1
        return True

    def move_next(self) -> bool:
        if self.cursor >= len(self.text):
            return False
        self.cursor += 1
        return True

    def insert(self, chars: str) -> bool:
        if not chars:
            return False
        self.text = self.text[: self.cursor] + chars + self.text[self.cursor :]
        self.cursor += len(chars)
        return True

    def delete_back(self) -> bool:
        """Remove the character before the cursor."""
        if self.cursor <= 0:
            return False
        self.text = self.text[: self.cursor - 1] + self.text[self.cursor :]
        self.cursor -= 1
        return True

    def delete_next(self) -> bool:
        """Remove the character under the cursor."""
        if self.cursor >= len(self.text):
            return False
        self.text = self.text[: self.cursor] + self.text[self.cursor + 1 :]
        return True

    def clear(self) -> bool:
        changed = bool(self.text) or self.cursor != 0
        self.text = ""
        self.cursor = 0
        return changed


@dataclass
class NavigationState:
    """Active menu, active ranked entry, and first visible rank index."""

    menu_count: int
    active_menu_index: int = 0
    active_entry_index: int = 0
    scroll_offset: int = 0

    def reset_entries(self) -> None:
        self.active_entry_index = 0
        self.scroll_offset = 0

    def move_entry(self, delta: int, matching_count: int, visible_rows: int) -> bool:
        """Move the entry cursor among matching entries and follow with scroll."""
        if matching_count <= 0:
            return False
        previous = self.active_entry_index
        self.active_entry_index = max(0, min(matching_count - 1, self.active_entry_index + delta))
        self.follow_cursor(visible_rows)
        return self.active_entry_index != previous

    def follow_cursor(self, visible_rows: int) -> None:
        """Adjust ``scroll_offset`` so the active entry sits inside the window."""
        rows = max(1, visible_rows)
        if self.active_entry_index < self.scroll_offset:
            self.scroll_offset = self.active_entry_index
        elif self.active_entry_index >= self.scroll_offset + rows:
            self.scroll_offset = self.active_entry_index - rows + 1
        self.scroll_offset = max(0, self.scroll_offset)

    def move_menu(self, delta: int) -> bool:
        """Switch menus, resetting entry cursor and scroll when the menu changes."""
        if self.menu_count <= 0:
            return False
        previous = self.active_menu_index
        self.active_menu_index = max(0, min(self.menu_count - 1, self.active_menu_index + delta))
        if self.active_menu_index == previous:
            return False
        self.reset_entries()
        return True
