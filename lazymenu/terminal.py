"""Terminal control helpers for the launcher session.

Owns raw-mode lifecycle, alternate-screen switching, and focus reporting.
The UI is drawn on the controlling tty so stdout stays free for ``--print``.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty

FALLBACK_SIZE = (80, 24)


class TerminalController:
    """Manage terminal mode transitions and frame output."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind input/output file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)
        self._active = False

    @classmethod
    def open_tty(cls, path: str = "/dev/tty") -> TerminalController:
        """Open the controlling terminal for both reading and drawing."""
        fd = os.open(path, os.O_RDWR | os.O_NOCTTY)
        return cls(fd, fd)

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with focus reporting enabled."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        # Alternate screen, clear, and focus in/out reports.
        os.write(self.stdout_fd, b"\x1b[?1049h\x1b[2J\x1b[H\x1b[?1004h")
        self._active = True

    def disable_tui_mode(self) -> None:
        """Restore normal terminal state."""
        if not self._active:
            return
        os.write(self.stdout_fd, b"\x1b[?1004l\x1b[0m\x1b[?25h\x1b[?1049l")
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)
        self._active = False

    def size(self) -> tuple[int, int]:
        """Return ``(columns, rows)`` of the terminal."""
        try:
            size = os.get_terminal_size(self.stdout_fd)
        except OSError:
            return FALLBACK_SIZE
        return max(1, size.columns), max(1, size.lines)

    def write(self, frame: str) -> None:
        data = frame.encode("utf-8")
        while data:
            written = os.write(self.stdout_fd, data)
            data = data[written:]

    def close(self) -> None:
        self.disable_tui_mode()
        fds = {self.stdin_fd, self.stdout_fd}
        for fd in fds:
            with contextlib.suppress(OSError):
                os.close(fd)

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()
