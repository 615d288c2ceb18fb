"""Exception types surfaced by config loading and command execution.

Everything wrong with a configuration is a ``ConfigError`` and is fatal at
startup. Keystroke handling never raises; only spawning can fail later.
"""

from __future__ import annotations


class ConfigError(Exception):
    """Invalid or unreadable launcher configuration."""


class ExecutorError(Exception):
    """The selected command could not be spawned."""

    def __init__(self, command: str, reason: str) -> None:
        super().__init__(f"Failed to execute {command!r}: {reason}")
        self.command = command
        self.reason = reason
