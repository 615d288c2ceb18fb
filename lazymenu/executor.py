"""Hand-off of the submitted selection to the outside world.

A selection is either printed to stdout or split into an argument vector
and spawned as a detached process, optionally behind an ``--exec-with``
prefix.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import sys
from typing import TextIO

from .errors import ExecutorError

logger = logging.getLogger(__name__)


def build_command(value: str, exec_with: str | None = None) -> str:
    """Return ``value`` wrapped as ``"<prefix> <value>"`` when a prefix is set."""
    prefix = (exec_with or "").strip()
    if not prefix:
        return value
    return f"{prefix} {value}"


def split_command(command: str) -> list[str]:
    """Split ``command`` into argv with shell quoting rules."""
    try:
        argv = shlex.split(command)
    except ValueError as exc:
        raise ExecutorError(command, str(exc)) from exc
    if not argv:
        raise ExecutorError(command, "empty command")
    return argv


def spawn(command: str) -> subprocess.Popen:
    """Start ``command`` detached from the launcher.

    Raises ``ExecutorError`` when the command cannot be parsed or its program
    cannot be started; the child's own exit status is not awaited.
    """
    argv = split_command(command)
    logger.debug("spawning %r", argv)
    try:
        return subprocess.Popen(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as exc:
        raise ExecutorError(command, exc.strerror or str(exc)) from exc


def print_selection(command: str, stream: TextIO | None = None) -> None:
    out = stream if stream is not None else sys.stdout
    out.write(command + "\n")
    out.flush()


class Executor:
    """Apply the configured execution policy to a submitted value."""

    def __init__(self, exec_with: str | None = None, print_only: bool = False) -> None:
        self.exec_with = exec_with
        self.print_only = print_only

    def run(self, value: str) -> str:
        """Execute (or print) ``value`` and return the final command string."""
        command = build_command(value, self.exec_with)
        if self.print_only:
            print_selection(command)
        else:
            spawn(command)
        return command
