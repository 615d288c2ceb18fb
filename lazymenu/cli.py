"""Command-line front door for lazymenu.

Parses CLI options, loads the menu config, and runs the interactive
session on the controlling terminal. Exit codes tell apart a selection,
a cancelled session, a bad config, and a failed command launch.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from platformdirs import user_log_dir

from .config import load_config
from .engine import SelectionEngine
from .errors import ConfigError, ExecutorError
from .executor import Executor
from .input import KeyReader
from .runtime import run_session
from .terminal import TerminalController
from .theme import plain_theme

APP_NAME = "lazymenu"
LOG_FILENAME = "lazymenu.log"

EXIT_SELECTED = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2
EXIT_CANCELLED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="A multi-page fuzzy launcher for your terminal.",
    )
    parser.add_argument("config", type=Path, help="Path to the TOML menu configuration.")
    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "-w",
        "--exec-with",
        metavar="PREFIX",
        default=None,
        help='Run the selection as "PREFIX VALUE" instead of VALUE.',
    )
    output.add_argument(
        "-p",
        "--print",
        dest="print_only",
        action="store_true",
        help="Print the selection to stdout instead of executing it.",
    )
    parser.add_argument(
        "-t",
        "--transient",
        action="store_true",
        help="Exit after the first selection or when the terminal loses focus.",
    )
    parser.add_argument(
        "--hide-unmatched",
        action="store_true",
        help="Hide entries that do not match the filter instead of dimming them.",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable theme colors and attributes.")
    parser.add_argument("--log-file", type=Path, default=None, help="Write log messages to this file.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    return parser


def default_log_path() -> Path:
    return Path(user_log_dir(APP_NAME, appauthor=False)) / LOG_FILENAME


def configure_logging(debug: bool, log_file: Path | None) -> Path | None:
    """Attach a file handler to the package logger when logging is requested.

    Nothing is ever logged to the terminal, which is in raw mode while the
    session runs. Returns the log path in use, if any.
    """
    if not debug and log_file is None:
        return None
    path = log_file if log_file is not None else default_log_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    package_logger = logging.getLogger(APP_NAME)
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    return path


def _error(message: str) -> None:
    sys.stderr.write(f"{APP_NAME}: {message}\n")


def run(argv: list[str] | None = None) -> int:
    """Run the launcher and return the process exit code."""
    args = build_parser().parse_args(argv)
    try:
        configure_logging(args.debug, args.log_file)
    except OSError as exc:
        _error(f"cannot open log file: {exc}")
        return EXIT_FAILURE

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        _error(str(exc))
        return EXIT_CONFIG_ERROR

    theme = plain_theme() if args.no_color else config.theme
    engine = SelectionEngine(config.menus, config.keybinds, hide_unmatched=args.hide_unmatched)
    executor = Executor(exec_with=args.exec_with, print_only=args.print_only)

    try:
        terminal = TerminalController.open_tty()
    except OSError as exc:
        _error(f"cannot open terminal: {exc}")
        return EXIT_FAILURE

    try:
        with terminal.raw_mode():
            result = run_session(
                engine,
                theme,
                terminal,
                KeyReader(terminal.stdin_fd),
                transient=args.transient,
                execute=None if args.print_only else executor.run,
            )
        if result.selection is not None:
            executor.run(result.selection)
            return EXIT_SELECTED
    except ExecutorError as exc:
        _error(str(exc))
        return EXIT_FAILURE
    finally:
        terminal.close()

    return EXIT_SELECTED if result.executed else EXIT_CANCELLED


def main(argv: list[str] | None = None) -> None:
    """Console-script entrypoint."""
    raise SystemExit(run(argv))


if __name__ == "__main__":
    main()
