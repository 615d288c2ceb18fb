"""CLI argument handling and exit-code behavior.

Terminal and session boundaries are mocked; these tests verify how
``lazymenu.cli.run`` wires config, executor policy, and exit codes.
"""

from __future__ import annotations

import io
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazymenu import cli
from lazymenu.errors import ExecutorError
from lazymenu.runtime import SessionResult

CONFIG = """
[menus.power]
prompt = "power> "

[menus.power.entries]
reboot = "reboot"
"""


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.config_path = Path(self._tmp.name) / "config.toml"
        self.config_path.write_text(CONFIG, encoding="utf-8")
        self.terminal = mock.MagicMock()
        self.terminal.stdin_fd = 99
        patcher = mock.patch("lazymenu.cli.TerminalController.open_tty", return_value=self.terminal)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _run(self, argv: list[str], result: SessionResult) -> tuple[int, mock.MagicMock]:
        with mock.patch("lazymenu.cli.run_session", return_value=result) as run_session:
            code = cli.run(argv)
        return code, run_session

    def test_selection_is_executed_with_prefix_after_teardown(self) -> None:
        with mock.patch("lazymenu.executor.spawn") as spawn:
            code, _ = self._run(
                [str(self.config_path), "--exec-with", "nohup hyprctl dispatch exec", "--transient"],
                SessionResult(selection="gimp --new-instance"),
            )
        self.assertEqual(code, cli.EXIT_SELECTED)
        spawn.assert_called_once_with("nohup hyprctl dispatch exec gimp --new-instance")
        self.terminal.close.assert_called_once()

    def test_exit_without_selection_is_cancelled(self) -> None:
        code, run_session = self._run([str(self.config_path)], SessionResult())
        self.assertEqual(code, cli.EXIT_CANCELLED)
        self.assertFalse(run_session.call_args.kwargs["transient"])
        self.assertIsNotNone(run_session.call_args.kwargs["execute"])

    def test_resident_session_that_executed_commands_succeeds(self) -> None:
        code, _ = self._run([str(self.config_path)], SessionResult(executed=2))
        self.assertEqual(code, cli.EXIT_SELECTED)

    def test_print_mode_is_one_shot(self) -> None:
        stdout = io.StringIO()
        with mock.patch("sys.stdout", stdout):
            code, run_session = self._run(
                [str(self.config_path), "--print"], SessionResult(selection="reboot")
            )
        self.assertEqual(code, cli.EXIT_SELECTED)
        self.assertIsNone(run_session.call_args.kwargs["execute"])
        self.assertEqual(stdout.getvalue(), "reboot\n")

    def test_config_error_exits_before_terminal_setup(self) -> None:
        self.config_path.write_text("[keybinds]\nsubmit = ['hyper+x']\n", encoding="utf-8")
        stderr = io.StringIO()
        with mock.patch("sys.stderr", stderr):
            code, run_session = self._run([str(self.config_path)], SessionResult())
        self.assertEqual(code, cli.EXIT_CONFIG_ERROR)
        run_session.assert_not_called()
        self.assertIn("lazymenu:", stderr.getvalue())
        cli.TerminalController.open_tty.assert_not_called()

    def test_spawn_failure_exits_nonzero(self) -> None:
        stderr = io.StringIO()
        with (
            mock.patch("lazymenu.executor.spawn", side_effect=ExecutorError("reboot", "boom")),
            mock.patch("sys.stderr", stderr),
        ):
            code, _ = self._run([str(self.config_path)], SessionResult(selection="reboot"))
        self.assertEqual(code, cli.EXIT_FAILURE)
        self.assertIn("boom", stderr.getvalue())
        self.terminal.close.assert_called_once()

    def test_missing_program_exits_nonzero_without_mocked_spawn(self) -> None:
        stderr = io.StringIO()
        with mock.patch("sys.stderr", stderr):
            code, _ = self._run(
                [str(self.config_path), "--transient"],
                SessionResult(selection="lazymenu-test-missing-program --now"),
            )
        self.assertEqual(code, cli.EXIT_FAILURE)
        self.assertIn("lazymenu-test-missing-program", stderr.getvalue())
        self.terminal.close.assert_called_once()

    def test_short_flags_match_long_options(self) -> None:
        args = cli.build_parser().parse_args([str(self.config_path), "-w", "nohup", "-t"])
        self.assertEqual(args.exec_with, "nohup")
        self.assertTrue(args.transient)
        args = cli.build_parser().parse_args([str(self.config_path), "-p"])
        self.assertTrue(args.print_only)

    def test_exec_with_and_print_are_mutually_exclusive(self) -> None:
        with mock.patch("sys.stderr", io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                cli.run([str(self.config_path), "--print", "--exec-with", "nohup"])
        self.assertEqual(ctx.exception.code, 2)

    def test_main_raises_system_exit_with_code(self) -> None:
        with mock.patch("lazymenu.cli.run", return_value=130):
            with self.assertRaises(SystemExit) as ctx:
                cli.main([str(self.config_path)])
        self.assertEqual(ctx.exception.code, 130)


class LoggingTests(unittest.TestCase):
    def test_no_handler_without_debug_or_log_file(self) -> None:
        self.assertIsNone(cli.configure_logging(False, None))

    def test_log_file_handler_is_attached(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "logs" / "run.log"
            logger = cli.logging.getLogger(cli.APP_NAME)
            before = list(logger.handlers)
            try:
                self.assertEqual(cli.configure_logging(True, path), path)
                self.assertTrue(path.parent.is_dir())
                added = [handler for handler in logger.handlers if handler not in before]
                self.assertEqual(len(added), 1)
            finally:
                for handler in logger.handlers[:]:
                    if handler not in before:
                        logger.removeHandler(handler)
                        handler.close()
                logger.setLevel(cli.logging.NOTSET)

    def test_default_log_path_uses_platform_log_dir(self) -> None:
        with mock.patch("lazymenu.cli.user_log_dir", return_value="/tmp/lazymenu-logs"):
            self.assertEqual(cli.default_log_path(), Path("/tmp/lazymenu-logs") / "lazymenu.log")


if __name__ == "__main__":
    unittest.main()
