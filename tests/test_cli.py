"""Tests for cli/main.py and core/log.py."""

import logging
import os
import select
import signal
import subprocess
import sys
import time
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from cli.main import build_parser, main
from core.log import setup_logging

# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class TestParser:
    """keystone create <kind> [-d DIR] [--debug]."""

    def test_create_demo(self) -> None:
        args = build_parser().parse_args(["create", "demo", "-d", "/srv/code", "--debug"])
        assert args.command == "create"
        assert args.kind == "demo"
        assert args.output_dir == "/srv/code"
        assert args.debug is True

    def test_defaults(self) -> None:
        args = build_parser().parse_args(["create", "base"])
        assert args.output_dir == "."
        assert args.debug is False

    def test_env_file_defaults(self) -> None:
        args = build_parser({"output_dir": "/projects", "debug": True}).parse_args(["create", "base"])
        assert args.output_dir == "/projects"
        assert args.debug is True

    def test_kind_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["create"])

    def test_unknown_kind(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["create", "website"])


# ---------------------------------------------------------------------------
# main
# ---------------------------------------------------------------------------


class TestMain:
    """main() runs the chosen generator and exits with its code."""

    def _fake_generator(self, code: int = 0, error: BaseException | None = None) -> MagicMock:
        instance = MagicMock()
        instance.run = AsyncMock(return_value=code, side_effect=error)
        return MagicMock(return_value=instance)

    @pytest.mark.parametrize("code", [0, 1])
    def test_exit_code(self, tmp_path: Path, code: int) -> None:
        fake = self._fake_generator(code)
        with (
            patch.dict("cli.main.GENERATORS", {"base": fake}),
            patch("cli.main.setup_logging"),
        ):
            with pytest.raises(SystemExit) as exc_info:
                main(["create", "base", "-d", str(tmp_path)])
        assert exc_info.value.code == code
        fake.assert_called_once_with(tmp_path)

    def test_keyboard_interrupt(self, tmp_path: Path) -> None:
        fake = self._fake_generator(error=KeyboardInterrupt())
        with (
            patch.dict("cli.main.GENERATORS", {"demo": fake}),
            patch("cli.main.setup_logging"),
        ):
            with pytest.raises(SystemExit) as exc_info:
                main(["create", "demo", "-d", str(tmp_path)])
        assert exc_info.value.code == 1


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


class TestSetupLogging:
    """File + console handlers on the keystone logger."""

    def test_handlers_replaced_on_repeat_calls(self, tmp_path: Path) -> None:
        with (
            patch("core.log.LOG_DIR", tmp_path),
            patch("core.log.LOG_FILE", tmp_path / "keystone.log"),
        ):
            setup_logging()
            logger = setup_logging(debug=True)
        try:
            assert logger.name == "keystone"
            assert len(logger.handlers) == 2
            console = [h for h in logger.handlers if type(h) is logging.StreamHandler]
            assert console[0].level == logging.DEBUG
            logging.getLogger("keystone.test").debug("hello")
            for handler in logger.handlers:
                handler.flush()
            assert "hello" in (tmp_path / "keystone.log").read_text()
        finally:
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
                handler.close()

    def test_console_warning_by_default(self, tmp_path: Path) -> None:
        with (
            patch("core.log.LOG_DIR", tmp_path),
            patch("core.log.LOG_FILE", tmp_path / "keystone.log"),
        ):
            logger = setup_logging()
        try:
            console = [h for h in logger.handlers if type(h) is logging.StreamHandler]
            assert console[0].level == logging.WARNING
        finally:
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
                handler.close()


# ---------------------------------------------------------------------------
# Ctrl+C
# ---------------------------------------------------------------------------

REPO_ROOT = Path(__file__).resolve().parent.parent


def _read_until(proc: subprocess.Popen, marker: bytes, timeout: float = 30.0) -> bytes:
    """Read the child's stdout until marker shows up (prompts end without a newline)."""
    fd = proc.stdout.fileno()
    output = b""
    deadline = time.monotonic() + timeout
    while marker not in output:
        remaining = deadline - time.monotonic()
        if remaining <= 0 or proc.poll() is not None:
            raise AssertionError(f"never saw {marker!r}, got {output!r}")
        ready, _, _ = select.select([fd], [], [], remaining)
        if ready:
            chunk = os.read(fd, 4096)
            if not chunk:
                raise AssertionError(f"stdout closed before {marker!r}, got {output!r}")
            output += chunk
    return output


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
class TestInterrupt:
    """SIGINT while the CLI waits on a prompt ends the run."""

    def test_sigint_at_prompt(self, tmp_path: Path) -> None:
        env = {**os.environ, "HOME": str(tmp_path), "PYTHONUNBUFFERED": "1"}
        proc = subprocess.Popen(
            [sys.executable, "-m", "cli.main", "create", "base", "-d", str(tmp_path)],
            cwd=REPO_ROOT,
            env=env,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
        try:
            _read_until(proc, b"What is the name of your project?")
            proc.send_signal(signal.SIGINT)
            _, stderr = proc.communicate(timeout=15)
        finally:
            if proc.poll() is None:
                proc.kill()
                proc.communicate()

        assert proc.returncode == 1
        assert b"canceled by user" in stderr
        assert not (tmp_path / "my-project").exists()
