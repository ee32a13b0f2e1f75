"""Tests for the gouse CLI.

The Go toolchain is replaced with a FakeReporter by patching the reporter
class the Toggler instantiates.
"""

import signal
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from gouse import __version__
from gouse.cli import ERR_CANNOT_WRITE_TO_STDIN, ERR_MUST_WRITE_TO_FILES, _cancel_on_sigint, app
from gouse.cli_utils import EXIT_CONFIG_ERROR, EXIT_ERROR, EXIT_SUCCESS
from gouse.core.cancellation import CancellationContext
from gouse.core.exceptions import BuildError

INPUT = b"package main\n\nfunc main() {\n\tnotUsed := false\n}\n"
GOLDEN = b"package main\n\nfunc main() {\n\tnotUsed := false; _ = notUsed /* TODO: gouse */\n}\n"
NOT_USED_ERR = "/tmp/gouse1/2.go:4:2: declared and not used: notUsed"

runner = CliRunner()


@pytest.fixture
def go_build(make_reporter):
    """Patch the Go reporter; yields a setter taking the scripted reports."""
    state = {}

    def script(*reports):
        state["reporter"] = make_reporter(*reports)
        return state["reporter"]

    with patch("gouse.engine.toggle.GoBuildReporter", side_effect=lambda config: state["reporter"]):
        yield script


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GOUSE_CONFIG", raising=False)
    monkeypatch.delenv("GOUSE_LOG_LEVEL", raising=False)


class TestVersionAndUsage:
    """Tests for flags that do not toggle anything."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["-v"])

        assert result.exit_code == EXIT_SUCCESS
        assert result.output == f"{__version__}\n"

    def test_write_with_stdin_is_usage_error(self) -> None:
        result = runner.invoke(app, ["-w"])

        assert result.exit_code == EXIT_CONFIG_ERROR
        assert ERR_CANNOT_WRITE_TO_STDIN in result.output

    def test_multiple_paths_require_write(self, tmp_path: Path) -> None:
        a, b = tmp_path / "a.go", tmp_path / "b.go"
        a.write_bytes(INPUT)
        b.write_bytes(INPUT)

        result = runner.invoke(app, [str(a), str(b)])

        assert result.exit_code == EXIT_CONFIG_ERROR
        assert ERR_MUST_WRITE_TO_FILES in result.output
        assert a.read_bytes() == INPUT


class TestToggleStreams:
    """Tests for stdin/stdout and single file output."""

    def test_stdin_to_stdout(self, go_build, ok_report, failed_report) -> None:
        go_build(ok_report, failed_report(NOT_USED_ERR))

        result = runner.invoke(app, [], input=INPUT)

        assert result.exit_code == EXIT_SUCCESS
        assert result.stdout_bytes == GOLDEN

    def test_single_path_to_stdout(self, tmp_path: Path, go_build, ok_report, failed_report) -> None:
        path = tmp_path / "main.go"
        path.write_bytes(INPUT)
        go_build(ok_report, failed_report(NOT_USED_ERR))

        result = runner.invoke(app, [str(path)])

        assert result.exit_code == EXIT_SUCCESS
        assert result.stdout_bytes == GOLDEN
        assert path.read_bytes() == INPUT

    def test_single_path_removes_markers(self, tmp_path: Path, go_build) -> None:
        path = tmp_path / "main.go"
        path.write_bytes(GOLDEN)
        reporter = go_build()

        result = runner.invoke(app, [str(path)])

        assert result.exit_code == EXIT_SUCCESS
        assert result.stdout_bytes == INPUT
        assert reporter.calls == []


class TestWrite:
    """Tests for -w."""

    def test_write_in_place(self, tmp_path: Path, go_build, ok_report, failed_report) -> None:
        path = tmp_path / "main.go"
        path.write_bytes(INPUT)
        go_build(ok_report, failed_report(NOT_USED_ERR))

        result = runner.invoke(app, ["-w", str(path)])

        assert result.exit_code == EXIT_SUCCESS
        assert result.stdout_bytes == b""
        assert path.read_bytes() == GOLDEN

    def test_shorter_result_truncates_file(self, tmp_path: Path, go_build) -> None:
        path = tmp_path / "main.go"
        path.write_bytes(GOLDEN)
        go_build()

        result = runner.invoke(app, ["-w", str(path)])

        assert result.exit_code == EXIT_SUCCESS
        assert path.read_bytes() == INPUT

    def test_same_path_twice_restores_file(
        self, tmp_path: Path, go_build, ok_report, failed_report
    ) -> None:
        """Double processing of the same file returns it to its previous state."""
        path = tmp_path / "main.go"
        path.write_bytes(INPUT)
        go_build(ok_report, failed_report(NOT_USED_ERR))

        result = runner.invoke(app, ["-w", str(path), str(path)])

        assert result.exit_code == EXIT_SUCCESS
        assert path.read_bytes() == INPUT

    def test_multiple_files(self, tmp_path: Path, go_build, ok_report, failed_report) -> None:
        a, b = tmp_path / "a.go", tmp_path / "b.go"
        a.write_bytes(INPUT)
        b.write_bytes(GOLDEN)
        go_build(ok_report, failed_report(NOT_USED_ERR))

        result = runner.invoke(app, ["-w", str(a), str(b)])

        assert result.exit_code == EXIT_SUCCESS
        assert a.read_bytes() == GOLDEN
        assert b.read_bytes() == INPUT


class TestErrors:
    """Tests for error reporting and exit codes."""

    def test_missing_file(self, tmp_path: Path, go_build) -> None:
        go_build()

        result = runner.invoke(app, [str(tmp_path / "missing.go")])

        assert result.exit_code == EXIT_ERROR
        assert "Error:" in result.output

    def test_build_error_leaves_file_untouched(self, tmp_path: Path) -> None:
        path = tmp_path / "main.go"
        path.write_bytes(INPUT)

        with patch(
            "gouse.engine.build.GoBuildReporter.build",
            side_effect=BuildError("build: cannot run go"),
        ):
            result = runner.invoke(app, ["-w", str(path)])

        assert result.exit_code == EXIT_ERROR
        assert "build: cannot run go" in result.output
        assert path.read_bytes() == INPUT

    def test_invalid_config(self, tmp_path: Path) -> None:
        config = tmp_path / "gouse.yaml"
        config.write_text("timeout: 0\n")

        result = runner.invoke(app, ["--config", str(config)], input=INPUT)

        assert result.exit_code == EXIT_CONFIG_ERROR
        assert "validation failed" in result.output

    def test_config_tool_name(
        self, tmp_path: Path, go_build, ok_report, failed_report
    ) -> None:
        config = tmp_path / "gouse.yaml"
        config.write_text("tool_name: wip\n")
        go_build(ok_report, failed_report(NOT_USED_ERR))

        result = runner.invoke(app, ["-c", str(config)], input=INPUT)

        assert result.exit_code == EXIT_SUCCESS
        assert b"/* TODO: wip */" in result.stdout_bytes


class TestSigint:
    """Tests for Ctrl+C handling."""

    def test_first_sigint_requests_cancel_second_interrupts(self) -> None:
        cancel = CancellationContext()
        previous = signal.getsignal(signal.SIGINT)

        with _cancel_on_sigint(cancel):
            handler = signal.getsignal(signal.SIGINT)
            handler(signal.SIGINT, None)
            assert cancel.is_cancelled is True
            with pytest.raises(KeyboardInterrupt):
                handler(signal.SIGINT, None)

        assert signal.getsignal(signal.SIGINT) is previous
