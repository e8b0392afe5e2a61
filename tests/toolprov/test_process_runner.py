"""
Tests for the process runner, using real child interpreters.
"""

import dataclasses
import subprocess
import sys
import time

import pytest

from toolprov.process_runner import ProcessInvocation, ProcessRunner

PYTHON = sys.executable


@pytest.fixture
def runner(logger):
    return ProcessRunner(logger)


class TestCapture:
    """Tests for capture mode."""

    def test_stdin_is_fed_and_stdout_captured(self, runner):
        result = runner.run(
            PYTHON,
            ["-c", "import sys; print(sys.stdin.readline().strip().upper())"],
            stdin="hello world",
        )

        assert result.success
        assert result.output == "HELLO WORLD"
        assert result.error == ""

    def test_trailing_newlines_are_trimmed(self, runner):
        result = runner.run(
            PYTHON, ["-c", "import sys; sys.stdout.write('\\r\\nline one\\nline two\\r\\n\\n')"]
        )

        assert result.output == "line one\nline two"

    def test_stderr_is_captured(self, runner):
        result = runner.run(PYTHON, ["-c", "import sys; sys.stderr.write('4.2.3\\n')"])

        assert result.success
        assert result.error == "4.2.3"
        assert result.output == ""

    def test_output_written_right_before_exit_is_kept(self, runner):
        script = "import sys; sys.stdout.write('x' * 200000); sys.stdout.flush(); sys.exit(0)"
        result = runner.run(PYTHON, ["-c", script])

        assert len(result.output) == 200000

    def test_undecodable_bytes_do_not_fail_the_run(self, runner):
        script = (
            "import sys; sys.stdout.buffer.write(b'ok\\xff\\xfe'); "
            "sys.stderr.buffer.write(b'\\xc3\\xa9t\\xe9')"
        )
        result = runner.run(PYTHON, ["-c", script])

        assert result.success
        assert result.output == "ok\ufffd\ufffd"
        assert result.error == "\u00e9t\ufffd"

    def test_arguments_with_spaces_survive(self, runner):
        result = runner.run(
            PYTHON, ["-c", "import sys; print('|'.join(sys.argv[1:]))", "a b", "c  d"]
        )

        assert result.output == "a b|c  d"

    def test_nonzero_exit_code_is_still_success(self, runner):
        result = runner.run(PYTHON, ["-c", "import sys; sys.exit(3)"])

        assert result.success
        assert result.return_code == 3


class TestFailures:
    """Tests for launch and communication failures."""

    def test_missing_program_reports_failure(self, runner, tmp_path):
        result = runner.run(str(tmp_path / "does-not-exist"), ["--version"])

        assert not result.success
        assert isinstance(result.exception, OSError)
        assert result.error
        assert result.output == ""

    def test_no_program_reports_failure(self, runner):
        result = runner.run(None, ["--version"])

        assert not result.success
        assert result.exception is not None

    def test_timeout_kills_the_process(self, runner):
        started = time.monotonic()
        result = runner.run(PYTHON, ["-c", "import time; time.sleep(30)"], timeout=0.5)

        assert not result.success
        assert isinstance(result.exception, subprocess.TimeoutExpired)
        assert time.monotonic() - started < 20


class TestModes:
    """Tests for the non-capturing and detached modes."""

    def test_without_capture_streams_stay_empty(self, runner):
        result = runner.run(PYTHON, ["-c", "print('not captured')"], capture_output=False)

        assert result.success
        assert result.output == ""
        assert result.error == ""
        assert result.return_code == 0

    def test_run_in_background_returns_before_exit(self, runner, tmp_path):
        marker = tmp_path / "marker.txt"
        script = (
            "import os, sys, time; line = sys.stdin.readline().strip(); time.sleep(0.5); "
            f"open({str(marker) + '.tmp'!r}, 'w').write(line); "
            f"os.replace({str(marker) + '.tmp'!r}, {str(marker)!r})"
        )

        result = runner.run_in_background(PYTHON, ["-c", script], stdin="heartbeat")

        assert result.success
        assert not result.invocation.capture_output
        deadline = time.monotonic() + 15
        while not marker.exists() and time.monotonic() < deadline:
            time.sleep(0.1)
        assert marker.read_text() == "heartbeat"

    def test_run_in_background_missing_program(self, runner, tmp_path):
        result = runner.run_in_background(str(tmp_path / "nope"))

        assert not result.success
        assert result.error


def test_invocation_is_immutable():
    invocation = ProcessInvocation(program="tool", arguments=("--version",))

    with pytest.raises(dataclasses.FrozenInstanceError):
        invocation.program = "other"
    assert invocation.command == ["tool", "--version"]
