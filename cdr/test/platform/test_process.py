"""Tests for cdr.platform.process module."""

from __future__ import annotations

import sys
import pytest

from cdr.core.result import Err, Ok
from cdr.platform.process import ProcessError, run_streaming

PY = sys.executable


class TestProcessError:
    def test_str_short_command(self) -> None:
        error = ProcessError(command=("gcloud", "auth"), returncode=1, stdout="", stderr="")
        assert str(error) == "gcloud auth failed (exit 1)"

    def test_str_long_command_truncated(self) -> None:
        error = ProcessError(
            command=("gcloud", "beta", "deploy", "release", "create"),
            returncode=1,
            stdout="",
            stderr="error",
        )
        assert str(error) == "gcloud beta deploy ... failed (exit 1)"

    def test_str_spawn_failure(self) -> None:
        error = ProcessError(
            command=("gcloud",), returncode=-1, stdout="", stderr="No such file or directory\n"
        )
        assert str(error) == "gcloud could not be started: No such file or directory"

    def test_frozen(self) -> None:
        error = ProcessError(("cmd",), 1, "", "")
        with pytest.raises(AttributeError):
            error.returncode = 2  # type: ignore[misc]


class TestRunStreaming:
    def test_listeners_receive_both_streams(self) -> None:
        out: list[str] = []
        err: list[str] = []

        result = run_streaming(
            [PY, "-c", "import sys; print('to-out'); sys.stderr.write('to-err')"],
            on_stdout=out.append,
            on_stderr=err.append,
        )

        assert isinstance(result, Ok)
        assert "to-out" in "".join(out)
        assert "".join(err) == "to-err"

    def test_silent_process_calls_no_listener(self) -> None:
        out: list[str] = []
        err: list[str] = []

        result = run_streaming([PY, "-c", "pass"], on_stdout=out.append, on_stderr=err.append)

        assert isinstance(result, Ok)
        assert out == []
        assert err == []

    def test_failure_still_delivers_stderr(self) -> None:
        err: list[str] = []

        result = run_streaming(
            [PY, "-c", "import sys; sys.stderr.write('ERROR: denied'); sys.exit(1)"],
            on_stdout=lambda _: None,
            on_stderr=err.append,
        )

        assert isinstance(result, Err)
        assert result.error.returncode == 1
        assert err == ["ERROR: denied"]

    def test_command_not_found(self) -> None:
        err: list[str] = []

        result = run_streaming(
            ["nonexistent_command_12345"], on_stdout=lambda _: None, on_stderr=err.append
        )

        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert err == []
