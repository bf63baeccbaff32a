"""Tests for console backends and error presentation."""

from __future__ import annotations

import pytest

from cdr.core.errors import ErrorCode
from cdr.output.console import MockConsole, RichConsole, Style
from cdr.output.errors import print_release_error, release_error_exit_code
from cdr.release.errors import ReleaseError


class TestMockConsole:
    def test_records_styles(self) -> None:
        console = MockConsole()
        console.info("running: gcloud beta deploy")
        console.warning("careful")
        console.error("broken")

        assert console.messages == [
            "info: running: gcloud beta deploy",
            "warning: careful",
            "error: broken",
        ]
        assert console.count(Style.ERROR) == 1
        assert len(console.find("gcloud")) == 1


class TestRichConsole:
    def test_brackets_are_not_markup(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole().info("Waiting for operation [operation-1]...done.")
        assert "[operation-1]" in capsys.readouterr().out


class TestPrintReleaseError:
    def test_message_and_hint(self) -> None:
        console = MockConsole()
        error = ReleaseError(kind="auth_failed", message="bad key", hint="check the secret")

        print_release_error(error, console)

        assert console.messages == ["error: bad key", "hint: check the secret"]

    def test_process_failure_shows_command_summary(self) -> None:
        console = MockConsole()
        error = ReleaseError(
            kind="process_failed",
            message="ERROR: denied",
            hint="gcloud beta deploy ... failed (exit 1)",
        )

        print_release_error(error, console)

        assert console.messages == [
            "error: release create failed",
            "gcloud beta deploy ... failed (exit 1)",
        ]


@pytest.mark.parametrize(
    ("kind", "code"),
    [
        ("invalid_input", ErrorCode.USER_ERROR),
        ("auth_failed", ErrorCode.ENV_ERROR),
        ("project_unresolved", ErrorCode.ENV_ERROR),
        ("gcloud_install_failed", ErrorCode.ENV_ERROR),
        ("component_failed", ErrorCode.ENV_ERROR),
        ("process_failed", ErrorCode.DEPLOY_ERROR),
    ],
)
def test_exit_codes(kind: str, code: ErrorCode) -> None:
    error = ReleaseError(kind=kind, message="x")  # type: ignore[arg-type]
    assert release_error_exit_code(error) == int(code)
