"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cdr.core.errors import ErrorCode
from cdr.output.console import Style
from cdr.release.errors import ReleaseError

if TYPE_CHECKING:
    from cdr.output.console import ConsoleProtocol

__all__ = ["print_release_error", "release_error_exit_code"]


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    match error:
        case ReleaseError(kind="process_failed", hint=hint):
            console.error("release create failed")
            if hint:
                console.print(hint, Style.DIM)
        case ReleaseError(message=message, hint=hint):
            console.error(message)
            if hint:
                console.print(f"hint: {hint}", Style.DIM)


def release_error_exit_code(error: ReleaseError) -> int:
    match error.kind:
        case "invalid_input":
            return int(ErrorCode.USER_ERROR)
        case "gcloud_install_failed" | "auth_failed" | "project_unresolved" | "component_failed":
            return int(ErrorCode.ENV_ERROR)
        case "process_failed":
            return int(ErrorCode.DEPLOY_ERROR)
    return int(ErrorCode.ENV_ERROR)
