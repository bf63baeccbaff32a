"""Subprocess execution with Result-based error handling.

``run_streaming`` hands the captured stdout and stderr to listeners so
callers can scrape gcloud output from either stream.

Usage:
    out: list[str] = []
    result = run_streaming(["gcloud", "auth", "list"], on_stdout=out.append, on_stderr=out.append)
    match result:
        case Ok():
            print("".join(out))
        case Err(error):
            print(f"Failed: {error.stderr}")
"""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from cdr.core.result import Err, Ok, Result

__all__ = ["Listener", "ProcessError", "run_streaming"]

Listener = Callable[[str], None]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: Exit code, or -1 when the process could not be started.
        stdout: Standard output (may be empty).
        stderr: Standard error, or the OS error text for spawn failures.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        if self.returncode == -1:
            return f"{cmd_str} could not be started: {self.stderr.strip()}"
        return f"{cmd_str} failed (exit {self.returncode})"


def run_streaming(
    cmd: list[str],
    *,
    on_stdout: Listener,
    on_stderr: Listener,
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
) -> Result[None, ProcessError]:
    """Execute a command, passing its output to listeners.

    Listeners are called zero or more times with non-empty text chunks, and
    always before the result is returned. There is no timeout; the calling
    pipeline owns that.

    Returns:
        Ok(None) on exit code 0, Err(ProcessError) otherwise.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            env=env,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.stdout:
        on_stdout(proc.stdout)
    if proc.stderr:
        on_stderr(proc.stderr)

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )
    return Ok(None)
