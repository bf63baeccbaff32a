"""Hosting pipeline adapter.

The release run reports back to the pipeline that invoked it: outputs,
exported variables, warnings and a failure status. ``RunnerProtocol`` is
that channel. ``ActionsRunner`` speaks the GitHub Actions file and workflow
command formats; ``MockRunner`` records calls for tests.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

import typer

__all__ = [
    "RunnerProtocol",
    "ActionsRunner",
    "MockRunner",
]


def _escape_data(value: str) -> str:
    """Escape a workflow command message."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return _escape_data(value).replace(":", "%3A").replace(",", "%2C")


class RunnerProtocol(Protocol):
    """What a release run can tell the hosting pipeline."""

    @property
    def failed(self) -> bool:
        """True once set_failed has been called."""
        ...

    def set_output(self, name: str, value: str) -> None: ...

    def export_variable(self, name: str, value: str) -> None:
        """Set a variable for this process and for later pipeline steps."""
        ...

    def add_path(self, path: Path) -> None:
        """Prepend a directory to PATH for this process and later steps."""
        ...

    def set_secret(self, value: str) -> None:
        """Ask the pipeline to mask ``value`` in its logs."""
        ...

    def warning(self, message: str) -> None: ...

    def set_failed(self, message: str) -> None:
        """Report the run as failed with a human-readable reason."""
        ...


class ActionsRunner:
    """GitHub Actions implementation.

    File commands (``GITHUB_OUTPUT``, ``GITHUB_ENV``, ``GITHUB_PATH``) are
    used when the runner provides them; outputs fall back to the legacy
    ``::set-output`` command otherwise.
    """

    def __init__(self, environ: MutableMapping[str, str] | None = None) -> None:
        self._environ: MutableMapping[str, str] = os.environ if environ is None else environ
        self._failed = False

    @property
    def failed(self) -> bool:
        return self._failed

    def _file_command(self, key: str) -> Path | None:
        value = self._environ.get(key)
        return Path(value) if value else None

    def _append(self, path: Path, text: str) -> None:
        with open(path, "a", encoding="utf-8") as f:
            f.write(text)

    def _key_value(self, name: str, value: str) -> str:
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        if delimiter in name or delimiter in value:
            raise ValueError(f"unexpected delimiter collision for {name}")
        return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"

    def _issue(
        self, command: str, message: str, properties: Mapping[str, str] | None = None
    ) -> None:
        props = ""
        if properties:
            props = " " + ",".join(f"{k}={_escape_property(v)}" for k, v in properties.items())
        typer.echo(f"::{command}{props}::{_escape_data(message)}")

    def set_output(self, name: str, value: str) -> None:
        path = self._file_command("GITHUB_OUTPUT")
        if path is not None:
            self._append(path, self._key_value(name, value))
            return
        self._issue("set-output", value, {"name": name})

    def export_variable(self, name: str, value: str) -> None:
        self._environ[name] = value
        path = self._file_command("GITHUB_ENV")
        if path is not None:
            self._append(path, self._key_value(name, value))

    def add_path(self, path: Path) -> None:
        target = self._file_command("GITHUB_PATH")
        if target is not None:
            self._append(target, f"{path}\n")
        current = self._environ.get("PATH", "")
        self._environ["PATH"] = f"{path}{os.pathsep}{current}" if current else str(path)

    def set_secret(self, value: str) -> None:
        self._issue("add-mask", value)

    def warning(self, message: str) -> None:
        self._issue("warning", message)

    def set_failed(self, message: str) -> None:
        self._failed = True
        self._issue("error", message)


def _empty_outputs() -> dict[str, str]:
    return {}


def _empty_lines() -> list[str]:
    return []


def _empty_paths() -> list[Path]:
    return []


@dataclass
class MockRunner:
    """Runner that records everything for assertions."""

    outputs: dict[str, str] = field(default_factory=_empty_outputs)
    exported: dict[str, str] = field(default_factory=_empty_outputs)
    paths: list[Path] = field(default_factory=_empty_paths)
    secrets: list[str] = field(default_factory=_empty_lines)
    warnings: list[str] = field(default_factory=_empty_lines)
    failures: list[str] = field(default_factory=_empty_lines)

    @property
    def failed(self) -> bool:
        return bool(self.failures)

    def set_output(self, name: str, value: str) -> None:
        self.outputs[name] = value

    def export_variable(self, name: str, value: str) -> None:
        self.exported[name] = value

    def add_path(self, path: Path) -> None:
        self.paths.append(path)

    def set_secret(self, value: str) -> None:
        self.secrets.append(value)

    def warning(self, message: str) -> None:
        self.warnings.append(message)

    def set_failed(self, message: str) -> None:
        self.failures.append(message)
