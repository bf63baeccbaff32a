"""Release run orchestration.

One run is strictly sequential: export the metrics marker, make sure gcloud
is installed, authenticated and bound to a project, install the beta
component, run ``gcloud beta deploy release create`` once and publish the
outputs. Every failure comes back as a single ``ReleaseError``.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Protocol

from cdr.actions.runner import RunnerProtocol
from cdr.core.config import ReleaseInputs
from cdr.core.result import Err, Ok, Result
from cdr.gcloud.errors import SdkError
from cdr.gcloud.sdk import CloudSdk
from cdr.output.console import ConsoleProtocol
from cdr.platform.process import Listener, ProcessError, run_streaming
from cdr.release.command import BETA_COMMAND, build_command, with_beta
from cdr.release.errors import ReleaseError, ReleaseErrorKind
from cdr.release.operation import publish_operation_id

__all__ = [
    "GCLOUD_METRICS_ENV_VAR",
    "GCLOUD_METRICS_LABEL",
    "NO_PROJECT_MESSAGE",
    "Executor",
    "ReleaseOutcome",
    "ReleaseService",
]

GCLOUD_METRICS_ENV_VAR = "CLOUDSDK_METRICS_ENVIRONMENT"
GCLOUD_METRICS_LABEL = "github-actions-deploy-cloudrun"
AMBIENT_PROJECT_ENV_VAR = "GCLOUD_PROJECT"

AUTH_FAILED_MESSAGE = "Error authenticating the Cloud SDK."
NO_PROJECT_MESSAGE = (
    "No project Id provided. Ensure you have set either the project_id or credentials fields."
)


class Executor(Protocol):
    def __call__(
        self,
        cmd: list[str],
        *,
        on_stdout: Listener,
        on_stderr: Listener,
    ) -> Result[None, ProcessError]: ...


@dataclass(frozen=True, slots=True)
class ReleaseOutcome:
    release: str
    operation_id: str | None
    command: tuple[str, ...]


def _from_sdk(kind: ReleaseErrorKind) -> Callable[[SdkError], ReleaseError]:
    def convert(error: SdkError) -> ReleaseError:
        return ReleaseError(kind=kind, message=error.message, hint=error.hint)

    return convert


class ReleaseService:
    def __init__(
        self,
        *,
        sdk: CloudSdk,
        runner: RunnerProtocol,
        console: ConsoleProtocol,
        execute: Executor = run_streaming,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._sdk = sdk
        self._runner = runner
        self._console = console
        self._execute = execute
        self._environ = os.environ if environ is None else environ

    def run(self, inputs: ReleaseInputs) -> Result[ReleaseOutcome, ReleaseError]:
        self._runner.export_variable(GCLOUD_METRICS_ENV_VAR, GCLOUD_METRICS_LABEL)
        if inputs.credentials:
            self._runner.set_secret(inputs.credentials)

        cmd = build_command(inputs)

        installed = self._ensure_gcloud(inputs)
        if isinstance(installed, Err):
            return installed

        authenticated = self._authenticate(inputs)
        if isinstance(authenticated, Err):
            return authenticated

        project = self._resolve_project(inputs)
        if isinstance(project, Err):
            return project

        beta = self._sdk.install_component(BETA_COMMAND)
        if isinstance(beta, Err):
            return beta.map_err(_from_sdk("component_failed"))
        cmd = with_beta(cmd)

        return self._create_release(inputs, cmd)

    def _ensure_gcloud(self, inputs: ReleaseInputs) -> Result[None, ReleaseError]:
        version = inputs.gcloud_version or ""
        if inputs.wants_latest_gcloud:
            latest = self._sdk.latest_version()
            if isinstance(latest, Err):
                return latest.map_err(_from_sdk("gcloud_install_failed"))
            version = latest.value

        if self._sdk.is_installed(version):
            bin_dir = self._sdk.tool_path(version)
        else:
            self._console.info(f"installing Cloud SDK {version}")
            result = self._sdk.install(version)
            if isinstance(result, Err):
                return result.map_err(_from_sdk("gcloud_install_failed"))
            bin_dir = result.value

        self._runner.add_path(bin_dir)
        return Ok(None)

    def _authenticate(self, inputs: ReleaseInputs) -> Result[None, ReleaseError]:
        if inputs.credentials:
            result = self._sdk.authenticate(inputs.credentials)
            if isinstance(result, Err):
                return result.map_err(_from_sdk("auth_failed"))

        if not self._sdk.is_authenticated():
            return Err(ReleaseError(kind="auth_failed", message=AUTH_FAILED_MESSAGE))
        return Ok(None)

    def _resolve_project(self, inputs: ReleaseInputs) -> Result[None, ReleaseError]:
        ambient = self._environ.get(AMBIENT_PROJECT_ENV_VAR)
        result: Result[object, SdkError] = Ok(None)
        if inputs.project_id:
            result = self._sdk.set_project(inputs.project_id)
        elif inputs.credentials:
            result = self._sdk.set_project_from_credentials(inputs.credentials)
        elif ambient:
            result = self._sdk.set_project(ambient)

        if isinstance(result, Err):
            return result.map_err(_from_sdk("project_unresolved"))

        if not self._sdk.is_project_id_set():
            return Err(ReleaseError(kind="project_unresolved", message=NO_PROJECT_MESSAGE))
        return Ok(None)

    def _create_release(
        self, inputs: ReleaseInputs, cmd: list[str]
    ) -> Result[ReleaseOutcome, ReleaseError]:
        tool = self._sdk.tool_command()
        self._console.info(f"running: {tool} {' '.join(cmd)}")

        stdout: list[str] = []
        stderr: list[str] = []
        result = self._execute([tool, *cmd], on_stdout=stdout.append, on_stderr=stderr.append)

        output = "".join(stdout)
        err_output = "".join(stderr)
        if isinstance(result, Err):
            error = result.error
            message = err_output or error.stderr or str(error)
            return Err(ReleaseError(kind="process_failed", message=message, hint=str(error)))

        operation_id = publish_operation_id(output + err_output, self._runner)
        release = inputs.release or ""
        self._runner.set_output("release", release)
        return Ok(
            ReleaseOutcome(release=release, operation_id=operation_id, command=(tool, *cmd))
        )
