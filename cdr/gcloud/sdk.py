"""Google Cloud SDK lifecycle: install, authenticate, select a project.

``CloudSdk`` is the seam the release service depends on. ``GcloudSdk``
drives the real ``gcloud`` binary and the tool cache; ``MockCloudSdk``
records calls and returns canned answers for tests.
"""

from __future__ import annotations

import contextlib
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from cdr.core.result import Err, Ok, Result
from cdr.core.structured import get_str
from cdr.gcloud.credentials import parse_service_account_key, write_key_file
from cdr.gcloud.errors import SdkError
from cdr.gcloud.http import HttpClient, RealHttpClient
from cdr.gcloud.installer import extract_archive
from cdr.platform.detection import PlatformInfo, detect
from cdr.platform.paths import tool_cache_dir
from cdr.platform.process import ProcessError, run_streaming

__all__ = [
    "CloudSdk",
    "GcloudSdk",
    "MockCloudSdk",
    "COMPONENTS_URL",
    "DOWNLOAD_BASE_URL",
]

COMPONENTS_URL = "https://dl.google.com/dl/cloudsdk/channels/rapid/components-2.json"
DOWNLOAD_BASE_URL = "https://dl.google.com/dl/cloudsdk/channels/rapid/downloads"
TOOL_NAME = "gcloud"


class CloudSdk(Protocol):
    """Operations the release run needs from the Cloud SDK."""

    def latest_version(self) -> Result[str, SdkError]: ...

    def is_installed(self, version: str) -> bool: ...

    def install(self, version: str) -> Result[Path, SdkError]:
        """Install ``version`` into the tool cache and return its bin dir."""
        ...

    def tool_path(self, version: str) -> Path:
        """Bin directory of a cached install."""
        ...

    def tool_command(self) -> str: ...

    def authenticate(self, credentials: str) -> Result[None, SdkError]: ...

    def is_authenticated(self) -> bool: ...

    def set_project(self, project_id: str) -> Result[None, SdkError]: ...

    def set_project_from_credentials(self, credentials: str) -> Result[str, SdkError]:
        """Select the project named in the key and return its id."""
        ...

    def is_project_id_set(self) -> bool: ...

    def install_component(self, name: str) -> Result[None, SdkError]: ...


@dataclass(frozen=True, slots=True)
class GcloudOutput:
    stdout: str
    stderr: str

    @property
    def text(self) -> str:
        return self.stdout + self.stderr


def _command_error(error: ProcessError, message: str) -> SdkError:
    return SdkError(kind="command_failed", message=message, hint=error.stderr.strip() or None)


class GcloudSdk:
    """Cloud SDK backed by the real ``gcloud`` binary."""

    def __init__(
        self,
        *,
        http: HttpClient | None = None,
        platform: PlatformInfo | None = None,
        cache_root: Path | None = None,
    ) -> None:
        self._http = http or RealHttpClient()
        self._platform = platform or detect()
        self._cache_root = cache_root or tool_cache_dir()

    def _install_dir(self, version: str) -> Path:
        return self._cache_root / TOOL_NAME / version / self._platform.arch.sdk_name

    def _marker(self, version: str) -> Path:
        install_dir = self._install_dir(version)
        return install_dir.with_name(f"{install_dir.name}.complete")

    def archive_url(self, version: str) -> str:
        plat = self._platform
        name = (
            f"google-cloud-sdk-{version}-{plat.platform.sdk_name}-"
            f"{plat.arch.sdk_name}.{plat.platform.archive_ext}"
        )
        return f"{DOWNLOAD_BASE_URL}/{name}"

    def _gcloud(self, args: list[str]) -> Result[GcloudOutput, ProcessError]:
        stdout: list[str] = []
        stderr: list[str] = []
        result = run_streaming(
            [self.tool_command(), *args],
            on_stdout=stdout.append,
            on_stderr=stderr.append,
        )
        if isinstance(result, Err):
            return result
        return Ok(GcloudOutput(stdout="".join(stdout), stderr="".join(stderr)))

    def latest_version(self) -> Result[str, SdkError]:
        result = self._http.get_json(COMPONENTS_URL)
        if isinstance(result, Err):
            return Err(
                SdkError(
                    kind="version_lookup_failed",
                    message="failed to look up the latest Cloud SDK version",
                    hint=str(result.error),
                )
            )
        version = get_str(result.value, "version")
        if version is None:
            return Err(
                SdkError(
                    kind="version_lookup_failed",
                    message="components manifest has no version",
                    hint=COMPONENTS_URL,
                )
            )
        return Ok(version)

    def is_installed(self, version: str) -> bool:
        return self._marker(version).exists() and self.tool_path(version).is_dir()

    def install(self, version: str) -> Result[Path, SdkError]:
        url = self.archive_url(version)
        archive_name = url.rsplit("/", 1)[-1]
        install_dir = self._install_dir(version)

        with tempfile.TemporaryDirectory(prefix="cdr-gcloud-") as tmp:
            downloaded = self._http.download(url, Path(tmp) / archive_name)
            if isinstance(downloaded, Err):
                return Err(
                    SdkError(
                        kind="download_failed",
                        message=f"failed to download Cloud SDK {version}",
                        hint=str(downloaded.error),
                    )
                )
            extracted = extract_archive(downloaded.value, install_dir, strip_components=1)

        if isinstance(extracted, Err):
            with contextlib.suppress(OSError):
                shutil.rmtree(install_dir)
            return Err(
                SdkError(
                    kind="extract_failed",
                    message=f"failed to extract Cloud SDK {version}",
                    hint=str(extracted.error),
                )
            )

        try:
            self._marker(version).write_text("", encoding="utf-8")
        except OSError as e:
            return Err(
                SdkError(
                    kind="io_failed",
                    message=f"failed to mark Cloud SDK {version} as installed",
                    hint=str(e),
                )
            )
        return Ok(self.tool_path(version))

    def tool_path(self, version: str) -> Path:
        return self._install_dir(version) / "bin"

    def tool_command(self) -> str:
        return f"{TOOL_NAME}{self._platform.platform.script_suffix}"

    def authenticate(self, credentials: str) -> Result[None, SdkError]:
        key = parse_service_account_key(credentials)
        if isinstance(key, Err):
            return key

        try:
            key_file = write_key_file(key.value)
        except OSError as e:
            return Err(
                SdkError(
                    kind="io_failed",
                    message="Error authenticating the Cloud SDK.",
                    hint=f"could not write the key file: {e}",
                )
            )

        try:
            result = self._gcloud(
                [
                    "--quiet",
                    "auth",
                    "activate-service-account",
                    key.value.client_email,
                    "--key-file",
                    str(key_file),
                ]
            )
        finally:
            key_file.unlink(missing_ok=True)

        if isinstance(result, Err):
            return Err(_command_error(result.error, "Error authenticating the Cloud SDK."))
        return Ok(None)

    def is_authenticated(self) -> bool:
        result = self._gcloud(["auth", "list"])
        if isinstance(result, Err):
            return False
        return "No credentialed accounts." not in result.value.text

    def set_project(self, project_id: str) -> Result[None, SdkError]:
        result = self._gcloud(["--quiet", "config", "set", "project", project_id])
        if isinstance(result, Err):
            return Err(_command_error(result.error, f"failed to set project {project_id}"))
        return Ok(None)

    def set_project_from_credentials(self, credentials: str) -> Result[str, SdkError]:
        key = parse_service_account_key(credentials)
        if isinstance(key, Err):
            return key
        project_id = key.value.project_id
        if project_id is None:
            return Err(
                SdkError(kind="invalid_credentials", message="credentials are missing project_id")
            )
        result = self.set_project(project_id)
        if isinstance(result, Err):
            return result
        return Ok(project_id)

    def is_project_id_set(self) -> bool:
        result = self._gcloud(["config", "get-value", "project"])
        if isinstance(result, Err):
            return False
        output = result.value
        return bool(output.stdout.strip()) and "unset" not in output.text

    def install_component(self, name: str) -> Result[None, SdkError]:
        result = self._gcloud(["--quiet", "components", "install", name])
        if isinstance(result, Err):
            return Err(_command_error(result.error, f"failed to install gcloud component {name}"))
        return Ok(None)


def _empty_calls() -> list[tuple[str, ...]]:
    return []


def _empty_errors() -> dict[str, SdkError]:
    return {}


def _empty_versions() -> set[str]:
    return set()


@dataclass
class MockCloudSdk:
    """Cloud SDK stand-in for tests.

    ``errors`` maps a method name to the SdkError it should return.
    """

    latest: str = "400.0.0"
    installed: set[str] = field(default_factory=_empty_versions)
    authenticated: bool = True
    project_id: str | None = None
    key_project_id: str | None = "key-project"
    errors: dict[str, SdkError] = field(default_factory=_empty_errors)
    calls: list[tuple[str, ...]] = field(default_factory=_empty_calls)

    def _fail(self, method: str) -> Err[SdkError] | None:
        error = self.errors.get(method)
        return Err(error) if error is not None else None

    def latest_version(self) -> Result[str, SdkError]:
        self.calls.append(("latest_version",))
        return self._fail("latest_version") or Ok(self.latest)

    def is_installed(self, version: str) -> bool:
        return version in self.installed

    def install(self, version: str) -> Result[Path, SdkError]:
        self.calls.append(("install", version))
        failure = self._fail("install")
        if failure is not None:
            return failure
        self.installed.add(version)
        return Ok(self.tool_path(version))

    def tool_path(self, version: str) -> Path:
        return Path("/opt/hostedtoolcache") / TOOL_NAME / version / "x86_64" / "bin"

    def tool_command(self) -> str:
        return TOOL_NAME

    def authenticate(self, credentials: str) -> Result[None, SdkError]:
        self.calls.append(("authenticate", credentials))
        return self._fail("authenticate") or Ok(None)

    def is_authenticated(self) -> bool:
        return self.authenticated

    def set_project(self, project_id: str) -> Result[None, SdkError]:
        self.calls.append(("set_project", project_id))
        failure = self._fail("set_project")
        if failure is not None:
            return failure
        self.project_id = project_id
        return Ok(None)

    def set_project_from_credentials(self, credentials: str) -> Result[str, SdkError]:
        self.calls.append(("set_project_from_credentials", credentials))
        failure = self._fail("set_project_from_credentials")
        if failure is not None:
            return failure
        if self.key_project_id is None:
            return Err(
                SdkError(kind="invalid_credentials", message="credentials are missing project_id")
            )
        self.project_id = self.key_project_id
        return Ok(self.key_project_id)

    def is_project_id_set(self) -> bool:
        return self.project_id is not None

    def install_component(self, name: str) -> Result[None, SdkError]:
        self.calls.append(("install_component", name))
        return self._fail("install_component") or Ok(None)

    def called(self, method: str) -> bool:
        return any(call[0] == method for call in self.calls)
