"""Service-account key handling.

The ``credentials`` input holds a service-account JSON key, either raw or
base64-encoded (the form most secret stores hand out).
"""

from __future__ import annotations

import base64
import binascii
import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from cdr.core.result import Err, Ok, Result
from cdr.core.structured import as_str_dict, get_str
from cdr.gcloud.errors import SdkError

__all__ = ["ServiceAccountKey", "parse_service_account_key", "write_key_file"]


@dataclass(frozen=True, slots=True)
class ServiceAccountKey:
    client_email: str
    project_id: str | None
    raw: str


def _decode(text: str) -> Result[str, SdkError]:
    stripped = text.strip()
    if stripped.startswith("{"):
        return Ok(stripped)
    try:
        return Ok(base64.b64decode(stripped, validate=True).decode("utf-8"))
    except (binascii.Error, ValueError) as e:
        return Err(
            SdkError(
                kind="invalid_credentials",
                message=f"credentials are neither JSON nor base64: {e}",
            )
        )


def parse_service_account_key(text: str) -> Result[ServiceAccountKey, SdkError]:
    decoded = _decode(text)
    if isinstance(decoded, Err):
        return decoded

    try:
        obj: object = json.loads(decoded.value)
    except json.JSONDecodeError as e:
        return Err(SdkError(kind="invalid_credentials", message=f"invalid credentials JSON: {e}"))

    data = as_str_dict(obj)
    if data is None:
        return Err(
            SdkError(kind="invalid_credentials", message="credentials must be a JSON object")
        )

    client_email = get_str(data, "client_email")
    if client_email is None:
        return Err(
            SdkError(
                kind="invalid_credentials",
                message="credentials are missing client_email",
                hint="Use a service-account key exported from IAM",
            )
        )

    return Ok(
        ServiceAccountKey(
            client_email=client_email,
            project_id=get_str(data, "project_id"),
            raw=decoded.value,
        )
    )


def write_key_file(key: ServiceAccountKey, directory: Path | None = None) -> Path:
    """Write the key to a file only the current user can read.

    ``RUNNER_TEMP`` is preferred so the runner cleans it up after the job.
    """
    if directory is None:
        runner_temp = os.environ.get("RUNNER_TEMP")
        directory = Path(runner_temp) if runner_temp else None

    fd, name = tempfile.mkstemp(prefix="cdr-key-", suffix=".json", dir=directory)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(key.raw)
    return Path(name)
