from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

SdkErrorKind = Literal[
    "version_lookup_failed",
    "download_failed",
    "extract_failed",
    "invalid_credentials",
    "command_failed",
    "io_failed",
]


@dataclass(frozen=True, slots=True)
class SdkError:
    kind: SdkErrorKind
    message: str
    hint: str | None = None

    def __str__(self) -> str:
        return self.message
