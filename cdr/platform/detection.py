"""Platform and architecture detection.

Only what is needed to pick the right Cloud SDK archive and executable name.
Detection is cached.
"""

from __future__ import annotations

import os as _os
import platform as _platform
import sys as _sys
from dataclasses import dataclass
from enum import Enum, auto
from functools import lru_cache

__all__ = [
    "Platform",
    "Arch",
    "PlatformInfo",
    "detect",
    "detect_arch",
    "detect_platform",
    "is_windows",
]


class Platform(Enum):
    """Operating system platform."""

    LINUX = auto()
    MACOS = auto()
    WINDOWS = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def sdk_name(self) -> str:
        """OS component of Cloud SDK archive names."""
        if self == Platform.MACOS:
            return "darwin"
        return str(self)

    @property
    def archive_ext(self) -> str:
        return "zip" if self == Platform.WINDOWS else "tar.gz"

    @property
    def script_suffix(self) -> str:
        return ".cmd" if self == Platform.WINDOWS else ""


class Arch(Enum):
    """CPU architecture."""

    X64 = auto()
    X86 = auto()
    ARM64 = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def sdk_name(self) -> str:
        """Architecture component of Cloud SDK archive names."""
        if self == Arch.ARM64:
            return "arm"
        if self == Arch.X86:
            return "x86"
        return "x86_64"


@dataclass(frozen=True, slots=True)
class PlatformInfo:
    platform: Platform
    arch: Arch

    def __str__(self) -> str:
        return f"{self.platform}-{self.arch}"


@lru_cache(maxsize=1)
def detect_platform() -> Platform:
    """Detect the current operating system (cached)."""
    # NOTE: platform.system() may query WMI on Windows (slow).
    system = _sys.platform.lower()
    if system.startswith("linux"):
        return Platform.LINUX
    if system.startswith("darwin"):
        return Platform.MACOS
    if system.startswith(("win32", "cygwin", "msys")):
        return Platform.WINDOWS
    return Platform.UNKNOWN


@lru_cache(maxsize=1)
def detect_arch() -> Arch:
    """Detect the current CPU architecture (cached)."""
    if detect_platform() == Platform.WINDOWS:
        env_arch = (
            _os.environ.get("PROCESSOR_ARCHITEW6432")
            or _os.environ.get("PROCESSOR_ARCHITECTURE")
            or ""
        )
        machine = env_arch.lower()
    else:
        machine = _platform.machine().lower()
    if machine in ("x86_64", "amd64"):
        return Arch.X64
    if machine in ("aarch64", "arm64"):
        return Arch.ARM64
    if machine in ("x86", "i386", "i686"):
        return Arch.X86
    return Arch.UNKNOWN


@lru_cache(maxsize=1)
def detect() -> PlatformInfo:
    return PlatformInfo(platform=detect_platform(), arch=detect_arch())


def is_windows() -> bool:
    return detect_platform() == Platform.WINDOWS
