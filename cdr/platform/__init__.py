"""Platform abstraction layer."""

from .detection import (
    Arch,
    Platform,
    PlatformInfo,
    detect,
    is_windows,
)
from .paths import tool_cache_dir
from .process import (
    ProcessError,
    run_streaming,
)

__all__ = [
    # detection
    "Arch",
    "Platform",
    "PlatformInfo",
    "detect",
    "is_windows",
    # paths
    "tool_cache_dir",
    # process
    "ProcessError",
    "run_streaming",
]
