"""Tool cache location.

On a hosted runner the SDK goes under ``RUNNER_TOOL_CACHE`` so later jobs on
the same machine can reuse it. Elsewhere it lands in the user cache dir.
"""

from __future__ import annotations

import os
from pathlib import Path

from .detection import is_windows

__all__ = ["home", "tool_cache_dir"]

APP_NAME = "cdr"


def home() -> Path:
    """Get user's home directory, honouring HOME/USERPROFILE first."""
    if is_windows():
        userprofile = os.environ.get("USERPROFILE")
        if userprofile:
            return Path(userprofile)
    else:
        home_env = os.environ.get("HOME")
        if home_env:
            return Path(home_env)
    return Path.home()


def tool_cache_dir() -> Path:
    runner_cache = os.environ.get("RUNNER_TOOL_CACHE")
    if runner_cache:
        return Path(runner_cache)

    if is_windows():
        local = os.environ.get("LOCALAPPDATA")
        base = Path(local) if local else home() / "AppData" / "Local"
        return base / APP_NAME / "tools"

    xdg = os.environ.get("XDG_CACHE_HOME")
    base = Path(xdg) if xdg else home() / ".cache"
    return base / APP_NAME / "tools"
