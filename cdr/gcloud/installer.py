"""Cloud SDK archive extraction.

The SDK ships as ``google-cloud-sdk/...`` inside a tar.gz (Linux, macOS) or
zip (Windows). Extraction strips that leading directory so the tool cache
entry holds ``bin/gcloud`` directly.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import stat
import tarfile
import zipfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from cdr.core.result import Err, Ok, Result

__all__ = ["InstallError", "extract_archive"]


@dataclass(frozen=True, slots=True)
class InstallError:
    archive: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message}: {self.archive}"


def _safe_relative_path(member_name: str, strip_components: int) -> Path | None:
    """Return a sanitized relative extraction path, or None if unsafe."""
    normalized = member_name.replace("\\", "/")
    if normalized.startswith("/"):
        return None

    parts = PurePosixPath(normalized).parts
    if len(parts) <= strip_components:
        return None

    kept = parts[strip_components:]
    if any(part in {"", ".", ".."} for part in kept):
        return None
    if kept[0].endswith(":"):
        return None
    return Path(*kept)


def _is_within_root(root: Path, target: Path) -> bool:
    try:
        return target.resolve().is_relative_to(root)
    except OSError:
        return False


def _reset_dir(install_dir: Path) -> Path:
    if install_dir.exists():
        shutil.rmtree(install_dir)
    install_dir.mkdir(parents=True, exist_ok=True)
    return install_dir.resolve()


def _extract_tar(archive: Path, install_dir: Path, strip_components: int) -> None:
    root = _reset_dir(install_dir)
    with tarfile.open(archive, "r:gz") as tar:
        for member in tar.getmembers():
            # Regular files only; links and devices are skipped.
            if not member.isreg():
                continue
            rel_path = _safe_relative_path(member.name, strip_components)
            if rel_path is None:
                continue
            full_path = install_dir / rel_path
            if not _is_within_root(root, full_path):
                continue
            src = tar.extractfile(member)
            if src is None:
                continue

            full_path.parent.mkdir(parents=True, exist_ok=True)
            with src, open(full_path, "wb") as dst:
                shutil.copyfileobj(src, dst)
            mode = member.mode & 0o777
            if mode:
                with contextlib.suppress(OSError):
                    os.chmod(full_path, mode)


def _extract_zip(archive: Path, install_dir: Path, strip_components: int) -> None:
    root = _reset_dir(install_dir)
    with zipfile.ZipFile(archive, "r") as zf:
        for info in zf.infolist():
            if info.is_dir():
                continue
            rel_path = _safe_relative_path(info.filename, strip_components)
            if rel_path is None:
                continue
            unix_attrs = info.external_attr >> 16
            if (unix_attrs & 0o170000) == stat.S_IFLNK:
                continue
            full_path = install_dir / rel_path
            if not _is_within_root(root, full_path):
                continue

            full_path.parent.mkdir(parents=True, exist_ok=True)
            with zf.open(info) as src, open(full_path, "wb") as dst:
                shutil.copyfileobj(src, dst)
            if unix_attrs & 0o777:
                with contextlib.suppress(OSError):
                    full_path.chmod(unix_attrs & 0o777)


def extract_archive(
    archive: Path,
    install_dir: Path,
    *,
    strip_components: int = 1,
) -> Result[Path, InstallError]:
    """Extract a .tar.gz or .zip archive into ``install_dir``.

    Any previous content of ``install_dir`` is removed first. Returns the
    install directory.
    """
    if not archive.exists():
        return Err(InstallError(archive=archive, message="Archive not found"))

    name = archive.name.lower()
    try:
        if name.endswith((".tar.gz", ".tgz")):
            _extract_tar(archive, install_dir, strip_components)
        elif name.endswith(".zip"):
            _extract_zip(archive, install_dir, strip_components)
        else:
            return Err(InstallError(archive=archive, message="Unsupported archive format"))
    except tarfile.TarError as e:
        return Err(InstallError(archive=archive, message=f"Tar extraction failed: {e}"))
    except zipfile.BadZipFile as e:
        return Err(InstallError(archive=archive, message=f"Invalid zip file: {e}"))
    except OSError as e:
        return Err(InstallError(archive=archive, message=f"IO error: {e}"))

    return Ok(install_dir)
