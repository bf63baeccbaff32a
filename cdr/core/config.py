"""Typed release inputs and their sources.

Inputs are gathered from up to three places, lowest precedence first:
an optional TOML file (``[release]`` table), the runner's ``INPUT_<NAME>``
environment variables, and explicit CLI options.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_table

__all__ = [
    "DEFAULT_REGION",
    "INPUT_NAMES",
    "ConfigError",
    "ReleaseInputs",
    "input_env_name",
    "inputs_from_env",
    "load_inputs_file",
    "resolve_inputs",
]

DEFAULT_REGION = "us-central1"
LATEST_VERSION = "latest"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when a config file cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ReleaseInputs:
    """Invocation parameters for one release run.

    Every field is optional. ``region`` falls back to ``us-central1`` and an
    empty ``gcloud_version`` means the latest published SDK.
    """

    credentials: str | None = None
    project_id: str | None = None
    gcloud_version: str | None = None
    release: str | None = None
    delivery_pipeline: str | None = None
    region: str | None = None
    annotations: str | None = None
    labels: str | None = None
    description: str | None = None
    gcs_source_staging_dir: str | None = None
    ignore_file: str | None = None
    to_target: str | None = None
    build_artifacts: str | None = None
    source: str | None = None
    images: str | None = None
    flags: str | None = None

    @property
    def effective_region(self) -> str:
        return self.region or DEFAULT_REGION

    @property
    def wants_latest_gcloud(self) -> bool:
        return not self.gcloud_version or self.gcloud_version == LATEST_VERSION

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> ReleaseInputs:
        """Build inputs from a mapping keyed by input name.

        Unknown keys are ignored; blank values count as missing.
        """
        return cls(**{name: get_str(data, name) for name in INPUT_NAMES})

    def merged(self, overrides: ReleaseInputs) -> ReleaseInputs:
        """Return a copy where every value set in ``overrides`` wins."""
        changes = {
            name: getattr(overrides, name)
            for name in INPUT_NAMES
            if getattr(overrides, name) is not None
        }
        return replace(self, **changes)


INPUT_NAMES: tuple[str, ...] = tuple(f.name for f in fields(ReleaseInputs))


def input_env_name(name: str) -> str:
    """Environment variable carrying a runner input (``INPUT_PROJECT_ID``)."""
    return f"INPUT_{name.replace(' ', '_').upper()}"


def inputs_from_env(environ: Mapping[str, str]) -> ReleaseInputs:
    data: dict[str, object] = {}
    for name in INPUT_NAMES:
        value = environ.get(input_env_name(name))
        if value is not None:
            data[name] = value
    return ReleaseInputs.from_mapping(data)


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_inputs_file(path: Path) -> Result[ReleaseInputs, ConfigError]:
    """Load inputs from the ``[release]`` table of a TOML file.

    Args:
        path: Path to the TOML file

    Returns:
        Ok(ReleaseInputs) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    table = get_table(result.value, "release")
    if table is None:
        return Err(ConfigError("Missing [release] table", path=path))
    return Ok(ReleaseInputs.from_mapping(table))


def resolve_inputs(
    *,
    environ: Mapping[str, str],
    overrides: ReleaseInputs | None = None,
    config_path: Path | None = None,
) -> Result[ReleaseInputs, ConfigError]:
    """Combine file, environment and CLI inputs (later sources win)."""
    base = ReleaseInputs()
    if config_path is not None:
        loaded = load_inputs_file(config_path)
        if isinstance(loaded, Err):
            return loaded
        base = loaded.value

    inputs = base.merged(inputs_from_env(environ))
    if overrides is not None:
        inputs = inputs.merged(overrides)
    return Ok(inputs)
