"""Core types: results, exit codes and release inputs."""

from .config import ConfigError, ReleaseInputs, resolve_inputs
from .errors import ErrorCode
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # config
    "ConfigError",
    "ReleaseInputs",
    "resolve_inputs",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
