"""Release creation: command assembly, output scraping, orchestration."""

from .command import build_command, parse_flags
from .errors import ReleaseError
from .operation import find_operation_id, publish_operation_id
from .service import ReleaseOutcome, ReleaseService

__all__ = [
    "ReleaseError",
    "ReleaseOutcome",
    "ReleaseService",
    "build_command",
    "find_operation_id",
    "parse_flags",
    "publish_operation_id",
]
