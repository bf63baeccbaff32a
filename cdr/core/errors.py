"""Exit codes for the CLI.

The hosting runner only distinguishes zero from non-zero, but distinct codes
make local runs and wrapper scripts easier to debug. Values must stay stable:
- 0: Success
- 1: User error (bad input, unreadable config file)
- 2: Environment error (gcloud install, authentication, project)
- 3: Deploy error (the release create command failed)
- 4: Network error (version lookup or download failed)
- 5: I/O error (file not found, permission denied)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    DEPLOY_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
