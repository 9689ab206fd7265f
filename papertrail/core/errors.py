"""Process exit codes.

Each release error family maps to one stable exit code so CI jobs can tell a
broken manifest from a bad fragment without parsing stderr.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    - 0: Success
    - 1: User error (bad arguments, malformed version or date)
    - 2: Manifest error (invalid release configuration)
    - 3: Fragment error (missing field, unknown type or component)
    - 4: Changelog error (duplicate release heading)
    - 5: I/O error (file not found, permission denied)
    """

    OK = 0
    USER_ERROR = 1
    CONFIG_ERROR = 2
    FRAGMENT_ERROR = 3
    CHANGELOG_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
