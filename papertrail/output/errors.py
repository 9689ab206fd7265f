"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from papertrail.core.errors import ErrorCode
from papertrail.output.console import Style
from papertrail.release.errors import (
    ChangelogStateError,
    ConfigError,
    FragmentBatchError,
    FragmentError,
    PRTitleError,
    ReleaseError,
    ReleaseIOError,
    VersionError,
)

if TYPE_CHECKING:
    from papertrail.output.console import ConsoleProtocol

__all__ = ["print_release_error", "release_error_exit_code"]


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    """Print a release error with its context and optional hint."""
    match error:
        case FragmentBatchError(errors=errors):
            for e in errors:
                console.error(e.pretty())
            console.print(f"{len(errors)} invalid fragment(s)", Style.DIM)
        case ConfigError(key=key):
            console.error(f"invalid manifest: {error.pretty()}")
            if key:
                console.print(f"key: {key}", Style.DIM)
        case _:
            console.error(error.pretty())
            if error.hint:
                console.print(f"hint: {error.hint}", Style.DIM)


def release_error_exit_code(error: ReleaseError) -> int:
    match error:
        case ConfigError():
            return int(ErrorCode.CONFIG_ERROR)
        case FragmentError() | FragmentBatchError():
            return int(ErrorCode.FRAGMENT_ERROR)
        case VersionError() | PRTitleError():
            return int(ErrorCode.USER_ERROR)
        case ChangelogStateError():
            return int(ErrorCode.CHANGELOG_ERROR)
        case ReleaseIOError():
            return int(ErrorCode.IO_ERROR)
    # Fallback for exhaustiveness
    return int(ErrorCode.USER_ERROR)
