"""Error types for the release engine.

One frozen dataclass per failure family. They are carried inside `Err` and
rendered by the CLI without importing implementation details.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ConfigError:
    """The manifest document is malformed or holds an invalid value."""

    message: str
    key: str | None = None
    path: Path | None = None

    @property
    def hint(self) -> str | None:
        if self.path is None:
            return None
        return f"check {self.path}"

    def pretty(self) -> str:
        if self.path is not None:
            return f"{self.path}: {self.message}"
        return self.message


@dataclass(frozen=True, slots=True)
class FragmentError:
    """A fragment is missing a field or uses a type/component outside the manifest."""

    message: str
    path: Path | None = None
    field_name: str | None = None

    @property
    def hint(self) -> str | None:
        return None

    def pretty(self) -> str:
        if self.path is not None:
            return f"{self.path}: {self.message}"
        return self.message

    def with_path(self, path: Path) -> FragmentError:
        return FragmentError(message=self.message, path=path, field_name=self.field_name)


@dataclass(frozen=True, slots=True)
class FragmentBatchError:
    """All per-file failures of a batch check, sorted by rendered message."""

    errors: tuple[FragmentError, ...] = field(default_factory=tuple)

    @property
    def message(self) -> str:
        return "\n".join(e.pretty() for e in self.errors)

    @property
    def hint(self) -> str | None:
        return f"{len(self.errors)} invalid fragment(s)"

    def pretty(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class VersionError:
    """A version or release date is not in the expected form."""

    value: str
    message: str

    @property
    def hint(self) -> str | None:
        return None

    def pretty(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class ChangelogStateError:
    """The changelog cannot take the new section (e.g. the version is already there)."""

    message: str
    path: Path | None = None

    @property
    def hint(self) -> str | None:
        return None

    def pretty(self) -> str:
        if self.path is not None:
            return f"{self.path}: {self.message}"
        return self.message


@dataclass(frozen=True, slots=True)
class ReleaseIOError:
    """A filesystem operation failed."""

    operation: str
    path: Path
    message: str

    @property
    def hint(self) -> str | None:
        return str(self.path)

    def pretty(self) -> str:
        return f"failed to {self.operation}: {self.message}"


@dataclass(frozen=True, slots=True)
class PRTitleError:
    """A pull request title does not follow the configured convention."""

    title: str
    message: str

    @property
    def hint(self) -> str | None:
        return "expected <type>(<scope>): <title>"

    def pretty(self) -> str:
        return self.message


ReleaseError = (
    ConfigError
    | FragmentError
    | FragmentBatchError
    | VersionError
    | ChangelogStateError
    | ReleaseIOError
    | PRTitleError
)
