from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class BumpLevel(IntEnum):
    """Semantic-version component a release increments. Ordered patch < minor < major."""

    PATCH = 0
    MINOR = 1
    MAJOR = 2

    def __str__(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, raw: str) -> BumpLevel | None:
        """Parse `major` / `minor` / `patch`, case-insensitively."""
        match raw.strip().lower():
            case "major":
                return cls.MAJOR
            case "minor":
                return cls.MINOR
            case "patch":
                return cls.PATCH
            case _:
                return None


@dataclass(frozen=True, slots=True)
class Fragment:
    """A validated, canonical change record.

    `type` is upper-cased and alias-resolved. `source_id` is the fragment's
    file name; it is only used as the final sort tie-break.
    """

    component: str
    type: str
    summary: str
    refs: tuple[str, ...]
    source_id: str

    @property
    def display_type(self) -> str:
        return self.type.strip().lower()


@dataclass(frozen=True, slots=True)
class RenderedRelease:
    """Dated changelog section and undated release-notes body for one version."""

    version: str
    section: str
    notes: str
