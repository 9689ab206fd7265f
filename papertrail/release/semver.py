from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from papertrail.core.result import Err, Ok, Result
from papertrail.release.errors import VersionError
from papertrail.release.model import BumpLevel


_VERSION_RE = re.compile(r"v(\d+)\.(\d+)\.(\d+)", re.ASCII)
_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


@dataclass(frozen=True, slots=True, order=True)
class ReleaseVersion:
    major: int
    minor: int
    patch: int

    def to_tag(self) -> str:
        return f"v{self.major}.{self.minor}.{self.patch}"

    def __str__(self) -> str:
        return self.to_tag()

    def bump(self, level: BumpLevel) -> ReleaseVersion:
        match level:
            case BumpLevel.MAJOR:
                return ReleaseVersion(self.major + 1, 0, 0)
            case BumpLevel.MINOR:
                return ReleaseVersion(self.major, self.minor + 1, 0)
            case BumpLevel.PATCH:
                return ReleaseVersion(self.major, self.minor, self.patch + 1)
            case _:
                raise AssertionError(f"unexpected bump level: {level}")


def parse_version(tag: str) -> Result[ReleaseVersion, VersionError]:
    """Parse a `vMAJOR.MINOR.PATCH` tag."""
    m = _VERSION_RE.fullmatch(tag)
    if m is None:
        return Err(
            VersionError(value=tag, message=f"invalid version {tag!r} (expected vMAJOR.MINOR.PATCH)")
        )
    return Ok(ReleaseVersion(int(m.group(1)), int(m.group(2)), int(m.group(3))))


def parse_release_date(raw: str) -> Result[str, VersionError]:
    """Validate a `YYYY-MM-DD` calendar date."""
    if _DATE_RE.fullmatch(raw) is None:
        return Err(VersionError(value=raw, message=f"invalid date {raw!r} (expected YYYY-MM-DD)"))
    try:
        datetime.strptime(raw, "%Y-%m-%d")
    except ValueError:
        return Err(VersionError(value=raw, message=f"invalid date {raw!r} (not a calendar date)"))
    return Ok(raw)
