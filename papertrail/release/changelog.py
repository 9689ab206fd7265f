"""Insert a rendered release section into an existing changelog."""

from __future__ import annotations

import re

from papertrail.core.result import Err, Ok, Result
from papertrail.release.errors import ChangelogStateError

__all__ = ["RELEASE_HEADING_PREFIXES", "find_insertion_index", "has_release", "insert_release_section"]

# Bare-version and year-prefixed (dated) release headings.
RELEASE_HEADING_PREFIXES = ("## v", "## 20")

_TRAILING_BLANK_RE = re.compile(r"\n[ \t\r\n]*\Z")


def has_release(changelog: str, version: str) -> bool:
    """True if a `## <version>` heading, dated or not, already exists."""
    pattern = re.compile(rf"^## {re.escape(version)}(?:[ \t]*\(|[ \t]*\r?$)", re.MULTILINE)
    return pattern.search(changelog) is not None


def find_insertion_index(changelog: str) -> int:
    """Offset of the earliest release heading, or the end of the document."""
    if changelog.startswith(RELEASE_HEADING_PREFIXES):
        return 0
    candidates = [changelog.find("\n" + prefix) for prefix in RELEASE_HEADING_PREFIXES]
    found = [c for c in candidates if c >= 0]
    if not found:
        return len(changelog)
    return min(found) + 1


def insert_release_section(
    changelog: str,
    section: str,
    *,
    version: str,
) -> Result[str, ChangelogStateError]:
    """Place `section` above the newest existing release.

    Text before and after the insertion point is kept as is, except that the
    whitespace at the end of the prefix is collapsed to exactly one blank line.

    Returns:
        Ok(updated document), or Err(ChangelogStateError) if `version` is
        already present. The input is never modified.
    """
    if has_release(changelog, version):
        return Err(ChangelogStateError(message=f"changelog already contains a section for {version}"))

    idx = find_insertion_index(changelog)
    head = _TRAILING_BLANK_RE.sub("", changelog[:idx])
    if not head.strip():
        head = ""
    tail = changelog[idx:]

    parts: list[str] = []
    if head:
        parts.append(head)
        parts.append("\n\n")
    parts.append(section)
    parts.append(tail)
    return Ok("".join(parts))
