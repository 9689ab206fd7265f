"""Assemble one release: render fragments into the changelog, then archive them.

The changelog is written only after rendering and insertion have succeeded
in memory, and fragments are archived only after the changelog is written.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from papertrail.core.result import Err, Ok, Result
from papertrail.platform.files import atomic_write_text, read_text
from papertrail.release.changelog import insert_release_section
from papertrail.release.errors import ChangelogStateError, ReleaseError, ReleaseIOError
from papertrail.release.manifest import Manifest
from papertrail.release.render import render_release
from papertrail.release.semver import parse_release_date, parse_version
from papertrail.services.archive import archive_fragments
from papertrail.services.sources import load_fragment_dir

__all__ = ["MergeOutcome", "MergeRequest", "merge_release", "today_utc"]


def today_utc() -> str:
    return datetime.now(UTC).strftime("%Y-%m-%d")


@dataclass(frozen=True, slots=True)
class MergeRequest:
    version: str
    fragments_dir: Path
    changelog_path: Path
    archive_root: Path
    date: str | None = None
    release_notes_out: Path | None = None


@dataclass(frozen=True, slots=True)
class MergeOutcome:
    version: str
    date: str
    fragment_count: int
    archived: tuple[Path, ...]
    release_notes_path: Path | None


def merge_release(request: MergeRequest, manifest: Manifest) -> Result[MergeOutcome, ReleaseError]:
    """Merge the pending fragments into the changelog as release `request.version`."""
    version = parse_version(request.version)
    if isinstance(version, Err):
        return version
    tag = version.value.to_tag()

    date = today_utc() if request.date is None else request.date
    checked_date = parse_release_date(date)
    if isinstance(checked_date, Err):
        return checked_date

    loaded = load_fragment_dir(request.fragments_dir, manifest)
    if isinstance(loaded, Err):
        return loaded
    paths = [p for p, _ in loaded.value]
    rendered = render_release(tag, date, (f for _, f in loaded.value), manifest)

    try:
        original = read_text(request.changelog_path)
    except OSError as e:
        return Err(ReleaseIOError(operation="read changelog", path=request.changelog_path, message=str(e)))
    except UnicodeDecodeError as e:
        return Err(ReleaseIOError(operation="decode changelog", path=request.changelog_path, message=str(e)))

    updated = insert_release_section(original, rendered.section, version=tag)
    if isinstance(updated, Err):
        return Err(ChangelogStateError(message=updated.error.message, path=request.changelog_path))

    try:
        atomic_write_text(request.changelog_path, updated.value)
    except OSError as e:
        return Err(ReleaseIOError(operation="write changelog", path=request.changelog_path, message=str(e)))

    if request.release_notes_out is not None:
        try:
            atomic_write_text(request.release_notes_out, rendered.notes)
        except OSError as e:
            return Err(
                ReleaseIOError(
                    operation="write release notes",
                    path=request.release_notes_out,
                    message=str(e),
                )
            )

    archived = archive_fragments(paths, archive_root=request.archive_root, version=tag)
    if isinstance(archived, Err):
        return archived

    return Ok(
        MergeOutcome(
            version=tag,
            date=date,
            fragment_count=len(paths),
            archived=tuple(archived.value),
            release_notes_path=request.release_notes_out,
        )
    )
