"""Move released fragments out of the pending directory.

Layout: `<archive_root>/<version>/<fragment file name>`.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from papertrail.core.result import Err, Ok, Result
from papertrail.release.errors import ReleaseIOError

__all__ = ["archive_fragments", "archive_path_for"]


def archive_path_for(archive_root: Path, version: str, fragment_path: Path) -> Path:
    return archive_root / version / fragment_path.name


def archive_fragments(
    paths: Iterable[Path],
    *,
    archive_root: Path,
    version: str,
) -> Result[list[Path], ReleaseIOError]:
    """Move each fragment into the version's archive directory.

    Returns:
        Ok(destination paths, in input order), or Err on the first failed move.
        An existing destination is never overwritten.
    """
    target_dir = archive_root / version
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        return Err(ReleaseIOError(operation="create archive directory", path=target_dir, message=str(e)))

    moved: list[Path] = []
    for path in paths:
        dst = archive_path_for(archive_root, version, path)
        if dst.exists():
            return Err(
                ReleaseIOError(
                    operation=f"archive fragment to {dst}",
                    path=path,
                    message="destination already exists",
                )
            )
        try:
            os.replace(path, dst)
        except OSError as e:
            return Err(ReleaseIOError(operation=f"archive fragment to {dst}", path=path, message=str(e)))
        moved.append(dst)
    return Ok(moved)
