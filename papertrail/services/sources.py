"""Load the manifest and fragment files from disk.

Every function here does the blocking I/O up front and hands plain text to
the pure release engine.
"""

from __future__ import annotations

import os
from pathlib import Path

from papertrail.core.result import Err, Ok, Result
from papertrail.platform.files import read_text
from papertrail.release.errors import (
    FragmentError,
    ReleaseError,
    ReleaseIOError,
)
from papertrail.release.fragments import (
    FRAGMENT_SUFFIXES,
    collect_fragment_results,
    parse_fragment_text,
)
from papertrail.release.manifest import Manifest, default_manifest, parse_manifest_text
from papertrail.release.model import Fragment

__all__ = [
    "ARCHIVE_DIR_NAME",
    "MANIFEST_CANDIDATES",
    "check_fragments",
    "discover_manifest",
    "duplicate_name_errors",
    "list_fragment_files",
    "load_fragment_dir",
    "load_fragments",
    "load_manifest",
    "read_fragment_file",
]

MANIFEST_CANDIDATES = (".papertrail.config.yml", "papertrail.config.yml")
ARCHIVE_DIR_NAME = "archived"


def discover_manifest(cwd: Path) -> Path | None:
    for name in MANIFEST_CANDIDATES:
        candidate = cwd / name
        if candidate.is_file():
            return candidate
    return None


def load_manifest(path: Path | None, *, cwd: Path) -> Result[Manifest, ReleaseError]:
    """Load the manifest at `path`, or the first default candidate under `cwd`.

    Without an explicit path and without a candidate file, the built-in
    defaults apply.
    """
    manifest_path = path if path is not None else discover_manifest(cwd)
    if manifest_path is None:
        return Ok(default_manifest())

    try:
        text = read_text(manifest_path)
    except OSError as e:
        return Err(ReleaseIOError(operation="read manifest", path=manifest_path, message=str(e)))
    except UnicodeDecodeError as e:
        return Err(ReleaseIOError(operation="decode manifest", path=manifest_path, message=str(e)))

    return parse_manifest_text(text, path=manifest_path)


def list_fragment_files(fragments_dir: Path) -> Result[list[Path], ReleaseError]:
    """All `.yml`/`.yaml` files below `fragments_dir`, sorted, skipping `archived/`."""
    if not fragments_dir.is_dir():
        return Err(
            ReleaseIOError(
                operation="list fragments in",
                path=fragments_dir,
                message="not a directory",
            )
        )

    files: list[Path] = []
    walk_errors: list[OSError] = []
    for root, dirs, names in os.walk(fragments_dir, onerror=walk_errors.append):
        dirs[:] = [d for d in dirs if d != ARCHIVE_DIR_NAME]
        for name in names:
            if Path(name).suffix.lower() in FRAGMENT_SUFFIXES:
                files.append(Path(root) / name)

    if walk_errors:
        e = walk_errors[0]
        return Err(
            ReleaseIOError(
                operation="list fragments in",
                path=Path(e.filename) if e.filename else fragments_dir,
                message=e.strerror or str(e),
            )
        )

    files.sort(key=lambda p: p.as_posix())
    return Ok(files)


def read_fragment_file(path: Path, manifest: Manifest) -> Result[Fragment, FragmentError | ReleaseIOError]:
    try:
        text = read_text(path)
    except OSError as e:
        return Err(ReleaseIOError(operation="read fragment", path=path, message=str(e)))
    except UnicodeDecodeError as e:
        return Err(FragmentError(message=f"invalid UTF-8: {e}", path=path))
    return parse_fragment_text(text, manifest, path=path)


def _require_fragments(fragments_dir: Path) -> Result[list[Path], ReleaseError]:
    files = list_fragment_files(fragments_dir)
    if isinstance(files, Err):
        return files
    if not files.value:
        return Err(FragmentError(message=f"no fragments found under {str(fragments_dir)!r}"))
    return files


def duplicate_name_errors(files: list[Path]) -> list[FragmentError]:
    """One error per file whose base name was already seen earlier in `files`.

    The base name is the fragment's source id and its archive file name, so
    it must be unique within one release.
    """
    seen: dict[str, Path] = {}
    errors: list[FragmentError] = []
    for path in files:
        first = seen.setdefault(path.name, path)
        if first != path:
            errors.append(
                FragmentError(
                    message=f"duplicate fragment file name {path.name!r} (also at {str(first)!r})",
                    path=path,
                )
            )
    return errors


def load_fragments(
    files: list[Path],
    manifest: Manifest,
) -> Result[list[tuple[Path, Fragment]], ReleaseError]:
    """Read and validate fragments, stopping at the first invalid one."""
    duplicates = duplicate_name_errors(files)
    if duplicates:
        return Err(duplicates[0])

    out: list[tuple[Path, Fragment]] = []
    for path in files:
        fragment = read_fragment_file(path, manifest)
        if isinstance(fragment, Err):
            return fragment
        out.append((path, fragment.value))
    return Ok(out)


def load_fragment_dir(
    fragments_dir: Path,
    manifest: Manifest,
) -> Result[list[tuple[Path, Fragment]], ReleaseError]:
    files = _require_fragments(fragments_dir)
    if isinstance(files, Err):
        return files
    return load_fragments(files.value, manifest)


def check_fragments(
    fragments_dir: Path,
    manifest: Manifest,
) -> Result[tuple[Fragment, ...], ReleaseError]:
    """Validate every fragment under `fragments_dir` and report all failures at once.

    Read failures are reported like validation failures, so one unreadable
    file does not hide problems in the others.
    """
    files = _require_fragments(fragments_dir)
    if isinstance(files, Err):
        return files

    results: list[Result[Fragment, FragmentError]] = [Err(e) for e in duplicate_name_errors(files.value)]
    for path in files.value:
        match read_fragment_file(path, manifest):
            case Err(ReleaseIOError(message=message)):
                results.append(Err(FragmentError(message=message, path=path)))
            case Err(FragmentError() as error):
                results.append(Err(error))
            case Ok(fragment):
                results.append(Ok(fragment))

    return collect_fragment_results(results)
