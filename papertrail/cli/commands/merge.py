from __future__ import annotations

from pathlib import Path

import typer

from papertrail.cli.commands._helpers import MANIFEST_HELP, resolve_manifest_or_exit, unwrap_or_exit
from papertrail.cli.context import build_context
from papertrail.output.console import Style
from papertrail.services.merge import MergeRequest, merge_release


def merge(
    version: str = typer.Option(..., "--version", help="Release version, e.g. v1.2.3"),
    date: str | None = typer.Option(None, "--date", help="Release date YYYY-MM-DD (default: today UTC)"),
    fragments: Path = typer.Option(Path("changelog.d"), "--fragments", help="Fragments directory"),
    changelog: Path = typer.Option(Path("CHANGELOG.md"), "--changelog", help="Changelog path"),
    archive: Path = typer.Option(
        Path("changelog.d/archived"), "--archive", help="Archive root for released fragments"
    ),
    release_notes_out: Path | None = typer.Option(
        None, "--release-notes-out", help="Also write the release notes body to this path"
    ),
    manifest: Path | None = typer.Option(None, "--manifest", help=MANIFEST_HELP),
) -> None:
    """Merge pending fragments into the changelog as a new release."""
    ctx = build_context()
    resolved = resolve_manifest_or_exit(manifest, ctx)

    request = MergeRequest(
        version=version,
        date=date,
        fragments_dir=ctx.cwd / fragments,
        changelog_path=ctx.cwd / changelog,
        archive_root=ctx.cwd / archive,
        release_notes_out=None if release_notes_out is None else ctx.cwd / release_notes_out,
    )
    outcome = unwrap_or_exit(merge_release(request, resolved), ctx)

    ctx.console.success(f"{outcome.version} ({outcome.date}): merged {outcome.fragment_count} fragment(s)")
    ctx.console.print(f"changelog: {request.changelog_path}", Style.DIM)
    if outcome.release_notes_path is not None:
        ctx.console.print(f"release notes: {outcome.release_notes_path}", Style.DIM)
    ctx.console.print(f"archived to: {request.archive_root / outcome.version}", Style.DIM)
