from __future__ import annotations

from pathlib import Path

import typer

from papertrail.cli.commands._helpers import MANIFEST_HELP, resolve_manifest_or_exit, unwrap_or_exit
from papertrail.cli.context import build_context
from papertrail.release.render import render_preview
from papertrail.services.sources import load_fragments


def preview(
    files: list[Path] = typer.Argument(..., help="Fragment files to preview"),
    manifest: Path | None = typer.Option(None, "--manifest", help=MANIFEST_HELP),
) -> None:
    """Render fragments as a markdown changelog preview (for PR comments)."""
    ctx = build_context()
    resolved = resolve_manifest_or_exit(manifest, ctx)

    loaded = unwrap_or_exit(load_fragments([ctx.cwd / f for f in files], resolved), ctx)
    typer.echo(render_preview((f for _, f in loaded), resolved), nl=False)
