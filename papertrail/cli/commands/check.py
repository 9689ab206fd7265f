from __future__ import annotations

from pathlib import Path

import typer

from papertrail.cli.commands._helpers import MANIFEST_HELP, resolve_manifest_or_exit, unwrap_or_exit
from papertrail.cli.context import build_context
from papertrail.services.sources import check_fragments


def check(
    fragments: Path = typer.Option(Path("changelog.d"), "--fragments", help="Fragments directory"),
    manifest: Path | None = typer.Option(None, "--manifest", help=MANIFEST_HELP),
) -> None:
    """Validate every pending fragment and report all problems at once."""
    ctx = build_context()
    resolved = resolve_manifest_or_exit(manifest, ctx)

    checked = unwrap_or_exit(check_fragments(ctx.cwd / fragments, resolved), ctx)
    ctx.console.success(f"{len(checked)} fragment(s) valid")
