from __future__ import annotations

from pathlib import Path

import typer

from papertrail.cli.commands._helpers import MANIFEST_HELP, resolve_manifest_or_exit, unwrap_or_exit
from papertrail.cli.context import build_context
from papertrail.release.bump import next_version
from papertrail.release.semver import parse_version
from papertrail.services.sources import load_fragment_dir


def bump(
    base: str = typer.Option(..., "--base", help="Current version, e.g. v1.2.3"),
    fragments: Path = typer.Option(Path("changelog.d"), "--fragments", help="Fragments directory"),
    manifest: Path | None = typer.Option(None, "--manifest", help=MANIFEST_HELP),
) -> None:
    """Print the next version implied by the pending fragments."""
    ctx = build_context()
    unwrap_or_exit(parse_version(base), ctx)
    resolved = resolve_manifest_or_exit(manifest, ctx)

    loaded = unwrap_or_exit(load_fragment_dir(ctx.cwd / fragments, resolved), ctx)
    version = unwrap_or_exit(next_version(base, (f.type for _, f in loaded), resolved), ctx)
    typer.echo(version.to_tag())
