from __future__ import annotations

from pathlib import Path

import typer

from papertrail.cli.commands._helpers import MANIFEST_HELP, resolve_manifest_or_exit, unwrap_or_exit
from papertrail.cli.context import build_context
from papertrail.release.pr_policy import validate_pr_title


def pr_title(
    title: str = typer.Argument(..., help="Pull request title"),
    manifest: Path | None = typer.Option(None, "--manifest", help=MANIFEST_HELP),
) -> None:
    """Check a pull request title against the manifest's pr_policy."""
    ctx = build_context()
    resolved = resolve_manifest_or_exit(manifest, ctx)

    if not resolved.pr_policy.title_enabled:
        ctx.console.info("PR title validation is disabled")
        return
    unwrap_or_exit(validate_pr_title(resolved.pr_policy, title), ctx)
    ctx.console.success("PR title OK")
