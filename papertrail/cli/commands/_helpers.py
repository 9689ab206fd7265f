"""Shared helpers for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, NoReturn, TypeVar

import typer

from papertrail.core.result import Err, Result
from papertrail.output.errors import print_release_error, release_error_exit_code
from papertrail.release.errors import ReleaseError
from papertrail.release.manifest import Manifest
from papertrail.services.sources import load_manifest

if TYPE_CHECKING:
    from papertrail.cli.context import CLIContext


T = TypeVar("T")

MANIFEST_HELP = "Release config YAML (default: .papertrail.config.yml or papertrail.config.yml)"


def fail(error: ReleaseError, ctx: CLIContext) -> NoReturn:
    print_release_error(error, ctx.console)
    raise typer.Exit(code=release_error_exit_code(error))


def unwrap_or_exit[T](result: Result[T, ReleaseError], ctx: CLIContext) -> T:
    """Return the Ok value, or print the error and exit with its code.

    Replaces the repeated pattern:
        if isinstance(result, Err):
            print_release_error(result.error, ctx.console)
            raise typer.Exit(code=release_error_exit_code(result.error))
    """
    if isinstance(result, Err):
        fail(result.error, ctx)
    return result.value


def resolve_manifest_or_exit(manifest_path: Path | None, ctx: CLIContext) -> Manifest:
    """Manifest errors are fatal before any fragment is read."""
    return unwrap_or_exit(load_manifest(manifest_path, cwd=ctx.cwd), ctx)
