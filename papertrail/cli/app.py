from __future__ import annotations

import typer

from papertrail import __version__
from papertrail.cli.commands.bump import bump
from papertrail.cli.commands.check import check
from papertrail.cli.commands.merge import merge
from papertrail.cli.commands.pr_title import pr_title
from papertrail.cli.commands.preview import preview


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Manage changelog fragments and releases.",
)


app.command()(check)
app.command()(bump)
app.command()(preview)
app.command()(merge)
app.command("pr-title")(pr_title)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)


def main() -> None:
    app()
