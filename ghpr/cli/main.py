"""Global options shared by every ghpr command."""

from typing import Optional

import typer

from ghpr import __version__
from ghpr.config import CmdOptions


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"ghpr {__version__}")
        raise typer.Exit(0)


def main_command(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase the debugging output of the command. Accepted multiple times for more information.",
    ),
    branch_name_template: Optional[str] = typer.Option(
        None,
        "--branch-name-template",
        "-b",
        help="Template for naming branches that are created for pull requests.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Turn small commits into stacked GitHub pull request branches."""
    ctx.obj = CmdOptions(verbose=verbose, branch_name_template=branch_name_template)
