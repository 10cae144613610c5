"""CLI entry point for ghpr.

This module provides the main CLI application that combines all commands
into a single interface.
"""

import typer

from ghpr.cli.create import create_command
from ghpr.cli.main import main_command

# Main application
app = typer.Typer(
    name="ghpr",
    help="ghpr: turn local commits into pull request branches",
    add_completion=False,
    no_args_is_help=True,
)

# Add individual commands
app.command("create")(create_command)

# Global options (verbosity, branch name template, --version)
app.callback()(main_command)


__all__ = [
    "app",
    "create_command",
    "main_command",
]
