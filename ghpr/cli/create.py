"""CLI command for creating the pull request branch of the current commit."""

from typing import Optional

import typer

from ghpr import verbose as diagnostics
from ghpr.config import CmdOptions, load as load_configuration
from ghpr.create import create_pull_request
from ghpr.errors import GhprError


def create_command(
    ctx: typer.Context,
    jira: Optional[str] = typer.Option(
        None,
        "--jira",
        "-j",
        help="Ticket key, available to the branch name template as {{jira}}",
    ),
    param: Optional[list[str]] = typer.Option(
        None,
        "--param",
        "-p",
        help="Extra branch name template parameter as KEY=VALUE (repeatable)",
    ),
) -> None:
    """Find or create the branch for the current commit and switch to it.

    If no local branch points at the checked-out commit, one is created with
    a name rendered from the branch name template.
    """
    cmd_options = ctx.obj if isinstance(ctx.obj, CmdOptions) else CmdOptions()
    cmd_options.jira = jira
    cmd_options.params = list(param or [])

    try:
        configuration = load_configuration(cmd_options)
        log = diagnostics.init(configuration.verbose)
        result = create_pull_request(
            ".",
            configuration.branch_name_template,
            configuration.command.branch_name_parameters,
            log=log,
        )
    except GhprError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)

    log.info(
        "Branch %s is ready for a pull request against %s.",
        result.branch_name,
        result.base_branch,
    )
