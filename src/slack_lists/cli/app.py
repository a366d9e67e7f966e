from dataclasses import dataclass, field
from typing import Optional

import typer

from slack_lists.config import SlackListsConfig
from slack_lists.utils import setup_logging


@dataclass
class GlobalOptions:
    """Options shared by every command, stored on the typer context."""

    token: Optional[str] = None
    as_user: bool = False
    schema: Optional[str] = None
    refresh_schema: bool = False
    verbose: bool = False
    config: SlackListsConfig = field(default_factory=SlackListsConfig)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:  # pragma: no cover
        import slack_lists

        typer.echo(f"slack-lists-cli version: {slack_lists.__version__}")
        raise typer.Exit()


app = typer.Typer(name="slack-lists", no_args_is_help=True)


@app.callback()
def app_callback(
    ctx: typer.Context,
    token: Optional[str] = typer.Option(None, "--token", help="Slack token to use"),
    as_user: bool = typer.Option(False, "--as-user", help="Prefer SLACK_USER_TOKEN"),
    schema: Optional[str] = typer.Option(
        None, "--schema", help="Path to a list schema JSON file"
    ),
    refresh_schema: bool = typer.Option(
        False, "--refresh-schema", help="Bypass cached schema and refresh from Slack"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Include error data and debug logs"),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Slack Lists from the command line."""
    config = SlackListsConfig()
    setup_logging("DEBUG" if verbose else config.log_level)
    ctx.obj = GlobalOptions(
        token=token,
        as_user=as_user,
        schema=schema,
        refresh_schema=refresh_schema,
        verbose=verbose,
        config=config,
    )
