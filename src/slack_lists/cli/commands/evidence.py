"""Evidence CLI commands for slack-lists-cli.

`slack-lists evidence link <list-id> <item-id> <url>` attaches a URL to an
item's link column. The column is the one named by --column, or the first
link column in the schema.
"""

from typing import Annotated, Any, Optional

import typer

from slack_lists.cli.app import app
from slack_lists.cli.commands.command_utils import get_options, resolve_schema_index, run_command
from slack_lists.client import SlackListsClient
from slack_lists.fields import build_cell
from slack_lists.identity import IdentityResolver
from slack_lists.schema import ColumnType, resolve_typed_column

evidence_app = typer.Typer(help="Evidence helpers")
app.add_typer(evidence_app, name="evidence")


@evidence_app.command()
def link(
    ctx: typer.Context,
    list_id: Annotated[str, typer.Argument(help="List ID")],
    item_id: Annotated[str, typer.Argument(help="Item ID")],
    url: Annotated[str, typer.Argument(help="URL")],
    description: Optional[str] = typer.Option(None, "--description", help="Link description"),
    column: Optional[str] = typer.Option(
        None, "--column", help="Column ID/key/name to update"
    ),
):
    """Attach a link as evidence."""
    options = get_options(ctx)

    async def action(client: SlackListsClient) -> dict[str, Any]:
        index = await resolve_schema_index(options, client, list_id)
        target = resolve_typed_column(index, column, ColumnType.LINK, [ColumnType.LINK])
        value = f"{url}|{description}" if description else url
        cell = await build_cell(target, value, IdentityResolver(client), row_id=item_id)
        return await client.update_item(list_id, [cell])

    run_command(options, action)
