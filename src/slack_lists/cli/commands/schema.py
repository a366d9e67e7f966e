"""Schema CLI commands for slack-lists-cli.

`slack-lists schema show <list-id>` prints a compact column listing that
agents can use to build item updates; `--for-update` adds per-column flag and
value hints. `slack-lists schema path <list-id>` prints the cache location.
"""

from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table

from slack_lists.cli.app import app
from slack_lists.cli.commands.command_utils import (
    get_options,
    resolve_schema_index,
    run_command,
    schema_cache,
)
from slack_lists.cli.output import output_json
from slack_lists.client import SlackListsClient
from slack_lists.schema import Column, ColumnType

schema_app = typer.Typer(help="Schema discovery commands")
app.add_typer(schema_app, name="schema")

console = Console()


MAX_EXAMPLES = 4


@schema_app.command()
def show(
    ctx: typer.Context,
    list_id: Annotated[str, typer.Argument(help="List ID")],
    for_update: bool = typer.Option(
        False, "--for-update", help="Include update hints for agents"
    ),
    table: bool = typer.Option(False, "--table", help="Render columns as a table"),
):
    """Output the compact schema of a list.

    The schema comes from --schema, the local cache, list metadata, or is
    inferred from existing items, in that order.
    """
    options = get_options(ctx)

    async def action(client: SlackListsClient) -> dict[str, Any]:
        index = await resolve_schema_index(options, client, list_id, required=True)
        columns = [compact_column(column) for column in index.columns]
        response: dict[str, Any] = {"ok": True, "list_id": list_id, "columns": columns}
        if for_update:
            response["update_hints"] = build_update_hints(list_id, index.columns)
        return response

    run_command(options, action, render=print_schema_table if table else output_json)


@schema_app.command()
def path(
    ctx: typer.Context,
    list_id: Annotated[str, typer.Argument(help="List ID")],
):
    """Print where the cached schema for a list is stored."""
    options = get_options(ctx)
    cache_path = schema_cache(options).path_for(list_id)
    output_json({"ok": True, "list_id": list_id, "path": str(cache_path), "exists": cache_path.exists()})


# --- Formatting ---


def compact_column(column: Column) -> dict[str, Any]:
    compact: dict[str, Any] = {"id": column.id, "name": column.name, "type": column.type.value}
    if column.key:
        compact["key"] = column.key
    if column.choices:
        compact["options"] = {
            "choices": [
                {k: v for k, v in {"value": c.value, "label": c.label}.items() if v is not None}
                for c in column.choices
            ]
        }
    return compact


def build_update_hints(list_id: str, columns: list[Column]) -> dict[str, Any]:
    fields = []
    for column in columns:
        hint: dict[str, Any] = {
            "id": column.id,
            "key": column.key,
            "name": column.name,
            "type": column.type.value,
            "set_with": infer_flag(column),
            "value_hint": infer_value_hint(column),
        }
        if column.choices:
            hint["choices"] = [c.value for c in column.choices]
        fields.append(hint)

    examples = [
        f"slack-lists items update {list_id} <item-id> {field['set_with']} {example_value(field)}"
        for field in fields[:MAX_EXAMPLES]
    ]
    return {"fields": fields, "examples": examples}


def infer_flag(column: Column) -> str:
    """Which items flag sets this column."""
    key = (column.key or "").lower()
    name = column.name.lower()

    if key == "name" or name in ("task", "title"):
        return "--name"
    if key == "status":
        return "--status"
    if key == "priority":
        return "--priority"
    if key in ("assignee", "owner"):
        return "--assignee"
    if any(token in text for token in ("date", "due") for text in (key, name)):
        return "--due"
    return "--field"


def infer_value_hint(column: Column) -> str | list[str] | None:
    match column.type:
        case ColumnType.SELECT if column.choices:
            return [c.value for c in column.choices]
        case ColumnType.RATING:
            maximum = column.options.max if column.options else None
            return f"1..{maximum}" if maximum else "1..n"
        case ColumnType.USER | ColumnType.TODO_ASSIGNEE:
            return "@user | email | U123"
        case ColumnType.DATE | ColumnType.TODO_DUE_DATE:
            return "YYYY-MM-DD"
        case ColumnType.MESSAGE:
            return "Slack message permalink URL"
        case ColumnType.NUMBER | ColumnType.CURRENCY:
            return "number"
        case ColumnType.CHECKBOX | ColumnType.TODO_COMPLETED:
            return "true | false"
        case _:
            return None


def example_value(field: dict[str, Any]) -> str:
    flag = field["set_with"]
    if flag == "--status" and field.get("choices"):
        return field["choices"][0]
    if flag == "--priority":
        return "1"
    if flag == "--assignee":
        return "@user"
    if flag == "--due":
        return "2026-01-15"
    if flag == "--name":
        return '"Task name"'
    if flag == "--field":
        return f'"{field["key"] or field["id"]}=value"'
    return '"value"'


def print_schema_table(response: dict[str, Any]) -> None:
    table = Table(title=f"Schema: {response['list_id']}")
    table.add_column("ID", style="cyan")
    table.add_column("Key")
    table.add_column("Name")
    table.add_column("Type", style="green")
    table.add_column("Choices")

    for column in response["columns"]:
        choices = (column.get("options") or {}).get("choices") or []
        table.add_row(
            column["id"],
            column.get("key") or "",
            column["name"],
            column["type"],
            ", ".join(choice["value"] for choice in choices),
        )

    console.print(table)
