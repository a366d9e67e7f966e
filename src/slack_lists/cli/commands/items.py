"""Item CLI commands for slack-lists-cli.

Flags such as --status or --assignee are mapped onto the list's columns
through the resolved schema, and values are encoded for the column's type.
`--field key=value` targets any column by id, key, or name; `--field '{...}'`
passes a raw cell through.
"""

import json
from collections.abc import Callable
from typing import Annotated, Any, Optional

import typer

from slack_lists.cli.app import GlobalOptions, app
from slack_lists.cli.commands.command_utils import get_options, resolve_schema_index, run_command
from slack_lists.client import SlackListsClient
from slack_lists.fields import (
    InvalidFieldError,
    JsonField,
    build_cell,
    parse_boolean,
    parse_field_argument,
    resolve_select_values,
)
from slack_lists.identity import IdentityResolver
from slack_lists.schema import (
    Column,
    ColumnType,
    SchemaIndex,
    SchemaUnavailableError,
    UnknownColumnError,
    find_primary_text_column,
    require_column,
)
from slack_lists.schema.defaults import (
    resolve_assignee_column,
    resolve_due_column,
    resolve_priority_column,
    resolve_status_column,
)

items_app = typer.Typer(help="Item operations")
app.add_typer(items_app, name="items")


FLAG_COLUMNS: dict[str, Callable[[SchemaIndex], Column | None]] = {
    "name": find_primary_text_column,
    "assignee": resolve_assignee_column,
    "priority": resolve_priority_column,
    "status": resolve_status_column,
    "due": resolve_due_column,
}


# --- Commands ---


@items_app.command("list")
def list_items(
    ctx: typer.Context,
    list_id: Annotated[str, typer.Argument(help="List ID")],
    status: Optional[str] = typer.Option(None, "--status", help="Filter by status"),
    assignee: Optional[str] = typer.Option(None, "--assignee", help="Filter by assignee"),
    archived: bool = typer.Option(False, "--archived", help="Include archived items"),
    limit: Optional[int] = typer.Option(None, "--limit", min=1, help="Maximum items to return"),
):
    """List items in a list, optionally filtered by status or assignee."""
    options = get_options(ctx)

    async def action(client: SlackListsClient) -> dict[str, Any]:
        index = None
        if status or assignee:
            index = await _require_index(options, client, list_id, "--status/--assignee")

        items = await fetch_all_items(client, list_id, archived, limit)
        filtered = items

        if status and index is not None:
            column = _flag_column(index, "status")
            expected = normalize_status_value(status, column)
            filtered = [i for i in filtered if matches_status(i, column, expected)]

        if assignee and index is not None:
            column = _flag_column(index, "assignee")
            user_id = await IdentityResolver(client).resolve_user(assignee)
            filtered = [i for i in filtered if matches_assignee(i, column.id, user_id)]

        return {
            "ok": True,
            "list_id": list_id,
            "total_count": len(items),
            "filtered_count": len(filtered),
            "items": filtered,
        }

    run_command(options, action)


@items_app.command()
def get(
    ctx: typer.Context,
    list_id: Annotated[str, typer.Argument(help="List ID")],
    item_id: Annotated[str, typer.Argument(help="Item ID")],
):
    """Get item details."""
    options = get_options(ctx)

    async def action(client: SlackListsClient) -> dict[str, Any]:
        return await client.get_item(list_id, item_id)

    run_command(options, action)


@items_app.command()
def create(
    ctx: typer.Context,
    list_id: Annotated[str, typer.Argument(help="List ID")],
    name: Optional[str] = typer.Option(None, "--name", help="Item name"),
    assignee: Optional[str] = typer.Option(None, "--assignee", help="Assignee"),
    priority: Optional[str] = typer.Option(None, "--priority", help="Priority"),
    status: Optional[str] = typer.Option(None, "--status", help="Status"),
    due: Optional[str] = typer.Option(None, "--due", help="Due date (YYYY-MM-DD)"),
    field: Optional[list[str]] = typer.Option(None, "--field", help="Custom field override"),
):
    """Create a new item."""
    options = get_options(ctx)
    flags = {"name": name, "assignee": assignee, "priority": priority, "status": status, "due": due}

    async def action(client: SlackListsClient) -> dict[str, Any]:
        index = await resolve_schema_index(options, client, list_id)
        fields = await build_cells(client, list_id, index, flags, field or [])
        if not fields:
            raise InvalidFieldError("No fields provided. Use --name or --field to set values.")
        return await client.create_item(list_id, fields)

    run_command(options, action)


@items_app.command()
def update(
    ctx: typer.Context,
    list_id: Annotated[str, typer.Argument(help="List ID")],
    item_id: Annotated[str, typer.Argument(help="Item ID")],
    name: Optional[str] = typer.Option(None, "--name", help="Item name"),
    assignee: Optional[str] = typer.Option(None, "--assignee", help="Assignee"),
    priority: Optional[str] = typer.Option(None, "--priority", help="Priority"),
    status: Optional[str] = typer.Option(None, "--status", help="Status"),
    due: Optional[str] = typer.Option(None, "--due", help="Due date (YYYY-MM-DD)"),
    field: Optional[list[str]] = typer.Option(None, "--field", help="Custom field override"),
):
    """Update fields of an existing item."""
    options = get_options(ctx)
    flags = {"name": name, "assignee": assignee, "priority": priority, "status": status, "due": due}

    async def action(client: SlackListsClient) -> dict[str, Any]:
        index = await resolve_schema_index(options, client, list_id)
        cells = await build_cells(client, list_id, index, flags, field or [], row_id=item_id)
        if not cells:
            raise InvalidFieldError("No fields provided. Use --field or other flags.")
        return await client.update_item(list_id, cells)

    run_command(options, action)


@items_app.command()
def delete(
    ctx: typer.Context,
    list_id: Annotated[str, typer.Argument(help="List ID")],
    item_id: Annotated[str, typer.Argument(help="Item ID")],
):
    """Delete an item."""
    options = get_options(ctx)

    async def action(client: SlackListsClient) -> dict[str, Any]:
        return await client.delete_item(list_id, item_id)

    run_command(options, action)


# --- Cell building ---


async def build_cells(
    client: SlackListsClient,
    list_id: str,
    index: SchemaIndex | None,
    flags: dict[str, str | None],
    field_args: list[str],
    row_id: str | None = None,
) -> list[dict[str, Any]]:
    """Encode flag values and --field arguments into cells."""
    identity = IdentityResolver(client)
    cells: list[dict[str, Any]] = []

    for flag, value in flags.items():
        if not value:
            continue
        if index is None:
            raise _schema_required(list_id, f"--{flag}")
        column = _flag_column(index, flag)
        cells.append(await build_cell(column, value, identity, row_id))

    for arg in field_args:
        parsed = parse_field_argument(arg)
        if isinstance(parsed, JsonField):
            cell = parsed.value if row_id is None else {"row_id": row_id, **parsed.value}
            cells.append(cell)
            continue

        if index is None:
            raise _schema_required(list_id, "--field key=value")
        column = require_column(index, parsed.key)
        cells.append(await build_cell(column, parsed.value, identity, row_id))

    return cells


def _flag_column(index: SchemaIndex, flag: str) -> Column:
    column = FLAG_COLUMNS[flag](index)
    if column is None:
        raise UnknownColumnError(flag)
    return column


async def _require_index(
    options: GlobalOptions, client: SlackListsClient, list_id: str, usage: str
) -> SchemaIndex:
    index = await resolve_schema_index(options, client, list_id)
    if index is None:
        raise _schema_required(list_id, usage)
    return index


def _schema_required(list_id: str, usage: str) -> SchemaUnavailableError:
    return SchemaUnavailableError(list_id, hint=f"Schema required for {usage}. Provide --schema.")


# --- Listing and filtering ---


async def fetch_all_items(
    client: SlackListsClient,
    list_id: str,
    archived: bool = False,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    items: list[dict[str, Any]] = []
    cursor: str | None = None

    while True:
        page = await client.list_rows(list_id, cursor, archived=archived)
        items.extend(page.rows)
        cursor = page.next_cursor
        if not cursor or not page.rows or (limit and len(items) >= limit):
            break

    return items[:limit] if limit else items


def normalize_status_value(value: str, column: Column) -> list[str] | bool:
    if column.type == ColumnType.TODO_COMPLETED:
        return parse_boolean(value)
    if column.type == ColumnType.SELECT:
        return resolve_select_values(column, value)
    return [value]


def find_field(item: dict[str, Any], column_id: str) -> dict[str, Any] | None:
    for item_field in item.get("fields") or []:
        if isinstance(item_field, dict) and item_field.get("column_id") == column_id:
            return item_field
    return None


def matches_status(item: dict[str, Any], column: Column, expected: list[str] | bool) -> bool:
    item_field = find_field(item, column.id)
    if item_field is None:
        return False

    if column.type == ColumnType.TODO_COMPLETED:
        checkbox = item_field.get("checkbox")
        if isinstance(checkbox, bool):
            return checkbox == expected
        raw = item_field.get("value")
        if isinstance(raw, str):
            try:
                parsed = json.loads(raw)
            except json.JSONDecodeError:
                return False
            if isinstance(parsed, dict) and isinstance(parsed.get("checkbox"), bool):
                return parsed["checkbox"] == expected
        return False

    expected_values = expected if isinstance(expected, list) else [str(expected)]
    select = item_field.get("select")
    if isinstance(select, list):
        return any(value in select for value in expected_values)

    raw = item_field.get("value")
    if isinstance(raw, str):
        return any(value in raw for value in expected_values)
    return False


def matches_assignee(item: dict[str, Any], column_id: str, user_id: str) -> bool:
    item_field = find_field(item, column_id)
    if item_field is None:
        return False

    users = item_field.get("user")
    if isinstance(users, list):
        return user_id in users

    raw = item_field.get("value")
    return isinstance(raw, str) and user_id in raw
