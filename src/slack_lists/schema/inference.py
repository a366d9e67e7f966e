"""Schema inference from list rows.

When list metadata is unavailable, the columns of a list can still be partly
recovered from the fields of existing items:

  item.fields[] -> {"column_id": "Col123", "key": "status", "select": [...]}

Limits of this approach:
  - columns with no populated rows never show up
  - select choices are not visible in row data, so options are never set
  - a column's type is taken from the first field seen for it
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from slack_lists.schema.models import Column, ColumnType, ListSchema


# Field-shape keys checked in order; the first one present decides the type.
TYPE_HINTS: tuple[tuple[str, ColumnType], ...] = (
    ("rich_text", ColumnType.RICH_TEXT),
    ("text", ColumnType.TEXT),
    ("user", ColumnType.USER),
    ("select", ColumnType.SELECT),
    ("date", ColumnType.DATE),
    ("rating", ColumnType.RATING),
    ("checkbox", ColumnType.CHECKBOX),
    ("link", ColumnType.LINK),
    ("attachment", ColumnType.ATTACHMENT),
    ("message", ColumnType.MESSAGE),
    ("reference", ColumnType.REFERENCE),
    ("channel", ColumnType.CHANNEL),
    ("emoji", ColumnType.EMOJI),
)

DEFAULT_SAMPLE_LIMIT = 100


@dataclass
class RowPage:
    """One page of items from the row-listing call."""

    rows: list[dict[str, Any]] = field(default_factory=list)
    next_cursor: str | None = None


type ListRowsFn = Callable[[str, str | None], Awaitable[RowPage]]


# --- Inference ---


def infer_schema(list_id: str, rows: list[Any]) -> ListSchema:
    """Derive a partial schema from row field data.

    A column is recorded the first time its id appears and is not revisited.
    Rows without a ``fields`` list, and fields without a column id, are skipped.
    """
    columns: list[Column] = []
    seen: set[str] = set()

    for row in rows:
        if not isinstance(row, dict):
            continue
        fields = row.get("fields")
        if not isinstance(fields, list):
            continue

        for raw_field in fields:
            if not isinstance(raw_field, dict):
                continue
            column_id = raw_field.get("column_id") or raw_field.get("columnId")
            if not column_id:
                continue
            column_id = str(column_id)
            if column_id in seen:
                continue

            seen.add(column_id)
            key = raw_field.get("key") if isinstance(raw_field.get("key"), str) else None
            columns.append(
                Column(
                    id=column_id,
                    key=key,
                    name=key or column_id,
                    type=infer_column_type(raw_field),
                )
            )

    return ListSchema(list_id=list_id, columns=columns)


def infer_column_type(raw_field: dict[str, Any]) -> ColumnType:
    for hint, column_type in TYPE_HINTS:
        if hint in raw_field:
            return column_type
    return ColumnType.UNKNOWN


# --- Row sampling ---


async def sample_rows(
    list_rows: ListRowsFn,
    list_id: str,
    limit: int = DEFAULT_SAMPLE_LIMIT,
) -> list[dict[str, Any]]:
    """Collect up to ``limit`` rows, one page at a time."""
    rows: list[dict[str, Any]] = []
    cursor: str | None = None

    while True:
        page = await list_rows(list_id, cursor)
        rows.extend(page.rows)
        cursor = page.next_cursor
        if not cursor or not page.rows or len(rows) >= limit:
            break

    logger.debug(f"Sampled {min(len(rows), limit)} rows from list {list_id}")
    return rows[:limit]
