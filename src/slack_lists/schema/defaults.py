"""Default column pickers used when a command flag does not name a column.

`--status`, `--priority`, `--assignee` and `--due` map onto whichever column
of the list most plausibly holds that value.
"""

from loguru import logger

from slack_lists.schema.errors import AmbiguousColumnError
from slack_lists.schema.index import (
    SchemaIndex,
    find_column_by_key_or_name,
    find_column_by_type,
    find_columns_by_type,
)
from slack_lists.schema.models import Column, ColumnType


def pick_select_column(index: SchemaIndex, label: str, candidates: list[str]) -> Column | None:
    """Pick a select column by key/name, else the only select column.

    Raises:
        AmbiguousColumnError: If nothing matches by name and several select
            columns exist.
    """
    column = find_column_by_key_or_name(index, candidates)
    if column is not None:
        return column

    selects = find_columns_by_type(index, [ColumnType.SELECT])
    if len(selects) > 1:
        raise AmbiguousColumnError(label, [c.key or c.name for c in selects])
    if selects:
        logger.debug(f"Using only select column {selects[0].id} for {label}")
        return selects[0]
    return None


def resolve_status_column(index: SchemaIndex) -> Column | None:
    completed = find_column_by_type(index, [ColumnType.TODO_COMPLETED])
    if completed is not None:
        return completed
    return pick_select_column(index, "status", ["status", "state"])


def resolve_priority_column(index: SchemaIndex) -> Column | None:
    return pick_select_column(index, "priority", ["priority"])


def resolve_assignee_column(index: SchemaIndex) -> Column | None:
    column = find_column_by_type(index, [ColumnType.TODO_ASSIGNEE, ColumnType.USER])
    if column is not None:
        return column
    return find_column_by_key_or_name(index, ["assignee", "owner"])


def resolve_due_column(index: SchemaIndex) -> Column | None:
    column = find_column_by_type(index, [ColumnType.TODO_DUE_DATE, ColumnType.DATE])
    if column is not None:
        return column
    return find_column_by_key_or_name(index, ["due", "due_date"])
