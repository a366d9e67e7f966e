"""Lookup index over a list schema.

Columns can be referenced by id, key, or display name. The index resolves a
reference in that order, case-insensitively for keys and names. Keys and names
are not unique; when two columns share one, the first column in schema order
wins.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from slack_lists.schema.errors import ColumnTypeMismatchError, UnknownColumnError
from slack_lists.schema.models import Column, ColumnType, ListSchema


PRIMARY_TEXT_CANDIDATES = ("name", "title", "task")


@dataclass(frozen=True)
class SchemaIndex:
    """Read-only view over a ListSchema. Rebuild it rather than mutating it."""

    schema: ListSchema
    by_id: dict[str, Column] = field(default_factory=dict)
    by_key: dict[str, Column] = field(default_factory=dict)
    by_name: dict[str, Column] = field(default_factory=dict)

    @property
    def columns(self) -> list[Column]:
        return self.schema.columns

    @property
    def list_id(self) -> str:
        return self.schema.list_id


def build_index(schema: ListSchema) -> SchemaIndex:
    """Build id/key/name lookup maps over a schema."""
    by_id: dict[str, Column] = {}
    by_key: dict[str, Column] = {}
    by_name: dict[str, Column] = {}

    for column in schema.columns:
        by_id.setdefault(column.id, column)
        if column.key:
            by_key.setdefault(column.key.lower(), column)
        by_name.setdefault(column.name.lower(), column)

    return SchemaIndex(schema=schema, by_id=by_id, by_key=by_key, by_name=by_name)


def resolve_column(index: SchemaIndex, identifier: str) -> Column | None:
    """Resolve a column reference: exact id, then key, then name."""
    if identifier in index.by_id:
        return index.by_id[identifier]

    lowered = identifier.lower()
    if lowered in index.by_key:
        return index.by_key[lowered]

    return index.by_name.get(lowered)


def require_column(index: SchemaIndex, identifier: str) -> Column:
    """Like resolve_column, but raise UnknownColumnError when nothing matches."""
    column = resolve_column(index, identifier)
    if column is None:
        raise UnknownColumnError(identifier)
    return column


def find_column_by_type(index: SchemaIndex, types: Iterable[ColumnType]) -> Column | None:
    """Return the first column, in schema order, whose type is in ``types``.

    Callers that need a unique default should use find_columns_by_type and
    check for more than one candidate.
    """
    wanted = set(types)
    for column in index.columns:
        if column.type in wanted:
            return column
    return None


def find_columns_by_type(index: SchemaIndex, types: Iterable[ColumnType]) -> list[Column]:
    wanted = set(types)
    return [column for column in index.columns if column.type in wanted]


def find_column_by_key_or_name(index: SchemaIndex, candidates: Iterable[str]) -> Column | None:
    """Return the column matched by the first candidate reference that resolves."""
    for candidate in candidates:
        column = resolve_column(index, candidate)
        if column is not None:
            return column
    return None


def find_primary_text_column(index: SchemaIndex) -> Column | None:
    """Pick the column that holds an item's title.

    Order: the column flagged primary, a column named name/title/task, then the
    first text or rich_text column.
    """
    for column in index.columns:
        if column.is_primary_column:
            return column

    column = find_column_by_key_or_name(index, PRIMARY_TEXT_CANDIDATES)
    if column is not None:
        return column

    return find_column_by_type(index, (ColumnType.TEXT, ColumnType.RICH_TEXT))


def resolve_typed_column(
    index: SchemaIndex | None,
    column_arg: str | None,
    fallback_type: ColumnType,
    allowed_types: Iterable[ColumnType],
) -> Column:
    """Resolve a column that must hold one of ``allowed_types``.

    With a schema, an explicit reference must resolve and have an allowed type;
    without one, the first column of an allowed type is used. Without a schema,
    an explicit reference is trusted as a column id of ``fallback_type``.

    Raises:
        UnknownColumnError: If the explicit reference does not resolve, or no
            column of an allowed type exists.
        ColumnTypeMismatchError: If the referenced column has another type.
    """
    allowed = list(allowed_types)

    if index is not None:
        if column_arg:
            column = require_column(index, column_arg)
            if column.type not in allowed:
                raise ColumnTypeMismatchError(
                    column.name, column.type.value, [t.value for t in allowed]
                )
            return column

        column = find_column_by_type(index, allowed)
        if column is None:
            raise UnknownColumnError("/".join(t.value for t in allowed))
        return column

    if not column_arg:
        raise UnknownColumnError(fallback_type.value)

    return Column(id=column_arg, name=column_arg, type=fallback_type)
