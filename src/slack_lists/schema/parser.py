"""Schema normalizer for Slack Lists.

Turns the payloads that describe a list's columns into a ListSchema:

  slackLists.info response -> {"list_metadata": {"schema": [...]}}
  exported schema file     -> {"schema": [...]} or {"columns": [...]}
  cached schema            -> {"list_id": ..., "columns": [...]}

Column entries are normalized one at a time. A column needs an id; everything
else has a default.
"""

import json
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError

from slack_lists.file_utils import read_text
from slack_lists.schema.errors import InvalidColumnError, SchemaFormatError
from slack_lists.schema.models import Column, ColumnOptions, ColumnType, ListSchema


ID_KEYS = ("id", "column_id", "columnId")


# --- Payload ---


def normalize_schema(data: Any) -> ListSchema:
    """Normalize a parsed payload into a ListSchema.

    The column list is looked up in priority order: the ``list_metadata``
    wrapper returned by the metadata call, then a top-level ``schema`` array,
    then a top-level ``columns`` array.

    Raises:
        SchemaFormatError: If none of those shapes is present.
        InvalidColumnError: If a column entry has no id.
    """
    if not isinstance(data, dict):
        raise SchemaFormatError("Schema payload must be a JSON object")

    # --- Metadata wrapper ---
    # Trigger: response from slackLists.info
    # Outcome: list id comes from the metadata, falling back to the request echo
    metadata = data.get("list_metadata")
    if isinstance(metadata, dict):
        raw_columns = metadata.get("schema")
        if raw_columns is None:
            raw_columns = metadata.get("columns")
        if isinstance(raw_columns, list):
            list_id = _first_present(metadata.get("id"), data.get("list_id"), data.get("listId"))
            return _build_schema(list_id, raw_columns)

    list_id = _first_present(data.get("list_id"), data.get("listId"))

    if isinstance(data.get("schema"), list):
        return _build_schema(list_id, data["schema"])

    if isinstance(data.get("columns"), list):
        return _build_schema(list_id, data["columns"])

    raise SchemaFormatError("Schema payload missing expected schema/columns list")


def normalize_column(raw: Any) -> Column:
    """Normalize one raw column entry.

    Raises:
        InvalidColumnError: If the entry is not an object or carries no id.
    """
    if not isinstance(raw, dict):
        raise InvalidColumnError(f"Invalid column entry in schema: {raw!r}")

    raw_id = _first_present(*(raw.get(key) for key in ID_KEYS))
    column_id = "" if raw_id is None else str(raw_id)
    if not column_id:
        raise InvalidColumnError("Schema column missing id/column_id")

    name = raw.get("name") if isinstance(raw.get("name"), str) else column_id
    key = raw.get("key") if isinstance(raw.get("key"), str) else None

    return Column(
        id=column_id,
        key=key,
        name=name,
        type=ColumnType.parse(raw.get("type")),
        is_primary_column=bool(raw.get("is_primary_column")),
        options=_normalize_options(column_id, raw.get("options")),
    )


async def load_schema_file(path: Path | str) -> ListSchema:
    """Read and normalize a schema JSON file.

    Raises:
        SchemaFormatError: If the file is not valid JSON or has no column list.
    """
    file_path = Path(path).expanduser()
    content = await read_text(file_path)

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise SchemaFormatError(f"Schema file {file_path} is not valid JSON: {e}") from e

    schema = normalize_schema(data)
    logger.debug(f"Loaded schema file {file_path} with {len(schema.columns)} columns")
    return schema


# --- Helpers ---


def _build_schema(list_id: Any, raw_columns: list) -> ListSchema:
    return ListSchema(
        list_id=list_id if isinstance(list_id, str) else "",
        columns=[normalize_column(raw) for raw in raw_columns],
    )


def _normalize_options(column_id: str, raw_options: Any) -> ColumnOptions | None:
    """Validate options, keeping malformed entries untyped instead of failing.

    A malformed ``choices`` list is dropped; any other malformed entry is kept
    as the service sent it.
    """
    if not isinstance(raw_options, dict):
        return None
    try:
        return ColumnOptions.model_validate(raw_options)
    except ValidationError as e:
        malformed = {str(error["loc"][0]) for error in e.errors() if error["loc"]}
        logger.warning(
            f"Column {column_id} has malformed options {sorted(malformed)}, keeping them untyped"
        )

    options = ColumnOptions.model_validate(
        {k: v for k, v in raw_options.items() if k not in malformed}
    )
    values = dict(options)
    values.update({k: raw_options[k] for k in malformed if k != "choices" and k in raw_options})
    return ColumnOptions.model_construct(**values)


def _first_present(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None
