"""Durable per-list schema cache.

Each list's last known schema is stored as JSON at
``<cache_dir>/schemas/<list_id>.json``. Entries never expire; a refresh is
requested explicitly with ``--refresh-schema``.

There is no locking. Two processes merging the same list concurrently each
read, merge and write; the last write wins and facts learned only by the other
process are lost.
"""

import json
from pathlib import Path

from loguru import logger

from slack_lists.file_utils import read_text, write_file_atomic
from slack_lists.schema.errors import SchemaFormatError
from slack_lists.schema.models import ColumnType, ListSchema
from slack_lists.schema.parser import normalize_schema


def merge_schemas(base: ListSchema | None, incoming: ListSchema) -> ListSchema:
    """Merge newly learned columns into a known schema without losing facts.

    New column ids are appended. For a column already known, only empty
    attributes are filled in: ``key`` when missing, ``name`` when it is just
    the id, ``type`` when unknown, and ``options`` when absent.
    """
    if base is None:
        return incoming.model_copy(deep=True)

    merged = [column.model_copy(deep=True) for column in base.columns]
    by_id = {column.id: column for column in merged}

    for column in incoming.columns:
        existing = by_id.get(column.id)
        if existing is None:
            copy = column.model_copy(deep=True)
            merged.append(copy)
            by_id[copy.id] = copy
            continue

        if not existing.key and column.key:
            existing.key = column.key

        if (not existing.name or existing.name == existing.id) and column.name:
            existing.name = column.name

        if existing.type == ColumnType.UNKNOWN and column.type != ColumnType.UNKNOWN:
            existing.type = column.type

        if existing.options is None and column.options is not None:
            existing.options = column.options.model_copy(deep=True)

    return ListSchema(list_id=incoming.list_id or base.list_id, columns=merged)


class SchemaCache:
    """File-backed schema store rooted at ``base_dir``."""

    def __init__(self, base_dir: Path):
        self.base_dir = Path(base_dir)

    def path_for(self, list_id: str) -> Path:
        return self.base_dir / "schemas" / f"{list_id}.json"

    async def load(self, list_id: str) -> ListSchema | None:
        """Load the cached schema, or None if the list has no entry.

        Raises:
            SchemaFormatError: If the cache file is corrupt.
            OSError: For I/O failures other than a missing file.
        """
        path = self.path_for(list_id)
        try:
            content = await read_text(path)
        except FileNotFoundError:
            return None

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise SchemaFormatError(
                f"Cached schema {path} is not valid JSON: {e}",
                hint="Run with --refresh-schema or delete the cache file.",
            ) from e

        schema = normalize_schema(data)
        logger.debug(f"Loaded cached schema for {list_id} ({len(schema.columns)} columns)")
        return schema

    async def save(self, list_id: str, schema: ListSchema) -> None:
        """Overwrite the cache entry for a list."""
        content = json.dumps(schema.to_json_dict(), indent=2)
        await write_file_atomic(self.path_for(list_id), content + "\n")

    async def merge(self, list_id: str, incoming: ListSchema) -> ListSchema:
        """Merge ``incoming`` into the cached entry, persist it, and return it."""
        existing = await self.load(list_id)
        merged = merge_schemas(existing, incoming)
        await self.save(list_id, merged)
        return merged
