"""Schema resolver for Slack Lists.

Finds a list's schema by trying each discovery strategy in turn:
  1. Explicit file   -> --schema flag or SLACK_LIST_SCHEMA_PATH, never cached
  2. Cache           -> last known schema, skipped with --refresh-schema
  3. Remote metadata -> slackLists.info, overwrites the cache
  4. Inference       -> sample items when metadata is unsupported, merged into the cache
  5. No schema       -> returns None

The remote service is passed in as a dependency, so the resolver can be driven
by the real client or by a test double.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from loguru import logger

from slack_lists.file_utils import FileError
from slack_lists.schema.cache import SchemaCache, merge_schemas
from slack_lists.schema.errors import SchemaUnavailableError, UnsupportedError
from slack_lists.schema.index import SchemaIndex, build_index
from slack_lists.schema.inference import DEFAULT_SAMPLE_LIMIT, RowPage, infer_schema, sample_rows
from slack_lists.schema.models import ListSchema
from slack_lists.schema.parser import load_schema_file, normalize_schema


class ListsService(Protocol):
    """Remote capabilities the resolver needs."""

    async def fetch_metadata(self, list_id: str) -> dict[str, Any]:
        """Return the raw list metadata payload, or raise UnsupportedError."""
        ...

    async def list_rows(self, list_id: str, cursor: str | None = None) -> RowPage:
        """Return one page of items, or raise UnsupportedError."""
        ...


@dataclass
class SchemaResolver:
    """Resolve a SchemaIndex for a list.

    Args:
        service: Remote list service (metadata and row listing)
        cache: Durable schema cache
        sample_limit: Maximum number of rows read for inference
    """

    service: ListsService
    cache: SchemaCache
    sample_limit: int = DEFAULT_SAMPLE_LIMIT

    async def resolve(
        self,
        list_id: str,
        schema_path: Path | str | None = None,
        force_refresh: bool = False,
    ) -> SchemaIndex | None:
        """Run the discovery chain, stopping at the first strategy that answers.

        Returns:
            A SchemaIndex, or None if no strategy produced any columns.

        Raises:
            SchemaFormatError, InvalidColumnError: If a schema file or metadata
                payload cannot be normalized.
            Any error from the remote service other than UnsupportedError.
        """
        # --- 1. Explicit schema file ---
        if schema_path:
            schema = await load_schema_file(schema_path)
            logger.debug(f"Schema for {list_id} loaded from file {schema_path}")
            return build_index(schema)

        # --- 2. Cache ---
        if not force_refresh:
            cached = await self.cache.load(list_id)
            if cached is not None:
                logger.debug(f"Schema for {list_id} loaded from cache")
                return build_index(cached)

        # --- 3. Remote metadata ---
        try:
            payload = await self.service.fetch_metadata(list_id)
        except UnsupportedError:
            logger.info(f"List metadata unavailable for {list_id}, inferring from items")
        else:
            schema = normalize_schema(payload)
            await self._persist(list_id, schema)
            logger.debug(f"Schema for {list_id} loaded from list metadata")
            return build_index(schema)

        # --- 4. Inference ---
        # Trigger: metadata call unsupported
        # Outcome: partial schema from item fields, merged with what was known
        try:
            rows = await sample_rows(self.service.list_rows, list_id, self.sample_limit)
        except UnsupportedError:
            logger.info(f"Item listing unavailable for {list_id}")
            return None

        inferred = infer_schema(list_id, rows)
        if not inferred.columns:
            logger.debug(f"No columns could be inferred for {list_id}")
            return None

        merged = await self._merge(list_id, inferred)
        logger.debug(f"Schema for {list_id} inferred from {len(rows)} items")
        return build_index(merged)

    async def require(
        self,
        list_id: str,
        schema_path: Path | str | None = None,
        force_refresh: bool = False,
    ) -> SchemaIndex:
        """Resolve a schema, raising SchemaUnavailableError if there is none."""
        index = await self.resolve(list_id, schema_path, force_refresh)
        if index is None:
            raise SchemaUnavailableError(list_id)
        return index

    # --- Cache writes ---
    # Persisting is a side effect of resolution; a failed write is logged and
    # the freshly discovered schema is still returned.

    async def _persist(self, list_id: str, schema: ListSchema) -> None:
        try:
            await self.cache.save(list_id, schema)
        except (OSError, FileError) as e:
            logger.warning(f"Could not cache schema for {list_id}: {e}")

    async def _merge(self, list_id: str, inferred: ListSchema) -> ListSchema:
        try:
            return await self.cache.merge(list_id, inferred)
        except (OSError, FileError) as e:
            logger.warning(f"Could not merge inferred schema for {list_id} into cache: {e}")
            return merge_schemas(None, inferred)
