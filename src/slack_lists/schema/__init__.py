"""Schema discovery for Slack Lists.

Column definitions come from a schema file, the local cache, the list metadata
API, or inference over existing items. Whatever the source, they are
normalized into a ListSchema and indexed for lookup by id, key, or name.
"""

from slack_lists.schema.cache import SchemaCache, merge_schemas
from slack_lists.schema.errors import (
    AmbiguousColumnError,
    ColumnTypeMismatchError,
    InvalidColumnError,
    InvalidNumberError,
    SchemaError,
    SchemaFormatError,
    SchemaUnavailableError,
    UnknownColumnError,
    UnsupportedError,
)
from slack_lists.schema.index import (
    SchemaIndex,
    build_index,
    find_column_by_key_or_name,
    find_column_by_type,
    find_columns_by_type,
    find_primary_text_column,
    require_column,
    resolve_column,
    resolve_typed_column,
)
from slack_lists.schema.inference import RowPage, infer_column_type, infer_schema, sample_rows
from slack_lists.schema.models import Column, ColumnOptions, ColumnType, ListSchema, SelectChoice
from slack_lists.schema.parser import load_schema_file, normalize_column, normalize_schema
from slack_lists.schema.resolver import ListsService, SchemaResolver

__all__ = [
    # Models
    "Column",
    "ColumnOptions",
    "ColumnType",
    "ListSchema",
    "SelectChoice",
    # Errors
    "AmbiguousColumnError",
    "ColumnTypeMismatchError",
    "InvalidColumnError",
    "InvalidNumberError",
    "SchemaError",
    "SchemaFormatError",
    "SchemaUnavailableError",
    "UnknownColumnError",
    "UnsupportedError",
    # Parser
    "load_schema_file",
    "normalize_column",
    "normalize_schema",
    # Index
    "SchemaIndex",
    "build_index",
    "find_column_by_key_or_name",
    "find_column_by_type",
    "find_columns_by_type",
    "find_primary_text_column",
    "require_column",
    "resolve_column",
    "resolve_typed_column",
    # Inference
    "RowPage",
    "infer_column_type",
    "infer_schema",
    "sample_rows",
    # Cache
    "SchemaCache",
    "merge_schemas",
    # Resolver
    "ListsService",
    "SchemaResolver",
]
