"""Typed errors raised by schema discovery, column lookup, and field encoding.

Every error carries a stable ``code`` so the CLI can map it to a
machine-readable identifier without inspecting messages.
"""

from collections.abc import Iterable


class SchemaError(ValueError):
    """Base exception for schema and encoding errors."""

    code = "schema_error"

    def __init__(self, message: str, hint: str | None = None):
        self.hint = hint
        super().__init__(message)


class SchemaFormatError(SchemaError):
    """Raised when a payload has no recognizable column list."""

    code = "schema_format_error"


class InvalidColumnError(SchemaError):
    """Raised when a column entry is missing its id."""

    code = "invalid_column"


class SchemaUnavailableError(SchemaError):
    """Raised when no discovery strategy produced any columns."""

    code = "schema_unavailable"

    def __init__(self, list_id: str, hint: str | None = None):
        self.list_id = list_id
        super().__init__(
            f"Schema unavailable for list {list_id}",
            hint=hint
            or "Provide --schema or ensure the list has items to infer columns from.",
        )


class UnknownColumnError(SchemaError):
    """Raised when a column reference does not resolve in the schema index."""

    code = "unknown_column"

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(
            f"Unknown column: {identifier}",
            hint="Run `slack-lists schema show <list-id>` to see column ids, keys and names.",
        )


class ColumnTypeMismatchError(SchemaError):
    """Raised when a resolved column is not one of the accepted types."""

    code = "column_type_mismatch"

    def __init__(self, column_name: str, actual: str, allowed: Iterable[str]):
        self.column_name = column_name
        self.actual = actual
        self.allowed = list(allowed)
        super().__init__(
            f"Column {column_name} is of type {actual}, expected {'/'.join(self.allowed)}"
        )


class AmbiguousColumnError(SchemaError):
    """Raised when more than one column could serve as a type-based default."""

    code = "ambiguous_column"

    def __init__(self, label: str, candidates: Iterable[str]):
        self.label = label
        self.candidates = list(candidates)
        super().__init__(
            f"Multiple columns could be used for {label}: {', '.join(self.candidates)}",
            hint=f"Specify --field with the column key for {label}.",
        )


class InvalidNumberError(SchemaError):
    """Raised when number or currency input does not parse."""

    code = "invalid_number"

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Expected a number, got: {value}")


class UnsupportedError(RuntimeError):
    """Raised by a remote capability the service does not offer.

    The resolver treats this as a signal to try the next discovery strategy.
    """

    code = "unsupported"

    def __init__(self, method: str):
        self.method = method
        super().__init__(f"Remote method not supported: {method}")
