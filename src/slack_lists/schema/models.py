"""Column model for Slack Lists.

A list's schema is a flat sequence of column definitions. Each column has a
service-assigned id, an optional human-stable key, a display name, and a type
drawn from a closed vocabulary. Select columns may carry their choices.

The same models are used for schemas read from files, returned by the remote
metadata call, inferred from rows, and persisted in the local cache.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ColumnType(str, Enum):
    """Column kinds understood by the field encoder.

    Anything the service reports that is not listed here becomes UNKNOWN and is
    encoded as free text.
    """

    TEXT = "text"
    RICH_TEXT = "rich_text"
    NUMBER = "number"
    RATING = "rating"
    DATE = "date"
    USER = "user"
    CHANNEL = "channel"
    SELECT = "select"
    CHECKBOX = "checkbox"
    CURRENCY = "currency"
    URL = "url"
    EMOJI = "emoji"
    ATTACHMENT = "attachment"
    LINK = "link"
    MESSAGE = "message"
    REFERENCE = "reference"
    TODO_ASSIGNEE = "todo_assignee"
    TODO_DUE_DATE = "todo_due_date"
    TODO_COMPLETED = "todo_completed"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "ColumnType":
        """Case-fold a raw type string, defaulting to UNKNOWN."""
        if isinstance(value, ColumnType):
            return value
        if not isinstance(value, str):
            return cls.UNKNOWN
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN


class SelectChoice(BaseModel):
    """One configured option of a select column."""

    value: str
    label: str | None = None
    color: str | None = None

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, value: Any) -> Any:
        # Choice values occasionally arrive as numbers
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class ColumnOptions(BaseModel):
    """Type-specific column constraints.

    Only the options the encoder and the schema command look at are typed;
    everything else the service sends is kept as extra data so a cached schema
    round-trips without losing it.
    """

    model_config = ConfigDict(extra="allow")

    choices: list[SelectChoice] | None = None
    max: int | None = None
    format: str | None = None
    precision: int | None = None
    date_format: str | None = None


class Column(BaseModel):
    """A single column definition.

    Only ``id`` is unique. ``key`` and ``name`` may collide across columns.
    """

    id: str
    key: str | None = None
    name: str
    type: ColumnType = ColumnType.UNKNOWN
    is_primary_column: bool = False
    options: ColumnOptions | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _parse_type(cls, value: Any) -> ColumnType:
        return ColumnType.parse(value)

    @property
    def choices(self) -> list[SelectChoice]:
        if self.options is None or not self.options.choices:
            return []
        return self.options.choices


class ListSchema(BaseModel):
    """The column definitions of one list, in display order."""

    list_id: str = ""
    columns: list[Column] = Field(default_factory=list)

    def to_json_dict(self) -> dict:
        """Serialize with stable field names for the cache and for output."""
        # Options kept untyped after a failed validation serialize as received
        return self.model_dump(mode="json", exclude_none=True, warnings=False)
