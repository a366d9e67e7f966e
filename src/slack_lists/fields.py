"""Typed field encoding for Slack Lists.

Converts a user-supplied string into the cell payload Slack expects for a
column's type:

  text/rich_text  "Ship it"          -> {"rich_text": [<rich_text block>]}
  user            "@ana, bo@x.io"    -> {"user": ["U1", "U2"]}
  select          "High"             -> {"select": ["high"]}
  checkbox        "done"             -> {"checkbox": True}
  number          "3.5"              -> {"number": 3.5}
  link            "https://x|Docs"   -> {"link": [{"original_url": ..., ...}]}

Only user and channel columns perform I/O, through the identity lookup passed
in by the caller.
"""

import json
import math
from dataclasses import dataclass
from typing import Any, Protocol, assert_never

from slack_lists.schema.errors import InvalidNumberError, SchemaError
from slack_lists.schema.models import Column, ColumnType, SelectChoice
from slack_lists.utils import split_list


TRUE_VALUES = frozenset({"true", "yes", "1", "completed", "done"})


class IdentityLookup(Protocol):
    """Maps human references (mentions, emails, names) to Slack ids."""

    async def resolve_user(self, reference: str) -> str: ...

    async def resolve_channel(self, reference: str) -> str: ...


class InvalidFieldError(SchemaError):
    """Raised when a --field argument cannot be parsed."""

    code = "invalid_field"


# --- Encoding ---


async def encode_field(
    column: Column,
    raw_value: str,
    identity: IdentityLookup,
) -> dict[str, Any]:
    """Build the typed payload fragment for one column.

    Raises:
        InvalidNumberError: If a number or currency value does not parse.
        Errors raised by ``identity`` for user and channel columns.
    """
    match column.type:
        case (
            ColumnType.TEXT
            | ColumnType.RICH_TEXT
            | ColumnType.URL
            | ColumnType.EMOJI
            | ColumnType.RATING
            | ColumnType.UNKNOWN
        ):
            return {"rich_text": build_rich_text(raw_value)}
        case ColumnType.USER | ColumnType.TODO_ASSIGNEE:
            return {"user": [await identity.resolve_user(v) for v in split_list(raw_value)]}
        case ColumnType.CHANNEL:
            return {"channel": [await identity.resolve_channel(v) for v in split_list(raw_value)]}
        case ColumnType.SELECT:
            return {"select": resolve_select_values(column, raw_value)}
        case ColumnType.DATE | ColumnType.TODO_DUE_DATE:
            return {"date": split_list(raw_value)}
        case ColumnType.CHECKBOX | ColumnType.TODO_COMPLETED:
            return {"checkbox": parse_boolean(raw_value)}
        case ColumnType.NUMBER | ColumnType.CURRENCY:
            return {"number": parse_number(raw_value)}
        case ColumnType.LINK:
            return {"link": [build_link_value(raw_value)]}
        case ColumnType.ATTACHMENT:
            return {"attachment": split_list(raw_value)}
        case ColumnType.MESSAGE:
            return {"message": split_list(raw_value)}
        case ColumnType.REFERENCE:
            return {"reference": [{"file": {"file_id": v}} for v in split_list(raw_value)]}
        case _:
            assert_never(column.type)


async def build_cell(
    column: Column,
    raw_value: str,
    identity: IdentityLookup,
    row_id: str | None = None,
) -> dict[str, Any]:
    """Encode a value and address it to a column (and row, for updates)."""
    cell: dict[str, Any] = {"column_id": column.id}
    if row_id is not None:
        cell = {"row_id": row_id, **cell}
    cell.update(await encode_field(column, raw_value, identity))
    return cell


def build_rich_text(text: str) -> list[dict[str, Any]]:
    return [
        {
            "type": "rich_text",
            "elements": [
                {
                    "type": "rich_text_section",
                    "elements": [{"type": "text", "text": text}],
                }
            ],
        }
    ]


def parse_boolean(value: str) -> bool:
    """Anything outside the true vocabulary is False."""
    return value.strip().lower() in TRUE_VALUES


def parse_number(value: str) -> float:
    try:
        number = float(value.strip())
    except ValueError as e:
        raise InvalidNumberError(value) from e
    if not math.isfinite(number):
        raise InvalidNumberError(value)
    return number


def resolve_select_values(column: Column, raw_value: str) -> list[str]:
    """Map comma-separated input onto the column's choice values.

    Each token matches a choice by value or label, ignoring case. A token that
    matches nothing is passed through as typed, since cached or inferred
    choice lists may be incomplete.
    """
    values = split_list(raw_value)
    choices = column.choices
    if not choices:
        return values
    return [_resolve_select_value(choices, value) for value in values]


def _resolve_select_value(choices: list[SelectChoice], token: str) -> str:
    lowered = token.lower()
    for choice in choices:
        if choice.value.lower() == lowered:
            return choice.value
        if choice.label is not None and choice.label.lower() == lowered:
            return choice.value
    return token


def build_link_value(raw_value: str) -> dict[str, Any]:
    """Parse ``url|label``; without a label the URL itself is displayed."""
    parts = raw_value.split("|")
    value: dict[str, Any] = {"original_url": parts[0].strip()}
    label = parts[1].strip() if len(parts) > 1 else ""
    if label:
        value["display_name"] = label
        value["display_as_url"] = False
    else:
        value["display_as_url"] = True
    return value


# --- Field arguments ---


@dataclass(frozen=True)
class KeyValueField:
    """A ``column=value`` argument, encoded through the schema."""

    key: str
    value: str


@dataclass(frozen=True)
class JsonField:
    """A raw JSON cell passed through untouched, apart from the column id."""

    value: dict[str, Any]


def parse_field_argument(text: str) -> KeyValueField | JsonField:
    """Parse a --field argument.

    Raises:
        InvalidFieldError: For malformed JSON, a JSON cell without a column id,
            or a ``key=value`` pair without a key.
    """
    trimmed = text.strip()
    if trimmed.startswith("{") or trimmed.startswith("["):
        try:
            value = json.loads(trimmed)
        except json.JSONDecodeError as e:
            raise InvalidFieldError(f"Invalid JSON field: {e}") from e
        if not isinstance(value, dict):
            raise InvalidFieldError("JSON field must be an object")
        return JsonField(value=_normalize_column_id(value))

    key, sep, value = trimmed.partition("=")
    if not sep:
        raise InvalidFieldError(f"Invalid field format: {text}", hint="Use key=value or JSON.")
    if not key.strip():
        raise InvalidFieldError(f"Invalid field key: {text}")
    return KeyValueField(key=key.strip(), value=value.strip())


def _normalize_column_id(value: dict[str, Any]) -> dict[str, Any]:
    cell = dict(value)
    if "column_id" not in cell and "columnId" in cell:
        cell["column_id"] = cell.pop("columnId")
    if "column_id" not in cell:
        raise InvalidFieldError("Custom JSON field missing column_id")
    return cell
