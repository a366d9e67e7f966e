"""Tests for slack_lists.schema.defaults -- default column pickers."""

import pytest

from slack_lists.schema.defaults import (
    resolve_assignee_column,
    resolve_due_column,
    resolve_priority_column,
    resolve_status_column,
)
from slack_lists.schema.errors import AmbiguousColumnError
from slack_lists.schema.index import build_index
from slack_lists.schema.models import Column, ColumnType, ListSchema


def _index(*columns: tuple[str, ColumnType, str | None]):
    return build_index(
        ListSchema(
            list_id="F1",
            columns=[Column(id=i, type=t, key=k, name=k or i) for i, t, k in columns],
        )
    )


class TestStatusColumn:
    def test_todo_completed_preferred(self):
        index = _index(("S", ColumnType.SELECT, "status"), ("C", ColumnType.TODO_COMPLETED, None))
        assert resolve_status_column(index).id == "C"

    def test_by_key(self):
        index = _index(("P", ColumnType.SELECT, "priority"), ("S", ColumnType.SELECT, "state"))
        assert resolve_status_column(index).id == "S"

    def test_single_select_fallback(self):
        index = _index(("T", ColumnType.TEXT, "name"), ("S", ColumnType.SELECT, "phase"))
        assert resolve_status_column(index).id == "S"

    def test_two_selects_are_ambiguous(self):
        index = _index(("A", ColumnType.SELECT, "phase"), ("B", ColumnType.SELECT, "stage"))
        with pytest.raises(AmbiguousColumnError) as exc:
            resolve_status_column(index)
        assert exc.value.candidates == ["phase", "stage"]

    def test_none(self):
        assert resolve_status_column(_index(("T", ColumnType.TEXT, "name"))) is None


class TestPriorityColumn:
    def test_by_key(self):
        index = _index(("S", ColumnType.SELECT, "status"), ("P", ColumnType.SELECT, "priority"))
        assert resolve_priority_column(index).id == "P"

    def test_two_selects_without_priority_are_ambiguous(self):
        index = _index(("S", ColumnType.SELECT, "status"), ("X", ColumnType.SELECT, "size"))
        with pytest.raises(AmbiguousColumnError):
            resolve_priority_column(index)


class TestAssigneeAndDue:
    def test_assignee_by_type(self):
        index = _index(("T", ColumnType.TEXT, "owner"), ("U", ColumnType.USER, "reviewer"))
        assert resolve_assignee_column(index).id == "U"

    def test_assignee_by_key(self):
        index = _index(("T", ColumnType.TEXT, "owner"))
        assert resolve_assignee_column(index).id == "T"

    def test_due_by_type(self):
        index = _index(("D", ColumnType.TODO_DUE_DATE, None))
        assert resolve_due_column(index).id == "D"

    def test_due_by_key(self):
        index = _index(("X", ColumnType.UNKNOWN, "due_date"))
        assert resolve_due_column(index).id == "X"
