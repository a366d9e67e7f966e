"""Tests for slack_lists.schema.inference -- schema inference from items."""

from unittest.mock import AsyncMock

import pytest

from slack_lists.schema.inference import RowPage, infer_column_type, infer_schema, sample_rows
from slack_lists.schema.models import ColumnType


# --- infer_column_type ---


class TestInferColumnType:
    @pytest.mark.parametrize(
        "raw_field,expected",
        [
            ({"column_id": "c", "rich_text": []}, ColumnType.RICH_TEXT),
            ({"column_id": "c", "text": "x"}, ColumnType.TEXT),
            ({"column_id": "c", "user": ["U1"]}, ColumnType.USER),
            ({"column_id": "c", "select": ["a"]}, ColumnType.SELECT),
            ({"column_id": "c", "date": ["2026-01-01"]}, ColumnType.DATE),
            ({"column_id": "c", "checkbox": True}, ColumnType.CHECKBOX),
            ({"column_id": "c", "channel": ["C1"]}, ColumnType.CHANNEL),
            ({"column_id": "c", "value": "?"}, ColumnType.UNKNOWN),
        ],
    )
    def test_shape_keys(self, raw_field, expected):
        assert infer_column_type(raw_field) == expected

    def test_rich_text_checked_before_text(self):
        assert infer_column_type({"text": "x", "rich_text": []}) == ColumnType.RICH_TEXT


# --- infer_schema ---


class TestInferSchema:
    def test_columns_in_first_seen_order(self):
        rows = [
            {"id": "R1", "fields": [{"column_id": "Col1", "key": "name", "text": "a"}]},
            {
                "id": "R2",
                "fields": [
                    {"column_id": "Col2", "key": "status", "select": ["open"]},
                    {"column_id": "Col1", "key": "name", "text": "b"},
                ],
            },
        ]
        schema = infer_schema("F1", rows)

        assert schema.list_id == "F1"
        assert [c.id for c in schema.columns] == ["Col1", "Col2"]
        assert schema.columns[0].name == "name"
        assert schema.columns[1].type == ColumnType.SELECT

    def test_first_observation_wins(self):
        rows = [
            {"fields": [{"column_id": "c1", "text": "hello"}]},
            {"fields": [{"column_id": "c1", "select": ["x"]}]},
        ]
        schema = infer_schema("F1", rows)
        assert len(schema.columns) == 1
        assert schema.columns[0].type == ColumnType.TEXT

    def test_options_never_set(self):
        schema = infer_schema("F1", [{"fields": [{"column_id": "c", "select": ["high"]}]}])
        assert schema.columns[0].options is None
        assert schema.columns[0].choices == []

    def test_name_falls_back_to_id(self):
        schema = infer_schema("F1", [{"fields": [{"columnId": "Col9", "date": []}]}])
        column = schema.columns[0]
        assert column.id == "Col9"
        assert column.key is None
        assert column.name == "Col9"

    def test_malformed_rows_skipped(self):
        rows = [
            "not a row",
            {"fields": "nope"},
            {"fields": [None, {"text": "no column id"}]},
            {"id": "R1"},
        ]
        assert infer_schema("F1", rows).columns == []

    def test_empty_rows(self):
        assert infer_schema("F1", []).columns == []


# --- sample_rows ---


class TestSampleRows:
    @pytest.mark.asyncio
    async def test_follows_cursor(self):
        list_rows = AsyncMock(
            side_effect=[
                RowPage(rows=[{"id": "R1"}], next_cursor="next"),
                RowPage(rows=[{"id": "R2"}], next_cursor=None),
            ]
        )
        rows = await sample_rows(list_rows, "F1", limit=10)

        assert [r["id"] for r in rows] == ["R1", "R2"]
        assert list_rows.await_args_list[0].args == ("F1", None)
        assert list_rows.await_args_list[1].args == ("F1", "next")

    @pytest.mark.asyncio
    async def test_stops_at_limit(self):
        list_rows = AsyncMock(
            return_value=RowPage(rows=[{"id": "R1"}, {"id": "R2"}], next_cursor="more")
        )
        rows = await sample_rows(list_rows, "F1", limit=3)

        assert len(rows) == 3
        assert list_rows.await_count == 2

    @pytest.mark.asyncio
    async def test_empty_page_stops_despite_cursor(self):
        list_rows = AsyncMock(return_value=RowPage(rows=[], next_cursor="again"))
        rows = await sample_rows(list_rows, "F1", limit=10)

        assert rows == []
        assert list_rows.await_count == 1

    @pytest.mark.asyncio
    async def test_errors_propagate(self):
        list_rows = AsyncMock(side_effect=RuntimeError("boom"))
        with pytest.raises(RuntimeError):
            await sample_rows(list_rows, "F1")
