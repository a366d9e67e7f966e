"""Tests for the `slack-lists items` commands."""

import json

from typer.testing import CliRunner

from slack_lists.cli.main import app as cli_app

runner = CliRunner()


class TestItemsCreate:
    def test_create_with_flags(self, mock_client):
        result = runner.invoke(
            cli_app,
            ["items", "create", "F1", "--name", "Ship it", "--status", "Done", "--assignee", "@bo"],
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["item"]["id"] == "Rec9"

        (body,) = mock_client.called("slackLists.items.create")
        fields = {f["column_id"]: f for f in body["initial_fields"]}
        assert fields["Col1"]["rich_text"][0]["elements"][0]["elements"][0]["text"] == "Ship it"
        assert fields["Col2"]["select"] == ["done"]
        assert fields["Col3"]["user"] == ["U2"]

    def test_create_with_key_value_field(self, mock_client):
        result = runner.invoke(cli_app, ["items", "create", "F1", "--field", "Due Date=2026-01-15"])

        assert result.exit_code == 0, result.output
        (body,) = mock_client.called("slackLists.items.create")
        assert body["initial_fields"] == [{"column_id": "Col4", "date": ["2026-01-15"]}]

    def test_unknown_select_value_passes_through(self, mock_client):
        runner.invoke(cli_app, ["items", "create", "F1", "--status", "blocked"])

        (body,) = mock_client.called("slackLists.items.create")
        assert body["initial_fields"][0]["select"] == ["blocked"]

    def test_no_fields(self, mock_client):
        result = runner.invoke(cli_app, ["items", "create", "F1"])

        assert result.exit_code == 1
        assert json.loads(result.output)["error"] == "invalid_field"

    def test_unknown_column(self, mock_client):
        result = runner.invoke(cli_app, ["items", "create", "F1", "--field", "nope=1"])

        assert result.exit_code == 1
        error = json.loads(result.output)
        assert error["error"] == "unknown_column"
        assert "schema show" in error["details"]["hint"]

    def test_json_field_without_schema(self, mock_client):
        del mock_client.responses["slackLists.info"]
        del mock_client.responses["slackLists.items.list"]

        result = runner.invoke(
            cli_app, ["items", "create", "F1", "--field", '{"columnId": "Col7", "checkbox": true}']
        )

        assert result.exit_code == 0, result.output
        (body,) = mock_client.called("slackLists.items.create")
        assert body["initial_fields"] == [{"column_id": "Col7", "checkbox": True}]

    def test_flag_without_schema(self, mock_client):
        del mock_client.responses["slackLists.info"]
        del mock_client.responses["slackLists.items.list"]

        result = runner.invoke(cli_app, ["items", "create", "F1", "--status", "open"])

        assert result.exit_code == 1
        assert json.loads(result.output)["error"] == "schema_unavailable"


class TestItemsUpdate:
    def test_update_sets_row_id(self, mock_client):
        result = runner.invoke(cli_app, ["items", "update", "F1", "Rec1", "--field", "status=Open"])

        assert result.exit_code == 0, result.output
        (body,) = mock_client.called("slackLists.items.update")
        assert body["cells"] == [{"row_id": "Rec1", "column_id": "Col2", "select": ["open"]}]

    def test_slack_error_mapped(self, mock_client):
        mock_client.responses["slackLists.items.update"] = {"ok": False, "error": "list_not_found"}

        result = runner.invoke(cli_app, ["items", "update", "F1", "Rec1", "--name", "x"])

        assert result.exit_code == 1
        error = json.loads(result.output)
        assert error["error"] == "slack_api_error"
        assert error["details"]["code"] == "list_not_found"
        assert "list ID" in error["details"]["hint"]


class TestItemsList:
    def test_list_all(self, mock_client):
        result = runner.invoke(cli_app, ["items", "list", "F1"])

        assert result.exit_code == 0, result.output
        output = json.loads(result.output)
        assert output["total_count"] == 2
        assert [i["id"] for i in output["items"]] == ["Rec1", "Rec2"]

    def test_filter_by_status_label(self, mock_client):
        result = runner.invoke(cli_app, ["items", "list", "F1", "--status", "Done"])

        output = json.loads(result.output)
        assert [i["id"] for i in output["items"]] == ["Rec2"]
        assert output["filtered_count"] == 1

    def test_filter_by_assignee(self, mock_client):
        result = runner.invoke(cli_app, ["items", "list", "F1", "--assignee", "ana"])

        assert [i["id"] for i in json.loads(result.output)["items"]] == ["Rec1"]

    def test_limit(self, mock_client):
        result = runner.invoke(cli_app, ["items", "list", "F1", "--limit", "1"])

        assert len(json.loads(result.output)["items"]) == 1


class TestItemsGetAndDelete:
    def test_get(self, mock_client):
        result = runner.invoke(cli_app, ["items", "get", "F1", "Rec1"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["item"]["id"] == "Rec1"
        assert mock_client.called("slackLists.items.info") == [{"list_id": "F1", "item_id": "Rec1"}]

    def test_get_error_mapped(self, mock_client):
        mock_client.responses["slackLists.items.info"] = {"ok": False, "error": "item_not_found"}

        result = runner.invoke(cli_app, ["items", "get", "F1", "Rec404"])

        assert result.exit_code == 1
        assert json.loads(result.output)["details"]["code"] == "item_not_found"

    def test_delete(self, mock_client):
        result = runner.invoke(cli_app, ["items", "delete", "F1", "Rec2"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"ok": True}
        assert mock_client.called("slackLists.items.delete") == [{"list_id": "F1", "item_id": "Rec2"}]
        assert mock_client.called("slackLists.info") == []


class TestItemsListPagination:
    def test_empty_page_with_cursor_stops(self, mock_client):
        mock_client.responses["slackLists.items.list"] = {
            "ok": True,
            "items": [],
            "response_metadata": {"next_cursor": "again"},
        }

        result = runner.invoke(cli_app, ["items", "list", "F1"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["total_count"] == 0
        assert len(mock_client.called("slackLists.items.list")) == 1
