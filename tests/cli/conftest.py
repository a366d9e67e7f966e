"""Fixtures for CLI tests: a fake Slack Web API behind httpx.MockTransport."""

import json
from dataclasses import dataclass, field
from typing import Any
from unittest.mock import patch

import httpx
import pytest

from slack_lists.client import SlackListsClient

METADATA = {
    "ok": True,
    "list_metadata": {
        "id": "F1",
        "schema": [
            {"id": "Col1", "key": "name", "name": "Name", "type": "text", "is_primary_column": True},
            {
                "id": "Col2",
                "key": "status",
                "name": "Status",
                "type": "select",
                "options": {
                    "choices": [
                        {"value": "open", "label": "Open"},
                        {"value": "done", "label": "Done"},
                    ]
                },
            },
            {"id": "Col3", "key": "owner", "name": "Owner", "type": "user"},
            {"id": "Col4", "key": "due_date", "name": "Due Date", "type": "date"},
        ],
    },
}

ITEMS = [
    {
        "id": "Rec1",
        "fields": [
            {"column_id": "Col1", "key": "name", "text": "Write docs"},
            {"column_id": "Col2", "key": "status", "select": ["open"]},
            {"column_id": "Col3", "key": "owner", "user": ["U1"]},
        ],
    },
    {
        "id": "Rec2",
        "fields": [
            {"column_id": "Col1", "key": "name", "text": "Ship"},
            {"column_id": "Col2", "key": "status", "select": ["done"]},
            {"column_id": "Col3", "key": "owner", "user": ["U2"]},
        ],
    },
]

USERS = [
    {"id": "U1", "name": "ana", "profile": {"real_name": "Ana Lopez"}},
    {"id": "U2", "name": "bo", "profile": {"real_name": "Bo Chen"}},
]


@dataclass
class FakeSlack:
    """Canned Web API responses keyed by method name, with a call log."""

    responses: dict[str, dict[str, Any]] = field(default_factory=dict)
    calls: list[tuple[str, Any]] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        method = request.url.path.rsplit("/", 1)[-1]
        if request.headers.get("Content-Type", "").startswith("application/json"):
            body = json.loads(request.content or b"{}")
        else:
            body = request.content.decode()
        self.calls.append((method, body))
        payload = self.responses.get(method, {"ok": False, "error": "unknown_method"})
        return httpx.Response(200, json=payload)

    def called(self, method: str) -> list[Any]:
        return [body for name, body in self.calls if name == method]


@pytest.fixture
def fake_slack() -> FakeSlack:
    return FakeSlack(
        responses={
            "slackLists.info": METADATA,
            "slackLists.items.list": {"ok": True, "items": ITEMS},
            "slackLists.items.create": {"ok": True, "item": {"id": "Rec9"}},
            "slackLists.items.info": {"ok": True, "item": ITEMS[0]},
            "slackLists.items.update": {"ok": True},
            "slackLists.items.delete": {"ok": True},
            "users.list": {"ok": True, "members": USERS},
        }
    )


@pytest.fixture(autouse=True)
def cli_env(monkeypatch, tmp_path):
    """Isolate config: token set, cache under tmp_path."""
    monkeypatch.setenv("SLACK_TOKEN", "xoxb-test")
    monkeypatch.setenv("SLACK_LIST_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.delenv("SLACK_LIST_SCHEMA_PATH", raising=False)
    monkeypatch.delenv("SLACK_LIST_LOG_LEVEL", raising=False)
    return tmp_path


@pytest.fixture
def mock_client(fake_slack):
    """Route every CLI client through the fake Slack API."""

    def create_client(options):
        transport = httpx.MockTransport(fake_slack.handler)
        return SlackListsClient("xoxb-test", http_client=httpx.AsyncClient(transport=transport))

    with patch("slack_lists.cli.commands.command_utils.create_client", side_effect=create_client):
        yield fake_slack
