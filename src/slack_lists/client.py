"""Typed client for the Slack Web API methods used by slack-lists-cli.

Wraps an httpx.AsyncClient. Every method posts to ``<api_url><method>`` with a
bearer token and raises SlackApiError when Slack answers ``ok: false``.

Usage:
    async with SlackListsClient(token) as client:
        payload = await client.fetch_metadata("F123")
"""

from typing import Any

from httpx import AsyncClient, Timeout
from loguru import logger

from slack_lists.schema.errors import UnsupportedError
from slack_lists.schema.inference import RowPage


DEFAULT_API_URL = "https://slack.com/api/"
PAGE_SIZE = 100


class SlackApiError(RuntimeError):
    """Slack returned ``ok: false``."""

    def __init__(self, method: str, code: str, data: dict[str, Any] | None = None):
        self.method = method
        self.code = code
        self.data = data or {}
        super().__init__(f"Slack API error from {method}: {code}")


class SlackListsClient:
    """Async Slack Web API client.

    Args:
        token: Bot or user token
        api_url: Base URL of the Web API
        http_client: Optional preconfigured client (tests, custom transports)
    """

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        http_client: AsyncClient | None = None,
    ):
        self.token = token
        self.api_url = api_url if api_url.endswith("/") else api_url + "/"
        self.http_client = http_client or AsyncClient(timeout=Timeout(30.0))

    async def __aenter__(self) -> "SlackListsClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http_client.aclose()

    async def call(
        self,
        method: str,
        params: dict[str, Any] | None = None,
        *,
        form: bool = False,
    ) -> dict[str, Any]:
        """Call a Web API method.

        Read-only directory methods take form-encoded arguments; everything
        else is sent as JSON.

        Raises:
            SlackApiError: If the response has ``ok: false``.
            httpx.HTTPStatusError: For non-2xx responses.
        """
        body = {k: v for k, v in (params or {}).items() if v is not None}
        headers = {"Authorization": f"Bearer {self.token}"}
        url = self.api_url + method

        logger.debug(f"Calling Slack method {method}")
        if form:
            response = await self.http_client.post(url, data=body, headers=headers)
        else:
            response = await self.http_client.post(url, json=body, headers=headers)
        response.raise_for_status()

        data = response.json()
        if not data.get("ok"):
            raise SlackApiError(method, str(data.get("error", "unknown_error")), data)
        return data

    # --- List capabilities ---

    async def fetch_metadata(self, list_id: str) -> dict[str, Any]:
        return await self._call_optional("slackLists.info", {"list_id": list_id})

    async def list_rows(
        self,
        list_id: str,
        cursor: str | None = None,
        limit: int = PAGE_SIZE,
        archived: bool = False,
    ) -> RowPage:
        data = await self._call_optional(
            "slackLists.items.list",
            {
                "list_id": list_id,
                "limit": limit,
                "cursor": cursor,
                "archived": True if archived else None,
            },
        )
        return RowPage(rows=data.get("items") or [], next_cursor=_next_cursor(data))

    async def create_item(self, list_id: str, initial_fields: list[dict]) -> dict[str, Any]:
        return await self.call(
            "slackLists.items.create", {"list_id": list_id, "initial_fields": initial_fields}
        )

    async def get_item(self, list_id: str, item_id: str) -> dict[str, Any]:
        return await self.call("slackLists.items.info", {"list_id": list_id, "item_id": item_id})

    async def update_item(self, list_id: str, cells: list[dict]) -> dict[str, Any]:
        return await self.call("slackLists.items.update", {"list_id": list_id, "cells": cells})

    async def delete_item(self, list_id: str, item_id: str) -> dict[str, Any]:
        return await self.call("slackLists.items.delete", {"list_id": list_id, "item_id": item_id})

    # --- Directory ---

    async def users_lookup_by_email(self, email: str) -> dict[str, Any]:
        return await self.call("users.lookupByEmail", {"email": email}, form=True)

    async def users_list(self, cursor: str | None = None) -> tuple[list[dict], str | None]:
        data = await self.call("users.list", {"limit": 200, "cursor": cursor}, form=True)
        return data.get("members") or [], _next_cursor(data)

    async def conversations_list(self, cursor: str | None = None) -> tuple[list[dict], str | None]:
        data = await self.call(
            "conversations.list",
            {"limit": 200, "cursor": cursor, "types": "public_channel,private_channel"},
            form=True,
        )
        return data.get("channels") or [], _next_cursor(data)

    async def _call_optional(self, method: str, params: dict[str, Any]) -> dict[str, Any]:
        try:
            return await self.call(method, params)
        except SlackApiError as e:
            if e.code == "unknown_method":
                raise UnsupportedError(method) from e
            raise


def _next_cursor(data: dict[str, Any]) -> str | None:
    metadata = data.get("response_metadata") or {}
    return metadata.get("next_cursor") or None
