"""User and channel reference resolution.

Accepts the forms people type on the command line:

  user:    <@U123>, U123 / W123, ana@example.com, @ana, "Ana Lopez"
  channel: <#C123>, C123 / G123 / D123, #general, general

Results are cached on the resolver instance, which lives for one command
invocation. The full user or channel directory is fetched at most once.
"""

import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

from loguru import logger

from slack_lists.client import SlackApiError


USER_MENTION = re.compile(r"^<@([A-Z0-9]+)>$")
USER_ID = re.compile(r"^[UW][A-Z0-9]+$")
CHANNEL_MENTION = re.compile(r"^<#([A-Z0-9]+)>$")
CHANNEL_ID = re.compile(r"^[CGD][A-Z0-9]+$")


type DirectoryPageFn = Callable[[str | None], Awaitable[tuple[list[dict], str | None]]]


class IdentityResolutionError(LookupError):
    """Raised when a user or channel reference matches nothing."""

    code = "identity_not_found"

    def __init__(self, kind: str, reference: str):
        self.kind = kind
        self.reference = reference
        self.hint = f"Use a {kind} id, a mention, or an exact name."
        super().__init__(f"Unable to resolve {kind}: {reference}")


class DirectoryClient(Protocol):
    async def users_lookup_by_email(self, email: str) -> dict[str, Any]: ...

    async def users_list(self, cursor: str | None = None) -> tuple[list[dict], str | None]: ...

    async def conversations_list(
        self, cursor: str | None = None
    ) -> tuple[list[dict], str | None]: ...


@dataclass
class IdentityResolver:
    """Resolve user and channel references against the Slack directory."""

    client: DirectoryClient
    user_cache: dict[str, str] = field(default_factory=dict)
    channel_cache: dict[str, str] = field(default_factory=dict)
    _users: list[dict] | None = None
    _channels: list[dict] | None = None

    async def resolve_user(self, reference: str) -> str:
        """Resolve a user reference to a user id.

        Raises:
            IdentityResolutionError: If no user matches.
        """
        ref = reference.strip()
        if ref in self.user_cache:
            return self.user_cache[ref]

        user_id = await self._lookup_user(ref)
        if user_id is None:
            raise IdentityResolutionError("user", reference)
        self.user_cache[ref] = user_id
        return user_id

    async def resolve_channel(self, reference: str) -> str:
        """Resolve a channel reference to a channel id.

        Raises:
            IdentityResolutionError: If no channel matches.
        """
        ref = reference.strip()
        if ref in self.channel_cache:
            return self.channel_cache[ref]

        channel_id = await self._lookup_channel(ref)
        if channel_id is None:
            raise IdentityResolutionError("channel", reference)
        self.channel_cache[ref] = channel_id
        return channel_id

    async def _lookup_user(self, ref: str) -> str | None:
        mention = USER_MENTION.match(ref)
        if mention:
            return mention.group(1)
        if USER_ID.match(ref):
            return ref

        # --- Email lookup ---
        # Trigger: looks like an email address
        # Outcome: users.lookupByEmail, falling back to the directory scan on error
        if "@" in ref and not ref.startswith("@"):
            try:
                result = await self.client.users_lookup_by_email(ref)
            except SlackApiError as e:
                logger.debug(f"Email lookup for {ref} failed ({e.code}), scanning users")
            else:
                user_id = (result.get("user") or {}).get("id")
                if user_id:
                    return str(user_id)

        name = ref[1:] if ref.startswith("@") else ref
        if self._users is None:
            self._users = await _collect(self.client.users_list)

        for user in self._users:
            if _matches_user_name(user, name):
                return str(user["id"])
        return None

    async def _lookup_channel(self, ref: str) -> str | None:
        mention = CHANNEL_MENTION.match(ref)
        if mention:
            return mention.group(1)
        if CHANNEL_ID.match(ref):
            return ref

        name = (ref[1:] if ref.startswith("#") else ref).lower()
        if self._channels is None:
            self._channels = await _collect(self.client.conversations_list)

        for channel in self._channels:
            if isinstance(channel.get("name"), str) and channel["name"].lower() == name:
                return str(channel["id"])
        return None


async def _collect(page_fn: DirectoryPageFn) -> list[dict]:
    items: list[dict] = []
    cursor: str | None = None
    while True:
        page, cursor = await page_fn(cursor)
        items.extend(page)
        if not cursor:
            return items


def _matches_user_name(user: dict, name: str) -> bool:
    candidate = name.lower()
    if isinstance(user.get("name"), str) and user["name"].lower() == candidate:
        return True

    profile = user.get("profile") or {}
    for attr in ("display_name", "real_name"):
        value = profile.get(attr)
        if isinstance(value, str) and value.lower() == candidate:
            return True
    return False
