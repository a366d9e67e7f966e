"""JSON output and error reporting for CLI commands.

Successful results go to stdout as JSON. Failures go to stderr as

  {"ok": false, "error": "<stable id>", "details": {"message": ..., "hint": ...}}

and the process exits with status 1. The error id is derived from the
exception type, never from its message.
"""

import json
from typing import Any, NoReturn

import typer
from httpx import HTTPError
from loguru import logger

from slack_lists.client import SlackApiError
from slack_lists.schema.errors import UnsupportedError


SLACK_ERROR_HINTS = {
    "list_not_found": (
        "Verify the list ID (F...), share the list to a channel the bot can access, "
        "or use --as-user with a user token."
    ),
    "not_in_channel": "Invite the bot to the channel or grant it access to the list.",
    "invalid_auth": "Check that SLACK_TOKEN / SLACK_USER_TOKEN is valid for the workspace.",
    "account_inactive": "Check that SLACK_TOKEN / SLACK_USER_TOKEN is valid for the workspace.",
    "token_revoked": "Check that SLACK_TOKEN / SLACK_USER_TOKEN is valid for the workspace.",
    "ratelimited": "Slack rate limit hit. Wait a moment and try again.",
    "rate_limited": "Slack rate limit hit. Wait a moment and try again.",
}


def output_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, default=str))


def describe_error(error: Exception, verbose: bool = False) -> tuple[str, dict[str, Any]]:
    """Map an exception to its stable error id and detail payload."""
    details: dict[str, Any] = {"message": str(error), "type": type(error).__name__}

    if isinstance(error, SlackApiError):
        details["code"] = error.code
        details["hint"] = _slack_hint(error)
        if verbose:
            details["data"] = error.data
        return "slack_api_error", details

    if isinstance(error, UnsupportedError):
        return error.code, details

    if isinstance(error, HTTPError):
        return "http_error", details

    code = getattr(error, "code", None)
    if isinstance(code, str):
        hint = getattr(error, "hint", None)
        if hint:
            details["hint"] = hint
        return code, details

    return "command_failed", details


def handle_command_error(error: Exception, verbose: bool = False) -> NoReturn:
    error_id, details = describe_error(error, verbose)
    logger.debug(f"Command failed with {error_id}: {error}")
    typer.echo(json.dumps({"ok": False, "error": error_id, "details": details}, indent=2), err=True)
    raise typer.Exit(1)


def _slack_hint(error: SlackApiError) -> str | None:
    if error.code == "missing_scope":
        needed = error.data.get("needed")
        if needed:
            return f"Missing OAuth scopes: {needed}. Reinstall the app after updating the manifest."
        return "Missing OAuth scopes. Update the app scopes and reinstall."
    return SLACK_ERROR_HINTS.get(error.code)
