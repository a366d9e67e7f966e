"""utility functions for commands"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import typer

from slack_lists.cli.app import GlobalOptions
from slack_lists.cli.output import handle_command_error, output_json
from slack_lists.client import SlackListsClient
from slack_lists.config import resolve_token
from slack_lists.schema import SchemaCache, SchemaIndex, SchemaResolver


def get_options(ctx: typer.Context) -> GlobalOptions:
    obj = ctx.find_root().obj
    return obj if isinstance(obj, GlobalOptions) else GlobalOptions()


def create_client(options: GlobalOptions) -> SlackListsClient:
    token = resolve_token(options.token, options.as_user)
    return SlackListsClient(token, api_url=options.config.api_url)


def schema_cache(options: GlobalOptions) -> SchemaCache:
    return SchemaCache(options.config.schema_cache_dir)


async def resolve_schema_index(
    options: GlobalOptions,
    client: SlackListsClient,
    list_id: str,
    required: bool = False,
) -> SchemaIndex | None:
    """Resolve the list schema using the global --schema/--refresh-schema flags."""
    resolver = SchemaResolver(
        service=client,
        cache=schema_cache(options),
        sample_limit=options.config.sample_limit,
    )
    schema_path = options.config.resolve_schema_path(options.schema)
    if required:
        return await resolver.require(list_id, schema_path, options.refresh_schema)
    return await resolver.resolve(list_id, schema_path, options.refresh_schema)


def run_command(
    options: GlobalOptions,
    action: Callable[[SlackListsClient], Awaitable[Any]],
    render: Callable[[Any], None] = output_json,
) -> None:
    """Run an async action with a client, render its result, map errors to JSON."""

    async def _run() -> Any:
        async with create_client(options) as client:
            return await action(client)

    try:
        result = asyncio.run(_run())
    except typer.Exit:
        raise
    except Exception as e:
        handle_command_error(e, options.verbose)
    render(result)
