"""CLI commands for slack-lists-cli."""

from . import evidence, items, schema

__all__ = ["evidence", "items", "schema"]
