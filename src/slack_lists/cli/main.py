"""Main CLI entry point for slack-lists-cli."""  # pragma: no cover

from slack_lists.cli.app import app  # pragma: no cover

# Register commands
from slack_lists.cli.commands import evidence, items, schema  # noqa: F401  # pragma: no cover

if __name__ == "__main__":  # pragma: no cover
    app()
