"""Command-line interface for slack-lists-cli."""
