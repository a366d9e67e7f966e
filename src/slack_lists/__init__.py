"""slack-lists-cli - command-line access to Slack Lists with typed field encoding."""

__version__ = "0.4.0"
