"""Configuration management for slack-lists-cli.

Settings come from the environment (``SLACK_LIST_`` prefix). Tokens use the
plain Slack variable names so the CLI can share them with other tools.
"""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from slack_lists.client import DEFAULT_API_URL


CACHE_DIR_NAME = "ml-agent"


class ConfigError(ValueError):
    """Raised when required configuration is missing."""

    code = "config_error"

    def __init__(self, message: str, hint: str | None = None):
        self.hint = hint
        super().__init__(message)


def _default_project() -> str:
    return Path.cwd().name or "default"


class SlackListsConfig(BaseSettings):
    """Runtime settings for one CLI invocation."""

    model_config = SettingsConfigDict(env_prefix="SLACK_LIST_", extra="ignore")

    schema_path: str | None = Field(
        default=None, description="Default schema file used instead of discovery"
    )
    cache_dir: Path | None = Field(
        default=None, description="Root directory for cached schemas"
    )
    project: str = Field(
        default_factory=_default_project, description="Project namespace for the cache"
    )
    log_level: str = Field(default="WARNING", description="Log level for stderr output")
    api_url: str = Field(default=DEFAULT_API_URL, description="Slack Web API base URL")
    sample_limit: int = Field(
        default=100, description="Maximum items read when inferring a schema", gt=0
    )

    @property
    def schema_cache_dir(self) -> Path:
        """Directory under which ``schemas/<list_id>.json`` files live."""
        if self.cache_dir is not None:
            return self.cache_dir.expanduser()
        base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
        return Path(base) / CACHE_DIR_NAME / "projects" / self.project

    def resolve_schema_path(self, cli_path: str | None = None) -> str | None:
        """The --schema flag wins over SLACK_LIST_SCHEMA_PATH."""
        return cli_path or self.schema_path


def resolve_token(token: str | None = None, as_user: bool = False) -> str:
    """Pick the Slack token for this invocation.

    Raises:
        ConfigError: If no token is configured.
    """
    if token:
        return token

    if as_user:
        user_token = os.environ.get("SLACK_USER_TOKEN") or os.environ.get("SLACK_TOKEN")
        if user_token:
            return user_token

    for name in ("SLACK_TOKEN", "SLACK_BOT_TOKEN", "SLACK_USER_TOKEN"):
        value = os.environ.get(name)
        if value:
            return value

    raise ConfigError(
        "No Slack token found.",
        hint="Set SLACK_TOKEN or SLACK_BOT_TOKEN (or SLACK_USER_TOKEN with --as-user).",
    )
