# bot_config.py
# Environment configuration for the bug bot.
# Values come from the process environment, optionally seeded from a .env
# file by the entrypoints (python-dotenv).

import os
from dataclasses import dataclass
from typing import List, Mapping, Optional

from bug_errors import ConfigurationError

DEFAULT_ROSTER_TTL_SECONDS = 300

REQUIRED_VARS = (
    "DISCORD_TOKEN",
    "DISCORD_CLIENT_ID",
    "DISCORD_GUILD_ID",
    "NOTION_TOKEN",
    "NOTION_DATABASE_ID",
)


@dataclass(frozen=True)
class Settings:
    discord_token: str
    discord_client_id: int
    discord_guild_id: int
    notion_token: str
    notion_database_id: str
    roster_ttl_seconds: int = DEFAULT_ROSTER_TTL_SECONDS
    log_level: str = "INFO"


def _env_str(env: Mapping[str, str], name: str, problems: List[str]) -> str:
    v = (env.get(name) or "").strip()
    if not v:
        problems.append(f"{name} is not set")
    return v


def _env_int(env: Mapping[str, str], name: str, problems: List[str],
             default: Optional[int] = None) -> int:
    v = (env.get(name) or "").strip()
    if v.isascii() and v.isdigit():
        return int(v)
    if not v and default is not None:
        return default
    problems.append(f"{name} is not set" if not v else f"{name} must be an integer (got {v!r})")
    return 0


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from `env` (defaults to os.environ).
    Every missing or invalid variable is reported at once in a single
    ConfigurationError so the operator can fix the .env in one pass.
    """
    if env is None:
        env = os.environ
    problems: List[str] = []

    settings = Settings(
        discord_token=_env_str(env, "DISCORD_TOKEN", problems),
        discord_client_id=_env_int(env, "DISCORD_CLIENT_ID", problems),
        discord_guild_id=_env_int(env, "DISCORD_GUILD_ID", problems),
        notion_token=_env_str(env, "NOTION_TOKEN", problems),
        notion_database_id=_env_str(env, "NOTION_DATABASE_ID", problems),
        roster_ttl_seconds=_env_int(env, "ROSTER_TTL_SECONDS", problems,
                                    default=DEFAULT_ROSTER_TTL_SECONDS),
        log_level=(env.get("LOG_LEVEL") or "INFO").strip().upper(),
    )
    if problems:
        raise ConfigurationError("Invalid configuration: " + "; ".join(problems))
    return settings


def mask(value: Optional[str]) -> str:
    """Short masked form of a secret for startup / diagnostics output."""
    if not value:
        return "<unset>"
    if len(value) <= 12:
        return value[:2] + "…"
    return value[:8] + "…" + value[-4:]
