import pytest

from bot_config import DEFAULT_ROSTER_TTL_SECONDS, load_settings, mask
from bug_errors import ConfigurationError
from tests.fakes import GOOD_ENV


def test_load_settings_defaults():
    s = load_settings(GOOD_ENV)
    assert s.discord_client_id == 1111
    assert s.discord_guild_id == 2222
    assert s.notion_database_id == "db-123"
    assert s.roster_ttl_seconds == DEFAULT_ROSTER_TTL_SECONDS == 300
    assert s.log_level == "INFO"


def test_load_settings_optional_overrides():
    s = load_settings({**GOOD_ENV, "ROSTER_TTL_SECONDS": "60", "LOG_LEVEL": "debug"})
    assert s.roster_ttl_seconds == 60
    assert s.log_level == "DEBUG"


def test_every_missing_variable_is_reported():
    env = {k: v for k, v in GOOD_ENV.items() if k not in ("DISCORD_TOKEN", "NOTION_DATABASE_ID")}
    with pytest.raises(ConfigurationError) as exc:
        load_settings(env)
    assert "DISCORD_TOKEN is not set" in str(exc.value)
    assert "NOTION_DATABASE_ID is not set" in str(exc.value)


def test_non_numeric_ids_are_rejected():
    with pytest.raises(ConfigurationError, match="DISCORD_GUILD_ID must be an integer"):
        load_settings({**GOOD_ENV, "DISCORD_GUILD_ID": "my-guild"})


@pytest.mark.parametrize("value", ["²", "１２", "-5", "3.0"])
def test_digit_like_ids_are_rejected_as_configuration_errors(value):
    with pytest.raises(ConfigurationError, match="DISCORD_GUILD_ID must be an integer"):
        load_settings({**GOOD_ENV, "DISCORD_GUILD_ID": value})


def test_blank_values_count_as_missing():
    with pytest.raises(ConfigurationError, match="NOTION_TOKEN is not set"):
        load_settings({**GOOD_ENV, "NOTION_TOKEN": "   "})


def test_load_settings_reads_process_environment(monkeypatch):
    for k, v in GOOD_ENV.items():
        monkeypatch.setenv(k, v)
    assert load_settings().discord_token == "discord-token-value"


def test_mask():
    assert mask(None) == "<unset>"
    assert mask("abc") == "ab…"
    assert mask("secret_notion_token") == "secret_n…oken"
