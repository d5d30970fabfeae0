# bot.py
# Discord bug tracker backed by a Notion database.
# Exposes a single guild-scoped slash command group: /bug add|list|update|assign|complete
# Requires: discord.py, python-dotenv, notion-client  (pip install -e .)

import sys
import logging

import discord
from discord import app_commands
from dotenv import load_dotenv
from notion_client import AsyncClient

from bot_config import Settings, load_settings, mask
from bug_commands import BugCommands
from bug_errors import ConfigurationError
from bug_service import NOTION_VERSION, BugQueryService
from name_resolver import NameResolver, RosterCache

log = logging.getLogger("bugbot")

# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------

def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # discord.py's gateway chatter is noisy at INFO
    logging.getLogger("discord").setLevel(logging.WARNING)

# -----------------------------------------------------------------------------
# Wiring
# -----------------------------------------------------------------------------

def build_service(settings: Settings) -> BugQueryService:
    notion = AsyncClient(auth=settings.notion_token, notion_version=NOTION_VERSION)
    resolver = NameResolver(notion, RosterCache(ttl_seconds=settings.roster_ttl_seconds))
    return BugQueryService(notion, settings.notion_database_id, resolver)


class BugBot(discord.Client):
    def __init__(self, settings: Settings, service: BugQueryService):
        intents = discord.Intents.default()   # guilds only; no message content needed
        super().__init__(intents=intents, application_id=settings.discord_client_id)
        self.settings = settings
        self.guild = discord.Object(id=settings.discord_guild_id)
        self.tree = app_commands.CommandTree(self)
        self.tree.add_command(BugCommands(service), guild=self.guild)

    async def on_ready(self):
        log.info("Logged in as %s (serving %d guild(s))", self.user, len(self.guilds))

        # Sync app commands to this guild (fast; avoids global propagation delay)
        try:
            synced = await self.tree.sync(guild=self.guild)
            log.info("Synced %d slash command(s) to guild %s", len(synced), self.guild.id)
        except discord.HTTPException as e:
            log.error("Slash command sync failed: %s", e)

# -----------------------------------------------------------------------------
# Entrypoint
# -----------------------------------------------------------------------------

def main() -> None:
    load_dotenv()  # load .env alongside the working directory
    try:
        settings = load_settings()
    except ConfigurationError as e:
        setup_logging()
        log.critical("%s", e)
        sys.exit(1)

    setup_logging(settings.log_level)
    log.info(
        "Starting: guild=%s app=%s notion_db=%s notion_token=%s roster_ttl=%ss",
        settings.discord_guild_id, settings.discord_client_id,
        mask(settings.notion_database_id), mask(settings.notion_token),
        settings.roster_ttl_seconds,
    )

    client = BugBot(settings, build_service(settings))
    try:
        client.run(settings.discord_token, log_handler=None)
    except KeyboardInterrupt:
        log.info("Shutting down…")


if __name__ == "__main__":
    main()
