# deploy_commands.py
# Register (or refresh) /bug in the configured guild without starting the
# gateway connection. Useful after changing command options.

import sys
import asyncio
import logging

import discord
from discord import app_commands
from dotenv import load_dotenv

from bot import setup_logging
from bot_config import Settings, load_settings
from bug_commands import BugCommands
from bug_errors import ConfigurationError

log = logging.getLogger("bugbot.deploy")


def build_tree(client: discord.Client, guild: discord.Object) -> app_commands.CommandTree:
    tree = app_commands.CommandTree(client)
    # Only the command schema is uploaded, so no service is wired in
    tree.add_command(BugCommands(service=None), guild=guild)
    return tree


async def deploy(settings: Settings) -> int:
    client = discord.Client(intents=discord.Intents.none(),
                            application_id=settings.discord_client_id)
    guild = discord.Object(id=settings.discord_guild_id)
    tree = build_tree(client, guild)

    async with client:
        await client.login(settings.discord_token)
        log.info("Started refreshing %d application (/) command(s).",
                 len(tree.get_commands(guild=guild)))
        synced = await tree.sync(guild=guild)
    log.info("Successfully reloaded %d application (/) command(s) in guild %s.",
             len(synced), settings.discord_guild_id)
    return len(synced)


def main() -> None:
    load_dotenv()
    setup_logging()
    try:
        settings = load_settings()
    except ConfigurationError as e:
        log.critical("%s", e)
        sys.exit(1)
    try:
        asyncio.run(deploy(settings))
    except discord.HTTPException as e:
        log.error("Error deploying commands: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
