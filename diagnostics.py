# diagnostics.py
# Connection & schema checks: run this before the bot when something is off.
#   python diagnostics.py
# Prints masked config values, verifies the Notion token and database schema,
# and verifies the Discord token can see the configured guild.

import os
import sys
import asyncio
from typing import Any, Dict, List, Mapping, Tuple

import discord
from dotenv import load_dotenv
from notion_client import AsyncClient

from bot_config import REQUIRED_VARS, Settings, load_settings, mask
from bug_errors import ConfigurationError, RemoteServiceError, notion_errors
from bug_mapper import SCHEMA
from bug_service import NOTION_VERSION


def check_env(env: Mapping[str, str]) -> List[Tuple[str, bool, str]]:
    """(name, present, masked value) for every required variable."""
    out = []
    for name in REQUIRED_VARS:
        v = (env.get(name) or "").strip()
        out.append((name, bool(v), mask(v) if v else "missing"))
    return out


def check_schema(database: Dict[str, Any]) -> List[str]:
    """
    Compare a retrieved Notion database against the properties the bot reads
    and writes. Returns one human readable problem per mismatch.
    """
    props = database.get("properties") or {}
    problems: List[str] = []
    for name, kind in SCHEMA.items():
        p = props.get(name)
        if not isinstance(p, dict):
            problems.append(f"missing property {name!r} (expected {kind})")
        elif p.get("type") != kind:
            problems.append(f"property {name!r} is {p.get('type')!r}, expected {kind!r}")
    return problems


async def check_notion(settings: Settings, notion=None) -> bool:
    if notion is None:
        async with AsyncClient(auth=settings.notion_token, notion_version=NOTION_VERSION) as client:
            return await _check_notion(settings, client)
    return await _check_notion(settings, notion)


async def _check_notion(settings: Settings, notion) -> bool:
    print("\n[notion] authentication")
    try:
        with notion_errors():
            me = await notion.users.me()
        print(f"  ok: authenticated as {me.get('name') or me.get('id')} ({me.get('type')})")
    except RemoteServiceError as e:
        print(f"  FAIL: {e}")
        return False

    print("[notion] database")
    try:
        with notion_errors():
            db = await notion.databases.retrieve(database_id=settings.notion_database_id)
    except RemoteServiceError as e:
        print(f"  FAIL: {e}")
        return False
    title = "".join(t.get("plain_text", "") for t in (db.get("title") or [])) or "Untitled"
    print(f"  ok: {title}")

    problems = check_schema(db)
    for p in problems:
        print(f"  schema: {p}")
    if not problems:
        print("  ok: all expected properties present")
    return not problems


async def check_discord(settings: Settings) -> bool:
    print("\n[discord] REST login")
    client = discord.Client(intents=discord.Intents.none())
    try:
        async with client:
            await client.login(settings.discord_token)
            app = await client.application_info()
            print(f"  ok: application {app.name} id={app.id}")
            if app.id != settings.discord_client_id:
                print(f"  warn: DISCORD_CLIENT_ID={settings.discord_client_id} does not match")
            guild = await client.fetch_guild(settings.discord_guild_id)
            print(f"  ok: guild {guild.name} id={guild.id}")
    except discord.HTTPException as e:
        print(f"  FAIL: {e}")
        return False
    return True


async def run_all(settings: Settings) -> bool:
    results = [await check_notion(settings), await check_discord(settings)]
    return all(results)


def main() -> None:
    load_dotenv()
    print("[env] required variables")
    for name, present, shown in check_env(os.environ):
        print(f"  {'ok' if present else 'FAIL'}: {name} = {shown}")
    try:
        settings = load_settings()
    except ConfigurationError as e:
        print(f"\n[fatal] {e}")
        sys.exit(1)

    ok = asyncio.run(run_all(settings))
    print("\nall checks passed" if ok else "\nsome checks failed")
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
