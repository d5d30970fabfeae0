# bug_commands.py
# The /bug slash command group: add, list, update, assign, complete.

import datetime as dt
import logging
from typing import Awaitable, Callable, Optional

import discord
from discord import app_commands

from bug_embeds import (
    assigned_embed,
    completed_embed,
    created_embed,
    error_embed,
    list_embed,
    updated_embed,
)
from bug_errors import BugTrackerError
from bug_models import BugInput, Priority, Severity, Status

log = logging.getLogger("bugbot.commands")

SEVERITY_CHOICES = [app_commands.Choice(name=s.value, value=s.value) for s in Severity]
PRIORITY_CHOICES = [app_commands.Choice(name=p.value, value=p.value) for p in Priority]
STATUS_CHOICES = [app_commands.Choice(name=s.value, value=s.value) for s in Status]

ASSIGNEE_HELP = "Assign to a Notion user (name or partial name)"


def _opt(val: Optional[str]) -> Optional[str]:
    val = (val or "").strip()
    return val or None


def parse_deadline(val: Optional[str]) -> Optional[str]:
    """Accept YYYY-MM-DD only; Notion rejects anything else with an opaque error."""
    val = _opt(val)
    if val is None:
        return None
    try:
        return dt.date.fromisoformat(val).isoformat()
    except ValueError:
        raise BugTrackerError(f"Deadline must be a date in YYYY-MM-DD format (got {val!r})") from None


class BugCommands(app_commands.Group):
    """
    Every subcommand defers first (Notion round trips can outlast Discord's
    3 second window), then edits the deferred reply with the result, or
    with an error embed carrying the exception text.
    """

    def __init__(self, service):
        super().__init__(name="bug", description="Bug tracker commands")
        self.service = service

    async def _respond(self, interaction: discord.Interaction, sub: str,
                       action: Callable[[], Awaitable[discord.Embed]]) -> None:
        try:
            await interaction.response.defer()
            embed = await action()
            await interaction.edit_original_response(embed=embed)
        except Exception as e:
            if isinstance(e, BugTrackerError):
                log.warning("/bug %s failed: %s", sub, e)
            else:
                log.exception("/bug %s failed", sub)
            err = error_embed(str(e) or e.__class__.__name__)
            if interaction.response.is_done():
                await interaction.edit_original_response(embed=err)
            else:
                await interaction.response.send_message(embed=err, ephemeral=True)

    @app_commands.command(name="add", description="Add a new bug to the tracker")
    @app_commands.describe(
        title="Bug title",
        description="Bug description",
        severity="Bug severity",
        priority="Bug priority",
        assignee=ASSIGNEE_HELP,
        steps="Reproduction steps",
        host="Relevant host/environment",
        deadline="Deadline (YYYY-MM-DD format)",
    )
    @app_commands.choices(severity=SEVERITY_CHOICES, priority=PRIORITY_CHOICES)
    async def add(
        self,
        interaction: discord.Interaction,
        title: str,
        description: str,
        severity: app_commands.Choice[str],
        priority: app_commands.Choice[str],
        assignee: Optional[str] = None,
        steps: Optional[str] = None,
        host: Optional[str] = None,
        deadline: Optional[str] = None,
    ):
        async def action():
            bug = BugInput(
                title=title,
                description=description,
                severity=Severity(severity.value),
                priority=Priority(priority.value),
                assignee=_opt(assignee),
                steps=_opt(steps),
                host=_opt(host),
                deadline=parse_deadline(deadline),
            )
            created = await self.service.create(bug)
            return created_embed(
                created.id, bug.title, bug.description, bug.severity, bug.priority,
                assignee=created.assignee, steps=bug.steps, host=bug.host,
                deadline=bug.deadline,
            )

        await self._respond(interaction, "add", action)

    @app_commands.command(name="list", description="List bugs (fixed bugs hidden unless filtered)")
    @app_commands.describe(status="Filter by status")
    @app_commands.choices(status=STATUS_CHOICES)
    async def list_bugs(
        self,
        interaction: discord.Interaction,
        status: Optional[app_commands.Choice[str]] = None,
    ):
        async def action():
            wanted = Status(status.value) if status else None
            bugs = await self.service.list_bugs(wanted)
            return list_embed(bugs, wanted)

        await self._respond(interaction, "list", action)

    @app_commands.command(name="update", description="Update a bug status")
    @app_commands.rename(bug_id="id")
    @app_commands.describe(bug_id="Bug ID", status="New status", assignee=ASSIGNEE_HELP)
    @app_commands.choices(status=STATUS_CHOICES)
    async def update(
        self,
        interaction: discord.Interaction,
        bug_id: int,
        status: app_commands.Choice[str],
        assignee: Optional[str] = None,
    ):
        async def action():
            new_status = Status(status.value)
            res = await self.service.update_status(bug_id, new_status, _opt(assignee))
            return updated_embed(bug_id, new_status, res.title, res.description, res.assignee)

        await self._respond(interaction, "update", action)

    @app_commands.command(name="assign", description="Assign a bug to someone")
    @app_commands.rename(bug_id="id")
    @app_commands.describe(bug_id="Bug ID", user="Notion user to assign (name or partial name)")
    async def assign(self, interaction: discord.Interaction, bug_id: int, user: str):
        async def action():
            name = await self.service.assign(bug_id, user)
            return assigned_embed(bug_id, name)

        await self._respond(interaction, "assign", action)

    @app_commands.command(name="complete", description="Mark a bug as completed")
    @app_commands.rename(bug_id="id")
    @app_commands.describe(bug_id="Bug ID", assignee=ASSIGNEE_HELP)
    async def complete(
        self,
        interaction: discord.Interaction,
        bug_id: int,
        assignee: Optional[str] = None,
    ):
        async def action():
            res = await self.service.complete(bug_id, _opt(assignee))
            return completed_embed(bug_id, res.title, res.description, res.assignee)

        await self._respond(interaction, "complete", action)
