# bug_embeds.py
# Discord rendering for /bug replies.

from typing import List, Optional

import discord

from bug_models import UNASSIGNED, Bug, BugNumber, Priority, Severity, Status

FOOTER = "Bug Tracker"
LIST_LIMIT = 10
FIELD_LIMIT = 1024          # Discord embed field value limit
DESCRIPTION_LIMIT = 4096    # Discord embed description limit
BLANK = "\u200b"

SEVERITY_EMOJI = {
    Severity.HIGH: "🔴",
    Severity.MEDIUM: "🟡",
    Severity.LOW: "🟢",
}

PRIORITY_EMOJI = {
    Priority.URGENT: "🚨",
    Priority.HIGH: "⬆️",
    Priority.MEDIUM: "➡️",
    Priority.LOW: "⬇️",
}

STATUS_EMOJI = {
    Status.OPEN: "🔵",
    Status.IN_PROGRESS: "🟠",
    Status.TEMP_FIX: "🟣",
    Status.FIXED: "✅",
    Status.NON_ISSUE: "⚪",
}


def _clip(val: Optional[str], limit: int = FIELD_LIMIT) -> str:
    """Fit a value into an embed slot; Discord rejects empty field values."""
    s = (val or "").strip()
    if not s:
        return "–"
    return s if len(s) <= limit else s[: limit - 1] + "…"


def severity_label(severity: Severity) -> str:
    return f"{SEVERITY_EMOJI.get(severity, '⚪')} {Severity(severity).value}"


def priority_label(priority: Priority) -> str:
    return f"{PRIORITY_EMOJI.get(priority, '➡️')} {Priority(priority).value}"


def status_label(status: Status) -> str:
    return f"{STATUS_EMOJI.get(status, '🔵')} {Status(status).value}"


def format_bug_line(bug: Bug) -> str:
    return (
        f"**#{bug.id}** │ {bug.title}\n"
        f"{status_label(bug.status)} · {severity_label(bug.severity)} · "
        f"{priority_label(bug.priority)} · 👤 {bug.assignee}"
    )


def _embed(title: str, color: discord.Color) -> discord.Embed:
    e = discord.Embed(title=title, color=color, timestamp=discord.utils.utcnow())
    e.set_footer(text=FOOTER)
    return e


def created_embed(bug_id: BugNumber, title: str, description: str,
                  severity: Severity, priority: Priority,
                  assignee: Optional[str] = None, steps: Optional[str] = None,
                  host: Optional[str] = None, deadline: Optional[str] = None) -> discord.Embed:
    e = _embed("✅ Bug Created Successfully", discord.Color.green())
    e.add_field(name="Bug ID", value=f"#{bug_id}", inline=True)
    e.add_field(name="Status", value=status_label(Status.OPEN), inline=True)
    e.add_field(name=BLANK, value=BLANK, inline=True)
    e.add_field(name="Title", value=_clip(title), inline=False)
    e.add_field(name="Description", value=_clip(description), inline=False)
    e.add_field(name="Severity", value=severity_label(severity), inline=True)
    e.add_field(name="Priority", value=priority_label(priority), inline=True)
    e.add_field(name="Assignee", value=_clip(assignee or UNASSIGNED), inline=True)
    if steps:
        e.add_field(name="Reproduction Steps", value=_clip(steps), inline=False)
    if host:
        e.add_field(name="Environment", value=_clip(host), inline=True)
    if deadline:
        e.add_field(name="Deadline", value=_clip(deadline), inline=True)
    return e


def list_embed(bugs: List[Bug], status: Optional[Status] = None) -> discord.Embed:
    e = _embed("🐛 Bug Tracker", discord.Color.blurple())
    if not bugs:
        if status:
            e.description = (
                f"No bugs found with status: **{Status(status).value}**\n\n"
                "Try a different filter or view all bugs with `/bug list`"
            )
        else:
            e.description = "No bugs found.\n\nCreate one with `/bug add`"
        return e

    filter_text = f" ({Status(status).value})" if status else ""
    plural = "s" if len(bugs) > 1 else ""
    e.title = f"🐛 Bug Tracker - {len(bugs)} bug{plural}{filter_text}"
    lines = "\n\n".join(format_bug_line(b) for b in bugs[:LIST_LIMIT])
    e.description = _clip(lines, DESCRIPTION_LIMIT)
    if len(bugs) > LIST_LIMIT:
        e.add_field(name=BLANK, value=f"*...and {len(bugs) - LIST_LIMIT} more bugs*", inline=False)
    return e


def updated_embed(bug_id: int, status: Status, title: str, description: str,
                  assignee: Optional[str] = None) -> discord.Embed:
    e = _embed("🔄 Bug Updated", discord.Color.yellow())
    e.add_field(name="Bug ID", value=f"#{bug_id}", inline=True)
    e.add_field(name="New Status", value=status_label(status), inline=True)
    e.add_field(name=BLANK, value=BLANK, inline=True)
    e.add_field(name="Title", value=_clip(title), inline=False)
    e.add_field(name="Description", value=_clip(description), inline=False)
    if assignee:
        e.add_field(name="Assignee", value=_clip(assignee), inline=True)
    return e


def assigned_embed(bug_id: int, assignee: str) -> discord.Embed:
    e = _embed("👤 Bug Assigned", discord.Color.blurple())
    e.add_field(name="Bug ID", value=f"#{bug_id}", inline=True)
    e.add_field(name="Assignee", value=_clip(assignee), inline=True)
    return e


def completed_embed(bug_id: int, title: str, description: str,
                    assignee: Optional[str] = None) -> discord.Embed:
    e = _embed("✅ Bug Completed", discord.Color.green())
    e.add_field(name="Bug ID", value=f"#{bug_id}", inline=True)
    e.add_field(name="Status", value=status_label(Status.FIXED), inline=True)
    e.add_field(name=BLANK, value=BLANK, inline=True)
    e.add_field(name="Title", value=_clip(title), inline=False)
    e.add_field(name="Description", value=_clip(description), inline=False)
    if assignee:
        e.add_field(name="Assignee", value=_clip(assignee), inline=True)
    return e


def error_embed(message: str) -> discord.Embed:
    e = discord.Embed(title="❌ Error", description=_clip(message, DESCRIPTION_LIMIT),
                      color=discord.Color.red())
    e.set_footer(text="Please check the bug ID and try again")
    return e
