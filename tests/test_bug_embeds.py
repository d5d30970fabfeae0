import discord

from bug_embeds import (
    FIELD_LIMIT,
    LIST_LIMIT,
    PRIORITY_EMOJI,
    SEVERITY_EMOJI,
    STATUS_EMOJI,
    assigned_embed,
    completed_embed,
    created_embed,
    error_embed,
    format_bug_line,
    list_embed,
    updated_embed,
)
from bug_models import Bug, Priority, Severity, Status


def fields(embed):
    return {f.name: f.value for f in embed.fields}


def test_every_enum_value_has_an_emoji():
    assert set(STATUS_EMOJI) == set(Status)
    assert set(SEVERITY_EMOJI) == set(Severity)
    assert set(PRIORITY_EMOJI) == set(Priority)


def test_format_bug_line():
    b = Bug(id=12, page_id="p", title="Crash on save", status=Status.TEMP_FIX,
            severity=Severity.HIGH, priority=Priority.URGENT, assignee="Jon Smith")
    assert format_bug_line(b) == (
        "**#12** │ Crash on save\n"
        "🟣 Temp Fix · 🔴 High · 🚨 Urgent · 👤 Jon Smith"
    )


def test_list_embed_caps_rendered_bugs():
    bugs = [Bug(id=n, page_id=f"p{n}", title=f"bug {n}") for n in range(1, 13)]
    e = list_embed(bugs)
    assert e.title == "🐛 Bug Tracker - 12 bugs"
    assert e.description.count("**#") == LIST_LIMIT
    assert "**#11**" not in e.description
    assert e.fields[-1].value == "*...and 2 more bugs*"


def test_list_embed_single_bug_with_filter():
    e = list_embed([Bug(id=1, page_id="p", title="only")], Status.OPEN)
    assert e.title == "🐛 Bug Tracker - 1 bug (Open)"
    assert e.fields == []


def test_list_embed_empty():
    assert "Create one with `/bug add`" in list_embed([]).description
    filtered = list_embed([], Status.NON_ISSUE)
    assert "No bugs found with status: **Non Issue**" in filtered.description


def test_created_embed_fields():
    e = created_embed(42, "Title", "Desc", Severity.LOW, Priority.HIGH,
                      steps="1. do it", host="web-1")
    f = fields(e)
    assert e.title == "✅ Bug Created Successfully"
    assert e.color == discord.Color.green()
    assert f["Bug ID"] == "#42"
    assert f["Status"] == "🔵 Open"
    assert f["Severity"] == "🟢 Low"
    assert f["Priority"] == "⬆️ High"
    assert f["Assignee"] == "Unassigned"
    assert f["Reproduction Steps"] == "1. do it"
    assert f["Environment"] == "web-1"
    assert "Deadline" not in f
    assert e.footer.text == "Bug Tracker"


def test_long_values_are_clipped():
    e = created_embed(1, "t", "x" * 5000, Severity.LOW, Priority.LOW)
    desc = fields(e)["Description"]
    assert len(desc) == FIELD_LIMIT
    assert desc.endswith("…")


def test_updated_and_completed_embeds():
    u = updated_embed(3, Status.IN_PROGRESS, "T", "", assignee="Maria Garcia")
    assert fields(u)["New Status"] == "🟠 In Progress"
    assert fields(u)["Description"] == "–"
    assert fields(u)["Assignee"] == "Maria Garcia"

    c = completed_embed(3, "T", "D")
    assert fields(c)["Status"] == "✅ Fixed"
    assert "Assignee" not in fields(c)


def test_assigned_and_error_embeds():
    a = assigned_embed(7, "Jon Smith")
    assert fields(a) == {"Bug ID": "#7", "Assignee": "Jon Smith"}
    err = error_embed("Bug #7 not found")
    assert err.title == "❌ Error"
    assert err.description == "Bug #7 not found"
    assert err.color == discord.Color.red()
