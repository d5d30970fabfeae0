import pytest
from notion_client.errors import RequestTimeoutError

from bug_mapper import (
    PROP_ASSIGNEE,
    PROP_COMPLETED,
    PROP_CREATED,
    PROP_DEADLINE,
    PROP_HOST,
    PROP_STATUS,
    PROP_STEPS,
    BugRecordMapper,
    parse_bug,
)
from bug_models import BugInput, Priority, Severity, Status
from tests.fakes import make_page
from name_resolver import NameResolver


def mapper_for(notion):
    return BugRecordMapper(NameResolver(notion), today=lambda: "2026-10-18")


def sample_input(**kw):
    base = dict(title="Login broken", description="500 on submit",
                severity=Severity.HIGH, priority=Priority.URGENT)
    base.update(kw)
    return BugInput(**base)


@pytest.mark.asyncio
async def test_creation_properties_required_fields_only(notion):
    props, person = await mapper_for(notion).creation_properties(sample_input())
    assert person is None
    assert set(props) == {"Title", "Description", "Status", "Severity", "Priority", PROP_CREATED}
    assert props["Title"] == {"title": [{"text": {"content": "Login broken"}}]}
    assert props[PROP_STATUS] == {"status": {"name": "Open"}}
    assert props["Severity"] == {"select": {"name": "High"}}
    assert props["Priority"] == {"select": {"name": "Urgent"}}
    assert props[PROP_CREATED] == {"date": {"start": "2026-10-18"}}
    assert None not in props.values()


@pytest.mark.asyncio
async def test_creation_properties_optional_fields(notion):
    bug = sample_input(assignee="maria", steps="1. open\n2. click", host="staging-2",
                       deadline="2026-11-01")
    props, person = await mapper_for(notion).creation_properties(bug)
    assert person.name == "Maria Garcia"
    assert props[PROP_ASSIGNEE] == {"people": [{"object": "user", "id": "u-3"}]}
    assert props[PROP_STEPS] == {"rich_text": [{"text": {"content": "1. open\n2. click"}}]}
    assert props[PROP_HOST] == {"rich_text": [{"text": {"content": "staging-2"}}]}
    assert props[PROP_DEADLINE] == {"date": {"start": "2026-11-01"}}


@pytest.mark.asyncio
async def test_unresolved_assignee_is_left_out(notion):
    props, person = await mapper_for(notion).creation_properties(sample_input(assignee="ghost"))
    assert person is None
    assert PROP_ASSIGNEE not in props


@pytest.mark.asyncio
async def test_roster_failure_degrades_to_unassigned(notion):
    notion.fail = RequestTimeoutError()
    prop, person = await mapper_for(notion).assignee_property("jon")
    assert (prop, person) == (None, None)


@pytest.mark.asyncio
async def test_status_properties_for_completion(notion):
    props, person = await mapper_for(notion).status_properties(
        Status.FIXED, "jonathan", completed=True)
    assert props[PROP_STATUS] == {"status": {"name": "Fixed"}}
    assert props[PROP_COMPLETED] == {"date": {"start": "2026-10-18"}}
    assert props[PROP_ASSIGNEE]["people"][0]["id"] == "u-2"
    assert person.name == "Jonathan Lee"


def test_parse_bug_full_page():
    bug = parse_bug(make_page(7, "Crash", status="In Progress", severity="Low",
                              priority="High", description="boom", assignee="Jon Smith"))
    assert bug.id == 7
    assert bug.page_id == "page-7"
    assert bug.title == "Crash"
    assert bug.description == "boom"
    assert bug.status is Status.IN_PROGRESS
    assert bug.severity is Severity.LOW
    assert bug.priority is Priority.HIGH
    assert bug.assignee == "Jon Smith"


@pytest.mark.parametrize("page", [
    {},
    None,
    {"id": "p", "properties": []},
    {"id": "p", "properties": {"Title": "oops", "Status": {"status": None},
                               "Bug ID": {"unique_id": {"number": "seven"}},
                               "Assignee": {"people": [{"id": "u"}]}}},
])
def test_parse_bug_fallbacks(page):
    bug = parse_bug(page)
    assert bug.id == "N/A"
    assert bug.title == "Untitled"
    assert bug.description == ""
    assert bug.status is Status.OPEN
    assert bug.severity is Severity.MEDIUM
    assert bug.priority is Priority.MEDIUM
    assert bug.assignee == "Unassigned"


def test_parse_bug_unknown_option_names_fall_back():
    bug = parse_bug(make_page(3, "x", status="Closed", severity="Critical", priority="P0"))
    assert (bug.status, bug.severity, bug.priority) == (Status.OPEN, Severity.MEDIUM, Priority.MEDIUM)


def test_parse_bug_joins_rich_text_segments():
    page = make_page(4, "x")
    page["properties"]["Description"]["rich_text"] = [
        {"plain_text": "first "}, {"text": {"content": "second"}}]
    assert parse_bug(page).description == "first second"


def test_parse_bug_text_assignee_column():
    page = make_page(5, "x")
    page["properties"]["Assignee"] = {"type": "rich_text", "rich_text": [{"plain_text": "Jon"}]}
    assert parse_bug(page).assignee == "Jon"


@pytest.mark.asyncio
async def test_round_trip_preserves_user_fields(notion):
    original = sample_input(severity=Severity.LOW, priority=Priority.MEDIUM,
                            steps="step", host="web-1", deadline="2026-12-24")
    props, _ = await mapper_for(notion).creation_properties(original)
    bug = parse_bug({"id": "page-x", "properties": props})
    assert (bug.title, bug.description, bug.severity, bug.priority) == (
        original.title, original.description, original.severity, original.priority)
    assert (bug.steps, bug.host, bug.deadline) == ("step", "web-1", "2026-12-24")
    assert bug.created_at == "2026-10-18"
    assert bug.status is Status.OPEN
