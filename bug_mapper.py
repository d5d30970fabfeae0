# bug_mapper.py
# Translate between bot-side records and Notion's per-page property bags.
#
# Property names are part of the database contract and must match exactly.

import datetime as dt
import enum
import logging
from typing import Any, Callable, Dict, Optional, Tuple, Type, TypeVar

from bug_errors import RemoteServiceError
from bug_models import (
    NO_BUG_ID,
    UNASSIGNED,
    Bug,
    BugInput,
    PersonRecord,
    Priority,
    Severity,
    Status,
)

log = logging.getLogger("bugbot.mapper")

PROP_TITLE = "Title"
PROP_DESCRIPTION = "Description"
PROP_STATUS = "Status"
PROP_SEVERITY = "Severity"
PROP_PRIORITY = "Priority"
PROP_ASSIGNEE = "Assignee"
PROP_BUG_ID = "Bug ID"
PROP_CREATED = "Date Created"
PROP_COMPLETED = "Date Completed"
PROP_STEPS = "Reproduction Steps"
PROP_HOST = "Relevant Host"
PROP_DEADLINE = "Deadline"

# Expected Notion property type per name (used by diagnostics)
SCHEMA = {
    PROP_TITLE: "title",
    PROP_DESCRIPTION: "rich_text",
    PROP_STATUS: "status",
    PROP_SEVERITY: "select",
    PROP_PRIORITY: "select",
    PROP_ASSIGNEE: "people",
    PROP_BUG_ID: "unique_id",
    PROP_CREATED: "date",
    PROP_COMPLETED: "date",
    PROP_STEPS: "rich_text",
    PROP_HOST: "rich_text",
    PROP_DEADLINE: "date",
}

E = TypeVar("E", bound=enum.Enum)


def utc_today() -> str:
    return dt.datetime.now(dt.timezone.utc).date().isoformat()


# -----------------------------------------------------------------------------
# Outgoing property values
# -----------------------------------------------------------------------------

def title_value(text: str) -> Dict[str, Any]:
    return {"title": [{"text": {"content": text}}]}


def rich_text_value(text: str) -> Dict[str, Any]:
    return {"rich_text": [{"text": {"content": text}}]}


def status_value(status: Status) -> Dict[str, Any]:
    return {"status": {"name": Status(status).value}}


def select_value(name: str) -> Dict[str, Any]:
    return {"select": {"name": name}}


def date_value(iso: str) -> Dict[str, Any]:
    return {"date": {"start": iso}}


def people_value(person: PersonRecord) -> Dict[str, Any]:
    return {"people": [{"object": "user", "id": person.id}]}


class BugRecordMapper:
    """
    Builds Notion property payloads for create/update and resolves optional
    assignees on the way. `resolver` needs an async `resolve(query)`.
    """

    def __init__(self, resolver, today: Callable[[], str] = utc_today):
        self._resolver = resolver
        self._today = today

    async def assignee_property(
        self, query: Optional[str]
    ) -> Tuple[Optional[Dict[str, Any]], Optional[PersonRecord]]:
        """
        Implicit assignment (create / update / complete). An unknown name or an
        unreachable roster leaves the bug unassigned instead of failing.
        """
        if not query or not query.strip():
            return None, None
        try:
            person = await self._resolver.resolve(query)
        except RemoteServiceError as e:
            log.warning("Roster unavailable, leaving %r unassigned: %s", query, e)
            return None, None
        if person is None:
            log.info("No Notion user matches %r; leaving unassigned", query)
            return None, None
        return people_value(person), person

    async def creation_properties(
        self, bug: BugInput
    ) -> Tuple[Dict[str, Any], Optional[PersonRecord]]:
        props: Dict[str, Any] = {
            PROP_TITLE: title_value(bug.title),
            PROP_DESCRIPTION: rich_text_value(bug.description),
            PROP_STATUS: status_value(Status.OPEN),
            PROP_SEVERITY: select_value(Severity(bug.severity).value),
            PROP_PRIORITY: select_value(Priority(bug.priority).value),
            PROP_CREATED: date_value(self._today()),
        }
        if bug.steps:
            props[PROP_STEPS] = rich_text_value(bug.steps)
        if bug.host:
            props[PROP_HOST] = rich_text_value(bug.host)
        if bug.deadline:
            props[PROP_DEADLINE] = date_value(bug.deadline)

        assignee, person = await self.assignee_property(bug.assignee)
        if assignee:
            props[PROP_ASSIGNEE] = assignee
        return props, person

    async def status_properties(
        self, status: Status, assignee: Optional[str] = None, completed: bool = False
    ) -> Tuple[Dict[str, Any], Optional[PersonRecord]]:
        props: Dict[str, Any] = {PROP_STATUS: status_value(status)}
        if completed:
            props[PROP_COMPLETED] = date_value(self._today())
        prop, person = await self.assignee_property(assignee)
        if prop:
            props[PROP_ASSIGNEE] = prop
        return props, person


# -----------------------------------------------------------------------------
# Incoming pages -> Bug
# -----------------------------------------------------------------------------

def _prop(props: Dict[str, Any], name: str, kind: str) -> Any:
    p = props.get(name)
    if not isinstance(p, dict):
        return None
    return p.get(kind)


def _plain_text(segments: Any) -> Optional[str]:
    if not isinstance(segments, list):
        return None
    parts = []
    for seg in segments:
        if not isinstance(seg, dict):
            continue
        txt = seg.get("plain_text")
        if txt is None:
            txt = (seg.get("text") or {}).get("content")
        if txt:
            parts.append(str(txt))
    return "".join(parts) or None


def _named(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        name = value.get("name")
        if isinstance(name, str) and name:
            return name
    return None


def _enum(cls: Type[E], name: Optional[str], default: E) -> E:
    try:
        return cls(name)
    except ValueError:
        return default


def _date(props: Dict[str, Any], name: str) -> Optional[str]:
    d = _prop(props, name, "date")
    if isinstance(d, dict) and d.get("start"):
        return str(d["start"])
    return None


def _bug_number(props: Dict[str, Any]):
    uid = _prop(props, PROP_BUG_ID, "unique_id")
    if isinstance(uid, dict) and isinstance(uid.get("number"), int):
        return uid["number"]
    return NO_BUG_ID


def _assignee_name(props: Dict[str, Any]) -> str:
    people = _prop(props, PROP_ASSIGNEE, "people")
    if isinstance(people, list):
        names = [_named(p) for p in people]
        names = [n for n in names if n]
        if names:
            return ", ".join(names)
    # databases that still keep Assignee as plain text
    return _plain_text(_prop(props, PROP_ASSIGNEE, "rich_text")) or UNASSIGNED


def parse_bug(page: Any) -> Bug:
    """Flatten a Notion page object into a Bug; never raises on bad shapes."""
    if not isinstance(page, dict):
        page = {}
    props = page.get("properties")
    if not isinstance(props, dict):
        props = {}

    return Bug(
        id=_bug_number(props),
        page_id=str(page.get("id") or ""),
        title=_plain_text(_prop(props, PROP_TITLE, "title")) or "Untitled",
        description=_plain_text(_prop(props, PROP_DESCRIPTION, "rich_text")) or "",
        status=_enum(Status, _named(_prop(props, PROP_STATUS, "status")), Status.OPEN),
        severity=_enum(Severity, _named(_prop(props, PROP_SEVERITY, "select")), Severity.MEDIUM),
        priority=_enum(Priority, _named(_prop(props, PROP_PRIORITY, "select")), Priority.MEDIUM),
        assignee=_assignee_name(props),
        steps=_plain_text(_prop(props, PROP_STEPS, "rich_text")),
        host=_plain_text(_prop(props, PROP_HOST, "rich_text")),
        deadline=_date(props, PROP_DEADLINE),
        created_at=_date(props, PROP_CREATED),
        completed_at=_date(props, PROP_COMPLETED),
    )
