# bug_service.py
# Bug operations against the Notion database. One remote round trip per
# operation, plus a page read where the caller needs fields Notion assigns
# (Bug ID) or the current title/description for the confirmation.

import logging
from typing import Any, Dict, List, Optional

from notion_client.helpers import async_collect_paginated_api

from bug_errors import BugNotFoundError, UserNotFoundError, notion_errors
from bug_mapper import (
    PROP_ASSIGNEE,
    PROP_BUG_ID,
    PROP_CREATED,
    PROP_STATUS,
    BugRecordMapper,
    parse_bug,
    people_value,
)
from bug_models import (
    Bug,
    BugCreateResult,
    BugInput,
    BugUpdateResult,
    Status,
)
from name_resolver import NameResolver

log = logging.getLogger("bugbot.service")

# The databases/{id}/query endpoint keeps this shape on this API version
NOTION_VERSION = "2022-06-28"


def status_filter(status: Optional[Status]) -> Dict[str, Any]:
    """Default view hides fixed bugs; an explicit status narrows to exactly it."""
    if status is None:
        return {"property": PROP_STATUS, "status": {"does_not_equal": Status.FIXED.value}}
    return {"property": PROP_STATUS, "status": {"equals": Status(status).value}}


def sort_bugs(bugs: List[Bug]) -> List[Bug]:
    """Priority (Urgent first) then severity (High first); stable otherwise."""
    return sorted(bugs, key=Bug.sort_key)


class BugQueryService:
    def __init__(self, notion, database_id: str, resolver: NameResolver,
                 mapper: Optional[BugRecordMapper] = None):
        self._notion = notion
        self.database_id = database_id
        self.resolver = resolver
        self.mapper = mapper or BugRecordMapper(resolver)

    # ----- Notion helpers -----
    async def _query(self, **body: Any) -> Dict[str, Any]:
        body = {k: v for k, v in body.items() if v is not None}
        return await self._notion.request(
            path=f"databases/{self.database_id}/query",
            method="POST",
            body=body,
        )

    async def _retrieve(self, page_id: str) -> Dict[str, Any]:
        with notion_errors():
            return await self._notion.pages.retrieve(page_id=page_id)

    async def _update(self, page_id: str, properties: Dict[str, Any]) -> None:
        with notion_errors():
            await self._notion.pages.update(page_id=page_id, properties=properties)

    # ----- Operations -----
    async def create(self, bug: BugInput) -> BugCreateResult:
        props, person = await self.mapper.creation_properties(bug)
        with notion_errors():
            created = await self._notion.pages.create(
                parent={"database_id": self.database_id},
                properties=props,
            )
        page = parse_bug(await self._retrieve(created["id"]))
        log.info("Created bug #%s (%s) %r", page.id, created["id"], bug.title)
        return BugCreateResult(
            id=page.id,
            page_id=created["id"],
            assignee=person.name if person else None,
        )

    async def list_bugs(self, status: Optional[Status] = None) -> List[Bug]:
        with notion_errors():
            pages = await async_collect_paginated_api(
                self._query,
                filter=status_filter(status),
                sorts=[{"property": PROP_CREATED, "direction": "descending"}],
            )
        bugs = [parse_bug(p) for p in pages if isinstance(p, dict) and "properties" in p]
        return sort_bugs(bugs)

    async def find_by_number(self, number: int) -> str:
        """Return the Notion page id of bug `number`."""
        with notion_errors():
            resp = await self._query(
                filter={"property": PROP_BUG_ID, "unique_id": {"equals": int(number)}},
                page_size=1,
            )
        results = resp.get("results") or []
        if not results:
            raise BugNotFoundError(number)
        return results[0]["id"]

    async def _set_status(self, number: int, status: Status, assignee: Optional[str],
                          completed: bool) -> BugUpdateResult:
        page_id = await self.find_by_number(number)
        current = parse_bug(await self._retrieve(page_id))
        props, person = await self.mapper.status_properties(
            status, assignee, completed=completed)
        await self._update(page_id, props)
        log.info("Bug #%s -> %s%s", number, Status(status).value,
                 f" (assignee {person.name})" if person else "")
        return BugUpdateResult(
            title=current.title,
            description=current.description,
            assignee=person.name if person else None,
        )

    async def update_status(self, number: int, status: Status,
                            assignee: Optional[str] = None) -> BugUpdateResult:
        return await self._set_status(number, status, assignee, completed=False)

    async def complete(self, number: int, assignee: Optional[str] = None) -> BugUpdateResult:
        return await self._set_status(number, Status.FIXED, assignee, completed=True)

    async def assign(self, number: int, query: str) -> str:
        """Explicit assignment: an unresolvable user is an error, not a no-op."""
        page_id = await self.find_by_number(number)
        person = await self.resolver.resolve(query)
        if person is None:
            roster = await self.resolver.list_roster()
            raise UserNotFoundError(query, [p.name for p in roster if p.name])
        await self._update(page_id, {PROP_ASSIGNEE: people_value(person)})
        log.info("Bug #%s assigned to %s", number, person.name)
        return person.name
