# name_resolver.py
# Resolve a free-text assignee ("jon", "smith jon", "Jon Smith") to a Notion
# workspace member.

import logging
import time
from typing import Any, Callable, Dict, List, Optional, Sequence

from notion_client.helpers import async_collect_paginated_api

from bug_errors import notion_errors
from bug_models import PersonRecord

log = logging.getLogger("bugbot.roster")

ROSTER_TTL_SECONDS = 300


def _norm(s: Optional[str]) -> str:
    return (s or "").strip().lower()


def match_person(query: str, roster: Sequence[PersonRecord]) -> Optional[PersonRecord]:
    """
    Staged match, case-insensitive and whitespace-trimmed:
      1) exact name
      2) first entry (roster order) whose name contains the query, or whose
         name is contained in the query
      3) first entry whose name contains every word of the query
    """
    q = _norm(query)
    if not q:
        return None

    named = [(p, _norm(p.name)) for p in roster]
    named = [(p, n) for p, n in named if n]

    for p, n in named:
        if n == q:
            return p

    for p, n in named:
        if q in n or n in q:
            return p

    words = q.split()
    for p, n in named:
        if all(w in n for w in words):
            return p

    return None


def person_from_user(user: Dict[str, Any]) -> Optional[PersonRecord]:
    """Notion user object -> PersonRecord, or None for bots / nameless users."""
    if user.get("type") != "person":
        return None
    uid = user.get("id")
    if not uid:
        return None
    email = (user.get("person") or {}).get("email")
    return PersonRecord(id=uid, name=user.get("name") or "", email=email)


class RosterCache:
    """Whole-roster snapshot plus the monotonic time it was fetched."""

    def __init__(self, ttl_seconds: float = ROSTER_TTL_SECONDS,
                 clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self.entries: Optional[List[PersonRecord]] = None
        self.fetched_at: float = 0.0

    def fresh(self) -> Optional[List[PersonRecord]]:
        if self.entries is None:
            return None
        if self._clock() - self.fetched_at >= self.ttl_seconds:
            return None
        return self.entries

    def replace(self, entries: List[PersonRecord]) -> None:
        self.entries, self.fetched_at = entries, self._clock()


class NameResolver:
    def __init__(self, notion, cache: Optional[RosterCache] = None):
        self._notion = notion
        self.cache = cache or RosterCache()

    async def list_roster(self) -> List[PersonRecord]:
        cached = self.cache.fresh()
        if cached is not None:
            return cached

        with notion_errors():
            users = await async_collect_paginated_api(self._notion.users.list)
        people = [p for p in (person_from_user(u) for u in users) if p is not None]
        self.cache.replace(people)
        log.info("Roster refreshed: %d person(s) of %d user(s)", len(people), len(users))
        return people

    async def resolve(self, query: str) -> Optional[PersonRecord]:
        if not _norm(query):
            return None
        person = match_person(query, await self.list_roster())
        if person:
            log.debug("Resolved %r -> %s (%s)", query, person.name, person.id)
        return person
