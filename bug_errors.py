# bug_errors.py
# Errors raised by the bug tracker. Everything except ConfigurationError is
# turned into an error embed by the /bug command handler.

import contextlib
from typing import Iterable

from notion_client.errors import HTTPResponseError, RequestTimeoutError


class BugTrackerError(Exception):
    """Base class for errors that can be shown to a Discord user verbatim."""


class BugNotFoundError(BugTrackerError):
    def __init__(self, number: int):
        self.number = number
        super().__init__(f"Bug #{number} not found")


class UserNotFoundError(BugTrackerError):
    def __init__(self, query: str, available: Iterable[str] = ()):
        self.query = query
        self.available = list(available)
        msg = f'No Notion user matches "{query}".'
        if self.available:
            msg += " Available users: " + ", ".join(self.available)
        else:
            msg += " No Notion users are visible to the integration."
        super().__init__(msg)


class RemoteServiceError(BugTrackerError):
    """Transport, auth or validation failure reported by Notion."""


class ConfigurationError(Exception):
    """Required configuration is missing or malformed; the bot must not start."""


@contextlib.contextmanager
def notion_errors():
    """Re-raise notion_client failures as RemoteServiceError, message untouched."""
    try:
        yield
    except (HTTPResponseError, RequestTimeoutError) as e:
        raise RemoteServiceError(str(e)) from e
