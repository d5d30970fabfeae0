# bug_models.py
# Value types shared by the resolver, mapper, service and Discord layer.

import enum
from dataclasses import dataclass
from typing import Optional, Union


class Status(str, enum.Enum):
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    TEMP_FIX = "Temp Fix"
    FIXED = "Fixed"
    NON_ISSUE = "Non Issue"


class Severity(str, enum.Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Priority(str, enum.Enum):
    URGENT = "Urgent"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


# Lower rank sorts first
PRIORITY_RANK = {
    Priority.URGENT: 0,
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
}
SEVERITY_RANK = {
    Severity.HIGH: 0,
    Severity.MEDIUM: 1,
    Severity.LOW: 2,
}

UNASSIGNED = "Unassigned"
NO_BUG_ID = "N/A"

BugNumber = Union[int, str]


@dataclass(frozen=True)
class PersonRecord:
    """A Notion workspace member that bugs can be assigned to."""
    id: str
    name: str
    email: Optional[str] = None


@dataclass(frozen=True)
class BugInput:
    """Options collected by `/bug add`."""
    title: str
    description: str
    severity: Severity
    priority: Priority
    assignee: Optional[str] = None
    steps: Optional[str] = None
    host: Optional[str] = None
    deadline: Optional[str] = None


@dataclass(frozen=True)
class Bug:
    id: BugNumber
    page_id: str
    title: str
    description: str = ""
    status: Status = Status.OPEN
    severity: Severity = Severity.MEDIUM
    priority: Priority = Priority.MEDIUM
    assignee: str = UNASSIGNED
    steps: Optional[str] = None
    host: Optional[str] = None
    deadline: Optional[str] = None
    created_at: Optional[str] = None
    completed_at: Optional[str] = None

    def sort_key(self):
        return (PRIORITY_RANK[self.priority], SEVERITY_RANK[self.severity])


@dataclass(frozen=True)
class BugCreateResult:
    id: BugNumber
    page_id: str
    assignee: Optional[str] = None


@dataclass(frozen=True)
class BugUpdateResult:
    title: str
    description: str
    assignee: Optional[str] = None
