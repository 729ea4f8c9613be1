"""Task domain types and the status state machine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from teamtrack.core.exceptions import DomainError


class TaskStatus(str, Enum):
    """Lifecycle states of a task."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    DONE = "done"

    @classmethod
    def parse(cls, value: TaskStatus | str) -> TaskStatus:
        """Coerce a raw value, raising DomainError for unknown statuses."""
        try:
            return cls(value)
        except ValueError:
            raise DomainError(f"Invalid task status: {value!r}") from None


class TaskPriority(str, Enum):
    """Priorities supported by the task workflow."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    @classmethod
    def parse(cls, value: TaskPriority | str) -> TaskPriority:
        """Coerce a raw value, raising DomainError for unknown priorities."""
        try:
            return cls(value)
        except ValueError:
            raise DomainError(f"Invalid task priority: {value!r}") from None


# Allowed transitions. Anything not listed (self-transitions included) is rejected.
TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.TODO: frozenset({TaskStatus.IN_PROGRESS, TaskStatus.BLOCKED, TaskStatus.DONE}),
    TaskStatus.IN_PROGRESS: frozenset({TaskStatus.BLOCKED, TaskStatus.DONE}),
    TaskStatus.BLOCKED: frozenset({TaskStatus.IN_PROGRESS, TaskStatus.DONE}),
    TaskStatus.DONE: frozenset(),
}


def can_transition(current: TaskStatus, target: TaskStatus) -> bool:
    """Whether the transition table allows ``current -> target``."""
    return target in TRANSITIONS.get(current, frozenset())


class _Unset:
    """Marker for "field not provided" in partial updates."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


def _clean_tags(tags: list[str] | None) -> list[str]:
    if not tags:
        return []
    cleaned: list[str] = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


@dataclass
class Task:
    """Task aggregate.

    Owns its status and priority; status only moves along TRANSITIONS.

    Attributes:
        id: Task identifier.
        title: Non-blank title.
        project_id: The project the task belongs to.
        created_by: User who created the task.
        description: Optional free text.
        assignee_id: User the task is assigned to, if any.
        status: Current lifecycle state.
        priority: Current priority.
        due_date: Optional deadline.
        tags: Labels, deduplicated in insertion order.
    """

    id: str
    title: str
    project_id: str
    created_by: str
    description: str | None = None
    assignee_id: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = None
    tags: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.title = self._validated_title(self.title)
        self.status = TaskStatus.parse(self.status)
        self.priority = TaskPriority.parse(self.priority)
        self.tags = _clean_tags(self.tags)
        if self.assignee_id is not None and not self.assignee_id.strip():
            raise DomainError("Assignee id is required")

    @property
    def is_done(self) -> bool:
        """Whether the task reached its terminal state."""
        return self.status is TaskStatus.DONE

    def change_status(self, next_status: TaskStatus | str) -> None:
        """Move the task to another status.

        Raises:
            DomainError: If the value is unknown or the transition is not allowed.
        """
        target = TaskStatus.parse(next_status)
        if not can_transition(self.status, target):
            raise DomainError(
                f"Invalid status transition: {self.status.value} -> {target.value}"
            )
        self.status = target

    def assign_to(self, user_id: str) -> None:
        """Assign the task to a user.

        Raises:
            DomainError: If the id is empty or blank.
        """
        if not user_id or not user_id.strip():
            raise DomainError("Assignee id is required")
        self.assignee_id = user_id

    def update_details(
        self,
        title: str = UNSET,
        description: str | None = UNSET,
        priority: TaskPriority | str = UNSET,
        due_date: datetime | None = UNSET,
        tags: list[str] | None = UNSET,
    ) -> None:
        """Apply a partial update. Omitted fields are left untouched.

        All values are validated before any field changes.

        Raises:
            DomainError: If the title is blank or the priority unknown.
        """
        new_title = self.title if title is UNSET else self._validated_title(title)
        new_priority = self.priority if priority is UNSET else TaskPriority.parse(priority)

        self.title = new_title
        self.priority = new_priority
        if description is not UNSET:
            self.description = description
        if due_date is not UNSET:
            self.due_date = due_date
        if tags is not UNSET:
            self.tags = _clean_tags(tags)

    @staticmethod
    def _validated_title(title: str | None) -> str:
        if not title or not title.strip():
            raise DomainError("Task title is required")
        return title.strip()


@dataclass(frozen=True)
class TaskFilters:
    """Optional constraints for task listings. ``None`` means "any"."""

    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    assignee_id: str | None = None

    @classmethod
    def parse(
        cls,
        status: TaskStatus | str | None = None,
        priority: TaskPriority | str | None = None,
        assignee_id: str | None = None,
    ) -> TaskFilters:
        """Build filters from raw values.

        Raises:
            DomainError: If the status or priority is unknown, or the
                assignee id is blank.
        """
        if assignee_id is not None and not assignee_id.strip():
            raise DomainError("Assignee id filter cannot be blank")
        return cls(
            status=TaskStatus.parse(status) if status is not None else None,
            priority=TaskPriority.parse(priority) if priority is not None else None,
            assignee_id=assignee_id,
        )

    def matches(self, task: Task) -> bool:
        """Whether a task satisfies every set constraint."""
        if self.status is not None and task.status is not self.status:
            return False
        if self.priority is not None and task.priority is not self.priority:
            return False
        return self.assignee_id is None or task.assignee_id == self.assignee_id
