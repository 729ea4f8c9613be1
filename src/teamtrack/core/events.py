"""Domain events emitted by the task workflow.

Events are immutable records published after a change has been saved.
They carry ids only, never aggregates, so subscribers load whatever
state they need themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import ClassVar, Literal

EventType = Literal[
    "task_created",
    "task_updated",
    "task_assigned",
    "task_status_changed",
]


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class DomainEvent:
    """Base class for immutable domain events.

    Attributes:
        task_id: The task the event is about.
        project_id: The project the task belongs to.
        actor_id: The principal who caused the change.
        occurred_at: When the change happened (UTC).
    """

    type: ClassVar[EventType]

    task_id: str
    project_id: str
    actor_id: str
    occurred_at: datetime = field(default_factory=_utc_now)

    def to_dict(self) -> dict[str, str]:
        """Flatten the event for logging or transport."""
        data = {
            key: value.isoformat() if isinstance(value, datetime) else str(value)
            for key, value in self.__dict__.items()
            if value is not None
        }
        data["type"] = self.type
        return data


@dataclass(frozen=True)
class TaskCreated(DomainEvent):
    """A task was created."""

    type: ClassVar[EventType] = "task_created"


@dataclass(frozen=True)
class TaskUpdated(DomainEvent):
    """Task details changed."""

    type: ClassVar[EventType] = "task_updated"


@dataclass(frozen=True)
class TaskAssigned(DomainEvent):
    """A task was assigned to a user."""

    type: ClassVar[EventType] = "task_assigned"

    assignee_id: str = ""


@dataclass(frozen=True)
class TaskStatusChanged(DomainEvent):
    """A task moved to another status."""

    type: ClassVar[EventType] = "task_status_changed"

    from_status: str = ""
    to_status: str = ""
