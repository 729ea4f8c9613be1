"""Protocol definitions for all external dependencies.

This module defines the interfaces (ports) that adapters must implement.
The core domain only depends on these protocols, never on concrete
implementations. This enables:
- Easy testing with in-memory or mock implementations
- Swapping storage backends without changing core logic
- Clear separation of concerns
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from teamtrack.core.events import DomainEvent
    from teamtrack.core.projects.types import Project
    from teamtrack.core.rbac.types import Team
    from teamtrack.core.tasks.types import Task, TaskFilters


Clock = Callable[[], datetime]
"""Returns the current time as a timezone-aware UTC datetime."""


def system_clock() -> datetime:
    """Read the system clock in UTC."""
    return datetime.now(UTC)


@runtime_checkable
class TeamRepository(Protocol):
    """Persistence port for Team aggregates (memberships included)."""

    async def get_team_by_id(self, team_id: str) -> Team | None:
        """Load a team with all of its memberships."""
        ...

    async def list_teams_for_user(self, user_id: str) -> list[Team]:
        """List the teams the user owns or belongs to."""
        ...

    async def create_team(self, team: Team) -> Team:
        """Persist a new team and return it with its assigned id."""
        ...

    async def save_team(self, team: Team) -> Team:
        """Persist changes to an existing team."""
        ...


@runtime_checkable
class ProjectRepository(Protocol):
    """Persistence port for Project aggregates."""

    async def get_project_by_id(self, project_id: str) -> Project | None:
        """Load a project."""
        ...

    async def list_projects_by_team(self, team_id: str) -> list[Project]:
        """List every project owned by a team."""
        ...

    async def create_project(self, project: Project) -> Project:
        """Persist a new project and return it with its assigned id."""
        ...

    async def save_project(self, project: Project) -> Project:
        """Persist changes to an existing project."""
        ...


@runtime_checkable
class TaskRepository(Protocol):
    """Persistence port for Task aggregates."""

    async def get_task_by_id(self, task_id: str) -> Task | None:
        """Load a task."""
        ...

    async def list_tasks_by_project(
        self, project_id: str, filters: TaskFilters | None = None
    ) -> list[Task]:
        """List a project's tasks, narrowed by ``filters`` when given."""
        ...

    async def list_tasks_by_assignee(self, user_id: str) -> list[Task]:
        """List every task assigned to a user."""
        ...

    async def create_task(self, task: Task) -> Task:
        """Persist a new task and return it with its assigned id."""
        ...

    async def save_task(self, task: Task) -> Task:
        """Persist changes to an existing task."""
        ...

    async def delete_task(self, task_id: str) -> bool:
        """Delete a task. Returns True if it existed."""
        ...


@runtime_checkable
class EventPublisher(Protocol):
    """Outbound port for domain events."""

    async def publish(self, event: DomainEvent) -> None:
        """Publish a domain event."""
        ...
