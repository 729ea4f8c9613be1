"""In-memory repositories for tests, demos and local development.

Aggregates are copied on the way in and on the way out, so a service
must call ``save_*`` for a change to become visible, exactly as it
would against a real database.
"""

from __future__ import annotations

import copy
import uuid
from collections.abc import Callable
from datetime import datetime
from typing import Generic, TypeVar

from teamtrack.core.auth.types import User
from teamtrack.core.interfaces import Clock, system_clock
from teamtrack.core.projects.types import Project
from teamtrack.core.rbac.types import Team
from teamtrack.core.tasks.types import Task, TaskFilters

NEW_ID = "new"

T = TypeVar("T")


def _new_id() -> str:
    return str(uuid.uuid4())


class InMemoryUserRepository:
    """Dictionary-backed UserRepository.

    Attributes:
        users: Stored users keyed by id.
    """

    def __init__(self, clock: Clock = system_clock) -> None:
        """Initialize an empty repository.

        Args:
            clock: Source of ``created_at`` timestamps.
        """
        self.users: dict[str, User] = {}
        self._clock = clock

    async def get_user_by_id(self, user_id: str) -> User | None:
        """Get user by ID."""
        user = self.users.get(user_id)
        return user.model_copy() if user else None

    async def get_user_by_email(self, email: str) -> User | None:
        """Get user by email address, case-insensitively."""
        wanted = email.strip().lower()
        for user in self.users.values():
            if user.email.lower() == wanted:
                return user.model_copy()
        return None

    async def create_user(self, email: str, name: str, password_hash: str) -> User:
        """Create a new, unverified user."""
        user = User(
            id=_new_id(),
            email=email,
            name=name,
            password_hash=password_hash,
            is_verified=False,
            created_at=self._clock(),
        )
        self.users[user.id] = user
        return user.model_copy()

    async def update_password(self, user_id: str, password_hash: str) -> User | None:
        """Replace a user's password hash."""
        return self._update(user_id, password_hash=password_hash)

    async def mark_verified(self, user_id: str) -> User | None:
        """Mark a user's email as verified."""
        return self._update(user_id, is_verified=True)

    def _update(self, user_id: str, **changes: str | bool | datetime) -> User | None:
        user = self.users.get(user_id)
        if user is None:
            return None
        updated = user.model_copy(update=changes)
        self.users[user_id] = updated
        return updated.model_copy()


class _AggregateStore(Generic[T]):
    """Copy-on-read/copy-on-write storage shared by the aggregate repositories."""

    def __init__(self) -> None:
        self.items: dict[str, T] = {}

    def get(self, item_id: str) -> T | None:
        item = self.items.get(item_id)
        return copy.deepcopy(item) if item is not None else None

    def put(self, item_id: str, item: T) -> None:
        self.items[item_id] = copy.deepcopy(item)

    def select(self, predicate: Callable[[T], bool]) -> list[T]:
        return [copy.deepcopy(item) for item in self.items.values() if predicate(item)]


class InMemoryTeamRepository:
    """Dictionary-backed TeamRepository."""

    def __init__(self) -> None:
        """Initialize an empty repository."""
        self._store: _AggregateStore[Team] = _AggregateStore()

    async def get_team_by_id(self, team_id: str) -> Team | None:
        """Load a team with all of its memberships."""
        return self._store.get(team_id)

    async def list_teams_for_user(self, user_id: str) -> list[Team]:
        """List the teams the user owns or belongs to."""
        return self._store.select(lambda team: user_id in team.member_ids())

    async def create_team(self, team: Team) -> Team:
        """Persist a new team, assigning an id when it carries a placeholder."""
        if team.id in ("", NEW_ID):
            team.id = _new_id()
        for membership in team.members:
            membership.team_id = team.id
        self._store.put(team.id, team)
        return copy.deepcopy(team)

    async def save_team(self, team: Team) -> Team:
        """Persist changes to an existing team."""
        self._store.put(team.id, team)
        return copy.deepcopy(team)


class InMemoryProjectRepository:
    """Dictionary-backed ProjectRepository."""

    def __init__(self) -> None:
        """Initialize an empty repository."""
        self._store: _AggregateStore[Project] = _AggregateStore()

    async def get_project_by_id(self, project_id: str) -> Project | None:
        """Load a project."""
        return self._store.get(project_id)

    async def list_projects_by_team(self, team_id: str) -> list[Project]:
        """List every project owned by a team."""
        return self._store.select(lambda project: project.team_id == team_id)

    async def create_project(self, project: Project) -> Project:
        """Persist a new project, assigning an id when it carries a placeholder."""
        if project.id in ("", NEW_ID):
            project.id = _new_id()
        self._store.put(project.id, project)
        return copy.deepcopy(project)

    async def save_project(self, project: Project) -> Project:
        """Persist changes to an existing project."""
        self._store.put(project.id, project)
        return copy.deepcopy(project)


class InMemoryTaskRepository:
    """Dictionary-backed TaskRepository."""

    def __init__(self) -> None:
        """Initialize an empty repository."""
        self._store: _AggregateStore[Task] = _AggregateStore()

    async def get_task_by_id(self, task_id: str) -> Task | None:
        """Load a task."""
        return self._store.get(task_id)

    async def list_tasks_by_project(
        self, project_id: str, filters: TaskFilters | None = None
    ) -> list[Task]:
        """List a project's tasks, narrowed by ``filters`` when given."""
        active = filters or TaskFilters()
        return self._store.select(
            lambda task: task.project_id == project_id and active.matches(task)
        )

    async def list_tasks_by_assignee(self, user_id: str) -> list[Task]:
        """List every task assigned to a user."""
        return self._store.select(lambda task: task.assignee_id == user_id)

    async def create_task(self, task: Task) -> Task:
        """Persist a new task, assigning an id when it carries a placeholder."""
        if task.id in ("", NEW_ID):
            task.id = _new_id()
        self._store.put(task.id, task)
        return copy.deepcopy(task)

    async def save_task(self, task: Task) -> Task:
        """Persist changes to an existing task."""
        self._store.put(task.id, task)
        return copy.deepcopy(task)

    async def delete_task(self, task_id: str) -> bool:
        """Delete a task. Returns True if it existed."""
        return self._store.items.pop(task_id, None) is not None
