"""Project domain types."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from teamtrack.core.exceptions import DomainError


class ProjectStatus(str, Enum):
    """States a project can assume within a team."""

    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    ARCHIVED = "archived"


PROJECT_TRANSITIONS: dict[ProjectStatus, frozenset[ProjectStatus]] = {
    ProjectStatus.ACTIVE: frozenset({ProjectStatus.PAUSED, ProjectStatus.COMPLETED}),
    ProjectStatus.PAUSED: frozenset({ProjectStatus.ACTIVE, ProjectStatus.COMPLETED}),
    ProjectStatus.COMPLETED: frozenset({ProjectStatus.ARCHIVED}),
    ProjectStatus.ARCHIVED: frozenset({ProjectStatus.COMPLETED}),
}


@dataclass
class Project:
    """A project owned by exactly one team."""

    id: str
    name: str
    team_id: str
    created_by: str
    status: ProjectStatus = ProjectStatus.ACTIVE
    description: str | None = None
    tags: list[str] = field(default_factory=list)
    deadline: datetime | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise DomainError("Project name is required")
        self.name = self.name.strip()
        try:
            self.status = ProjectStatus(self.status)
        except ValueError:
            raise DomainError(f"Invalid project status: {self.status!r}") from None

    def rename(self, name: str) -> None:
        """Change the project name."""
        if not name or not name.strip():
            raise DomainError("Project name is required")
        self.name = name.strip()

    def pause(self) -> None:
        """active -> paused."""
        self._move_to(ProjectStatus.PAUSED)

    def resume(self) -> None:
        """paused -> active."""
        self._move_to(ProjectStatus.ACTIVE)

    def complete(self) -> None:
        """active/paused -> completed."""
        self._move_to(ProjectStatus.COMPLETED)

    def archive(self) -> None:
        """completed -> archived."""
        self._move_to(ProjectStatus.ARCHIVED)

    def unarchive(self) -> None:
        """archived -> completed."""
        self._move_to(ProjectStatus.COMPLETED)

    def _move_to(self, target: ProjectStatus) -> None:
        if target not in PROJECT_TRANSITIONS[self.status]:
            raise DomainError(
                f"Invalid project status transition: {self.status.value} -> {target.value}"
            )
        self.status = target
