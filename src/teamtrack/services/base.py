"""Shared plumbing for the team, project and task services."""

import structlog

from teamtrack.core.decorators import use_case
from teamtrack.core.exceptions import NotFoundError
from teamtrack.core.interfaces import ProjectRepository, TaskRepository, TeamRepository
from teamtrack.core.projects.types import Project
from teamtrack.core.rbac.types import Team
from teamtrack.core.tasks.types import Task

logger = structlog.get_logger()

__all__ = ["WorkspaceLoader", "use_case"]


class WorkspaceLoader:
    """Loads the team -> project -> task chain through the repositories.

    Every missing link raises NotFoundError, so callers can rely on a
    fully resolved chain before any authorization decision is made.
    """

    def __init__(
        self,
        teams: TeamRepository,
        projects: ProjectRepository | None = None,
        tasks: TaskRepository | None = None,
    ) -> None:
        """Initialize with the repositories the caller needs."""
        self.teams = teams
        self._projects = projects
        self._tasks = tasks

    @property
    def projects(self) -> ProjectRepository:
        """The project repository."""
        if self._projects is None:
            raise RuntimeError("WorkspaceLoader was built without a project repository")
        return self._projects

    @property
    def tasks(self) -> TaskRepository:
        """The task repository."""
        if self._tasks is None:
            raise RuntimeError("WorkspaceLoader was built without a task repository")
        return self._tasks

    async def team(self, team_id: str) -> Team:
        """Load a team or raise NotFoundError."""
        team = await self.teams.get_team_by_id(team_id)
        if team is None:
            logger.warning("team_not_found", team_id=team_id)
            raise NotFoundError("Team not found")
        return team

    async def project_with_team(self, project_id: str) -> tuple[Project, Team]:
        """Load a project and its owning team."""
        project = await self.projects.get_project_by_id(project_id)
        if project is None:
            logger.warning("project_not_found", project_id=project_id)
            raise NotFoundError("Project not found")
        return project, await self.team(project.team_id)

    async def task_with_team(self, task_id: str) -> tuple[Task, Project, Team]:
        """Load a task, its project and the project's team."""
        task = await self.tasks.get_task_by_id(task_id)
        if task is None:
            logger.warning("task_not_found", task_id=task_id)
            raise NotFoundError("Task not found")
        project, team = await self.project_with_team(task.project_id)
        return task, project, team
