"""Project service: project creation, edits and status lifecycle."""

from collections.abc import Callable
from datetime import datetime

import structlog

from teamtrack.core.exceptions import PermissionDeniedError
from teamtrack.core.interfaces import ProjectRepository, TeamRepository
from teamtrack.core.projects.types import Project
from teamtrack.core.rbac import policies
from teamtrack.core.tasks.types import UNSET
from teamtrack.services.base import WorkspaceLoader, use_case

logger = structlog.get_logger()

NEW_ID = "new"


class ProjectService:
    """Service for project operations.

    Reading a project requires team membership; every mutation requires
    the owner or an admin of the owning team.
    """

    def __init__(self, projects: ProjectRepository, teams: TeamRepository) -> None:
        """Initialize with the project and team repositories."""
        self._projects = projects
        self._load = WorkspaceLoader(teams=teams, projects=projects)

    @use_case("create project")
    async def create_project(
        self,
        team_id: str,
        requester_id: str,
        name: str,
        description: str | None = None,
        tags: list[str] | None = None,
        deadline: datetime | None = None,
    ) -> Project:
        """Create a project in a team.

        Raises:
            NotFoundError: If the team does not exist.
            PermissionDeniedError: If the requester is not owner/admin.
            DomainError: If the name is blank.
        """
        team = await self._load.team(team_id)
        policies.ensure_owner_or_admin(team, requester_id)

        project = Project(
            id=NEW_ID,
            name=name,
            team_id=team.id,
            created_by=requester_id,
            description=description,
            tags=list(tags or []),
            deadline=deadline,
        )
        created = await self._projects.create_project(project)
        logger.info("project_created", project_id=created.id, team_id=team.id)
        return created

    @use_case("get project")
    async def get_project(self, project_id: str, requester_id: str) -> Project:
        """Get a project visible to a team member."""
        project, team = await self._load.project_with_team(project_id)
        policies.ensure_team_member(team, requester_id)
        return project

    @use_case("list projects")
    async def list_projects_by_team(self, team_id: str, requester_id: str) -> list[Project]:
        """List a team's projects for one of its members."""
        team = await self._load.team(team_id)
        policies.ensure_team_member(team, requester_id)
        return await self._projects.list_projects_by_team(team.id)

    @use_case("update project")
    async def update_project(
        self,
        project_id: str,
        requester_id: str,
        name: str = UNSET,
        description: str | None = UNSET,
        tags: list[str] = UNSET,
        deadline: datetime | None = UNSET,
    ) -> Project:
        """Apply a partial update to a project. Omitted fields are kept."""
        project, team = await self._load.project_with_team(project_id)
        policies.ensure_owner_or_admin(team, requester_id)

        if name is not UNSET:
            project.rename(name)
        if description is not UNSET:
            project.description = description
        if tags is not UNSET:
            project.tags = list(tags or [])
        if deadline is not UNSET:
            project.deadline = deadline

        updated = await self._projects.save_project(project)
        logger.info("project_updated", project_id=project.id)
        return updated

    @use_case("pause project")
    async def pause(self, project_id: str, requester_id: str) -> Project:
        """active -> paused."""
        return await self._change_status(project_id, requester_id, Project.pause)

    @use_case("resume project")
    async def resume(self, project_id: str, requester_id: str) -> Project:
        """paused -> active."""
        return await self._change_status(project_id, requester_id, Project.resume)

    @use_case("complete project")
    async def complete(self, project_id: str, requester_id: str) -> Project:
        """active/paused -> completed."""
        return await self._change_status(project_id, requester_id, Project.complete)

    @use_case("archive project")
    async def archive(self, project_id: str, requester_id: str) -> Project:
        """completed -> archived."""
        return await self._change_status(project_id, requester_id, Project.archive)

    @use_case("unarchive project")
    async def unarchive(self, project_id: str, requester_id: str) -> Project:
        """archived -> completed."""
        return await self._change_status(project_id, requester_id, Project.unarchive)

    async def _change_status(
        self,
        project_id: str,
        requester_id: str,
        transition: Callable[[Project], None],
    ) -> Project:
        project, team = await self._load.project_with_team(project_id)
        if not policies.can_manage_project(team, requester_id):
            logger.warning(
                "project_status_change_denied",
                project_id=project_id,
                requester_id=requester_id,
            )
            raise PermissionDeniedError("Insufficient permissions")

        previous = project.status
        transition(project)
        updated = await self._projects.save_project(project)
        logger.info(
            "project_status_changed",
            project_id=project.id,
            from_status=previous.value,
            to_status=project.status.value,
        )
        return updated
