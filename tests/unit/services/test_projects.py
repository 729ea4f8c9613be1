"""Tests for the project service."""

import pytest

from teamtrack.adapters.db.memory import InMemoryProjectRepository, InMemoryTeamRepository
from teamtrack.core.exceptions import DomainError, NotFoundError, PermissionDeniedError
from teamtrack.core.projects.types import Project, ProjectStatus
from teamtrack.core.rbac.types import Team
from teamtrack.services.projects import ProjectService
from tests.fixtures.domain_objects import (
    ADMIN_ID,
    MEMBER_ID,
    OUTSIDER_ID,
    OWNER_ID,
    PROJECT_ID,
    TEAM_ID,
)


@pytest.fixture
async def service(
    team_repo: InMemoryTeamRepository,
    project_repo: InMemoryProjectRepository,
    sample_team: Team,
    sample_project: Project,
) -> ProjectService:
    """Project service with the sample team and project stored."""
    await team_repo.create_team(sample_team)
    await project_repo.create_project(sample_project)
    return ProjectService(project_repo, team_repo)


class TestCreateProject:
    """Test project creation."""

    async def test_admin_creates(self, service: ProjectService) -> None:
        """Admins create projects; ids are assigned."""
        project = await service.create_project(TEAM_ID, ADMIN_ID, "Search", tags=["q1"])

        assert project.id != "new"
        assert project.team_id == TEAM_ID
        assert project.created_by == ADMIN_ID
        assert project.status is ProjectStatus.ACTIVE

    async def test_member_cannot_create(self, service: ProjectService) -> None:
        """Plain members may not create projects."""
        with pytest.raises(PermissionDeniedError):
            await service.create_project(TEAM_ID, MEMBER_ID, "Search")

    async def test_missing_team(self, service: ProjectService) -> None:
        """Unknown teams are NotFound."""
        with pytest.raises(NotFoundError):
            await service.create_project("nope", OWNER_ID, "Search")

    async def test_blank_name(self, service: ProjectService) -> None:
        """A name is required."""
        with pytest.raises(DomainError):
            await service.create_project(TEAM_ID, OWNER_ID, "")


class TestReadProjects:
    """Test project reads."""

    async def test_member_can_read(self, service: ProjectService) -> None:
        """Team members see projects."""
        project = await service.get_project(PROJECT_ID, MEMBER_ID)

        assert project.name == "Billing"
        assert [p.id for p in await service.list_projects_by_team(TEAM_ID, MEMBER_ID)] == [PROJECT_ID]

    async def test_outsider_cannot_read(self, service: ProjectService) -> None:
        """Outsiders are denied."""
        with pytest.raises(PermissionDeniedError):
            await service.get_project(PROJECT_ID, OUTSIDER_ID)
        with pytest.raises(PermissionDeniedError):
            await service.list_projects_by_team(TEAM_ID, OUTSIDER_ID)

    async def test_missing_project(self, service: ProjectService) -> None:
        """Unknown projects are NotFound."""
        with pytest.raises(NotFoundError):
            await service.get_project("nope", OWNER_ID)


class TestUpdateProject:
    """Test partial updates."""

    async def test_partial_update(self, service: ProjectService) -> None:
        """Only provided fields change."""
        updated = await service.update_project(PROJECT_ID, OWNER_ID, description="Invoices")

        assert updated.name == "Billing"
        assert updated.description == "Invoices"

    async def test_rename_persisted(
        self, service: ProjectService, project_repo: InMemoryProjectRepository
    ) -> None:
        """Renames reach storage."""
        await service.update_project(PROJECT_ID, ADMIN_ID, name="Payments")

        assert (await project_repo.get_project_by_id(PROJECT_ID)).name == "Payments"  # type: ignore[union-attr]

    async def test_member_cannot_update(self, service: ProjectService) -> None:
        """Plain members may not edit projects."""
        with pytest.raises(PermissionDeniedError):
            await service.update_project(PROJECT_ID, MEMBER_ID, name="Payments")


class TestProjectLifecycle:
    """Test status changes through the service."""

    async def test_full_lifecycle(self, service: ProjectService) -> None:
        """active -> paused -> active -> completed -> archived -> completed."""
        assert (await service.pause(PROJECT_ID, OWNER_ID)).status is ProjectStatus.PAUSED
        assert (await service.resume(PROJECT_ID, OWNER_ID)).status is ProjectStatus.ACTIVE
        assert (await service.complete(PROJECT_ID, ADMIN_ID)).status is ProjectStatus.COMPLETED
        assert (await service.archive(PROJECT_ID, ADMIN_ID)).status is ProjectStatus.ARCHIVED
        assert (await service.unarchive(PROJECT_ID, OWNER_ID)).status is ProjectStatus.COMPLETED

    async def test_invalid_transition(self, service: ProjectService) -> None:
        """Archiving an active project is a DomainError."""
        with pytest.raises(DomainError):
            await service.archive(PROJECT_ID, OWNER_ID)

    async def test_member_cannot_change_status(self, service: ProjectService) -> None:
        """Permission is checked before the lifecycle."""
        with pytest.raises(PermissionDeniedError):
            await service.archive(PROJECT_ID, MEMBER_ID)
