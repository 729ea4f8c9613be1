"""Tests for the team service."""

from unittest.mock import AsyncMock

import pytest

from teamtrack.adapters.db.memory import InMemoryTeamRepository
from teamtrack.core.exceptions import (
    ApplicationError,
    DomainError,
    NotFoundError,
    PermissionDeniedError,
)
from teamtrack.core.rbac.types import Team, TeamRole
from teamtrack.services.teams import TeamService
from tests.fixtures.domain_objects import (
    ADMIN_ID,
    MEMBER_ID,
    OTHER_MEMBER_ID,
    OUTSIDER_ID,
    OWNER_ID,
    TEAM_ID,
)


@pytest.fixture
async def seeded_repo(team_repo: InMemoryTeamRepository, sample_team: Team) -> InMemoryTeamRepository:
    """Team repository holding the sample team."""
    await team_repo.create_team(sample_team)
    return team_repo


@pytest.fixture
def service(seeded_repo: InMemoryTeamRepository) -> TeamService:
    """Team service over the seeded repository."""
    return TeamService(seeded_repo)


class TestCreateTeam:
    """Test team creation."""

    async def test_creator_becomes_owner(self, team_repo: InMemoryTeamRepository) -> None:
        """The creator is the single owner and the id is assigned."""
        service = TeamService(team_repo)

        team = await service.create_team(OWNER_ID, "Design", "UI people")

        assert team.id != "new"
        assert team.owner_id == OWNER_ID
        assert team.member_ids() == [OWNER_ID]
        assert team.get_member(OWNER_ID).team_id == team.id  # type: ignore[union-attr]
        assert await team_repo.get_team_by_id(team.id) is not None

    async def test_blank_name(self, team_repo: InMemoryTeamRepository) -> None:
        """A name is required."""
        with pytest.raises(DomainError):
            await TeamService(team_repo).create_team(OWNER_ID, " ")


class TestReadTeams:
    """Test team reads."""

    async def test_member_can_get(self, service: TeamService) -> None:
        """Members see the team."""
        team = await service.get_team(TEAM_ID, MEMBER_ID)

        assert team.id == TEAM_ID

    async def test_outsider_cannot_get(self, service: TeamService) -> None:
        """Outsiders are denied."""
        with pytest.raises(PermissionDeniedError):
            await service.get_team(TEAM_ID, OUTSIDER_ID)

    async def test_missing_team(self, service: TeamService) -> None:
        """Unknown ids are NotFound."""
        with pytest.raises(NotFoundError):
            await service.get_team("nope", OWNER_ID)

    async def test_list_teams_for_user(self, service: TeamService) -> None:
        """Lists teams the user belongs to."""
        assert [t.id for t in await service.list_teams_for_user(MEMBER_ID)] == [TEAM_ID]
        assert await service.list_teams_for_user(OUTSIDER_ID) == []


class TestAddMember:
    """Test adding members."""

    async def test_owner_adds_member(
        self, service: TeamService, seeded_repo: InMemoryTeamRepository
    ) -> None:
        """The change is persisted."""
        await service.add_member(TEAM_ID, OWNER_ID, OUTSIDER_ID, role="admin")

        stored = await seeded_repo.get_team_by_id(TEAM_ID)
        assert stored.get_member(OUTSIDER_ID).role is TeamRole.ADMIN  # type: ignore[union-attr]

    async def test_admin_cannot_add(self, service: TeamService) -> None:
        """Only the owner manages members."""
        with pytest.raises(PermissionDeniedError):
            await service.add_member(TEAM_ID, ADMIN_ID, OUTSIDER_ID)

    async def test_duplicate_member(self, service: TeamService) -> None:
        """Adding an existing member is a DomainError."""
        with pytest.raises(DomainError):
            await service.add_member(TEAM_ID, OWNER_ID, MEMBER_ID)

    @pytest.mark.parametrize("role", ["owner", "superuser"])
    async def test_invalid_roles(self, service: TeamService, role: str) -> None:
        """Owner and unknown roles are rejected."""
        with pytest.raises(DomainError):
            await service.add_member(TEAM_ID, OWNER_ID, OUTSIDER_ID, role=role)


class TestRemoveMember:
    """Test removing members."""

    async def test_owner_removes_member(
        self, service: TeamService, seeded_repo: InMemoryTeamRepository
    ) -> None:
        """Removed members disappear from storage."""
        await service.remove_member(TEAM_ID, OWNER_ID, MEMBER_ID)

        stored = await seeded_repo.get_team_by_id(TEAM_ID)
        assert stored.get_member(MEMBER_ID) is None  # type: ignore[union-attr]

    async def test_member_can_leave(self, service: TeamService) -> None:
        """Members may remove themselves."""
        team = await service.remove_member(TEAM_ID, MEMBER_ID, MEMBER_ID)

        assert MEMBER_ID not in team.member_ids()

    async def test_member_cannot_remove_others(self, service: TeamService) -> None:
        """Members cannot remove each other."""
        with pytest.raises(PermissionDeniedError):
            await service.remove_member(TEAM_ID, MEMBER_ID, OTHER_MEMBER_ID)

    async def test_owner_cannot_leave(self, service: TeamService) -> None:
        """The owner is never removed."""
        with pytest.raises(DomainError):
            await service.remove_member(TEAM_ID, OWNER_ID, OWNER_ID)


class TestRoleChanges:
    """Test promotion and demotion."""

    async def test_promote_and_demote(self, service: TeamService) -> None:
        """The owner moves members between roles."""
        team = await service.promote_member(TEAM_ID, OWNER_ID, MEMBER_ID)
        assert team.get_member(MEMBER_ID).role is TeamRole.ADMIN  # type: ignore[union-attr]

        team = await service.demote_member(TEAM_ID, OWNER_ID, MEMBER_ID)
        assert team.get_member(MEMBER_ID).role is TeamRole.MEMBER  # type: ignore[union-attr]

    async def test_admin_cannot_promote(self, service: TeamService) -> None:
        """Admins cannot change roles."""
        with pytest.raises(PermissionDeniedError):
            await service.promote_member(TEAM_ID, ADMIN_ID, MEMBER_ID)

    async def test_owner_demote_is_noop(self, service: TeamService) -> None:
        """Demoting the owner leaves them owner."""
        team = await service.demote_member(TEAM_ID, OWNER_ID, OWNER_ID)

        assert team.get_member(OWNER_ID).role is TeamRole.OWNER  # type: ignore[union-attr]


class TestErrorPropagation:
    """Test how repository failures surface."""

    async def test_unexpected_error_wrapped(self) -> None:
        """Infrastructure failures become ApplicationError with the cause."""
        repo = AsyncMock()
        boom = ConnectionError("db down")
        repo.get_team_by_id.side_effect = boom
        service = TeamService(repo)

        with pytest.raises(ApplicationError) as exc_info:
            await service.get_team(TEAM_ID, OWNER_ID)

        assert exc_info.value.cause is boom
        assert exc_info.value.__cause__ is boom
