"""Team service: team creation and membership management."""
import structlog
from teamtrack.core.interfaces import TeamRepository
from teamtrack.core.rbac import policies
from teamtrack.core.rbac.types import Team, TeamMembership, TeamRole
from teamtrack.services.base import WorkspaceLoader, use_case
logger = structlog.get_logger()
NEW_ID = "new"
class TeamService:
    """Service for team and membership operations."""
    def __init__(self, teams: TeamRepository) -> None:
        """Initialize with the team repository.
        Args:
            teams: Team repository for persistence.
        """
        self._teams = teams
        self._load = WorkspaceLoader(teams=teams)
    @use_case("create team")
    async def create_team(
        self,
        owner_id: str,
        name: str,
        description: str | None = None,
    ) -> Team:
        """Create a team owned by ``owner_id``.
        Raises:
            DomainError: If the name is blank.
        """
        team = Team.create(NEW_ID, name, owner_id, description)
        created = await self._teams.create_team(team)
        logger.info("team_created", team_id=created.id, owner_id=owner_id)
        return created
    @use_case("get team")
    async def get_team(self, team_id: str, requester_id: str) -> Team:
        """Get a team the requester belongs to."""
        team = await self._load.team(team_id)
        policies.ensure_team_member(team, requester_id)
        return team
    @use_case("list teams")
    async def list_teams_for_user(self, user_id: str) -> list[Team]:
        """List the teams a user owns or belongs to."""
        return await self._teams.list_teams_for_user(user_id)
    @use_case("add team member")
    async def add_member(
        self,
        team_id: str,
        requester_id: str,
        user_id: str,
        role: TeamRole | str = TeamRole.MEMBER,
    ) -> Team:
        """Add a user to a team as admin or member. Owner only.
        Raises:
            PermissionDeniedError: If the requester is not the owner.
            DomainError: If the user is already a member or the role is invalid.
        """
        team = await self._load.team(team_id)
        policies.ensure_owner(team, requester_id)
        parsed_role = TeamRole.parse(role)
        membership = TeamMembership(team_id=team.id, user_id=user_id, role=parsed_role)
        team.add_member(membership)
        updated = await self._teams.save_team(team)
        logger.info("team_member_added", team_id=team.id, user_id=user_id, role=parsed_role.value)
        return updated
    @use_case("remove team member")
    async def remove_member(self, team_id: str, requester_id: str, user_id: str) -> Team:
        """Remove a member. The owner removes anyone; members may leave.
        Raises:
            PermissionDeniedError: If the requester may not remove the user.
            DomainError: If the user is the owner or not a member.
        """
        team = await self._load.team(team_id)
        policies.ensure_can_remove_member(team, requester_id, user_id)
        team.remove_member(user_id)
        updated = await self._teams.save_team(team)
        logger.info("team_member_removed", team_id=team.id, user_id=user_id)
        return updated
    @use_case("promote team member")
    async def promote_member(self, team_id: str, requester_id: str, user_id: str) -> Team:
        """Promote a member to admin. Owner only."""
        team = await self._load.team(team_id)
        policies.ensure_owner(team, requester_id)
        team.promote_to_admin(user_id)
        updated = await self._teams.save_team(team)
        logger.info("team_member_promoted", team_id=team.id, user_id=user_id)
        return updated
    @use_case("demote team member")
    async def demote_member(self, team_id: str, requester_id: str, user_id: str) -> Team:
        """Demote an admin to member. Owner only."""
        team = await self._load.team(team_id)
        policies.ensure_owner(team, requester_id)
        team.demote_to_member(user_id)
        updated = await self._teams.save_team(team)
        logger.info("team_member_demoted", team_id=team.id, user_id=user_id)
        return updated
