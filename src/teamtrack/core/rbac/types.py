"""RBAC domain types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from teamtrack.core.exceptions import DomainError


class TeamRole(str, Enum):
    """Team roles."""

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"

    @classmethod
    def parse(cls, value: TeamRole | str) -> TeamRole:
        """Coerce a raw value, raising DomainError for unknown roles."""
        try:
            return cls(value)
        except ValueError:
            raise DomainError(f"Invalid team role: {value!r}") from None


@dataclass
class TeamMembership:
    """A user's membership in a team."""

    team_id: str
    user_id: str
    role: TeamRole = TeamRole.MEMBER

    def __post_init__(self) -> None:
        self.role = TeamRole.parse(self.role)

    @classmethod
    def owner(cls, team_id: str, user_id: str) -> TeamMembership:
        """Create the owner membership."""
        return cls(team_id=team_id, user_id=user_id, role=TeamRole.OWNER)

    @classmethod
    def admin(cls, team_id: str, user_id: str) -> TeamMembership:
        """Create an admin membership."""
        return cls(team_id=team_id, user_id=user_id, role=TeamRole.ADMIN)

    @classmethod
    def member(cls, team_id: str, user_id: str) -> TeamMembership:
        """Create a plain member membership."""
        return cls(team_id=team_id, user_id=user_id, role=TeamRole.MEMBER)

    def promote_to_admin(self) -> None:
        """Make this member an admin. The owner role never changes."""
        if self.role is TeamRole.OWNER:
            return
        self.role = TeamRole.ADMIN

    def demote_to_member(self) -> None:
        """Make this admin a plain member. The owner role never changes."""
        if self.role is TeamRole.OWNER:
            return
        self.role = TeamRole.MEMBER


@dataclass
class Team:
    """Team aggregate: owns its memberships and their role invariants.

    Invariants:
        - exactly one owner, fixed at construction, never removed or demoted
        - no user appears twice in ``members``
        - the owner always has an explicit ``owner`` membership
    """

    id: str
    name: str
    owner_id: str
    members: list[TeamMembership] = field(default_factory=list)
    description: str | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise DomainError("Team name is required")
        if not self.owner_id or not self.owner_id.strip():
            raise DomainError("Team owner is required")

        seen: set[str] = set()
        for membership in self.members:
            if membership.user_id in seen:
                raise DomainError("User already belongs to team")
            seen.add(membership.user_id)
            if membership.role is TeamRole.OWNER and membership.user_id != self.owner_id:
                raise DomainError("Only the team owner can hold the owner role")

        owner = self.get_member(self.owner_id)
        if owner is None:
            self.members.insert(0, TeamMembership.owner(self.id, self.owner_id))
        elif owner.role is not TeamRole.OWNER:
            owner.role = TeamRole.OWNER

    @classmethod
    def create(cls, team_id: str, name: str, owner_id: str, description: str | None = None) -> Team:
        """Create a team whose only member is its owner."""
        return cls(
            id=team_id,
            name=name.strip() if name else name,
            owner_id=owner_id,
            members=[TeamMembership.owner(team_id, owner_id)],
            description=description,
        )

    def get_member(self, user_id: str) -> TeamMembership | None:
        """Get the membership of a user, if any."""
        for membership in self.members:
            if membership.user_id == user_id:
                return membership
        return None

    def member_ids(self) -> list[str]:
        """Ids of every member, owner included."""
        return [m.user_id for m in self.members]

    def add_member(self, membership: TeamMembership) -> None:
        """Add a membership.

        Raises:
            DomainError: If the user is already a member or the role is owner.
        """
        if self.get_member(membership.user_id) is not None:
            raise DomainError("User already belongs to team")
        if membership.role is TeamRole.OWNER:
            raise DomainError("A team has exactly one owner")
        membership.team_id = self.id
        self.members.append(membership)

    def remove_member(self, user_id: str) -> None:
        """Remove a member.

        Raises:
            DomainError: If the user is the owner or not a member.
        """
        if user_id == self.owner_id:
            raise DomainError("Owner cannot be removed")
        membership = self.get_member(user_id)
        if membership is None:
            raise DomainError("User is not a member of this team")
        self.members.remove(membership)

    def promote_to_admin(self, user_id: str) -> None:
        """Promote a member to admin. No-op for the owner.

        Raises:
            DomainError: If the user is not a member.
        """
        self._require_member(user_id).promote_to_admin()

    def demote_to_member(self, user_id: str) -> None:
        """Demote an admin to member. No-op for the owner.

        Raises:
            DomainError: If the user is not a member.
        """
        self._require_member(user_id).demote_to_member()

    def rename(self, name: str) -> None:
        """Change the team name."""
        if not name or not name.strip():
            raise DomainError("Team name is required")
        self.name = name.strip()

    def _require_member(self, user_id: str) -> TeamMembership:
        membership = self.get_member(user_id)
        if membership is None:
            raise DomainError("User is not a member of this team")
        return membership
