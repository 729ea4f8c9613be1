"""RBAC core domain."""

from teamtrack.core.rbac import policies
from teamtrack.core.rbac.types import Team, TeamMembership, TeamRole

__all__ = [
    "Team",
    "TeamMembership",
    "TeamRole",
    "policies",
]
