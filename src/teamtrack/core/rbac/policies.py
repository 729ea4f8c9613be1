"""Authorization policies.

Pure predicates deriving access decisions from a Team aggregate and a
principal id. Every service that reads or mutates a project or task
asks these functions instead of re-deriving role checks locally.

The ``ensure_*`` variants raise PermissionDeniedError on denial so a
caller can never silently drop an authorization failure. The one
exception is ``visible_tasks``, which shapes listings rather than
rejecting them.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from teamtrack.core.exceptions import PermissionDeniedError
from teamtrack.core.rbac.types import Team, TeamRole

if TYPE_CHECKING:
    from teamtrack.core.tasks.types import Task


def is_owner(team: Team, user_id: str) -> bool:
    """The user owns the team."""
    return team.owner_id == user_id


def is_team_member(team: Team, user_id: str) -> bool:
    """The user owns or belongs to the team."""
    return is_owner(team, user_id) or team.get_member(user_id) is not None


def is_owner_or_admin(team: Team, user_id: str) -> bool:
    """The user owns the team or is one of its admins."""
    if is_owner(team, user_id):
        return True
    membership = team.get_member(user_id)
    return membership is not None and membership.role is TeamRole.ADMIN


def member_role(team: Team, user_id: str) -> TeamRole | None:
    """Effective role of a user in a team, or None for outsiders."""
    if is_owner(team, user_id):
        return TeamRole.OWNER
    membership = team.get_member(user_id)
    return membership.role if membership is not None else None


def can_update_task(team: Team, user_id: str, task: Task) -> bool:
    """The assignee, or any owner/admin, may edit a task.

    The assignee keeps edit rights over their own task even as a plain member.
    """
    return task.assignee_id == user_id or is_owner_or_admin(team, user_id)


def can_create_or_assign_task(team: Team, user_id: str) -> bool:
    """Only owners and admins create tasks or (re)assign them."""
    return is_owner_or_admin(team, user_id)


def can_view_task(team: Team, user_id: str, task: Task) -> bool:
    """Owners/admins see every task; members see tasks assigned to them."""
    return is_owner_or_admin(team, user_id) or task.assignee_id == user_id


def can_delete_task(team: Team, user_id: str, task: Task) -> bool:
    """Owners/admins, or the member who created the task."""
    return is_owner_or_admin(team, user_id) or task.created_by == user_id


def can_manage_project(team: Team, user_id: str) -> bool:
    """Only owners and admins create, edit or change status of projects."""
    return is_owner_or_admin(team, user_id)


def can_manage_members(team: Team, user_id: str) -> bool:
    """Only the owner adds, promotes or demotes members."""
    return is_owner(team, user_id)


def can_remove_member(team: Team, requester_id: str, user_id: str) -> bool:
    """The owner removes anyone; any member may remove themselves."""
    if is_owner(team, requester_id):
        return True
    return requester_id == user_id and is_team_member(team, requester_id)


def visible_tasks(team: Team, user_id: str, tasks: Iterable[Task]) -> list[Task]:
    """Shape a team-wide task listing for a viewer.

    Owners and admins see all tasks; plain members only see tasks
    assigned to them; outsiders see nothing.
    """
    if is_owner_or_admin(team, user_id):
        return list(tasks)
    if is_team_member(team, user_id):
        return [task for task in tasks if task.assignee_id == user_id]
    return []


# Guards


def ensure_team_member(team: Team, user_id: str) -> None:
    """Raise PermissionDeniedError unless the user belongs to the team."""
    if not is_team_member(team, user_id):
        raise PermissionDeniedError("Insufficient permissions")


def ensure_owner(team: Team, user_id: str) -> None:
    """Raise PermissionDeniedError unless the user owns the team."""
    if not is_owner(team, user_id):
        raise PermissionDeniedError("Insufficient permissions")


def ensure_owner_or_admin(team: Team, user_id: str) -> None:
    """Raise PermissionDeniedError unless the user is owner or admin."""
    if not is_owner_or_admin(team, user_id):
        raise PermissionDeniedError("Insufficient permissions")


def ensure_can_update_task(team: Team, user_id: str, task: Task) -> None:
    """Raise PermissionDeniedError unless the user may edit the task."""
    if not can_update_task(team, user_id, task):
        raise PermissionDeniedError("Insufficient permissions")


def ensure_can_create_or_assign_task(team: Team, user_id: str) -> None:
    """Raise PermissionDeniedError unless the user may create/assign tasks."""
    if not can_create_or_assign_task(team, user_id):
        raise PermissionDeniedError("Insufficient permissions")


def ensure_can_view_task(team: Team, user_id: str, task: Task) -> None:
    """Raise PermissionDeniedError unless the user may see the task."""
    if not can_view_task(team, user_id, task):
        raise PermissionDeniedError("Insufficient permissions")


def ensure_can_delete_task(team: Team, user_id: str, task: Task) -> None:
    """Raise PermissionDeniedError unless the user may delete the task."""
    if not can_delete_task(team, user_id, task):
        raise PermissionDeniedError("Insufficient permissions")


def ensure_can_remove_member(team: Team, requester_id: str, user_id: str) -> None:
    """Raise PermissionDeniedError unless the requester may remove the user."""
    if not can_remove_member(team, requester_id, user_id):
        raise PermissionDeniedError("Insufficient permissions")
