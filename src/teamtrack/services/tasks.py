"""Task service: the authorized task workflow.

Every operation resolves task -> project -> team first, then asks the
authorization policies, and only then lets the Task aggregate apply its
own rules. A principal outside the team is therefore rejected before
the status state machine is ever consulted.
"""

from datetime import datetime

import structlog

from teamtrack.core.events import (
    DomainEvent,
    TaskAssigned,
    TaskCreated,
    TaskStatusChanged,
    TaskUpdated,
)
from teamtrack.core.exceptions import DomainError, NotFoundError, PermissionDeniedError
from teamtrack.core.interfaces import (
    EventPublisher,
    ProjectRepository,
    TaskRepository,
    TeamRepository,
)
from teamtrack.core.rbac import policies
from teamtrack.core.rbac.types import Team
from teamtrack.core.tasks.types import UNSET, Task, TaskFilters, TaskPriority, TaskStatus
from teamtrack.services.base import WorkspaceLoader, use_case

logger = structlog.get_logger()

NEW_ID = "new"


class TaskService:
    """Service for task operations within a team's projects."""

    def __init__(
        self,
        tasks: TaskRepository,
        projects: ProjectRepository,
        teams: TeamRepository,
        events: EventPublisher,
    ) -> None:
        """Initialize the task service.

        Args:
            tasks: Task repository.
            projects: Project repository, used to resolve a task's team.
            teams: Team repository, source of every authorization decision.
            events: Publisher notified after each successful change.
        """
        self._tasks = tasks
        self._events = events
        self._load = WorkspaceLoader(teams=teams, projects=projects, tasks=tasks)

    @use_case("create task")
    async def create_task(
        self,
        project_id: str,
        requester_id: str,
        title: str,
        description: str | None = None,
        assignee_id: str | None = None,
        priority: TaskPriority | str = TaskPriority.MEDIUM,
        due_date: datetime | None = None,
        tags: list[str] | None = None,
    ) -> Task:
        """Create a task in a project.

        Args:
            project_id: Project the task belongs to.
            requester_id: Principal performing the operation.
            title: Non-blank task title.
            description: Optional free text.
            assignee_id: Optional assignee; must belong to the team.
            priority: Initial priority.
            due_date: Optional deadline.
            tags: Optional labels.

        Returns:
            The persisted task.

        Raises:
            NotFoundError: If the project or its team does not exist.
            PermissionDeniedError: If the requester may not create tasks.
            DomainError: If the title is blank, the priority unknown, or the
                assignee outside the team.
        """
        project, team = await self._load.project_with_team(project_id)
        policies.ensure_team_member(team, requester_id)
        policies.ensure_can_create_or_assign_task(team, requester_id)
        if assignee_id is not None:
            self._ensure_assignable(team, assignee_id)

        task = Task(
            id=NEW_ID,
            title=title,
            project_id=project.id,
            created_by=requester_id,
            description=description,
            assignee_id=assignee_id,
            priority=priority,
            due_date=due_date,
            tags=list(tags or []),
        )
        created = await self._tasks.create_task(task)
        logger.info("task_created", task_id=created.id, project_id=project.id)

        await self._publish(
            TaskCreated(task_id=created.id, project_id=project.id, actor_id=requester_id)
        )
        return created

    @use_case("assign task")
    async def assign_task(self, task_id: str, requester_id: str, assignee_id: str) -> Task:
        """Assign a task to a member of its team.

        Raises:
            PermissionDeniedError: If the requester may not assign tasks.
            DomainError: If the assignee is blank or not a team member.
        """
        task, project, team = await self._load.task_with_team(task_id)
        policies.ensure_team_member(team, requester_id)
        policies.ensure_can_create_or_assign_task(team, requester_id)
        self._ensure_assignable(team, assignee_id)

        task.assign_to(assignee_id)
        updated = await self._tasks.save_task(task)
        logger.info("task_assigned", task_id=task.id, assignee_id=assignee_id)

        await self._publish(
            TaskAssigned(
                task_id=task.id,
                project_id=project.id,
                actor_id=requester_id,
                assignee_id=assignee_id,
            )
        )
        return updated

    @use_case("change task status")
    async def change_status(
        self,
        task_id: str,
        requester_id: str,
        status: TaskStatus | str,
    ) -> Task:
        """Move a task along the status state machine.

        Raises:
            PermissionDeniedError: If the requester is neither the assignee
                nor an owner/admin of the team.
            DomainError: If the transition is not allowed.
        """
        task, project, team = await self._load.task_with_team(task_id)
        policies.ensure_team_member(team, requester_id)
        if not policies.can_update_task(team, requester_id, task):
            logger.warning(
                "task_status_change_denied",
                task_id=task_id,
                requester_id=requester_id,
            )
            raise PermissionDeniedError("Insufficient permissions")

        previous = task.status
        task.change_status(status)
        updated = await self._tasks.save_task(task)
        logger.info(
            "task_status_changed",
            task_id=task.id,
            from_status=previous.value,
            to_status=task.status.value,
        )

        await self._publish(
            TaskStatusChanged(
                task_id=task.id,
                project_id=project.id,
                actor_id=requester_id,
                from_status=previous.value,
                to_status=task.status.value,
            )
        )
        return updated

    @use_case("update task")
    async def update_task(
        self,
        task_id: str,
        requester_id: str,
        title: str = UNSET,
        description: str | None = UNSET,
        priority: TaskPriority | str = UNSET,
        due_date: datetime | None = UNSET,
        tags: list[str] | None = UNSET,
    ) -> Task:
        """Apply a partial update to a task's details.

        Omitted fields are kept. Status and assignee have their own operations.
        """
        task, project, team = await self._load.task_with_team(task_id)
        policies.ensure_team_member(team, requester_id)
        policies.ensure_can_update_task(team, requester_id, task)

        task.update_details(
            title=title,
            description=description,
            priority=priority,
            due_date=due_date,
            tags=tags,
        )
        updated = await self._tasks.save_task(task)
        logger.info("task_updated", task_id=task.id)

        await self._publish(
            TaskUpdated(task_id=task.id, project_id=project.id, actor_id=requester_id)
        )
        return updated

    @use_case("get task")
    async def get_task(self, task_id: str, requester_id: str) -> Task:
        """Get a task the requester is allowed to see."""
        task, _, team = await self._load.task_with_team(task_id)
        policies.ensure_team_member(team, requester_id)
        policies.ensure_can_view_task(team, requester_id, task)
        return task

    @use_case("list project tasks")
    async def list_tasks_by_project(
        self,
        project_id: str,
        requester_id: str,
        status: TaskStatus | str | None = None,
        priority: TaskPriority | str | None = None,
        assignee_id: str | None = None,
    ) -> list[Task]:
        """List a project's tasks, filtered to what the requester may see.

        Args:
            project_id: Project to list.
            requester_id: Principal performing the operation.
            status: Only tasks in this status.
            priority: Only tasks with this priority.
            assignee_id: Only tasks assigned to this user.

        Raises:
            NotFoundError: If the project or its team does not exist.
            PermissionDeniedError: If the requester is not a team member.
            DomainError: If a filter value is invalid.
        """
        project, team = await self._load.project_with_team(project_id)
        policies.ensure_team_member(team, requester_id)
        filters = TaskFilters.parse(status=status, priority=priority, assignee_id=assignee_id)

        tasks = await self._tasks.list_tasks_by_project(project.id, filters)
        return policies.visible_tasks(team, requester_id, tasks)

    @use_case("list team tasks")
    async def list_tasks_by_team(self, team_id: str, requester_id: str) -> list[Task]:
        """List tasks across every project of a team, filtered for the requester."""
        team = await self._load.team(team_id)
        policies.ensure_team_member(team, requester_id)

        tasks: list[Task] = []
        for project in await self._load.projects.list_projects_by_team(team.id):
            tasks.extend(await self._tasks.list_tasks_by_project(project.id))
        return policies.visible_tasks(team, requester_id, tasks)

    @use_case("list user tasks")
    async def list_tasks_for_user(self, user_id: str) -> list[Task]:
        """List the tasks assigned to a user."""
        return await self._tasks.list_tasks_by_assignee(user_id)

    @use_case("delete task")
    async def delete_task(self, task_id: str, requester_id: str) -> None:
        """Delete a task. Owner/admin, or the member who created it.

        Raises:
            NotFoundError: If the task is gone by the time it is deleted.
            PermissionDeniedError: If the requester may not delete it.
        """
        task, _, team = await self._load.task_with_team(task_id)
        policies.ensure_team_member(team, requester_id)
        policies.ensure_can_delete_task(team, requester_id, task)

        if not await self._tasks.delete_task(task.id):
            raise NotFoundError("Task not found")
        logger.info("task_deleted", task_id=task.id, requester_id=requester_id)

    @staticmethod
    def _ensure_assignable(team: Team, assignee_id: str) -> None:
        if not policies.is_team_member(team, assignee_id):
            raise DomainError("Assignee must be a member of the team")

    async def _publish(self, event: DomainEvent) -> None:
        try:
            await self._events.publish(event)
        except Exception as e:
            # Log but don't fail: the change is already saved
            logger.error(
                "domain_event_publish_failed",
                event_type=event.type,
                task_id=event.task_id,
                error=str(e),
            )
            return
        logger.debug("domain_event_published", event_type=event.type, task_id=event.task_id)
