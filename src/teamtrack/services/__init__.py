"""Use-case services composed from the core domain and its ports."""

from teamtrack.services.base import WorkspaceLoader, use_case
from teamtrack.services.projects import ProjectService
from teamtrack.services.tasks import TaskService
from teamtrack.services.teams import TeamService

__all__ = [
    "TeamService",
    "ProjectService",
    "TaskService",
    "WorkspaceLoader",
    "use_case",
]
