"""Project domain."""

from teamtrack.core.projects.types import PROJECT_TRANSITIONS, Project, ProjectStatus

__all__ = ["Project", "ProjectStatus", "PROJECT_TRANSITIONS"]
