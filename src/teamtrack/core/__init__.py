"""Core domain - Pure business logic with no infrastructure dependencies."""

from .exceptions import (
    AccountLockedError,
    ApplicationError,
    AuthError,
    DomainError,
    NotFoundError,
    PermissionDeniedError,
    TeamtrackError,
)
from .interfaces import (
    Clock,
    EventPublisher,
    ProjectRepository,
    TaskRepository,
    TeamRepository,
    system_clock,
)

__all__ = [
    # Exceptions
    "TeamtrackError",
    "DomainError",
    "PermissionDeniedError",
    "NotFoundError",
    "AuthError",
    "AccountLockedError",
    "ApplicationError",
    # Interfaces
    "Clock",
    "system_clock",
    "TeamRepository",
    "ProjectRepository",
    "TaskRepository",
    "EventPublisher",
]
