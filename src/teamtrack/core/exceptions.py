"""Domain-specific exceptions.

All exceptions in the teamtrack system inherit from TeamtrackError,
making it easy to catch all system errors while still being able
to handle specific error types.
"""

from __future__ import annotations


class TeamtrackError(Exception):
    """Base exception for all teamtrack errors.

    All custom exceptions in the system should inherit from this class
    to enable catching all teamtrack-specific errors with a single except clause.
    """

    pass


class DomainError(TeamtrackError):
    """A business invariant was violated.

    Raised by aggregates at the point of violation:
    - Duplicate team member, removing the owner, unknown member
    - Task status transition not present in the transition table
    - Blank title, blank assignee, unknown status or priority value

    Callers should not retry; the request itself is invalid.
    """

    pass


class PermissionDeniedError(TeamtrackError):
    """The principal lacks the role required for the operation.

    Every authorization denial surfaces as this error. Listings are
    the only place where visibility is shaped silently instead.
    """

    pass


class NotFoundError(TeamtrackError):
    """A referenced aggregate (user, team, project, task) does not exist."""

    pass


class AuthError(TeamtrackError):
    """Authentication failed (bad credentials, unverified account)."""

    pass


class AccountLockedError(AuthError):
    """Too many failed attempts for a lockout key.

    Attributes:
        key: The lockout key that is currently locked.
    """

    def __init__(self, key: str, message: str = "Too many attempts") -> None:
        """Initialize AccountLockedError.

        Args:
            key: The locked lockout key.
            message: Error description.
        """
        super().__init__(message)
        self.key = key


class ApplicationError(TeamtrackError):
    """An orchestration step failed unexpectedly.

    Use cases wrap anything outside the taxonomy in this error so the
    transport layer can answer with a generic failure while the original
    exception stays reachable for logging.

    Attributes:
        cause: The original exception, if any.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        """Initialize ApplicationError.

        Args:
            message: Error description.
            cause: Underlying exception that triggered the failure.
        """
        super().__init__(message)
        self.cause = cause
