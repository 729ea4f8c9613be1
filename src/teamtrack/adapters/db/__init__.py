"""Repository adapters."""

from teamtrack.adapters.db.memory import (
    InMemoryProjectRepository,
    InMemoryTaskRepository,
    InMemoryTeamRepository,
    InMemoryUserRepository,
)

__all__ = [
    "InMemoryUserRepository",
    "InMemoryTeamRepository",
    "InMemoryProjectRepository",
    "InMemoryTaskRepository",
]
