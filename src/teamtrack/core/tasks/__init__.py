"""Task domain."""

from teamtrack.core.tasks.types import (
    TRANSITIONS,
    UNSET,
    Task,
    TaskFilters,
    TaskPriority,
    TaskStatus,
    can_transition,
)

__all__ = [
    "Task",
    "TaskFilters",
    "TaskPriority",
    "TaskStatus",
    "TRANSITIONS",
    "UNSET",
    "can_transition",
]
