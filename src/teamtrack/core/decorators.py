"""Error propagation policy shared by every use-case orchestrator."""

from collections.abc import Awaitable, Callable
from functools import wraps
from typing import ParamSpec, TypeVar

import structlog

from teamtrack.core.exceptions import ApplicationError, TeamtrackError

logger = structlog.get_logger()

P = ParamSpec("P")
R = TypeVar("R")


def use_case(action: str) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorate a service method with the error propagation policy.

    Taxonomy errors (domain, permission, not-found, auth, token) pass
    through untouched. Anything else is logged and wrapped in
    ApplicationError with the original exception as its cause.

    Args:
        action: Human readable name of the operation (e.g., "change task status").

    Returns:
        Decorated coroutine function.
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return await func(*args, **kwargs)
            except TeamtrackError:
                raise
            except Exception as e:
                logger.error("use_case_failed", action=action, error=str(e))
                raise ApplicationError(f"Failed to {action}", cause=e) from e

        return wrapper

    return decorator
