"""HTTP edge: authentication dependencies and error mapping."""

from teamtrack.entrypoints.api.deps import (
    CurrentPrincipal,
    Principal,
    RefreshPrincipal,
    get_principal,
    get_refresh_principal,
    get_token_service,
)
from teamtrack.entrypoints.api.errors import STATUS_BY_ERROR, install_exception_handlers

__all__ = [
    "Principal",
    "CurrentPrincipal",
    "RefreshPrincipal",
    "get_principal",
    "get_refresh_principal",
    "get_token_service",
    "STATUS_BY_ERROR",
    "install_exception_handlers",
]
