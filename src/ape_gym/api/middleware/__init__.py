"""API middleware modules."""

from .auth import (
    CurrentUser,
    get_current_user,
    require_admin,
    require_role,
    require_staff,
)
from .rate_limit import (
    get_rate_limit_key,
    limiter,
)

__all__ = [
    "CurrentUser",
    "get_current_user",
    "require_admin",
    "require_role",
    "require_staff",
    "limiter",
    "get_rate_limit_key",
]
