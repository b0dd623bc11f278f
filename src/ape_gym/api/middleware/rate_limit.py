"""Rate limiting middleware for FastAPI.

Uses slowapi to throttle the public auth endpoints per client IP, and per
user id once a request has been authenticated.
"""

from typing import Optional

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from ...config import get_settings


def get_rate_limit_key(request: Request) -> str:
    """Get the rate limit key for a request.

    Uses the user id if authenticated (from request state), otherwise falls
    back to the client's IP address.
    """
    user: Optional[object] = getattr(request.state, "user", None)
    if user is not None:
        user_id = getattr(user, "id", None)
        if user_id:
            return f"user:{user_id}"

    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_rate_limit_key,
    enabled=get_settings().rate_limit_enabled,
)


# Limits are read from settings when a request is checked
def login_limit() -> str:
    return get_settings().rate_limit_login


def register_limit() -> str:
    return get_settings().rate_limit_register


def password_reset_limit() -> str:
    return get_settings().rate_limit_password_reset
