"""API route modules."""

from . import admin, app, auth

__all__ = ["admin", "app", "auth"]
