"""Utility modules for the Ape Gym API."""

from .log_sanitizer import (
    LogSanitizationFilter,
    install_log_sanitizer,
    sanitize_string,
)
from .timeutils import (
    parse_iso,
    period_key,
    to_iso,
    utc_day_key,
    utc_now,
    utc_now_iso,
    utc_week_key,
)

__all__ = [
    "LogSanitizationFilter",
    "install_log_sanitizer",
    "sanitize_string",
    "parse_iso",
    "period_key",
    "to_iso",
    "utc_day_key",
    "utc_now",
    "utc_now_iso",
    "utc_week_key",
]
