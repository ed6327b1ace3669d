"""Core utilities: exceptions, middleware and time handling."""

from app.core.exceptions import (
    AppException,
    InvalidBookingStatus,
    InvalidDate,
    exception_for,
)
from app.core.timezone import BusinessClock, TimezoneConfigurationError

__all__ = [
    "AppException",
    "InvalidBookingStatus",
    "InvalidDate",
    "exception_for",
    "BusinessClock",
    "TimezoneConfigurationError",
]
