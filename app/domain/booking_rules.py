"""Booking window validation rules.

Rules are applied in order and the first failure wins:

1. end must be after start
2. duration must be at least the minimum
3. duration must not exceed the maximum
4. local start hour >= open and local end hour <= close
5. start must not be in the past

Rule 4 compares only the hour component, so an end time of 17:45 local is
accepted when the business closes at 17.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from app.core.timezone import BusinessClock
from app.domain.errors import BookingError, ErrorCode


@dataclass(frozen=True)
class BookingPolicy:
    """Duration and business-hours limits for a booking."""

    min_duration: timedelta = timedelta(minutes=30)
    max_duration: timedelta = timedelta(hours=4)
    open_hour: int = 9
    close_hour: int = 17

    @classmethod
    def from_settings(cls, settings) -> "BookingPolicy":
        return cls(
            min_duration=timedelta(minutes=settings.min_booking_minutes),
            max_duration=timedelta(hours=settings.max_booking_hours),
            open_hour=settings.business_hours_start,
            close_hour=settings.business_hours_end,
        )

    @property
    def min_minutes(self) -> int:
        return int(self.min_duration.total_seconds() // 60)

    @property
    def max_hours(self) -> float:
        hours = self.max_duration.total_seconds() / 3600
        return int(hours) if hours.is_integer() else hours


def validate_booking_window(
    start: datetime,
    end: datetime,
    clock: BusinessClock,
    policy: BookingPolicy,
    now: datetime,
) -> BookingError | None:
    """Validate a UTC booking interval.

    Args:
        start: Start instant (aware, UTC)
        end: End instant (aware, UTC)
        clock: Business clock used for the local-hours check
        policy: Duration and hours limits
        now: Current UTC instant

    Returns:
        The first rule violation, or None if the interval is acceptable
    """
    if end <= start:
        return BookingError(ErrorCode.VALIDATION_ERROR, "End time must be after start time")

    duration = end - start
    if duration < policy.min_duration:
        return BookingError(
            ErrorCode.VALIDATION_ERROR,
            f"Booking must be at least {policy.min_minutes} minutes",
        )
    if duration > policy.max_duration:
        return BookingError(
            ErrorCode.VALIDATION_ERROR,
            f"Booking cannot exceed {policy.max_hours} hours",
        )

    local_start = clock.to_local_display(start)
    local_end = clock.to_local_display(end)
    if local_start.hour < policy.open_hour or local_end.hour > policy.close_hour:
        return BookingError(
            ErrorCode.OUTSIDE_BUSINESS_HOURS,
            f"Bookings must be between {policy.open_hour}:00 and {policy.close_hour}:00 "
            f"({clock.timezone_name})",
        )

    if start < now:
        return BookingError(ErrorCode.PAST_TIME_NOT_ALLOWED, "Cannot book times in the past")

    return None
