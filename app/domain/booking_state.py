"""Booking state machine.

States: confirmed → rescheduled | updated → ... → cancelled (terminal)
"""

from enum import Enum

from app.core.exceptions import InvalidBookingStatus


class BookingStatus(str, Enum):
    """Lifecycle status of a booking."""

    CONFIRMED = "confirmed"
    RESCHEDULED = "rescheduled"
    UPDATED = "updated"
    CANCELLED = "cancelled"


BOOKING_TRANSITIONS: dict[BookingStatus, set[BookingStatus]] = {
    BookingStatus.CONFIRMED: {
        BookingStatus.RESCHEDULED,
        BookingStatus.UPDATED,
        BookingStatus.CANCELLED,
    },
    BookingStatus.RESCHEDULED: {
        BookingStatus.RESCHEDULED,
        BookingStatus.UPDATED,
        BookingStatus.CANCELLED,
    },
    BookingStatus.UPDATED: {
        BookingStatus.RESCHEDULED,
        BookingStatus.UPDATED,
        BookingStatus.CANCELLED,
    },
    BookingStatus.CANCELLED: set(),  # Terminal state
}

# Only these statuses hold a room's time slot
BLOCKING_STATUSES: tuple[BookingStatus, ...] = (BookingStatus.CONFIRMED,)


def can_transition(current: str, target: str) -> bool:
    """Check whether ``current → target`` is allowed."""
    try:
        current_status = BookingStatus(current)
        target_status = BookingStatus(target)
    except ValueError:
        return False
    return target_status in BOOKING_TRANSITIONS[current_status]


def assert_booking_transition(current: str, target: str) -> None:
    """Validate booking state transition.

    Raises:
        InvalidBookingStatus: If the transition is not allowed
    """
    if not can_transition(current, target):
        current_label = getattr(current, "value", current)
        target_label = getattr(target, "value", target)
        raise InvalidBookingStatus(
            f"Invalid booking transition: {current_label} → {target_label}"
        )
