"""Typed booking errors returned by the engine instead of raised."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(str, Enum):
    """Stable error codes exposed to API callers."""

    RESOURCE_NOT_FOUND = "ResourceNotFound"
    PRINCIPAL_NOT_FOUND = "PrincipalNotFound"
    BOOKING_NOT_FOUND = "BookingNotFound"
    TIME_SLOT_CONFLICT = "TimeSlotConflict"
    VALIDATION_ERROR = "ValidationError"
    OUTSIDE_BUSINESS_HOURS = "OutsideBusinessHours"
    PAST_TIME_NOT_ALLOWED = "PastTimeNotAllowed"
    BOOKING_CANCELLED = "BookingCancelled"
    ALREADY_CANCELLED = "AlreadyCancelled"
    INVALID_DATE = "InvalidDate"
    AVAILABILITY_FETCH_FAILED = "AvailabilityFetchFailed"
    ROOMS_FETCH_FAILED = "RoomsFetchFailed"
    CREATE_FAILED = "CreateFailed"
    UPDATE_FAILED = "UpdateFailed"


@dataclass(frozen=True)
class BookingError:
    """An expected failure with a stable code and a human message."""

    code: ErrorCode
    message: str

    @classmethod
    def room_not_found(cls, room_id: int) -> "BookingError":
        return cls(ErrorCode.RESOURCE_NOT_FOUND, f"Room with ID {room_id} does not exist")

    @classmethod
    def user_not_found(cls, user_id: int) -> "BookingError":
        return cls(ErrorCode.PRINCIPAL_NOT_FOUND, f"User with ID {user_id} does not exist")

    @classmethod
    def booking_not_found(cls, booking_id: int) -> "BookingError":
        return cls(ErrorCode.BOOKING_NOT_FOUND, f"Booking with ID {booking_id} does not exist")
