"""Pydantic schemas for API validation."""

from app.schemas.booking import BookingCreate, BookingResponse, BookingUpdate
from app.schemas.error import ErrorResponse
from app.schemas.room import AvailabilityResponse, BookingSlotResponse, RoomResponse

__all__ = [
    # Booking
    "BookingCreate",
    "BookingUpdate",
    "BookingResponse",
    # Room
    "RoomResponse",
    "BookingSlotResponse",
    "AvailabilityResponse",
    # Error
    "ErrorResponse",
]
