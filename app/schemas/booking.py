"""Booking-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.timezone import BusinessClock
from app.models.booking import Booking


def _reject_blank(value: str | None) -> str | None:
    if value is not None and not value.strip():
        raise ValueError("title must not be blank")
    return value


class BookingCreate(BaseModel):
    """Schema for creating a booking.

    Times are wall-clock values in the business timezone; any offset sent
    by the client is ignored.
    """

    room_id: int = Field(..., gt=0)
    user_id: int = Field(..., gt=0)
    start_time: datetime
    end_time: datetime
    title: str = Field(..., min_length=1, max_length=100)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _reject_blank(v)


class BookingUpdate(BaseModel):
    """Schema for rescheduling or retitling a booking. All fields optional."""

    start_time: datetime | None = None
    end_time: datetime | None = None
    title: str | None = Field(None, max_length=100)


class BookingResponse(BaseModel):
    """Schema for booking response. Times are business-local with offset."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    room_id: int
    room_name: str
    user_id: int
    user_name: str
    title: str
    start_time: datetime
    end_time: datetime
    status: str
    created_at: datetime

    @classmethod
    def from_booking(cls, booking: Booking, clock: BusinessClock) -> "BookingResponse":
        return cls(
            id=booking.id,
            room_id=booking.room_id,
            room_name=booking.room.name if booking.room else "Unknown",
            user_id=booking.user_id,
            user_name=booking.user.name if booking.user else "Unknown",
            title=booking.title or "",
            start_time=clock.to_local(booking.start_time),
            end_time=clock.to_local(booking.end_time),
            status=booking.status,
            created_at=clock.to_local(booking.created_at),
        )
