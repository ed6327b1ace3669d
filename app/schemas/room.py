"""Room and availability Pydantic schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict


class RoomResponse(BaseModel):
    """Schema for room listing."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    capacity: int
    location: str | None
    amenities: list[str]


class BookingSlotResponse(BaseModel):
    """Confirmed booking on the requested day."""

    model_config = ConfigDict(from_attributes=True)

    start_time: datetime
    end_time: datetime
    title: str


class AvailabilityResponse(BaseModel):
    """Schema for room availability on one local calendar day."""

    model_config = ConfigDict(from_attributes=True)

    room_id: int
    room_name: str
    date: date
    bookings: list[BookingSlotResponse]
    is_available: bool
    has_any_bookings: bool
