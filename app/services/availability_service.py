"""Room listing and day-level availability (read-only)."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.timezone import BusinessClock
from app.domain.booking_rules import BookingPolicy
from app.domain.errors import BookingError, ErrorCode
from app.domain.result import Err, Ok, Result
from app.repositories.booking_repository import BookingRepository

logger = logging.getLogger(__name__)


@dataclass
class AvailabilitySlot:
    """A confirmed booking on the requested day, in local time."""

    start_time: datetime
    end_time: datetime
    title: str


@dataclass
class AvailabilityResult:
    """Availability summary of one room for one local calendar day."""

    room_id: int
    room_name: str
    date: date
    bookings: list[AvailabilitySlot] = field(default_factory=list)
    is_available: bool = True
    has_any_bookings: bool = False


@dataclass
class RoomSummary:
    """Room with its amenity names."""

    id: int
    name: str
    capacity: int
    location: str | None
    amenities: list[str] = field(default_factory=list)


def has_gaps(
    slots: list[AvailabilitySlot],
    business_start: datetime,
    business_end: datetime,
) -> bool:
    """Check for any free time between business open and close.

    ``slots`` must be non-empty and ordered by start time.
    """
    if not slots:
        raise ValueError("has_gaps requires at least one booking")

    if slots[0].start_time > business_start:
        return True

    for current, following in zip(slots, slots[1:]):
        if current.end_time < following.start_time:
            return True

    return slots[-1].end_time < business_end


class AvailabilityService:
    """Service for room listing and availability."""

    def __init__(
        self,
        clock: BusinessClock | None = None,
        policy: BookingPolicy | None = None,
    ) -> None:
        self.clock = clock or BusinessClock(settings.business_timezone)
        self.policy = policy or BookingPolicy.from_settings(settings)

    async def list_rooms(self, db: AsyncSession) -> Result[list[RoomSummary]]:
        """All rooms with their amenity names."""
        try:
            rooms = await BookingRepository(db).list_rooms_with_amenities()
        except SQLAlchemyError:
            logger.exception("Error fetching rooms")
            return Err(BookingError(ErrorCode.ROOMS_FETCH_FAILED, "An error occurred while fetching rooms"))

        return Ok(
            [
                RoomSummary(
                    id=room.id,
                    name=room.name,
                    capacity=room.capacity,
                    location=room.location,
                    amenities=room.amenity_names,
                )
                for room in rooms
            ]
        )

    async def get_room_availability(
        self,
        db: AsyncSession,
        room_id: int,
        day: date,
    ) -> Result[AvailabilityResult]:
        """Confirmed bookings of a room on a local calendar day and whether any gap is left.

        Args:
            db: Database session
            room_id: Room to inspect
            day: Calendar date in the business timezone

        Returns:
            Ok with the availability summary, or Err
        """
        repo = BookingRepository(db)
        try:
            room = await repo.find_room(room_id)
            if room is None:
                return Err(BookingError.room_not_found(room_id))

            range_start, range_end = self.clock.local_day_bounds(day)
            opening = self.clock.at_local(day, self.policy.open_hour)
            closing = self.clock.at_local(day, self.policy.close_hour)
            bookings = await repo.find_confirmed_starting_between(room_id, range_start, range_end)
            room_name = room.name
        except OverflowError:
            # Local midnight of the first or last representable day has no UTC instant
            return Err(BookingError(ErrorCode.INVALID_DATE, f"Date {day.isoformat()} is out of range"))
        except SQLAlchemyError:
            logger.exception(f"Error fetching availability for room {room_id} on {day}")
            return Err(
                BookingError(
                    ErrorCode.AVAILABILITY_FETCH_FAILED,
                    "An error occurred while fetching room availability",
                )
            )

        slots = [
            AvailabilitySlot(
                start_time=self.clock.to_local(b.start_time),
                end_time=self.clock.to_local(b.end_time),
                title=b.title or "",
            )
            for b in bookings
        ]

        if slots:
            is_available = has_gaps(slots, opening, closing)
        else:
            is_available = True

        return Ok(
            AvailabilityResult(
                room_id=room_id,
                room_name=room_name,
                date=day,
                bookings=slots,
                is_available=is_available,
                has_any_bookings=bool(slots),
            )
        )


availability_service = AvailabilityService()
