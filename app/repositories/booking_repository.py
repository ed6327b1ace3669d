"""Query functions over rooms, users and bookings.

All relational navigation the engine needs goes through here as explicit
queries instead of lazy-loaded object graphs.
"""

from datetime import datetime

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.domain.booking_state import BLOCKING_STATUSES
from app.models.booking import Booking
from app.models.room import Room, RoomAmenity
from app.models.user import User


class BookingRepository:
    """Repository bound to one session (and therefore one transaction)."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # ==================== ROOMS ====================

    async def find_room(self, room_id: int) -> Room | None:
        result = await self.db.execute(select(Room).where(Room.id == room_id))
        return result.scalar_one_or_none()

    async def room_exists(self, room_id: int) -> bool:
        result = await self.db.execute(select(exists().where(Room.id == room_id)))
        return bool(result.scalar())

    async def lock_room(self, room_id: int) -> Room | None:
        """Take a row lock on the room for the rest of the transaction.

        Every write that scans a room's bookings for overlap goes through
        this first, so two writers on the same room are serialized.
        """
        result = await self.db.execute(
            select(Room).where(Room.id == room_id).with_for_update()
        )
        return result.scalar_one_or_none()

    async def list_rooms_with_amenities(self) -> list[Room]:
        result = await self.db.execute(
            select(Room)
            .order_by(Room.id)
            .options(selectinload(Room.amenities).selectinload(RoomAmenity.amenity))
        )
        return list(result.scalars().all())

    # ==================== USERS ====================

    async def user_exists(self, user_id: int) -> bool:
        result = await self.db.execute(select(exists().where(User.id == user_id)))
        return bool(result.scalar())

    # ==================== BOOKINGS ====================

    async def get_booking(
        self,
        booking_id: int,
        with_details: bool = False,
        for_update: bool = False,
    ) -> Booking | None:
        """Load a booking.

        ``for_update`` takes a row lock held until commit or rollback and
        re-reads the row, so a status committed by another writer while this
        one waited is what the caller sees.
        """
        query = select(Booking).where(Booking.id == booking_id)
        if with_details:
            query = query.options(selectinload(Booking.room), selectinload(Booking.user))
        if for_update:
            query = query.with_for_update()
        if with_details or for_update:
            # Refresh attributes already in the identity map
            query = query.execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def find_confirmed_overlapping(
        self,
        room_id: int,
        start: datetime,
        end: datetime,
        exclude_id: int | None = None,
    ) -> list[Booking]:
        """Blocking bookings of the room that overlap [start, end)."""
        query = select(Booking).where(
            Booking.room_id == room_id,
            Booking.status.in_([s.value for s in BLOCKING_STATUSES]),
            Booking.start_time < end,
            Booking.end_time > start,
        )
        if exclude_id is not None:
            query = query.where(Booking.id != exclude_id)
        result = await self.db.execute(query.order_by(Booking.start_time))
        return list(result.scalars().all())

    async def find_confirmed_starting_between(
        self,
        room_id: int,
        range_start: datetime,
        range_end: datetime,
    ) -> list[Booking]:
        """Blocking bookings of the room whose start is in [range_start, range_end)."""
        result = await self.db.execute(
            select(Booking)
            .where(
                Booking.room_id == room_id,
                Booking.status.in_([s.value for s in BLOCKING_STATUSES]),
                Booking.start_time >= range_start,
                Booking.start_time < range_end,
            )
            .order_by(Booking.start_time)
        )
        return list(result.scalars().all())

    async def list_by_user(self, user_id: int) -> list[Booking]:
        """All bookings of a user, newest start first."""
        result = await self.db.execute(
            select(Booking)
            .where(Booking.user_id == user_id)
            .options(selectinload(Booking.room), selectinload(Booking.user))
            .order_by(Booking.start_time.desc(), Booking.id.desc())
        )
        return list(result.scalars().all())

    async def add(self, booking: Booking) -> Booking:
        self.db.add(booking)
        await self.db.flush()
        return booking
