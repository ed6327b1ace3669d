"""Booking lifecycle service: create, reschedule/update, cancel.

Every write runs check-then-write inside one transaction: the room row is
locked before the overlap scan and stays locked until commit or rollback.
Expected failures come back as ``Err(BookingError)``; only storage faults
are caught here, logged, and converted to the generic failure codes.
"""

import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.timezone import BusinessClock
from app.domain.booking_rules import BookingPolicy, validate_booking_window
from app.domain.booking_state import BookingStatus, assert_booking_transition
from app.domain.errors import BookingError, ErrorCode
from app.domain.result import Err, Ok, Result
from app.models.booking import Booking
from app.repositories.booking_repository import BookingRepository

logger = logging.getLogger(__name__)

# Name of the PostgreSQL exclusion constraint backing the overlap check
OVERLAP_CONSTRAINT = "ex_bookings_no_confirmed_overlap"

# Wall-clock times whose UTC instant falls outside the datetime range
OUT_OF_RANGE = BookingError(ErrorCode.VALIDATION_ERROR, "Time is outside the supported range")


def _is_overlap_violation(exc: IntegrityError) -> bool:
    return OVERLAP_CONSTRAINT in str(exc.orig)


class BookingService:
    """Service for the booking lifecycle."""

    def __init__(
        self,
        clock: BusinessClock | None = None,
        policy: BookingPolicy | None = None,
    ) -> None:
        self.clock = clock or BusinessClock(settings.business_timezone)
        self.policy = policy or BookingPolicy.from_settings(settings)

    async def create_booking(
        self,
        db: AsyncSession,
        room_id: int,
        user_id: int,
        start_time: datetime,
        end_time: datetime,
        title: str,
    ) -> Result[Booking]:
        """Create a confirmed booking.

        Args:
            db: Database session
            room_id: Room to book
            user_id: Owner of the booking
            start_time: Wall-clock start in the business timezone
            end_time: Wall-clock end in the business timezone
            title: Booking title

        Returns:
            Ok with the created booking (room and user loaded), or Err
        """
        try:
            start = self.clock.to_absolute(start_time)
            end = self.clock.to_absolute(end_time)
        except OverflowError:
            return Err(OUT_OF_RANGE)

        error = validate_booking_window(start, end, self.clock, self.policy, self.clock.now())
        if error:
            return Err(error)

        repo = BookingRepository(db)
        try:
            if not await repo.room_exists(room_id):
                return Err(BookingError.room_not_found(room_id))
            if not await repo.user_exists(user_id):
                return Err(BookingError.user_not_found(user_id))

            await repo.lock_room(room_id)
            conflicts = await repo.find_confirmed_overlapping(room_id, start, end)
            if conflicts:
                logger.info(
                    f"Booking conflict on room {room_id} for {start.isoformat()}–{end.isoformat()} "
                    f"(existing booking {conflicts[0].id})"
                )
                await db.rollback()
                return Err(self._conflict("This room is already booked for the requested time slot"))

            now = self.clock.now()
            booking = Booking(
                room_id=room_id,
                user_id=user_id,
                title=title.strip(),
                start_time=start,
                end_time=end,
                status=BookingStatus.CONFIRMED.value,
                created_at=now,
                updated_at=now,
            )
            await repo.add(booking)
            booking_id = booking.id
            await db.commit()

            created = await repo.get_booking(booking_id, with_details=True)
        except IntegrityError as e:
            await db.rollback()
            if _is_overlap_violation(e):
                logger.info(f"Overlap constraint rejected booking on room {room_id}")
                return Err(self._conflict("This room is already booked for the requested time slot"))
            logger.exception("Error creating booking")
            return Err(BookingError(ErrorCode.CREATE_FAILED, "An error occurred while creating the booking"))
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("Error creating booking")
            return Err(BookingError(ErrorCode.CREATE_FAILED, "An error occurred while creating the booking"))

        logger.info(f"Booking {booking_id} created for room {room_id} by user {user_id}")
        return Ok(created)

    async def update_booking(
        self,
        db: AsyncSession,
        booking_id: int,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
        title: str | None = None,
    ) -> Result[Booking]:
        """Reschedule and/or retitle a booking.

        Unsupplied time fields keep their stored instant. Title-only updates
        skip validation and the overlap scan.

        Locks are taken room first, then booking, the same order as
        create_booking. On any Err the transaction is rolled back, which
        expires instances the caller still holds from this session.
        """
        try:
            requested_start = self.clock.to_absolute(start_time) if start_time is not None else None
            requested_end = self.clock.to_absolute(end_time) if end_time is not None else None
        except OverflowError:
            return Err(OUT_OF_RANGE)

        repo = BookingRepository(db)
        try:
            found = await repo.get_booking(booking_id)
            if found is None:
                return Err(BookingError.booking_not_found(booking_id))
            room_id = found.room_id

            await repo.lock_room(room_id)
            booking = await repo.get_booking(booking_id, for_update=True)
            if booking is None:
                await db.rollback()
                return Err(BookingError.booking_not_found(booking_id))
            if booking.is_cancelled:
                await db.rollback()
                return Err(BookingError(ErrorCode.BOOKING_CANCELLED, "Cannot update a cancelled booking"))

            new_start = requested_start if requested_start is not None else booking.start_time
            new_end = requested_end if requested_end is not None else booking.end_time

            if start_time is not None or end_time is not None:
                error = validate_booking_window(
                    new_start, new_end, self.clock, self.policy, self.clock.now()
                )
                if error:
                    await db.rollback()
                    return Err(error)

                conflicts = await repo.find_confirmed_overlapping(
                    room_id, new_start, new_end, exclude_id=booking_id
                )
                if conflicts:
                    logger.info(
                        f"Reschedule of booking {booking_id} conflicts with booking {conflicts[0].id}"
                    )
                    await db.rollback()
                    return Err(self._conflict("The new time slot conflicts with another booking"))

            time_changed = new_start != booking.start_time or new_end != booking.end_time
            target = BookingStatus.RESCHEDULED if time_changed else BookingStatus.UPDATED
            assert_booking_transition(booking.status, target)

            booking.start_time = new_start
            booking.end_time = new_end
            if title is not None and title.strip():
                booking.title = title.strip()
            booking.status = target.value
            booking.updated_at = self.clock.now()
            await db.commit()

            updated = await repo.get_booking(booking_id, with_details=True)
        except IntegrityError as e:
            await db.rollback()
            if _is_overlap_violation(e):
                logger.info(f"Overlap constraint rejected reschedule of booking {booking_id}")
                return Err(self._conflict("The new time slot conflicts with another booking"))
            logger.exception(f"Error updating booking {booking_id}")
            return Err(BookingError(ErrorCode.UPDATE_FAILED, "An error occurred while updating the booking"))
        except SQLAlchemyError:
            await db.rollback()
            logger.exception(f"Error updating booking {booking_id}")
            return Err(BookingError(ErrorCode.UPDATE_FAILED, "An error occurred while updating the booking"))

        logger.info(f"Booking {booking_id} {target.value}")
        return Ok(updated)

    async def cancel_booking(self, db: AsyncSession, booking_id: int) -> Result[None]:
        """Cancel a booking. Bookings are never deleted.

        The booking row is locked so a concurrent reschedule cannot
        overwrite the cancellation.
        """
        repo = BookingRepository(db)
        try:
            booking = await repo.get_booking(booking_id, for_update=True)
            if booking is None:
                await db.rollback()
                return Err(BookingError.booking_not_found(booking_id))
            if booking.is_cancelled:
                await db.rollback()
                return Err(BookingError(ErrorCode.ALREADY_CANCELLED, "Booking is already cancelled"))

            assert_booking_transition(booking.status, BookingStatus.CANCELLED)
            booking.status = BookingStatus.CANCELLED.value
            booking.updated_at = self.clock.now()
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.exception(f"Error cancelling booking {booking_id}")
            return Err(BookingError(ErrorCode.UPDATE_FAILED, "An error occurred while cancelling the booking"))

        logger.info(f"Booking {booking_id} cancelled")
        return Ok(None)

    async def get_booking(self, db: AsyncSession, booking_id: int) -> Booking | None:
        """Get a booking with its room and user."""
        return await BookingRepository(db).get_booking(booking_id, with_details=True)

    async def list_user_bookings(self, db: AsyncSession, user_id: int) -> list[Booking]:
        """All bookings of a user, newest start first."""
        return await BookingRepository(db).list_by_user(user_id)

    @staticmethod
    def _conflict(message: str) -> BookingError:
        return BookingError(ErrorCode.TIME_SLOT_CONFLICT, message)


booking_service = BookingService()
