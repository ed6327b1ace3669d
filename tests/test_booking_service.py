"""Tests for the booking lifecycle service against a real session."""

from datetime import datetime, timedelta

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.domain.errors import ErrorCode
from app.domain.result import Err, Ok
from app.models.booking import Booking
from app.repositories.booking_repository import BookingRepository
from conftest import at


async def _book(service, db, day, start_hour, end_hour, room_id=1, user_id=1, title="Standup"):
    return await service.create_booking(
        db,
        room_id=room_id,
        user_id=user_id,
        start_time=at(day, start_hour),
        end_time=at(day, end_hour),
        title=title,
    )


async def test_create_booking(booking_service, db, future_day, clock):
    result = await _book(booking_service, db, future_day, 10, 11, title="  Planning  ")

    assert isinstance(result, Ok)
    booking = result.value
    assert booking.status == "confirmed"
    assert booking.title == "Planning"
    assert booking.room.name == "Board Room"
    assert booking.user.name == "John Doe"
    assert booking.start_time == clock.to_absolute(at(future_day, 10))
    assert clock.to_local_display(booking.end_time) == at(future_day, 11)


async def test_overlapping_booking_conflicts(booking_service, db, future_day):
    first = await _book(booking_service, db, future_day, 10, 12)
    second = await _book(booking_service, db, future_day, 11, 13, user_id=2)

    assert isinstance(first, Ok)
    assert isinstance(second, Err)
    assert second.error.code == ErrorCode.TIME_SLOT_CONFLICT

    stored = (await db.execute(select(Booking))).scalars().all()
    assert len(stored) == 1


async def test_back_to_back_bookings(booking_service, db, future_day):
    first = await _book(booking_service, db, future_day, 10, 11)
    second = await _book(booking_service, db, future_day, 11, 12)

    assert isinstance(first, Ok)
    assert isinstance(second, Ok)


async def test_same_slot_in_another_room(booking_service, db, future_day):
    await _book(booking_service, db, future_day, 10, 11, room_id=1)
    other = await _book(booking_service, db, future_day, 10, 11, room_id=2)

    assert isinstance(other, Ok)


async def test_validation_runs_before_existence_checks(booking_service, db, future_day):
    result = await _book(booking_service, db, future_day, 11, 10, room_id=999)

    assert result.error.code == ErrorCode.VALIDATION_ERROR


async def test_unknown_room(booking_service, db, future_day):
    result = await _book(booking_service, db, future_day, 10, 11, room_id=999)

    assert result.error.code == ErrorCode.RESOURCE_NOT_FOUND
    assert result.error.message == "Room with ID 999 does not exist"


async def test_unknown_user(booking_service, db, future_day):
    result = await _book(booking_service, db, future_day, 10, 11, user_id=999)

    assert result.error.code == ErrorCode.PRINCIPAL_NOT_FOUND


async def test_past_booking_rejected(booking_service, db, clock):
    yesterday = clock.to_local_display(clock.now()).date() - timedelta(days=1)

    result = await _book(booking_service, db, yesterday, 10, 11)

    assert result.error.code == ErrorCode.PAST_TIME_NOT_ALLOWED


async def test_outside_business_hours(booking_service, db, future_day):
    result = await _book(booking_service, db, future_day, 7, 8)

    assert result.error.code == ErrorCode.OUTSIDE_BUSINESS_HOURS


async def test_reschedule(booking_service, db, future_day, clock):
    created = (await _book(booking_service, db, future_day, 10, 11)).value

    result = await booking_service.update_booking(
        db, created.id, start_time=at(future_day, 14), end_time=at(future_day, 15)
    )

    assert isinstance(result, Ok)
    assert result.value.status == "rescheduled"
    assert clock.to_local_display(result.value.start_time) == at(future_day, 14)


async def test_reschedule_only_end_keeps_start(booking_service, db, future_day, clock):
    created = (await _book(booking_service, db, future_day, 10, 11)).value

    result = await booking_service.update_booking(db, created.id, end_time=at(future_day, 12))

    assert result.value.status == "rescheduled"
    assert clock.to_local_display(result.value.start_time) == at(future_day, 10)
    assert clock.to_local_display(result.value.end_time) == at(future_day, 12)


async def test_reschedule_into_conflict(booking_service, db, future_day):
    await _book(booking_service, db, future_day, 10, 11)
    # Err rolls the session back and expires held instances, so keep the id
    other_id = (await _book(booking_service, db, future_day, 13, 14)).value.id

    result = await booking_service.update_booking(
        db, other_id, start_time=at(future_day, 10, 30), end_time=at(future_day, 11, 30)
    )

    assert result.error.code == ErrorCode.TIME_SLOT_CONFLICT
    unchanged = await booking_service.get_booking(db, other_id)
    assert unchanged.status == "confirmed"


async def test_reschedule_over_own_interval(booking_service, db, future_day):
    created = (await _book(booking_service, db, future_day, 10, 12)).value

    result = await booking_service.update_booking(
        db, created.id, start_time=at(future_day, 11), end_time=at(future_day, 13)
    )

    assert isinstance(result, Ok)


async def test_reschedule_validation(booking_service, db, future_day):
    created = (await _book(booking_service, db, future_day, 10, 11)).value

    result = await booking_service.update_booking(db, created.id, end_time=at(future_day, 9))

    assert result.error.code == ErrorCode.VALIDATION_ERROR


async def test_title_only_update(booking_service, db, future_day):
    created = (await _book(booking_service, db, future_day, 10, 11)).value
    start, end = created.start_time, created.end_time

    result = await booking_service.update_booking(db, created.id, title="Retro")

    assert result.value.status == "updated"
    assert result.value.title == "Retro"
    assert (result.value.start_time, result.value.end_time) == (start, end)


async def test_blank_title_is_ignored(booking_service, db, future_day):
    created = (await _book(booking_service, db, future_day, 10, 11, title="Kickoff")).value

    result = await booking_service.update_booking(db, created.id, title="   ")

    assert result.value.title == "Kickoff"
    assert result.value.status == "updated"


async def test_update_unknown_booking(booking_service, db):
    result = await booking_service.update_booking(db, 404, title="Nope")

    assert result.error.code == ErrorCode.BOOKING_NOT_FOUND


async def test_reschedule_cancelled_booking(booking_service, db, future_day, clock):
    booking_id = (await _book(booking_service, db, future_day, 10, 11)).value.id
    await booking_service.cancel_booking(db, booking_id)

    result = await booking_service.update_booking(
        db, booking_id, start_time=at(future_day, 14), end_time=at(future_day, 15)
    )

    assert result.error.code == ErrorCode.BOOKING_CANCELLED
    booking = await booking_service.get_booking(db, booking_id)
    assert booking.status == "cancelled"
    assert clock.to_local_display(booking.start_time) == at(future_day, 10)


async def test_cancel_twice(booking_service, db, future_day):
    booking_id = (await _book(booking_service, db, future_day, 10, 11)).value.id

    first = await booking_service.cancel_booking(db, booking_id)
    second = await booking_service.cancel_booking(db, booking_id)

    assert isinstance(first, Ok)
    assert first.value is None
    assert second.error.code == ErrorCode.ALREADY_CANCELLED
    assert (await booking_service.get_booking(db, booking_id)).status == "cancelled"


async def test_cancel_unknown_booking(booking_service, db):
    result = await booking_service.cancel_booking(db, 404)

    assert result.error.code == ErrorCode.BOOKING_NOT_FOUND


async def test_cancelled_slot_can_be_rebooked(booking_service, db, future_day):
    created = (await _book(booking_service, db, future_day, 10, 11)).value
    await booking_service.cancel_booking(db, created.id)

    again = await _book(booking_service, db, future_day, 10, 11, user_id=2)

    assert isinstance(again, Ok)


async def test_list_user_bookings_newest_first(booking_service, db, future_day):
    early = (await _book(booking_service, db, future_day, 10, 11)).value
    late = (await _book(booking_service, db, future_day + timedelta(days=1), 10, 11)).value
    await _book(booking_service, db, future_day, 12, 13, user_id=2)

    bookings = await booking_service.list_user_bookings(db, 1)

    assert [b.id for b in bookings] == [late.id, early.id]
    assert bookings[0].room.name == "Board Room"


async def test_list_user_bookings_empty(booking_service, db):
    assert await booking_service.list_user_bookings(db, 999) == []


async def test_confirmed_bookings_never_overlap(booking_service, db, future_day):
    for start_hour, end_hour in [(9, 11), (10, 12), (11, 13), (12, 14), (11, 12), (13, 15)]:
        await _book(booking_service, db, future_day, start_hour, end_hour)

    bookings = (
        (await db.execute(select(Booking).where(Booking.status == "confirmed").order_by(Booking.start_time)))
        .scalars()
        .all()
    )
    for current, following in zip(bookings, bookings[1:]):
        assert current.end_time <= following.start_time


async def test_storage_fault_on_create(booking_service, db, future_day, monkeypatch):
    async def broken_lock(self, room_id):
        raise SQLAlchemyError("connection lost")

    monkeypatch.setattr(BookingRepository, "lock_room", broken_lock)

    result = await _book(booking_service, db, future_day, 10, 11)

    assert result.error.code == ErrorCode.CREATE_FAILED


async def test_overlap_constraint_maps_to_conflict(booking_service, db, future_day, monkeypatch):
    async def racing_add(self, booking):
        raise IntegrityError(
            "INSERT INTO bookings",
            {},
            Exception('conflicting key value violates exclusion constraint "ex_bookings_no_confirmed_overlap"'),
        )

    monkeypatch.setattr(BookingRepository, "add", racing_add)

    result = await _book(booking_service, db, future_day, 10, 11)

    assert result.error.code == ErrorCode.TIME_SLOT_CONFLICT


async def test_storage_fault_on_cancel(booking_service, db, future_day, monkeypatch):
    created = (await _book(booking_service, db, future_day, 10, 11)).value

    async def broken_get(self, booking_id, with_details=False, for_update=False):
        raise SQLAlchemyError("connection lost")

    monkeypatch.setattr(BookingRepository, "get_booking", broken_get)

    result = await booking_service.cancel_booking(db, created.id)

    assert result.error.code == ErrorCode.UPDATE_FAILED


async def test_get_booking_loads_details(booking_service, db, future_day):
    title = "Design review"
    created = (await _book(booking_service, db, future_day, 10, 11, title=title)).value

    booking = await booking_service.get_booking(db, created.id)

    assert booking.title == title
    assert booking.user.name == "John Doe"


async def test_reschedule_storage_fault(booking_service, db, future_day, monkeypatch):
    booking_id = (await _book(booking_service, db, future_day, 10, 11)).value.id

    async def broken_lock(self, room_id):
        raise SQLAlchemyError("connection lost")

    monkeypatch.setattr(BookingRepository, "lock_room", broken_lock)

    result = await booking_service.update_booking(
        db, booking_id, start_time=at(future_day, 14), end_time=at(future_day, 15)
    )

    assert result.error.code == ErrorCode.UPDATE_FAILED


async def test_reschedule_overlap_constraint_maps_to_conflict(booking_service, db, future_day, monkeypatch):
    booking_id = (await _book(booking_service, db, future_day, 10, 11)).value.id

    async def racing_commit():
        raise IntegrityError(
            "UPDATE bookings",
            {},
            Exception('conflicting key value violates exclusion constraint "ex_bookings_no_confirmed_overlap"'),
        )

    monkeypatch.setattr(db, "commit", racing_commit)

    result = await booking_service.update_booking(
        db, booking_id, start_time=at(future_day, 14), end_time=at(future_day, 15)
    )

    assert result.error.code == ErrorCode.TIME_SLOT_CONFLICT


async def test_reschedule_other_integrity_error_is_update_failure(booking_service, db, future_day, monkeypatch):
    booking_id = (await _book(booking_service, db, future_day, 10, 11)).value.id

    async def failing_commit():
        raise IntegrityError("UPDATE bookings", {}, Exception("CHECK constraint failed: ck_bookings_status"))

    monkeypatch.setattr(db, "commit", failing_commit)

    result = await booking_service.update_booking(db, booking_id, title="Renamed")

    assert result.error.code == ErrorCode.UPDATE_FAILED


async def test_reschedule_sees_cancel_committed_while_waiting_for_lock(
    booking_service, db, session_factory, future_day, monkeypatch
):
    booking_id = (await _book(booking_service, db, future_day, 10, 11)).value.id
    # Warm the identity map with the still-confirmed row
    assert (await booking_service.get_booking(db, booking_id)).status == "confirmed"

    original_lock = BookingRepository.lock_room

    async def lock_after_concurrent_cancel(self, room_id):
        async with session_factory() as other:
            cancelled = await booking_service.cancel_booking(other, booking_id)
            assert isinstance(cancelled, Ok)
        return await original_lock(self, room_id)

    monkeypatch.setattr(BookingRepository, "lock_room", lock_after_concurrent_cancel)

    result = await booking_service.update_booking(
        db, booking_id, start_time=at(future_day, 14), end_time=at(future_day, 15)
    )

    assert result.error.code == ErrorCode.BOOKING_CANCELLED
    monkeypatch.undo()
    async with session_factory() as fresh:
        stored = await booking_service.get_booking(fresh, booking_id)
    assert stored.status == "cancelled"


async def test_writes_read_the_booking_under_a_row_lock(booking_service, db, future_day, monkeypatch):
    booking_id = (await _book(booking_service, db, future_day, 10, 11)).value.id
    calls = []
    original_get = BookingRepository.get_booking
    original_lock = BookingRepository.lock_room

    async def recording_get(self, booking_id, with_details=False, for_update=False):
        calls.append(("get", for_update))
        return await original_get(self, booking_id, with_details=with_details, for_update=for_update)

    async def recording_lock(self, room_id):
        calls.append(("lock_room", room_id))
        return await original_lock(self, room_id)

    monkeypatch.setattr(BookingRepository, "get_booking", recording_get)
    monkeypatch.setattr(BookingRepository, "lock_room", recording_lock)

    await booking_service.update_booking(db, booking_id, title="Renamed")
    update_calls = list(calls)
    calls.clear()
    await booking_service.cancel_booking(db, booking_id)

    locked_read = update_calls.index(("get", True))
    assert update_calls.index(("lock_room", 1)) < locked_read
    assert calls[0] == ("get", True)


async def test_time_outside_datetime_range(booking_service, db):
    result = await booking_service.create_booking(
        db,
        room_id=1,
        user_id=1,
        start_time=datetime(1, 1, 1, 0, 30),
        end_time=datetime(1, 1, 1, 1, 30),
        title="Ancient",
    )

    assert result.error.code == ErrorCode.VALIDATION_ERROR
    assert result.error.message == "Time is outside the supported range"


async def test_reschedule_outside_datetime_range(booking_service, db, future_day):
    booking_id = (await _book(booking_service, db, future_day, 10, 11)).value.id

    result = await booking_service.update_booking(db, booking_id, start_time=datetime(1, 1, 1, 0, 30))

    assert result.error.code == ErrorCode.VALIDATION_ERROR
