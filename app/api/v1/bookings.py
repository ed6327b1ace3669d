"""Booking endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import BookingServiceDep, get_db
from app.core.exceptions import exception_for
from app.domain.errors import BookingError
from app.domain.result import Err
from app.schemas.booking import BookingCreate, BookingResponse, BookingUpdate
from app.schemas.error import ErrorResponse

router = APIRouter()


@router.post(
    "/",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def create_booking(
    booking_data: BookingCreate,
    service: BookingServiceDep,
    db: Annotated[AsyncSession, Depends(get_db)],
    request: Request,
    response: Response,
) -> BookingResponse:
    """Create a new booking."""
    result = await service.create_booking(
        db,
        room_id=booking_data.room_id,
        user_id=booking_data.user_id,
        start_time=booking_data.start_time,
        end_time=booking_data.end_time,
        title=booking_data.title,
    )
    if isinstance(result, Err):
        raise exception_for(result.error)

    booking = result.value
    response.headers["Location"] = str(request.url_for("get_booking", booking_id=booking.id))
    return BookingResponse.from_booking(booking, service.clock)


@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_booking(
    booking_id: int,
    service: BookingServiceDep,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingResponse:
    """Get a booking by ID."""
    booking = await service.get_booking(db, booking_id)
    if not booking:
        raise exception_for(BookingError.booking_not_found(booking_id))
    return BookingResponse.from_booking(booking, service.clock)


@router.patch(
    "/{booking_id}",
    response_model=BookingResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def update_booking(
    booking_id: int,
    updates: BookingUpdate,
    service: BookingServiceDep,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingResponse:
    """Reschedule and/or retitle a booking."""
    result = await service.update_booking(
        db,
        booking_id,
        start_time=updates.start_time,
        end_time=updates.end_time,
        title=updates.title,
    )
    if isinstance(result, Err):
        raise exception_for(result.error)
    return BookingResponse.from_booking(result.value, service.clock)


@router.delete(
    "/{booking_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def cancel_booking(
    booking_id: int,
    service: BookingServiceDep,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Response:
    """Cancel a booking (soft delete)."""
    result = await service.cancel_booking(db, booking_id)
    if isinstance(result, Err):
        raise exception_for(result.error)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
