"""Room endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import AvailabilityServiceDep, get_db, get_local_date
from app.core.exceptions import exception_for
from app.domain.result import Err
from app.schemas.error import ErrorResponse
from app.schemas.room import AvailabilityResponse, RoomResponse

router = APIRouter()


@router.get("/", response_model=list[RoomResponse], responses={500: {"model": ErrorResponse}})
async def list_rooms(
    service: AvailabilityServiceDep,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[RoomResponse]:
    """List all rooms with their amenities."""
    result = await service.list_rooms(db)
    if isinstance(result, Err):
        raise exception_for(result.error)
    return [RoomResponse.model_validate(room) for room in result.value]


@router.get(
    "/{room_id}/availability",
    response_model=AvailabilityResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def get_room_availability(
    room_id: int,
    day: Annotated[date, Depends(get_local_date)],
    service: AvailabilityServiceDep,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AvailabilityResponse:
    """Confirmed bookings of a room on a local calendar day.

    ``has_any_bookings`` is false when the room is completely free that day.
    """
    result = await service.get_room_availability(db, room_id, day)
    if isinstance(result, Err):
        raise exception_for(result.error)
    return AvailabilityResponse.model_validate(result.value)
