"""User endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import BookingServiceDep, get_db
from app.schemas.booking import BookingResponse

router = APIRouter()


@router.get("/{user_id}/bookings", response_model=list[BookingResponse])
async def get_user_bookings(
    user_id: int,
    service: BookingServiceDep,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[BookingResponse]:
    """All bookings of a user, newest start first."""
    bookings = await service.list_user_bookings(db, user_id)
    return [BookingResponse.from_booking(b, service.clock) for b in bookings]
