"""API dependencies shared by the endpoint modules."""

from datetime import date
from typing import Annotated

from fastapi import Depends, Query

from app.core.exceptions import InvalidDate
from app.database import get_db
from app.services.availability_service import AvailabilityService, availability_service
from app.services.booking_service import BookingService, booking_service

__all__ = [
    "get_db",
    "get_booking_service",
    "get_availability_service",
    "get_local_date",
]


def get_booking_service() -> BookingService:
    """Booking engine used by the request."""
    return booking_service


def get_availability_service() -> AvailabilityService:
    """Availability calculator used by the request."""
    return availability_service


def get_local_date(
    date_param: Annotated[
        str | None, Query(alias="date", description="Local calendar date, YYYY-MM-DD")
    ] = None,
) -> date:
    """Parse the ``date`` query parameter or fail with InvalidDate."""
    if not date_param:
        raise InvalidDate()
    try:
        return date.fromisoformat(date_param.strip())
    except ValueError:
        raise InvalidDate() from None


BookingServiceDep = Annotated[BookingService, Depends(get_booking_service)]
AvailabilityServiceDep = Annotated[AvailabilityService, Depends(get_availability_service)]
