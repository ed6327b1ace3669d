"""Database models."""

from app.models.booking import Booking
from app.models.room import Amenity, Room, RoomAmenity
from app.models.user import User

__all__ = [
    # Room
    "Room",
    "Amenity",
    "RoomAmenity",
    # User
    "User",
    # Booking
    "Booking",
]
