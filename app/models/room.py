"""Room and amenity database models."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.booking import Booking


class Room(Base):
    """Bookable meeting room."""

    __tablename__ = "rooms"
    __table_args__ = (
        CheckConstraint("capacity BETWEEN 1 AND 500", name="ck_rooms_capacity_range"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    location: Mapped[str | None] = mapped_column(String(200))

    # Relationships
    amenities: Mapped[list["RoomAmenity"]] = relationship(
        "RoomAmenity", back_populates="room", cascade="all, delete-orphan"
    )
    bookings: Mapped[list["Booking"]] = relationship(
        "Booking", back_populates="room", passive_deletes="all"
    )

    @property
    def amenity_names(self) -> list[str]:
        """Names of the room's amenities (requires amenities to be loaded)."""
        return [ra.amenity.name for ra in self.amenities if ra.amenity and ra.amenity.name]


class Amenity(Base):
    """Amenity reference table."""

    __tablename__ = "amenities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)

    # Relationships
    room_amenities: Mapped[list["RoomAmenity"]] = relationship(
        "RoomAmenity", back_populates="amenity"
    )


class RoomAmenity(Base):
    """Many-to-many relationship between rooms and amenities."""

    __tablename__ = "room_amenities"
    __table_args__ = (
        UniqueConstraint("room_id", "amenity_id", name="uq_room_amenities_room_amenity"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    room_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False
    )
    amenity_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("amenities.id", ondelete="CASCADE"), nullable=False
    )

    # Relationships
    room: Mapped["Room"] = relationship("Room", back_populates="amenities")
    amenity: Mapped["Amenity"] = relationship("Amenity", back_populates="room_amenities")
