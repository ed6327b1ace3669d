"""Booking database model."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.domain.booking_state import BookingStatus
from app.models.types import UTCDateTime

if TYPE_CHECKING:
    from app.models.room import Room
    from app.models.user import User


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Booking(Base):
    """Reservation of a room for a half-open interval [start_time, end_time)."""

    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("end_time > start_time", name="ck_bookings_end_after_start"),
        CheckConstraint(
            "status IN ('confirmed', 'cancelled', 'rescheduled', 'updated')",
            name="ck_bookings_status",
        ),
        Index("ix_bookings_room_interval", "room_id", "start_time", "end_time"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    room_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("rooms.id", ondelete="RESTRICT"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)

    # Absolute instants, always UTC
    start_time: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    end_time: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    # Status
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=BookingStatus.CONFIRMED.value, index=True
    )  # confirmed, rescheduled, updated, cancelled

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=_utcnow)

    # Relationships
    room: Mapped["Room"] = relationship("Room", back_populates="bookings")
    user: Mapped["User"] = relationship("User", back_populates="bookings")

    @property
    def is_cancelled(self) -> bool:
        return self.status == BookingStatus.CANCELLED
