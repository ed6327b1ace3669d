"""Initial database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2026-09-28

Creates all initial tables for the room booking service:
- Rooms and amenities
- Users
- Bookings
"""

from typing import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all database tables."""

    # ==================== ROOMS ====================
    op.create_table(
        "rooms",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False, index=True),
        sa.Column("capacity", sa.Integer, nullable=False),
        sa.Column("location", sa.String(200)),
        sa.CheckConstraint("capacity BETWEEN 1 AND 500", name="ck_rooms_capacity_range"),
    )

    # ==================== AMENITIES ====================
    op.create_table(
        "amenities",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(50), unique=True, nullable=False),
    )

    op.create_table(
        "room_amenities",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("room_id", sa.Integer, sa.ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False),
        sa.Column("amenity_id", sa.Integer, sa.ForeignKey("amenities.id", ondelete="CASCADE"), nullable=False),
        sa.UniqueConstraint("room_id", "amenity_id", name="uq_room_amenities_room_amenity"),
    )

    # ==================== USERS ====================
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
    )

    # ==================== BOOKINGS ====================
    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("room_id", sa.Integer, sa.ForeignKey("rooms.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="confirmed", index=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("end_time > start_time", name="ck_bookings_end_after_start"),
        sa.CheckConstraint(
            "status IN ('confirmed', 'cancelled', 'rescheduled', 'updated')",
            name="ck_bookings_status",
        ),
    )

    op.create_index("ix_bookings_room_interval", "bookings", ["room_id", "start_time", "end_time"])


def downgrade() -> None:
    """Drop all database tables."""
    op.drop_index("ix_bookings_room_interval", table_name="bookings")
    op.drop_table("bookings")
    op.drop_table("users")
    op.drop_table("room_amenities")
    op.drop_table("amenities")
    op.drop_table("rooms")
