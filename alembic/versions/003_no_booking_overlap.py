"""Prevent overlapping confirmed bookings at the database level.

Revision ID: 003_no_booking_overlap
Revises: 002_seed_data
Create Date: 2026-09-30

Adds a GiST exclusion constraint so two confirmed bookings of the same
room can never hold intersecting half-open intervals, even if two writers
race past the application-level conflict scan.
"""

from typing import Sequence

from alembic import op

# revision identifiers
revision: str = "003_no_booking_overlap"
down_revision: str = "002_seed_data"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

CONSTRAINT_NAME = "ex_bookings_no_confirmed_overlap"


def upgrade() -> None:
    """Create the exclusion constraint."""
    # Needed for equality on integer columns inside a GiST index
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
    op.execute(
        f"""
        ALTER TABLE bookings
        ADD CONSTRAINT {CONSTRAINT_NAME}
        EXCLUDE USING gist (
            room_id WITH =,
            tstzrange(start_time, end_time, '[)') WITH &&
        )
        WHERE (status = 'confirmed')
        """
    )


def downgrade() -> None:
    """Drop the exclusion constraint."""
    op.execute(f"ALTER TABLE bookings DROP CONSTRAINT IF EXISTS {CONSTRAINT_NAME}")
