"""Seed rooms, amenities and users.

Revision ID: 002_seed_data
Revises: 001_initial
Create Date: 2026-09-28

Seeds the reference amenities, the office meeting rooms with their
amenities, and a handful of users.
"""

from typing import Sequence

from alembic import op
from sqlalchemy import Integer, String, column, table

# revision identifiers
revision: str = "002_seed_data"
down_revision: str = "001_initial"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

AMENITIES = [
    {"id": 1, "name": "Projector"},
    {"id": 2, "name": "Whiteboard"},
    {"id": 3, "name": "Video Conference"},
    {"id": 4, "name": "Phone"},
    {"id": 5, "name": "TV Screen"},
]

ROOMS = [
    {"id": 1, "name": "Board Room", "capacity": 12, "location": "3rd Floor"},
    {"id": 2, "name": "Small Meeting Room A", "capacity": 4, "location": "2nd Floor"},
    {"id": 3, "name": "Small Meeting Room B", "capacity": 4, "location": "2nd Floor"},
    {"id": 4, "name": "Large Conference Room", "capacity": 20, "location": "1st Floor"},
]

# room id -> amenity names
ROOM_AMENITIES = {
    1: ["Projector", "Whiteboard", "Video Conference", "Phone", "TV Screen"],
    2: ["Whiteboard", "TV Screen"],
    3: ["Whiteboard", "Video Conference"],
    4: ["Projector", "Whiteboard", "Video Conference", "Phone"],
}

USERS = [
    {"id": 1, "name": "John Doe"},
    {"id": 2, "name": "Jane Smith"},
    {"id": 3, "name": "Bob Wilson"},
]


def _sync_sequence(table_name: str) -> None:
    # Explicit ids leave the serial sequence behind on PostgreSQL
    op.execute(
        f"SELECT setval(pg_get_serial_sequence('{table_name}', 'id'), "
        f"(SELECT MAX(id) FROM {table_name}))"
    )


def upgrade() -> None:
    """Insert seed data."""
    amenities_table = table("amenities", column("id", Integer), column("name", String))
    rooms_table = table(
        "rooms",
        column("id", Integer),
        column("name", String),
        column("capacity", Integer),
        column("location", String),
    )
    room_amenities_table = table(
        "room_amenities",
        column("room_id", Integer),
        column("amenity_id", Integer),
    )
    users_table = table("users", column("id", Integer), column("name", String))

    amenity_ids = {a["name"]: a["id"] for a in AMENITIES}

    op.bulk_insert(amenities_table, AMENITIES)
    op.bulk_insert(rooms_table, ROOMS)
    op.bulk_insert(
        room_amenities_table,
        [
            {"room_id": room_id, "amenity_id": amenity_ids[name]}
            for room_id, names in ROOM_AMENITIES.items()
            for name in names
        ],
    )
    op.bulk_insert(users_table, USERS)

    if op.get_bind().dialect.name == "postgresql":
        for table_name in ("amenities", "rooms", "room_amenities", "users"):
            _sync_sequence(table_name)


def downgrade() -> None:
    """Remove seed data."""
    room_amenities_table = table("room_amenities", column("room_id", Integer))
    rooms_table = table("rooms", column("id", Integer))
    amenities_table = table("amenities", column("id", Integer))
    users_table = table("users", column("id", Integer))

    room_ids = [r["id"] for r in ROOMS]
    op.execute(room_amenities_table.delete().where(room_amenities_table.c.room_id.in_(room_ids)))
    op.execute(rooms_table.delete().where(rooms_table.c.id.in_(room_ids)))
    op.execute(amenities_table.delete().where(amenities_table.c.id.in_([a["id"] for a in AMENITIES])))
    op.execute(users_table.delete().where(users_table.c.id.in_([u["id"] for u in USERS])))
