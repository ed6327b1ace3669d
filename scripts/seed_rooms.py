#!/usr/bin/env python3
"""Add a meeting room (with amenities) or a user to the database."""

import asyncio

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import AsyncSessionLocal
from app.models.room import Amenity, Room, RoomAmenity
from app.models.user import User


async def _get_or_create_amenity(session: AsyncSession, name: str) -> Amenity:
    result = await session.execute(select(Amenity).where(Amenity.name == name))
    amenity = result.scalar_one_or_none()
    if amenity is None:
        amenity = Amenity(name=name)
        session.add(amenity)
        await session.flush()
        print(f"Created amenity: {name}")
    return amenity


async def create_room(
    name: str,
    capacity: int,
    location: str | None = None,
    amenities: list[str] | None = None,
) -> None:
    """Create a room if one with the same name doesn't exist."""
    async with AsyncSessionLocal() as session:

        # Check if room already exists
        result = await session.execute(select(Room).where(Room.name == name))
        existing = result.scalar_one_or_none()

        if existing:
            print(f"Room already exists: {name} (ID {existing.id})")
            return

        room = Room(name=name, capacity=capacity, location=location)
        session.add(room)
        await session.flush()

        for amenity_name in amenities or []:
            amenity = await _get_or_create_amenity(session, amenity_name.strip())
            session.add(RoomAmenity(room_id=room.id, amenity_id=amenity.id))

        room_id = room.id
        await session.commit()
        print(f"Created room: {name} (ID {room_id})")
        print(f"Capacity: {capacity}")
        print(f"Amenities: {', '.join(amenities or []) or '-'}")


async def create_user(name: str) -> None:
    """Create a user."""
    async with AsyncSessionLocal() as session:
        user = User(name=name)
        session.add(user)
        await session.flush()
        user_id = user.id
        await session.commit()
        print(f"Created user: {name} (ID {user_id})")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Seed rooms and users")
    subparsers = parser.add_subparsers(dest="command", required=True)

    room_parser = subparsers.add_parser("room", help="Add a meeting room")
    room_parser.add_argument("--name", required=True, help="Room name")
    room_parser.add_argument("--capacity", type=int, required=True, help="Seats (1-500)")
    room_parser.add_argument("--location", default=None, help="Floor or building")
    room_parser.add_argument(
        "--amenity", action="append", default=[], help="Amenity name (repeatable)"
    )

    user_parser = subparsers.add_parser("user", help="Add a user")
    user_parser.add_argument("--name", required=True, help="Full name")

    args = parser.parse_args()

    if args.command == "room":
        if not 1 <= args.capacity <= 500:
            parser.error("--capacity must be between 1 and 500")
        asyncio.run(
            create_room(
                name=args.name,
                capacity=args.capacity,
                location=args.location,
                amenities=args.amenity,
            )
        )
    else:
        asyncio.run(create_user(name=args.name))
