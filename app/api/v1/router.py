"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import bookings, rooms, users

api_router = APIRouter()

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])

# Rooms
api_router.include_router(rooms.router, prefix="/rooms", tags=["Rooms"])

# Users
api_router.include_router(users.router, prefix="/users", tags=["Users"])
