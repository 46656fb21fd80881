"""Versioned API router."""

from fastapi import APIRouter

from . import guests, health, reports, reservations, rooms

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(guests.router, prefix="/guests", tags=["guests"])
router.include_router(rooms.router, prefix="/rooms", tags=["rooms"])
router.include_router(
    reservations.router, prefix="/reservations", tags=["reservations"]
)
router.include_router(reports.router, tags=["reports"])

__all__ = ["router"]
