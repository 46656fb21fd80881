"""ORM models package export."""

from hotel_api.models.guest import Guest
from hotel_api.models.reservation import PaymentStatus, Reservation, ReservationStatus
from hotel_api.models.room import Room

__all__ = [
    "Guest",
    "PaymentStatus",
    "Reservation",
    "ReservationStatus",
    "Room",
]
