"""Service layer exports."""
from hotel_api.services import (
    availability_service,
    guest_service,
    metrics_service,
    reporting_service,
    reservation_service,
    room_service,
)

__all__ = [
    "availability_service",
    "guest_service",
    "metrics_service",
    "reporting_service",
    "reservation_service",
    "room_service",
]
