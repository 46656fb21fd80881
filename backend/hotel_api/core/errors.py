"""Domain errors raised by the service layer."""

from __future__ import annotations

import enum


class HotelError(ValueError):
    """Base class for domain failures surfaced to API callers."""


class NotFoundError(HotelError):
    """A referenced guest, room or reservation does not exist."""


class ValidationError(HotelError):
    """Malformed input such as an empty date range or bad guest count."""


class ConflictError(HotelError):
    """The requested change collides with existing state."""


class DuplicateKeyError(HotelError):
    """A unique value (guest email, room number) is already taken."""


class InvalidTransitionError(HotelError):
    """A status or payment-status change outside the allowed table."""

    def __init__(
        self,
        current: enum.Enum,
        target: enum.Enum,
        *,
        label: str = "status",
    ) -> None:
        self.current = current
        self.target = target
        super().__init__(
            f"Invalid {label} transition from {current.value} to {target.value}"
        )


__all__ = [
    "ConflictError",
    "DuplicateKeyError",
    "HotelError",
    "InvalidTransitionError",
    "NotFoundError",
    "ValidationError",
]
