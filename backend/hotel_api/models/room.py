"""Room models."""
from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hotel_api.db.base import Base
from hotel_api.models.mixins import TimestampMixin


class Room(TimestampMixin, Base):
    """A bookable room with a nightly rate."""

    __tablename__ = "rooms"
    __table_args__ = (
        CheckConstraint("price_per_night > 0", name="ck_rooms_price_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    room_number: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    room_type: Mapped[str] = mapped_column(String(50), nullable=False)
    price_per_night: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500))
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    reservations: Mapped[list["Reservation"]] = relationship(
        "Reservation", back_populates="room", passive_deletes="all"
    )
