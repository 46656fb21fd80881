"""Guest models."""
from __future__ import annotations

import uuid

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hotel_api.db.base import Base
from hotel_api.models.mixins import TimestampMixin


class Guest(TimestampMixin, Base):
    """A person who books stays at the hotel."""

    __tablename__ = "guests"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)

    reservations: Mapped[list["Reservation"]] = relationship(
        "Reservation", back_populates="guest", passive_deletes="all"
    )
