"""Reservation models."""
from __future__ import annotations

import enum
import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, Enum, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hotel_api.db.base import Base
from hotel_api.models.mixins import TimestampMixin


class ReservationStatus(str, enum.Enum):
    """Lifecycle states for reservations."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    CANCELLED = "cancelled"


class PaymentStatus(str, enum.Enum):
    """Settlement states for a reservation's charge."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class Reservation(TimestampMixin, Base):
    """A guest's stay in a room over a half-open date range."""

    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint(
            "check_out_date > check_in_date", name="ck_reservations_date_order"
        ),
        CheckConstraint(
            "number_of_guests BETWEEN 1 AND 10", name="ck_reservations_guest_count"
        ),
        Index("ix_reservations_room_dates", "room_id", "check_in_date", "check_out_date"),
        Index("ix_reservations_check_in_date", "check_in_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    guest_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("guests.id", ondelete="RESTRICT"), nullable=False
    )
    room_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("rooms.id", ondelete="RESTRICT"), nullable=False
    )
    check_in_date: Mapped[date] = mapped_column(Date, nullable=False)
    check_out_date: Mapped[date] = mapped_column(Date, nullable=False)
    number_of_guests: Mapped[int] = mapped_column(nullable=False, default=1)
    special_requests: Mapped[str | None] = mapped_column(String(1000))
    status: Mapped[ReservationStatus] = mapped_column(
        Enum(
            ReservationStatus,
            name="reservation_status",
            values_callable=_enum_values,
        ),
        default=ReservationStatus.PENDING,
        nullable=False,
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus, name="payment_status", values_callable=_enum_values),
        default=PaymentStatus.PENDING,
        nullable=False,
    )
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    guest: Mapped["Guest"] = relationship("Guest", back_populates="reservations")
    room: Mapped["Room"] = relationship("Room", back_populates="reservations")

    @property
    def nights(self) -> int:
        """Number of nights covered by the stay."""
        return (self.check_out_date - self.check_in_date).days

    @property
    def is_active(self) -> bool:
        """Whether the reservation still holds its room."""
        return self.status != ReservationStatus.CANCELLED
