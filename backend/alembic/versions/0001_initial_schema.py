"""Initial hotel schema.

Revision ID: 0001
Revises:
Create Date: 2026-10-17
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

RESERVATION_STATUS = sa.Enum(
    "pending",
    "confirmed",
    "checked_in",
    "checked_out",
    "cancelled",
    name="reservation_status",
)
PAYMENT_STATUS = sa.Enum(
    "pending", "paid", "failed", "refunded", name="payment_status"
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "guests",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=100), nullable=False, unique=True),
        sa.Column("phone", sa.String(length=20), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "rooms",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("room_number", sa.String(length=50), nullable=False, unique=True),
        sa.Column("room_type", sa.String(length=50), nullable=False),
        sa.Column("price_per_night", sa.Numeric(10, 2), nullable=False),
        sa.Column("description", sa.String(length=500)),
        sa.Column(
            "is_available", sa.Boolean(), nullable=False, server_default=sa.true()
        ),
        *_timestamps(),
        sa.CheckConstraint("price_per_night > 0", name="ck_rooms_price_positive"),
    )

    op.create_table(
        "reservations",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "guest_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("guests.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "room_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("rooms.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("check_in_date", sa.Date(), nullable=False),
        sa.Column("check_out_date", sa.Date(), nullable=False),
        sa.Column("number_of_guests", sa.Integer(), nullable=False),
        sa.Column("special_requests", sa.String(length=1000)),
        sa.Column("status", RESERVATION_STATUS, nullable=False),
        sa.Column("payment_status", PAYMENT_STATUS, nullable=False),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "check_out_date > check_in_date", name="ck_reservations_date_order"
        ),
        sa.CheckConstraint(
            "number_of_guests BETWEEN 1 AND 10", name="ck_reservations_guest_count"
        ),
    )
    op.create_index(
        "ix_reservations_room_dates",
        "reservations",
        ["room_id", "check_in_date", "check_out_date"],
    )
    op.create_index(
        "ix_reservations_check_in_date", "reservations", ["check_in_date"]
    )

    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        # Last line of defence against concurrent double bookings.
        op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
        op.execute(
            """
            ALTER TABLE reservations
            ADD CONSTRAINT ex_reservations_room_overlap
            EXCLUDE USING gist (
                room_id WITH =,
                daterange(check_in_date, check_out_date, '[)') WITH &&
            )
            WHERE (status <> 'cancelled')
            """
        )


def downgrade() -> None:
    op.drop_index("ix_reservations_check_in_date", table_name="reservations")
    op.drop_index("ix_reservations_room_dates", table_name="reservations")
    op.drop_table("reservations")
    op.drop_table("rooms")
    op.drop_table("guests")
    bind = op.get_bind()
    PAYMENT_STATUS.drop(bind, checkfirst=True)
    RESERVATION_STATUS.drop(bind, checkfirst=True)
