"""Seed a development database with rooms, guests and reservations."""
from __future__ import annotations

import argparse
import asyncio
import random
from datetime import date, timedelta
from decimal import Decimal

from hotel_api.db.session import get_sessionmaker
from hotel_api.models.reservation import PaymentStatus, ReservationStatus
from hotel_api.schemas.guest import GuestCreate
from hotel_api.schemas.reservation import ReservationCreate
from hotel_api.schemas.room import RoomCreate
from hotel_api.services import guest_service, reservation_service, room_service

ROOM_TYPES: dict[str, Decimal] = {
    "Single": Decimal("90.00"),
    "Double": Decimal("140.00"),
    "Suite": Decimal("260.00"),
}
FIRST_NAMES = ("Ava", "Liam", "Noah", "Mia", "Zoe", "Omar", "Lena", "Ken")
LAST_NAMES = ("Smith", "Garcia", "Chen", "Muller", "Dubois", "Brown", "Kim")
EMAIL_DOMAINS = ("example.com", "mail.ca", "post.co.uk", "web.de", "courrier.fr")


def build_rooms(rng: random.Random, count: int) -> list[RoomCreate]:
    rooms = []
    for index in range(count):
        room_type = rng.choice(list(ROOM_TYPES))
        rooms.append(
            RoomCreate(
                room_number=f"{100 + index}",
                room_type=room_type,
                price_per_night=ROOM_TYPES[room_type],
                description=f"{room_type} room on floor {1 + index // 10}",
            )
        )
    return rooms


def build_guests(rng: random.Random, count: int) -> list[GuestCreate]:
    guests = []
    for index in range(count):
        first = rng.choice(FIRST_NAMES)
        last = rng.choice(LAST_NAMES)
        guests.append(
            GuestCreate(
                name=f"{first} {last}",
                email=f"{first}.{last}.{index}@{rng.choice(EMAIL_DOMAINS)}".lower(),
                phone=f"555-{rng.randint(1000, 9999)}",
            )
        )
    return guests


async def seed_sample_data(
    rng: random.Random,
    *,
    rooms: int = 10,
    guests: int = 20,
    reservations: int = 40,
    today: date | None = None,
) -> None:
    today = today or date.today()
    sessionmaker = get_sessionmaker()
    async with sessionmaker() as session:
        room_result = await room_service.bulk_create_rooms(
            session, build_rooms(rng, rooms)
        )
        guest_result = await guest_service.bulk_create_guests(
            session, build_guests(rng, guests)
        )
        room_ids = [room.id for room in room_result["created_rooms"]]
        guest_ids = [guest.id for guest in guest_result["created_guests"]]
        if not room_ids or not guest_ids:
            print("Nothing to book; rooms or guests already exist.")
            return

        requests = []
        for _ in range(reservations):
            check_in = today + timedelta(days=rng.randint(-60, 30))
            requests.append(
                ReservationCreate(
                    guest_id=rng.choice(guest_ids),
                    room_id=rng.choice(room_ids),
                    check_in_date=check_in,
                    check_out_date=check_in + timedelta(days=rng.randint(1, 7)),
                    number_of_guests=rng.randint(1, 4),
                )
            )
        booking_result = await reservation_service.bulk_create_reservations(
            session, requests
        )

        for summary in booking_result["created_reservations"]:
            reservation = await reservation_service.get_reservation(
                session, reservation_id=summary.id
            )
            if reservation is None:
                continue
            if rng.random() < 0.7:
                await reservation_service.update_payment_status(
                    session, reservation=reservation, payment_status=PaymentStatus.PAID
                )
            if rng.random() < 0.6:
                await reservation_service.update_status(
                    session, reservation=reservation, status=ReservationStatus.CONFIRMED
                )

        print(
            f"Seeded {room_result['total_created']} room(s), "
            f"{guest_result['total_created']} guest(s), "
            f"{booking_result['total_created']} reservation(s) "
            f"({booking_result['total_skipped']} skipped)."
        )


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--rooms", type=int, default=10)
    parser.add_argument("--guests", type=int, default=20)
    parser.add_argument("--reservations", type=int, default=40)
    args = parser.parse_args()
    asyncio.run(
        seed_sample_data(
            random.Random(args.seed),
            rooms=args.rooms,
            guests=args.guests,
            reservations=args.reservations,
        )
    )


if __name__ == "__main__":
    main()
