"""Guest API integration tests."""

from __future__ import annotations

import uuid

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


def _guest(name: str, email: str) -> dict[str, str]:
    return {"name": name, "email": email, "phone": "+1 555 010 0000"}


async def test_guest_crud_roundtrip(client: AsyncClient) -> None:
    created = await client.post(
        "/api/v1/guests", json=_guest("Jane Doe", "jane@example.com")
    )
    assert created.status_code == 201
    guest = created.json()
    assert guest["email"] == "jane@example.com"
    assert guest["created_at"] and guest["updated_at"]

    fetched = await client.get(f"/api/v1/guests/{guest['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["name"] == "Jane Doe"

    replaced = await client.put(
        f"/api/v1/guests/{guest['id']}",
        json={"name": "Jane Smith", "email": "jane.smith@example.com", "phone": "555"},
    )
    assert replaced.status_code == 200
    assert replaced.json()["name"] == "Jane Smith"
    assert replaced.json()["phone"] == "555"

    deleted = await client.delete(f"/api/v1/guests/{guest['id']}")
    assert deleted.status_code == 204

    missing = await client.get(f"/api/v1/guests/{guest['id']}")
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Guest not found"


async def test_duplicate_email_is_conflict(client: AsyncClient) -> None:
    first = await client.post("/api/v1/guests", json=_guest("A", "dup@example.com"))
    assert first.status_code == 201

    second = await client.post("/api/v1/guests", json=_guest("B", "dup@example.com"))
    assert second.status_code == 409
    assert second.json()["detail"] == "Guest with email dup@example.com already exists"


async def test_update_to_taken_email_is_conflict(client: AsyncClient) -> None:
    await client.post("/api/v1/guests", json=_guest("A", "a@example.com"))
    other = (
        await client.post("/api/v1/guests", json=_guest("B", "b@example.com"))
    ).json()

    response = await client.put(
        f"/api/v1/guests/{other['id']}", json=_guest("B", "a@example.com")
    )
    assert response.status_code == 409

    # Keeping one's own email is not a conflict.
    response = await client.put(
        f"/api/v1/guests/{other['id']}", json=_guest("Bee", "b@example.com")
    )
    assert response.status_code == 200


async def test_invalid_payloads_rejected(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/guests", json=_guest("No Email", "not-an-email")
    )
    assert response.status_code == 422

    response = await client.post(
        "/api/v1/guests",
        json={"name": "x" * 101, "email": "long@example.com", "phone": "1"},
    )
    assert response.status_code == 422


async def test_list_guests_search_and_paging(client: AsyncClient) -> None:
    for name, email in (
        ("Alice Walker", "alice@example.com"),
        ("Bob Stone", "bob@example.ca"),
        ("Carol Alison", "carol@example.de"),
    ):
        await client.post("/api/v1/guests", json=_guest(name, email))

    everyone = await client.get("/api/v1/guests")
    assert [g["name"] for g in everyone.json()] == [
        "Alice Walker",
        "Bob Stone",
        "Carol Alison",
    ]

    matches = await client.get("/api/v1/guests", params={"search": "ALI"})
    assert {g["name"] for g in matches.json()} == {"Alice Walker", "Carol Alison"}

    by_email = await client.get("/api/v1/guests", params={"search": "example.ca"})
    assert [g["name"] for g in by_email.json()] == ["Bob Stone"]

    page = await client.get("/api/v1/guests", params={"skip": 1, "limit": 1})
    assert [g["name"] for g in page.json()] == ["Bob Stone"]


async def test_bulk_create_reports_duplicates(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/guests/bulk",
        json=[
            _guest("One", "one@example.com"),
            _guest("Two", "two@example.com"),
            _guest("Again", "one@example.com"),
        ],
    )
    assert response.status_code == 200
    body = response.json()
    assert body["total_requested"] == 3
    assert body["total_created"] == 2
    assert body["total_skipped"] == 1
    assert [g["email"] for g in body["created_guests"]] == [
        "one@example.com",
        "two@example.com",
    ]
    assert body["errors"] == ["Guest with email one@example.com already exists"]


async def test_bulk_create_rejects_empty_list(client: AsyncClient) -> None:
    response = await client.post("/api/v1/guests/bulk", json=[])
    assert response.status_code == 422


async def test_guest_with_reservation_cannot_be_deleted(
    hotel: dict[str, object],
) -> None:
    client: AsyncClient = hotel["client"]  # type: ignore[assignment]
    guest = hotel["guests"][0]  # type: ignore[index]
    room = hotel["rooms"][0]  # type: ignore[index]
    booked = await client.post(
        "/api/v1/reservations",
        json={
            "guest_id": guest["id"],
            "room_id": room["id"],
            "check_in_date": "2030-01-01",
            "check_out_date": "2030-01-03",
            "number_of_guests": 1,
        },
    )
    assert booked.status_code == 201

    response = await client.delete(f"/api/v1/guests/{guest['id']}")
    assert response.status_code == 409
    assert (
        response.json()["detail"]
        == "Guest has existing reservations and cannot be deleted"
    )


async def test_unknown_guest_returns_404(client: AsyncClient) -> None:
    response = await client.put(
        f"/api/v1/guests/{uuid.uuid4()}", json=_guest("Ghost", "ghost@example.com")
    )
    assert response.status_code == 404
