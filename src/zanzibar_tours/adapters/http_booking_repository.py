"""API-backed booking repository."""

import logging
from dataclasses import dataclass
from datetime import datetime

from zanzibar_tours.adapters.api_client import ApiClient
from zanzibar_tours.domain.models import Booking, BookingDraft, BookingStatus
from zanzibar_tours.services.bookings import BookingRepository

logger = logging.getLogger(__name__)


@dataclass
class HttpBookingRepository(BookingRepository):
    """Reads and writes bookings through the API."""

    api: ApiClient

    async def list_bookings(self) -> list[Booking]:
        """Return every booking."""
        return _parse_bookings(await self.api.get("bookings"))

    async def list_user_bookings(self, user_id: int) -> list[Booking]:
        """Return the bookings of one user."""
        return _parse_bookings(await self.api.get(f"bookings/user/{user_id}"))

    async def create_booking(self, draft: BookingDraft) -> None:
        """Create a booking."""
        await self.api.post(
            "bookings",
            json={
                "location_id": draft.location_id,
                "activity_id": draft.activity_id,
                "user_id": draft.user_id,
                "full_name": draft.full_name,
                "notes": draft.notes,
            },
        )

    async def update_status(self, booking_id: int, status: BookingStatus) -> None:
        """Set a booking's status."""
        await self.api.put(f"bookings/{booking_id}", json={"status": status.value})

    async def delete_booking(self, booking_id: int) -> None:
        """Delete a booking."""
        await self.api.delete(f"bookings/{booking_id}")


def _parse_bookings(payload: object) -> list[Booking]:
    if not isinstance(payload, list):
        return []
    bookings = []
    for row in payload:
        if not isinstance(row, dict):
            continue
        try:
            bookings.append(_booking_from_row(row))
        except (KeyError, TypeError, ValueError):
            logger.warning("Skipping malformed booking row %s", row.get("id"))
    return bookings


def _booking_from_row(row: dict[str, object]) -> Booking:
    user_id = row.get("user_id")
    return Booking(
        id=int(row["id"]),
        user_id=int(user_id) if user_id is not None else None,
        location_id=int(row["location_id"]),
        activity_id=int(row["activity_id"]),
        full_name=str(row.get("full_name") or ""),
        notes=str(row.get("notes") or ""),
        status=BookingStatus.parse(str(row.get("status") or "Pending")),
        created_at=_parse_datetime(row.get("created_at")),
        activity_name=_optional_str(row.get("activity_name")),
        location_name=_optional_str(row.get("location_name")),
    )


def _parse_datetime(value: object) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _optional_str(value: object) -> str | None:
    return str(value) if value is not None else None
