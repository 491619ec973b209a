"""Booking lifecycle operations."""

from collections import Counter
from dataclasses import dataclass
from typing import Protocol

from zanzibar_tours.domain.errors import FormValidationError
from zanzibar_tours.domain.models import Booking, BookingDraft, BookingStatus

ALL_STATUSES = "all"


class BookingRepository(Protocol):
    """Persistence interface for bookings."""

    async def list_bookings(self) -> list[Booking]:
        """Return every booking."""

    async def list_user_bookings(self, user_id: int) -> list[Booking]:
        """Return the bookings of one user."""

    async def create_booking(self, draft: BookingDraft) -> None:
        """Create a booking."""

    async def update_status(self, booking_id: int, status: BookingStatus) -> None:
        """Set the status of a booking."""

    async def delete_booking(self, booking_id: int) -> None:
        """Delete a booking."""


@dataclass
class BookingService:
    """Application service for bookings."""

    repository: BookingRepository

    async def list_all(self) -> list[Booking]:
        """Return every booking."""
        return await self.repository.list_bookings()

    async def list_for_user(self, user_id: int | None) -> list[Booking]:
        """Return a user's bookings, or none for an unknown user."""
        if user_id is None:
            return []
        return await self.repository.list_user_bookings(user_id)

    async def create(self, draft: BookingDraft) -> None:
        """Submit a new booking."""
        await self.repository.create_booking(draft)

    async def set_status(
        self, booking_id: int, status: BookingStatus | str
    ) -> BookingStatus:
        """Change a booking's status, accepting any letter case."""
        try:
            resolved = BookingStatus.parse(str(status))
        except ValueError as exc:
            raise FormValidationError(f"Unknown booking status: {status}") from exc
        await self.repository.update_status(booking_id, resolved)
        return resolved

    async def approve(self, booking_id: int) -> None:
        """Approve a booking."""
        await self.set_status(booking_id, BookingStatus.APPROVED)

    async def reject(self, booking_id: int) -> None:
        """Reject a booking."""
        await self.set_status(booking_id, BookingStatus.REJECTED)

    async def delete(self, booking_id: int) -> None:
        """Delete a booking."""
        await self.repository.delete_booking(booking_id)


def filter_by_status(bookings: list[Booking], status_filter: str | None) -> list[Booking]:
    """Filter bookings by status name; ``All`` or empty keeps everything."""
    if not status_filter or status_filter.strip().lower() == ALL_STATUSES:
        return list(bookings)
    wanted = status_filter.strip().lower()
    return [booking for booking in bookings if booking.status.lower() == wanted]


def count_by_status(bookings: list[Booking]) -> dict[str, int]:
    """Count bookings per status, including zero counts."""
    counts = Counter(booking.status for booking in bookings)
    return {status.value: counts.get(status, 0) for status in BookingStatus}
