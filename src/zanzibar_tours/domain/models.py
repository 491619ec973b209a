"""Domain models for the tourism portal."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class Role(StrEnum):
    """Account roles known to the portal."""

    TOURIST = "tourist"
    OPERATOR = "operator"
    ADMIN = "admin"


class BookingStatus(StrEnum):
    """Lifecycle status of a booking."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"

    @classmethod
    def parse(cls, raw: str) -> "BookingStatus":
        """Parse a status in any letter case, e.g. ``approved``."""
        cleaned = raw.strip()
        normalized = cleaned[:1].upper() + cleaned[1:].lower()
        return cls(normalized)


@dataclass(frozen=True)
class Location:
    """A tourist site shown on the map."""

    id: int
    name: str
    category: str
    description: str
    image_url: str | None
    lat: float | None
    lng: float | None


@dataclass(frozen=True)
class Activity:
    """A bookable activity offered at a location."""

    id: int
    location_id: int
    name: str
    description: str
    price: float


@dataclass(frozen=True)
class Booking:
    """A tourist's booking of an activity."""

    id: int
    user_id: int | None
    location_id: int
    activity_id: int
    full_name: str
    notes: str
    status: BookingStatus
    created_at: datetime | None
    activity_name: str | None = None
    location_name: str | None = None


@dataclass(frozen=True)
class BookingDraft:
    """Payload for creating a booking."""

    location_id: int
    activity_id: int
    user_id: int | None
    full_name: str
    notes: str


@dataclass(frozen=True)
class UserRecord:
    """A user account as listed for administrators."""

    id: int
    full_name: str
    email: str | None
    role: Role | None
    phone: str | None = None
    avatar_url: str | None = None


@dataclass(frozen=True)
class ImageUpload:
    """An image file attached to a location form."""

    filename: str
    content: bytes
    content_type: str
