"""Locations and activities."""

import asyncio
from dataclasses import dataclass
from typing import Protocol

from zanzibar_tours.domain.errors import DomainError, FormValidationError
from zanzibar_tours.domain.geo import parse_coordinates
from zanzibar_tours.domain.models import Activity, ImageUpload, Location


class CatalogRepository(Protocol):
    """Persistence interface for locations and activities."""

    async def list_locations(self) -> list[Location]:
        """Return all locations."""

    async def create_location(
        self, fields: dict[str, str], image: ImageUpload | None
    ) -> None:
        """Create a location from form fields and an optional image."""

    async def update_location(
        self, location_id: int, fields: dict[str, str], image: ImageUpload | None
    ) -> None:
        """Update a location from form fields and an optional image."""

    async def delete_location(self, location_id: int) -> None:
        """Delete a location."""

    async def list_activities(self, location_id: int) -> list[Activity]:
        """Return the activities offered at a location."""

    async def create_activity(self, payload: dict[str, object]) -> None:
        """Create an activity."""


@dataclass(frozen=True)
class LocationForm:
    """Admin form for creating or editing a location."""

    name: str
    category: str = ""
    description: str = ""
    lat: object = None
    lng: object = None
    image: ImageUpload | None = None


@dataclass(frozen=True)
class ActivityForm:
    """Operator form for adding an activity."""

    name: str
    description: str = ""
    price: str | float | None = None


@dataclass
class CatalogService:
    """Application service for browsing and editing the catalog."""

    repository: CatalogRepository

    async def list_locations(self) -> list[Location]:
        """Return all locations."""
        return await self.repository.list_locations()

    async def list_activities(self, location_id: int) -> list[Activity]:
        """Return the activities of one location."""
        return await self.repository.list_activities(location_id)

    async def list_all_activities(
        self, locations: list[Location]
    ) -> tuple[list[Activity], list[tuple[Location, DomainError]]]:
        """Fetch the activities of every location concurrently.

        A location whose fetch fails is returned in the second list; the
        other locations still contribute their activities.
        """
        results = await asyncio.gather(
            *(self.list_activities(location.id) for location in locations),
            return_exceptions=True,
        )
        activities: list[Activity] = []
        failures: list[tuple[Location, DomainError]] = []
        for location, result in zip(locations, results, strict=True):
            if isinstance(result, DomainError):
                failures.append((location, result))
            elif isinstance(result, BaseException):
                raise result
            else:
                activities.extend(result)
        return activities, failures

    async def save_location(
        self, form: LocationForm, existing: Location | None = None
    ) -> None:
        """Create a new location or update an existing one."""
        if not form.name.strip():
            raise FormValidationError("Name is required.")
        if form.image and not form.image.content_type.startswith("image/"):
            raise FormValidationError("Only image files are allowed.")

        fields = {
            "name": form.name,
            "category": form.category,
            "description": form.description,
        }
        if existing is not None:
            if form.image is None and existing.image_url:
                fields["imageFilename"] = _filename(existing.image_url)
            await self.repository.update_location(existing.id, fields, form.image)
            return

        point = parse_coordinates(form.lat, form.lng)
        if point is None:
            raise FormValidationError("Invalid location coordinates.")
        fields["lat"] = str(point.lat)
        fields["lng"] = str(point.lng)
        fields["bookinglink"] = ""
        await self.repository.create_location(fields, form.image)

    async def delete_location(self, location_id: int) -> None:
        """Delete a location."""
        await self.repository.delete_location(location_id)

    async def create_activity(self, location_id: int, form: ActivityForm) -> None:
        """Add an activity under a location."""
        name = form.name.strip()
        if not name:
            raise FormValidationError("Activity name is required.")
        await self.repository.create_activity(
            {
                "location_id": location_id,
                "name": name,
                "description": form.description or "No description",
                "price": _parse_price(form.price),
            }
        )


def _filename(url: str) -> str:
    return url.rsplit("/", 1)[-1]


def _parse_price(raw: str | float | None) -> float:
    if raw is None or raw == "":
        return 0.0
    try:
        return float(raw)
    except (TypeError, ValueError):
        return 0.0
