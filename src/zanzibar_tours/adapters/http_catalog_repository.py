"""API-backed catalog repository."""

import logging
from dataclasses import dataclass

from zanzibar_tours.adapters.api_client import ApiClient
from zanzibar_tours.domain.models import Activity, ImageUpload, Location
from zanzibar_tours.services.catalog import CatalogRepository

logger = logging.getLogger(__name__)


@dataclass
class HttpCatalogRepository(CatalogRepository):
    """Reads and writes locations and activities through the API."""

    api: ApiClient

    async def list_locations(self) -> list[Location]:
        """Return all locations."""
        payload = await self.api.get("locations")
        if isinstance(payload, dict):
            payload = payload.get("locations", [])
        locations = []
        for row in _rows(payload):
            try:
                locations.append(_location_from_row(row))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed location row %s", row.get("id"))
        return locations

    async def create_location(
        self, fields: dict[str, str], image: ImageUpload | None
    ) -> None:
        """Create a location, as multipart when an image is attached."""
        if image is None:
            await self.api.post("locations", json=fields)
        else:
            await self.api.post("locations", data=fields, files=_image_files(image))

    async def update_location(
        self, location_id: int, fields: dict[str, str], image: ImageUpload | None
    ) -> None:
        """Update a location, as multipart when an image is attached."""
        path = f"locations/{location_id}"
        if image is None:
            await self.api.put(path, json=fields)
        else:
            await self.api.put(path, data=fields, files=_image_files(image))

    async def delete_location(self, location_id: int) -> None:
        """Delete a location."""
        await self.api.delete(f"locations/{location_id}")

    async def list_activities(self, location_id: int) -> list[Activity]:
        """Return the activities of a location."""
        payload = await self.api.get(f"activities/{location_id}")
        activities = []
        for row in _rows(payload):
            try:
                activities.append(_activity_from_row(row, location_id))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed activity row %s", row.get("id"))
        return activities

    async def create_activity(self, payload: dict[str, object]) -> None:
        """Create an activity."""
        await self.api.post("activities", json=payload)


def _rows(payload: object) -> list[dict[str, object]]:
    if not isinstance(payload, list):
        return []
    return [row for row in payload if isinstance(row, dict)]


def _image_files(image: ImageUpload) -> dict[str, tuple[str, bytes, str]]:
    return {"image": (image.filename, image.content, image.content_type)}


def _optional_float(value: object) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _location_from_row(row: dict[str, object]) -> Location:
    image_url = row.get("imageurl") or row.get("image_url") or row.get("imageUrl")
    return Location(
        id=int(row["id"]),
        name=str(row.get("name") or ""),
        category=str(row.get("category") or ""),
        description=str(row.get("description") or ""),
        image_url=str(image_url) if image_url else None,
        lat=_optional_float(row.get("lat")),
        lng=_optional_float(row.get("lng")),
    )


def _activity_from_row(row: dict[str, object], location_id: int) -> Activity:
    return Activity(
        id=int(row["id"]),
        location_id=int(row.get("location_id") or location_id),
        name=str(row.get("name") or ""),
        description=str(row.get("description") or ""),
        price=_optional_float(row.get("price")) or 0.0,
    )
