"""Map-based browsing of locations and their activities."""

from dataclasses import dataclass

from zanzibar_tours.domain.geo import LatLng, MapBounds, calculate_bounds, marker_icon
from zanzibar_tours.domain.models import Activity, Location


@dataclass(frozen=True)
class MapMarker:
    """A location pin with the activities bookable there."""

    location: Location
    position: LatLng
    icon: str
    activities: tuple[Activity, ...]


@dataclass(frozen=True)
class MapView:
    """Everything needed to draw the map."""

    center: LatLng
    zoom: int
    markers: list[MapMarker]
    bounds: MapBounds | None
    categories: list[str]


@dataclass
class MapBrowser:
    """Builds map views with client-side filtering."""

    center: LatLng
    zoom: int = 10

    def build(
        self,
        locations: list[Location],
        activities: list[Activity],
        category: str | None = None,
        search: str | None = None,
    ) -> MapView:
        """Return markers for locations matching the category and search text."""
        by_location: dict[int, list[Activity]] = {}
        for activity in activities:
            by_location.setdefault(activity.location_id, []).append(activity)

        markers = [
            MapMarker(
                location=location,
                position=LatLng(location.lat, location.lng),
                icon=marker_icon(location.category),
                activities=tuple(by_location.get(location.id, [])),
            )
            for location in filter_locations(locations, category, search)
            if location.lat is not None and location.lng is not None
        ]
        return MapView(
            center=self.center,
            zoom=self.zoom,
            markers=markers,
            bounds=calculate_bounds([marker.position for marker in markers]),
            categories=sorted({loc.category for loc in locations if loc.category}),
        )


def filter_locations(
    locations: list[Location], category: str | None = None, search: str | None = None
) -> list[Location]:
    """Keep locations in the category whose name or description match."""
    results = list(locations)
    if category and category.lower() != "all":
        results = [loc for loc in results if loc.category.lower() == category.lower()]
    if search and search.strip():
        needle = search.strip().lower()
        results = [
            loc
            for loc in results
            if needle in loc.name.lower() or needle in loc.description.lower()
        ]
    return results
