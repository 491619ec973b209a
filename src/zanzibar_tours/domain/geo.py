"""Map geometry helpers."""

from dataclasses import dataclass


@dataclass(frozen=True)
class LatLng:
    """A point on the map."""

    lat: float
    lng: float


@dataclass(frozen=True)
class MapBounds:
    """Bounding box enclosing a set of markers."""

    north_east: LatLng
    south_west: LatLng


def parse_coordinates(lat: object, lng: object) -> LatLng | None:
    """Return a point when both values parse and fall in valid ranges."""
    if lat is None or lng is None or lat == "" or lng == "":
        return None
    try:
        latitude = float(lat)
        longitude = float(lng)
    except (TypeError, ValueError):
        return None
    if latitude != latitude or longitude != longitude:  # NaN
        return None
    if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
        return None
    return LatLng(lat=latitude, lng=longitude)


def calculate_bounds(points: list[LatLng]) -> MapBounds | None:
    """Compute the bounding box of the points, or None when empty."""
    if not points:
        return None
    lats = [point.lat for point in points]
    lngs = [point.lng for point in points]
    return MapBounds(
        north_east=LatLng(lat=max(lats), lng=max(lngs)),
        south_west=LatLng(lat=min(lats), lng=min(lngs)),
    )


_CATEGORY_ICONS = {
    "Museum": "camera",
    "Art": "camera",
    "Historical": "monument",
    "Nature": "tree",
    "Park": "tree",
    "Coastal": "anchor",
    "Urban": "building",
}


def marker_icon(category: str) -> str:
    """Return the marker icon name for a location category."""
    return _CATEGORY_ICONS.get(category, "map-marker")
