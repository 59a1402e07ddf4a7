"""Great-circle distance and coordinate validation."""

import math
from typing import Dict, Optional

EARTH_RADIUS_KM = 6371.0

LATITUDE_RANGE = (-90.0, 90.0)
LONGITUDE_RANGE = (-180.0, 180.0)


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Distance in kilometers between two points given in degrees, using the
    spherical law of cosines on a 6371 km sphere.

    The acos argument is clamped to [-1, 1] because rounding can push it
    slightly outside for near-identical or antipodal points.
    """
    if lat1 == lat2 and lon1 == lon2:
        return 0.0

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_lambda = math.radians(lon2) - math.radians(lon1)

    cosine = (
        math.cos(phi1) * math.cos(phi2) * math.cos(delta_lambda)
        + math.sin(phi1) * math.sin(phi2)
    )
    cosine = min(1.0, max(-1.0, cosine))
    return EARTH_RADIUS_KM * math.acos(cosine)


def _check_range(value: Optional[float], bounds: tuple, label: str) -> Optional[str]:
    if value is None:
        return f"{label} is required"
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return f"{label} must be a finite number"
    low, high = bounds
    if value < low or value > high:
        return f"{label} must be between {low:g} and {high:g}"
    return None


def validate_coordinates(
    latitude: Optional[float],
    longitude: Optional[float],
    latitude_field: str = "latitude",
    longitude_field: str = "longitude",
) -> Dict[str, str]:
    """Return a field -> message mapping for every invalid coordinate."""
    errors = {}
    problem = _check_range(latitude, LATITUDE_RANGE, "Latitude")
    if problem:
        errors[latitude_field] = problem
    problem = _check_range(longitude, LONGITUDE_RANGE, "Longitude")
    if problem:
        errors[longitude_field] = problem
    return errors
