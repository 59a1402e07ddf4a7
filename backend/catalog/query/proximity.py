"""Radius search ordered by computed distance."""

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from catalog.core.exceptions import raise_if_errors
from catalog.query.geo import distance_km, validate_coordinates
from catalog.query.predicates import Predicate


@dataclass
class NearbyMatch:
    entity: Any
    distance_km: float


def validate_proximity(
    latitude: Optional[float],
    longitude: Optional[float],
    radius_km: Optional[float],
    limit: Optional[int] = None,
    max_radius_km: Optional[float] = None,
    max_limit: Optional[int] = None,
) -> Dict[str, str]:
    errors = validate_coordinates(latitude, longitude)

    if radius_km is None:
        errors["radiusKm"] = "Radius is required"
    elif not math.isfinite(radius_km) or radius_km <= 0:
        errors["radiusKm"] = "Radius must be a positive number"
    elif max_radius_km is not None and radius_km > max_radius_km:
        errors["radiusKm"] = f"Radius must not exceed {max_radius_km:g} km"

    if limit is not None:
        if limit < 1:
            errors["limit"] = "Limit must be at least 1"
        elif max_limit is not None and limit > max_limit:
            errors["limit"] = f"Limit must not exceed {max_limit}"

    return errors


def find_nearby(
    entities: Iterable[Any],
    latitude: float,
    longitude: float,
    radius_km: float,
    limit: Optional[int] = None,
    predicate: Optional[Predicate] = None,
    max_radius_km: Optional[float] = None,
    max_limit: Optional[int] = None,
) -> List[NearbyMatch]:
    """
    Entities within `radius_km` of the center, closest first.

    Equal distances are ordered by id. An invalid center, radius or limit
    raises InvalidArgumentError instead of widening the search.
    """
    raise_if_errors(
        validate_proximity(latitude, longitude, radius_km, limit, max_radius_km, max_limit),
        "Invalid proximity search parameters",
    )

    matches = []
    for entity in entities:
        if predicate is not None and not predicate(entity):
            continue
        distance = distance_km(latitude, longitude, entity.latitude, entity.longitude)
        if distance <= radius_km:
            matches.append(NearbyMatch(entity=entity, distance_km=distance))

    matches.sort(key=lambda match: (match.distance_km, match.entity.id))
    if limit is not None:
        matches = matches[:limit]
    return matches
