"""
Filter predicates for destination queries.

Each supplied criterion becomes an independent closure over a destination;
the closures are combined with logical AND. Criteria left as None (or
blank) add no constraint.
"""

import math
from decimal import Decimal
from typing import Any, Callable, Iterable, List

from catalog.core.exceptions import raise_if_errors
from catalog.query.geo import distance_km, validate_coordinates

Predicate = Callable[[Any], bool]


def all_of(predicates: Iterable[Predicate]) -> Predicate:
    """Conjunction of predicates. An empty set accepts everything."""
    predicates = list(predicates)

    def matches(entity) -> bool:
        return all(predicate(entity) for predicate in predicates)

    return matches


def is_active(destination) -> bool:
    return bool(destination.active)


def name_contains(term: str) -> Predicate:
    needle = term.strip().casefold()
    return lambda entity: entity.name is not None and needle in entity.name.casefold()


def in_city(city_id: int) -> Predicate:
    return lambda destination: destination.city_id == city_id


def of_type(destination_type) -> Predicate:
    return lambda destination: destination.type == destination_type


def price_at_least(min_price: Decimal) -> Predicate:
    return lambda destination: destination.price is not None and destination.price >= min_price


def price_at_most(max_price: Decimal) -> Predicate:
    return lambda destination: destination.price is not None and destination.price <= max_price


def rating_at_least(min_rating: float) -> Predicate:
    return lambda destination: (destination.average_rating or 0.0) >= min_rating


def has_any_tag(tag_names: Iterable[str]) -> Predicate:
    wanted = {name.strip() for name in tag_names}
    return lambda destination: any(tag.name in wanted for tag in destination.tags)


def within_radius(latitude: float, longitude: float, radius_km: float) -> Predicate:
    def matches(entity) -> bool:
        return distance_km(latitude, longitude, entity.latitude, entity.longitude) <= radius_km

    return matches


def _validate_criteria(criteria) -> None:
    errors = {}

    min_price = getattr(criteria, "min_price", None)
    max_price = getattr(criteria, "max_price", None)
    if min_price is not None and min_price < 0:
        errors["minPrice"] = "Minimum price cannot be negative"
    if max_price is not None and max_price < 0:
        errors["maxPrice"] = "Maximum price cannot be negative"
    if min_price is not None and max_price is not None and min_price > max_price:
        errors["priceRange"] = "Minimum price cannot exceed maximum price"

    min_rating = getattr(criteria, "min_rating", None)
    if min_rating is not None and not 0.0 <= min_rating <= 5.0:
        errors["minRating"] = "Minimum rating must be between 0 and 5"

    location = (
        getattr(criteria, "latitude", None),
        getattr(criteria, "longitude", None),
        getattr(criteria, "radius_km", None),
    )
    if any(value is not None for value in location):
        latitude, longitude, radius_km = location
        errors.update(validate_coordinates(latitude, longitude))
        if radius_km is None:
            errors["radiusKm"] = "Radius is required for a location filter"
        elif not math.isfinite(radius_km) or radius_km <= 0:
            errors["radiusKm"] = "Radius must be a finite number greater than 0"

    raise_if_errors(errors, "Invalid search criteria")


def build_destination_predicates(criteria) -> List[Predicate]:
    """
    Translate sparse search criteria into a list of predicates.

    The active-only constraint is not added here; the query executor
    appends it to every destination listing.
    """
    _validate_criteria(criteria)
    predicates: List[Predicate] = []

    name = getattr(criteria, "name", None)
    if name is not None and name.strip():
        predicates.append(name_contains(name))

    city_id = getattr(criteria, "city_id", None)
    if city_id is not None:
        predicates.append(in_city(city_id))

    destination_type = getattr(criteria, "type", None)
    if destination_type is not None:
        predicates.append(of_type(destination_type))

    min_price = getattr(criteria, "min_price", None)
    if min_price is not None:
        predicates.append(price_at_least(Decimal(str(min_price))))

    max_price = getattr(criteria, "max_price", None)
    if max_price is not None:
        predicates.append(price_at_most(Decimal(str(max_price))))

    min_rating = getattr(criteria, "min_rating", None)
    if min_rating is not None:
        predicates.append(rating_at_least(min_rating))

    tags = getattr(criteria, "tags", None)
    if tags:
        predicates.append(has_any_tag(tags))

    radius_km = getattr(criteria, "radius_km", None)
    if radius_km is not None:
        predicates.append(within_radius(criteria.latitude, criteria.longitude, radius_km))

    return predicates
