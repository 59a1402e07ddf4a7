import logging
from typing import List, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from catalog.core.config import settings
from catalog.core.database import get_db
from catalog.core.exceptions import InvalidArgumentError, NotFoundError, raise_if_errors
from catalog.models.city import City
from catalog.models.destination import Destination, DestinationImage, DestinationTag, DestinationType
from catalog.query.executor import QueryExecutor
from catalog.query.paging import DESTINATION_SORT_FIELDS, resolve_fetch_plan
from catalog.query.predicates import build_destination_predicates, in_city, is_active, of_type
from catalog.query.proximity import find_nearby
from catalog.repositories.city_repository import CityRepository
from catalog.repositories.destination_repository import DestinationRepository
from catalog.schemas.common import PageResponse
from catalog.schemas.destination import (
    DestinationCreate,
    DestinationResponse,
    DestinationSearchRequest,
    DestinationUpdate,
    to_destination_response,
)
from catalog.services.updates import check_version, collect_changes

logger = logging.getLogger(__name__)

REQUIRED_DESTINATION_FIELDS = ("name", "type", "city_id", "latitude", "longitude", "active")


def build_tags(tag_names: List[str]) -> List[DestinationTag]:
    return [DestinationTag(name=name.strip()) for name in tag_names]


def build_images(image_urls: List[str], start_order: int = 0) -> List[DestinationImage]:
    return [
        DestinationImage(image_url=url.strip(), display_order=start_order + offset)
        for offset, url in enumerate(image_urls)
    ]


def delete_destination_tree(db: Session, destination: Destination):
    """Delete a destination after deleting the images and tags it owns."""
    for image in list(destination.images):
        db.delete(image)
    for tag in list(destination.tags):
        db.delete(tag)
    db.delete(destination)


class DestinationService:
    """
    Destination use cases. Every listing path goes through a QueryExecutor
    that always appends the active-only predicate; direct id lookups do not.
    """

    def __init__(self, db: Session = Depends(get_db)):
        self.db = db
        self.destinations = DestinationRepository(db)
        self.cities = CityRepository(db)
        self.executor = QueryExecutor(self.destinations, implicit_predicates=(is_active,))

    def _get_or_404(self, destination_id: int) -> Destination:
        destination = self.destinations.get(destination_id)
        if destination is None:
            raise NotFoundError(f"Destination not found with id: {destination_id}")
        return destination

    def _get_city_or_404(self, city_id: int) -> City:
        city = self.cities.get(city_id)
        if city is None:
            raise NotFoundError(f"City not found with id: {city_id}")
        return city

    def search_destinations(self, request: DestinationSearchRequest) -> PageResponse[DestinationResponse]:
        """Search with any combination of criteria; problems are reported together."""
        logger.debug(f"Searching destinations with request: {request.model_dump(exclude_none=True)}")
        errors = {}
        predicates = []
        plan = None
        try:
            predicates = build_destination_predicates(request)
        except InvalidArgumentError as e:
            errors.update(e.errors)
        try:
            plan = resolve_fetch_plan(
                request.page, request.size, request.sort_by, request.sort_direction, DESTINATION_SORT_FIELDS
            )
        except InvalidArgumentError as e:
            errors.update(e.errors)
        raise_if_errors(errors, "Invalid search request")

        result = self.executor.execute(predicates, plan)
        return PageResponse.from_page(result, to_destination_response)

    def get_all_destinations(
        self,
        page: Optional[int] = 0,
        size: Optional[int] = None,
        sort_by: Optional[str] = "name",
        sort_dir: Optional[str] = "asc",
    ) -> PageResponse[DestinationResponse]:
        logger.debug(f"Getting all destinations - page: {page}, size: {size}")
        plan = resolve_fetch_plan(page, size, sort_by, sort_dir, DESTINATION_SORT_FIELDS)
        result = self.executor.execute([], plan)
        return PageResponse.from_page(result, to_destination_response)

    def get_destination_by_id(self, destination_id: int) -> DestinationResponse:
        logger.debug(f"Getting destination by id: {destination_id}")
        return to_destination_response(self._get_or_404(destination_id))

    def get_destinations_by_city(
        self, city_id: int, page: Optional[int] = 0, size: Optional[int] = None
    ) -> PageResponse[DestinationResponse]:
        logger.debug(f"Getting destinations by city: {city_id}")
        if not self.cities.exists(city_id):
            raise NotFoundError(f"City not found with id: {city_id}")
        plan = resolve_fetch_plan(page, size, "name", "asc", DESTINATION_SORT_FIELDS)
        result = self.executor.execute([in_city(city_id)], plan)
        return PageResponse.from_page(result, to_destination_response)

    def get_destinations_by_type(
        self, destination_type: DestinationType, page: Optional[int] = 0, size: Optional[int] = None
    ) -> PageResponse[DestinationResponse]:
        logger.debug(f"Getting destinations by type: {destination_type}")
        plan = resolve_fetch_plan(page, size, "name", "asc", DESTINATION_SORT_FIELDS)
        result = self.executor.execute([of_type(destination_type)], plan)
        return PageResponse.from_page(result, to_destination_response)

    def get_popular_destinations(self, limit: Optional[int] = None) -> List[DestinationResponse]:
        """Highest rated first, then most reviewed, then name."""
        if limit is None:
            limit = settings.popular_default_limit
        logger.debug(f"Getting popular destinations, limit: {limit}")
        if limit < 1 or limit > settings.popular_max_limit:
            raise InvalidArgumentError(
                "Invalid limit",
                {"limit": f"Limit must be between 1 and {settings.popular_max_limit}"},
            )
        return [to_destination_response(d) for d in self.destinations.find_popular(limit)]

    def get_nearby_destinations(
        self,
        latitude: Optional[float],
        longitude: Optional[float],
        radius_km: Optional[float] = None,
        limit: Optional[int] = None,
    ) -> List[DestinationResponse]:
        if radius_km is None:
            radius_km = settings.destination_nearby_default_radius_km
        if limit is None:
            limit = settings.nearby_default_limit
        logger.debug(
            f"Getting nearby destinations - lat: {latitude}, lng: {longitude}, "
            f"radius: {radius_km}km, limit: {limit}"
        )
        matches = find_nearby(
            self.destinations.find_active(),
            latitude,
            longitude,
            radius_km,
            limit=limit,
            predicate=is_active,
            max_radius_km=settings.destination_nearby_max_radius_km,
            max_limit=settings.nearby_max_limit,
        )
        return [to_destination_response(match.entity, match.distance_km) for match in matches]

    def get_destination_types(self) -> List[DestinationType]:
        return list(DestinationType)

    def create_destination(self, request: DestinationCreate) -> DestinationResponse:
        logger.debug(f"Creating destination: {request.name}")
        city = self._get_city_or_404(request.city_id)

        values = request.model_dump(exclude={"tags", "image_urls", "city_id"})
        destination = Destination(**values)
        destination.city = city
        destination.tags = build_tags(request.tags)
        destination.images = build_images(request.image_urls)

        destination = self.destinations.save(destination)
        logger.info(f"Created destination with id: {destination.id}")
        return to_destination_response(destination)

    def update_destination(self, destination_id: int, request: DestinationUpdate) -> DestinationResponse:
        """
        Apply only the fields present in the request. Tags and image URLs,
        when present, replace the existing collections.
        """
        logger.debug(f"Updating destination: {destination_id}")
        destination = self._get_or_404(destination_id)
        check_version(destination, request.version, "Destination")

        changes = collect_changes(request, REQUIRED_DESTINATION_FIELDS, skip=("version",))

        if "city_id" in changes and changes["city_id"] != destination.city_id:
            destination.city = self._get_city_or_404(changes["city_id"])
        changes.pop("city_id", None)

        if "tags" in changes:
            destination.tags = build_tags(changes.pop("tags") or [])
        if "image_urls" in changes:
            destination.images = build_images(changes.pop("image_urls") or [])

        for field, value in changes.items():
            setattr(destination, field, value)

        destination = self.destinations.save(destination)
        logger.info(f"Updated destination with id: {destination.id}")
        return to_destination_response(destination)

    def delete_destination(self, destination_id: int):
        logger.debug(f"Deleting destination: {destination_id}")
        destination = self._get_or_404(destination_id)
        delete_destination_tree(self.db, destination)
        self.destinations.commit()
        logger.info(f"Deleted destination with id: {destination_id}")
