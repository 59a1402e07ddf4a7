import logging
from typing import List, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from catalog.core.config import settings
from catalog.core.database import get_db
from catalog.core.exceptions import InvalidArgumentError, NotFoundError
from catalog.models.city import City
from catalog.query.executor import Page, QueryExecutor
from catalog.query.paging import CITY_SORT_FIELDS, resolve_fetch_plan
from catalog.query.proximity import find_nearby
from catalog.repositories.city_repository import CityRepository
from catalog.schemas.city import CityCreate, CityResponse, CityUpdate, to_city_response
from catalog.schemas.common import PageResponse
from catalog.services.destination_service import delete_destination_tree
from catalog.services.updates import check_version, collect_changes

logger = logging.getLogger(__name__)

REQUIRED_CITY_FIELDS = ("name", "region", "latitude", "longitude", "is_popular")


class CityService:
    """City use cases. One instance per request session."""

    def __init__(self, db: Session = Depends(get_db)):
        self.db = db
        self.cities = CityRepository(db)
        self.executor = QueryExecutor(self.cities)

    def _get_or_404(self, city_id: int) -> City:
        city = self.cities.get(city_id)
        if city is None:
            raise NotFoundError(f"City not found with id: {city_id}")
        return city

    def get_all_cities(
        self,
        page: Optional[int] = 0,
        size: Optional[int] = None,
        sort_by: Optional[str] = "name",
        sort_dir: Optional[str] = "asc",
    ) -> PageResponse[CityResponse]:
        logger.debug(f"Getting all cities - page: {page}, size: {size}, sort: {sort_by} {sort_dir}")
        plan = resolve_fetch_plan(page, size, sort_by, sort_dir, CITY_SORT_FIELDS)
        result = self.executor.execute([], plan)
        return PageResponse.from_page(result, to_city_response)

    def get_all_cities_simple(self) -> List[CityResponse]:
        return [to_city_response(city) for city in self.cities.find_all_by_name()]

    def get_city_by_id(self, city_id: int) -> CityResponse:
        logger.debug(f"Getting city by id: {city_id}")
        return to_city_response(self._get_or_404(city_id))

    def get_city_by_name(self, name: str) -> CityResponse:
        logger.debug(f"Getting city by name: {name}")
        city = self.cities.find_by_name(name)
        if city is None:
            raise NotFoundError(f"City not found with name: {name}")
        return to_city_response(city)

    def get_cities_by_region(self, region: str) -> List[CityResponse]:
        return [to_city_response(city) for city in self.cities.find_by_region(region)]

    def get_popular_cities(self) -> List[CityResponse]:
        return [to_city_response(city) for city in self.cities.find_popular()]

    def search_cities(
        self,
        name: Optional[str],
        page: Optional[int] = 0,
        size: Optional[int] = None,
    ) -> PageResponse[CityResponse]:
        logger.debug(f"Searching cities by name: {name}")
        errors = {}
        if name is None or not name.strip():
            errors["name"] = "A search term is required"
        try:
            plan = resolve_fetch_plan(page, size, "name", "asc", CITY_SORT_FIELDS)
        except InvalidArgumentError as e:
            errors.update(e.errors)
        if errors:
            raise InvalidArgumentError("Invalid city search parameters", errors)

        content, total = self.cities.search_by_name(name, plan)
        result = Page(content=content, page=plan.page, size=plan.size, total_elements=total)
        return PageResponse.from_page(result, to_city_response)

    def get_nearby_cities(
        self,
        latitude: Optional[float],
        longitude: Optional[float],
        radius_km: Optional[float] = None,
    ) -> List[CityResponse]:
        if radius_km is None:
            radius_km = settings.city_nearby_default_radius_km
        logger.debug(f"Getting nearby cities - lat: {latitude}, lng: {longitude}, radius: {radius_km}km")
        matches = find_nearby(
            self.cities.list_all(),
            latitude,
            longitude,
            radius_km,
            max_radius_km=settings.city_nearby_max_radius_km,
        )
        return [to_city_response(match.entity, match.distance_km) for match in matches]

    def get_all_regions(self) -> List[str]:
        return self.cities.find_regions()

    def create_city(self, request: CityCreate) -> CityResponse:
        logger.debug(f"Creating city: {request.name}")
        city = City(**request.model_dump())
        city = self.cities.save(city)
        logger.info(f"Created city with id: {city.id}")
        return to_city_response(city)

    def update_city(self, city_id: int, request: CityUpdate) -> CityResponse:
        logger.debug(f"Updating city: {city_id}")
        city = self._get_or_404(city_id)
        check_version(city, request.version, "City")

        changes = collect_changes(request, REQUIRED_CITY_FIELDS, skip=("version",))
        for field, value in changes.items():
            setattr(city, field, value)

        city = self.cities.save(city)
        logger.info(f"Updated city with id: {city.id} (fields: {', '.join(sorted(changes)) or 'none'})")
        return to_city_response(city)

    def delete_city(self, city_id: int) -> int:
        """
        Delete a city and, explicitly, every destination it owns.
        Returns the number of destinations removed.
        """
        logger.debug(f"Deleting city: {city_id}")
        city = self._get_or_404(city_id)

        owned = list(city.destinations)
        for destination in owned:
            delete_destination_tree(self.db, destination)
        self.cities.delete(city)
        self.cities.commit()

        logger.info(f"Deleted city with id: {city_id} and {len(owned)} destinations")
        return len(owned)
