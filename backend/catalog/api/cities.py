from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
import logging

from catalog.schemas.city import CityCreate, CityResponse, CityUpdate
from catalog.schemas.common import ApiResult, PageResponse
from catalog.services.city_service import CityService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cities", tags=["cities"])


@router.get("", response_model=ApiResult[PageResponse[CityResponse]])
def get_all_cities(
    page: int = Query(0, description="Page number (0-based)"),
    size: int = Query(20, description="Page size (1-100)"),
    sort_by: str = Query("name", alias="sortBy", description="Sort field"),
    sort_dir: str = Query("asc", alias="sortDir", description="Sort direction (asc/desc)"),
    service: CityService = Depends()
):
    """Get all cities with pagination and sorting."""
    logger.info(f"Getting all cities - page: {page}, size: {size}, sortBy: {sort_by}, sortDir: {sort_dir}")
    cities = service.get_all_cities(page, size, sort_by, sort_dir)
    return ApiResult.ok(cities, f"Retrieved {cities.total_elements} cities")


@router.get("/simple", response_model=ApiResult[List[CityResponse]])
def get_all_cities_simple(service: CityService = Depends()):
    """Get all cities as a plain list ordered by name."""
    cities = service.get_all_cities_simple()
    return ApiResult.ok(cities, f"Retrieved {len(cities)} cities")


@router.get("/popular", response_model=ApiResult[List[CityResponse]])
def get_popular_cities(service: CityService = Depends()):
    """Get cities flagged as popular."""
    cities = service.get_popular_cities()
    return ApiResult.ok(cities, f"Retrieved {len(cities)} popular cities")


@router.get("/regions", response_model=ApiResult[List[str]])
def get_all_regions(service: CityService = Depends()):
    """Get the distinct list of regions."""
    regions = service.get_all_regions()
    return ApiResult.ok(regions, f"Retrieved {len(regions)} regions")


@router.get("/search", response_model=ApiResult[PageResponse[CityResponse]])
def search_cities(
    name: Optional[str] = Query(None, description="Search term"),
    page: int = Query(0),
    size: int = Query(20),
    service: CityService = Depends()
):
    """Search cities by name (case-insensitive, contains)."""
    logger.info(f"Searching cities by name: {name}")
    cities = service.search_cities(name, page, size)
    return ApiResult.ok(cities, f"Found {cities.total_elements} cities matching: {name}")


@router.get("/nearby", response_model=ApiResult[List[CityResponse]])
def get_nearby_cities(
    latitude: Optional[float] = Query(None, description="Latitude of the center"),
    longitude: Optional[float] = Query(None, description="Longitude of the center"),
    radius_km: Optional[float] = Query(None, alias="radiusKm", description="Search radius in kilometers"),
    service: CityService = Depends()
):
    """Get cities within a radius, closest first."""
    logger.info(f"Getting nearby cities - lat: {latitude}, lng: {longitude}, radius: {radius_km}km")
    cities = service.get_nearby_cities(latitude, longitude, radius_km)
    return ApiResult.ok(cities, f"Found {len(cities)} cities nearby")


@router.get("/name/{name}", response_model=ApiResult[CityResponse])
def get_city_by_name(name: str, service: CityService = Depends()):
    """Get a city by its name."""
    return ApiResult.ok(service.get_city_by_name(name), "City retrieved successfully")


@router.get("/region/{region}", response_model=ApiResult[List[CityResponse]])
def get_cities_by_region(region: str, service: CityService = Depends()):
    """Get all cities in a region."""
    cities = service.get_cities_by_region(region)
    return ApiResult.ok(cities, f"Found {len(cities)} cities in region: {region}")


@router.get("/{city_id}", response_model=ApiResult[CityResponse])
def get_city(city_id: int, service: CityService = Depends()):
    """Get a specific city by ID."""
    return ApiResult.ok(service.get_city_by_id(city_id), "City retrieved successfully")


@router.post("", response_model=ApiResult[CityResponse], status_code=status.HTTP_201_CREATED)
def create_city(city_data: CityCreate, service: CityService = Depends()):
    """Create a new city."""
    logger.info(f"Creating new city: {city_data.name}")
    return ApiResult.ok(service.create_city(city_data), "City created successfully")


@router.put("/{city_id}", response_model=ApiResult[CityResponse])
@router.patch("/{city_id}", response_model=ApiResult[CityResponse])
def update_city(city_id: int, city_data: CityUpdate, service: CityService = Depends()):
    """Update a city. Only the fields sent are changed."""
    logger.info(f"Updating city: {city_id}")
    return ApiResult.ok(service.update_city(city_id, city_data), "City updated successfully")


@router.delete("/{city_id}", response_model=ApiResult[None])
def delete_city(city_id: int, service: CityService = Depends()):
    """Delete a city together with its destinations."""
    logger.info(f"Deleting city: {city_id}")
    removed = service.delete_city(city_id)
    return ApiResult.ok(None, f"City deleted successfully ({removed} destinations removed)")
