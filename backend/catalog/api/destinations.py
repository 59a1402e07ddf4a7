from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
import logging

from catalog.models.destination import DestinationType
from catalog.schemas.common import ApiResult, PageResponse
from catalog.schemas.destination import (
    DestinationCreate,
    DestinationResponse,
    DestinationSearchRequest,
    DestinationUpdate,
)
from catalog.services.destination_service import DestinationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/destinations", tags=["destinations"])


@router.post("/search", response_model=ApiResult[PageResponse[DestinationResponse]])
def search_destinations(
    request: DestinationSearchRequest,
    service: DestinationService = Depends()
):
    """Search destinations by name, city, type, price range, rating, tags and location."""
    logger.info(f"Searching destinations with filters: {request.model_dump(exclude_none=True)}")
    destinations = service.search_destinations(request)
    return ApiResult.ok(destinations, f"Found {destinations.total_elements} destinations")


@router.get("", response_model=ApiResult[PageResponse[DestinationResponse]])
def get_all_destinations(
    page: int = Query(0, description="Page number (0-based)"),
    size: int = Query(20, description="Page size (1-100)"),
    sort_by: str = Query("name", alias="sortBy", description="Sort field"),
    sort_dir: str = Query("asc", alias="sortDir", description="Sort direction (asc/desc)"),
    service: DestinationService = Depends()
):
    """Get all active destinations with pagination and sorting."""
    logger.info(f"Getting all destinations - page: {page}, size: {size}, sortBy: {sort_by}, sortDir: {sort_dir}")
    destinations = service.get_all_destinations(page, size, sort_by, sort_dir)
    return ApiResult.ok(destinations, f"Retrieved {destinations.total_elements} destinations")


@router.get("/types", response_model=ApiResult[List[DestinationType]])
def get_destination_types(service: DestinationService = Depends()):
    """Get all destination types."""
    return ApiResult.ok(service.get_destination_types(), "Destination types retrieved successfully")


@router.get("/popular", response_model=ApiResult[List[DestinationResponse]])
def get_popular_destinations(
    limit: int = Query(10, description="Maximum number of destinations to return (1-50)"),
    service: DestinationService = Depends()
):
    """Get the best rated, most reviewed destinations."""
    logger.info(f"Getting popular destinations, limit: {limit}")
    destinations = service.get_popular_destinations(limit)
    return ApiResult.ok(destinations, f"Retrieved {len(destinations)} popular destinations")


@router.get("/nearby", response_model=ApiResult[List[DestinationResponse]])
def get_nearby_destinations(
    latitude: Optional[float] = Query(None, description="Latitude of the center"),
    longitude: Optional[float] = Query(None, description="Longitude of the center"),
    radius_km: Optional[float] = Query(None, alias="radiusKm", description="Search radius in kilometers"),
    limit: Optional[int] = Query(None, description="Maximum number of destinations to return"),
    service: DestinationService = Depends()
):
    """Get active destinations within a radius, closest first."""
    logger.info(
        f"Getting nearby destinations - lat: {latitude}, lng: {longitude}, radius: {radius_km}km, limit: {limit}"
    )
    destinations = service.get_nearby_destinations(latitude, longitude, radius_km, limit)
    return ApiResult.ok(destinations, f"Found {len(destinations)} destinations nearby")


@router.get("/city/{city_id}", response_model=ApiResult[PageResponse[DestinationResponse]])
def get_destinations_by_city(
    city_id: int,
    page: int = Query(0),
    size: int = Query(20),
    service: DestinationService = Depends()
):
    """Get the active destinations of a city."""
    destinations = service.get_destinations_by_city(city_id, page, size)
    return ApiResult.ok(destinations, f"Found {destinations.total_elements} destinations in this city")


@router.get("/type/{destination_type}", response_model=ApiResult[PageResponse[DestinationResponse]])
def get_destinations_by_type(
    destination_type: DestinationType,
    page: int = Query(0),
    size: int = Query(20),
    service: DestinationService = Depends()
):
    """Get the active destinations of one type."""
    destinations = service.get_destinations_by_type(destination_type, page, size)
    return ApiResult.ok(
        destinations, f"Found {destinations.total_elements} {destination_type.value} destinations"
    )


@router.get("/{destination_id}", response_model=ApiResult[DestinationResponse])
def get_destination(destination_id: int, service: DestinationService = Depends()):
    """Get a specific destination by ID, active or not."""
    return ApiResult.ok(service.get_destination_by_id(destination_id), "Destination retrieved successfully")


@router.post("", response_model=ApiResult[DestinationResponse], status_code=status.HTTP_201_CREATED)
def create_destination(destination_data: DestinationCreate, service: DestinationService = Depends()):
    """Create a new destination."""
    logger.info(f"Creating new destination: {destination_data.name}")
    return ApiResult.ok(service.create_destination(destination_data), "Destination created successfully")


@router.put("/{destination_id}", response_model=ApiResult[DestinationResponse])
@router.patch("/{destination_id}", response_model=ApiResult[DestinationResponse])
def update_destination(
    destination_id: int,
    destination_data: DestinationUpdate,
    service: DestinationService = Depends()
):
    """Update a destination. Only the fields sent are changed."""
    logger.info(f"Updating destination: {destination_id}")
    return ApiResult.ok(
        service.update_destination(destination_id, destination_data), "Destination updated successfully"
    )


@router.delete("/{destination_id}", response_model=ApiResult[None])
def delete_destination(destination_id: int, service: DestinationService = Depends()):
    """Delete a destination with its images and tags."""
    logger.info(f"Deleting destination: {destination_id}")
    service.delete_destination(destination_id)
    return ApiResult.ok(None, "Destination deleted successfully")
