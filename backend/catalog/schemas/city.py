from datetime import datetime
from typing import Optional

from pydantic import Field

from catalog.models.city import City
from .common import CamelModel


class CityCreate(CamelModel):
    name: str = Field(..., min_length=2, max_length=100, description="City name")
    arabic_name: Optional[str] = Field(None, max_length=100, description="Localized name")
    region: str = Field(..., min_length=1, max_length=100, description="Region")
    latitude: float = Field(..., ge=-90, le=90, description="Latitude")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude")
    description: Optional[str] = Field(None, max_length=1000)
    image_url: Optional[str] = Field(None, max_length=500)
    is_popular: bool = False


class CityUpdate(CamelModel):
    """Partial update: only fields present in the payload are applied."""

    name: Optional[str] = Field(None, min_length=2, max_length=100)
    arabic_name: Optional[str] = Field(None, max_length=100)
    region: Optional[str] = Field(None, min_length=1, max_length=100)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    description: Optional[str] = Field(None, max_length=1000)
    image_url: Optional[str] = Field(None, max_length=500)
    is_popular: Optional[bool] = None
    version: Optional[int] = Field(None, description="Expected version for optimistic locking")


class CityResponse(CamelModel):
    id: int
    name: str
    arabic_name: Optional[str] = None
    region: str
    latitude: float
    longitude: float
    description: Optional[str] = None
    image_url: Optional[str] = None
    is_popular: bool
    destination_count: int
    distance_km: Optional[float] = None
    version: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CitySummary(CamelModel):
    id: int
    name: str
    region: str


def to_city_response(city: City, distance_km: Optional[float] = None) -> CityResponse:
    return CityResponse(
        id=city.id,
        name=city.name,
        arabic_name=city.arabic_name,
        region=city.region,
        latitude=city.latitude,
        longitude=city.longitude,
        description=city.description,
        image_url=city.image_url,
        is_popular=bool(city.is_popular),
        destination_count=city.destination_count,
        distance_km=round(distance_km, 3) if distance_km is not None else None,
        version=city.version,
        created_at=city.created_at,
        updated_at=city.updated_at,
    )
