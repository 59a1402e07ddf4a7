from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_validator

from catalog.models.destination import Destination, DestinationImage, DestinationType
from .city import CitySummary
from .common import CamelModel


def _clean_strings(values: Optional[List[str]]) -> Optional[List[str]]:
    if values is None:
        return None
    return [value.strip() for value in values if value and value.strip()]


class DestinationCreate(CamelModel):
    name: str = Field(..., min_length=2, max_length=100, description="Destination name")
    description: Optional[str] = Field(None, max_length=1000)
    type: DestinationType
    city_id: int = Field(..., description="Owning city")
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    address: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    website: Optional[str] = Field(None, max_length=255)
    opening_hours: Optional[str] = Field(None, max_length=255)
    active: bool = True
    tags: List[str] = Field(default_factory=list)
    image_urls: List[str] = Field(default_factory=list)

    @field_validator("tags", "image_urls")
    @classmethod
    def clean_strings(cls, values):
        return _clean_strings(values)


class DestinationUpdate(CamelModel):
    """
    Partial update. Omitted fields keep their value, fields sent as null are
    cleared. Sending tags or imageUrls replaces the whole collection.
    """

    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    type: Optional[DestinationType] = None
    city_id: Optional[int] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    address: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    website: Optional[str] = Field(None, max_length=255)
    opening_hours: Optional[str] = Field(None, max_length=255)
    active: Optional[bool] = None
    tags: Optional[List[str]] = None
    image_urls: Optional[List[str]] = None
    version: Optional[int] = Field(None, description="Expected version for optimistic locking")

    @field_validator("tags", "image_urls")
    @classmethod
    def clean_strings(cls, values):
        return _clean_strings(values)


class DestinationSearchRequest(CamelModel):
    """Every criterion is optional; absent criteria do not constrain the result."""

    name: Optional[str] = None
    city_id: Optional[int] = None
    type: Optional[DestinationType] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    min_rating: Optional[float] = None
    tags: Optional[List[str]] = None

    # Location filter
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    radius_km: Optional[float] = None

    # Pagination
    page: Optional[int] = 0
    size: Optional[int] = 20
    sort_by: Optional[str] = "name"
    sort_direction: Optional[str] = "asc"

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, values):
        return _clean_strings(values)


class DestinationResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    type: DestinationType
    city_id: int
    city: Optional[CitySummary] = None
    price: Optional[Decimal] = None
    latitude: float
    longitude: float
    address: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    opening_hours: Optional[str] = None
    active: bool
    average_rating: float
    review_count: int
    image_urls: List[str]
    tags: List[str]
    distance_km: Optional[float] = None
    version: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DestinationImageCreate(CamelModel):
    image_url: str = Field(..., min_length=1, max_length=500)
    caption: Optional[str] = Field(None, max_length=200)


class DestinationImagesAdd(CamelModel):
    images: List[DestinationImageCreate] = Field(..., min_length=1)


class DestinationImageReorder(CamelModel):
    display_order: int = Field(..., ge=0)


class DestinationImageCaption(CamelModel):
    caption: Optional[str] = Field(None, max_length=200)


class DestinationImageResponse(CamelModel):
    id: int
    image_url: str
    caption: Optional[str] = None
    display_order: int
    created_at: Optional[datetime] = None


def to_destination_response(destination: Destination, distance_km: Optional[float] = None) -> DestinationResponse:
    city = destination.city
    return DestinationResponse(
        id=destination.id,
        name=destination.name,
        description=destination.description,
        type=destination.type,
        city_id=destination.city_id,
        city=CitySummary(id=city.id, name=city.name, region=city.region) if city is not None else None,
        price=destination.price,
        latitude=destination.latitude,
        longitude=destination.longitude,
        address=destination.address,
        phone=destination.phone,
        website=destination.website,
        opening_hours=destination.opening_hours,
        active=bool(destination.active),
        average_rating=destination.average_rating or 0.0,
        review_count=destination.review_count or 0,
        image_urls=[image.image_url for image in ordered_images(destination.images)],
        tags=destination.tag_names,
        distance_km=round(distance_km, 3) if distance_km is not None else None,
        version=destination.version,
        created_at=destination.created_at,
        updated_at=destination.updated_at,
    )


def ordered_images(images: List[DestinationImage]) -> List[DestinationImage]:
    """Presentation order: display order, then insertion (id)."""
    return sorted(images, key=lambda image: (image.display_order or 0, image.id or 0))


def to_image_response(image: DestinationImage) -> DestinationImageResponse:
    return DestinationImageResponse(
        id=image.id,
        image_url=image.image_url,
        caption=image.caption,
        display_order=image.display_order,
        created_at=image.created_at,
    )
