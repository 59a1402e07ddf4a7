from fastapi import APIRouter, Depends, status
from typing import List
import logging

from catalog.schemas.common import ApiResult
from catalog.schemas.destination import (
    DestinationImageCaption,
    DestinationImageReorder,
    DestinationImageResponse,
    DestinationImagesAdd,
)
from catalog.services.image_service import DestinationImageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/destinations/{destination_id}/images", tags=["destination images"])


@router.get("", response_model=ApiResult[List[DestinationImageResponse]])
def get_destination_images(destination_id: int, service: DestinationImageService = Depends()):
    """Get the images of a destination in display order."""
    images = service.get_images(destination_id)
    return ApiResult.ok(images, f"Retrieved {len(images)} images")


@router.post("", response_model=ApiResult[List[DestinationImageResponse]], status_code=status.HTTP_201_CREATED)
def add_destination_images(
    destination_id: int,
    request: DestinationImagesAdd,
    service: DestinationImageService = Depends()
):
    """Attach images (by URL) after the existing ones."""
    logger.info(f"Adding {len(request.images)} images to destination: {destination_id}")
    images = service.add_images(destination_id, request.images)
    return ApiResult.ok(images, f"{len(images)} images added successfully")


@router.delete("/{image_id}", response_model=ApiResult[DestinationImageResponse])
def delete_destination_image(destination_id: int, image_id: int, service: DestinationImageService = Depends()):
    """Remove an image from a destination."""
    logger.info(f"Deleting image {image_id} from destination: {destination_id}")
    return ApiResult.ok(service.delete_image(destination_id, image_id), "Image deleted successfully")


@router.put("/{image_id}/reorder", response_model=ApiResult[DestinationImageResponse])
def reorder_destination_image(
    destination_id: int,
    image_id: int,
    request: DestinationImageReorder,
    service: DestinationImageService = Depends()
):
    """Change the display order of an image."""
    image = service.reorder_image(destination_id, image_id, request.display_order)
    return ApiResult.ok(image, "Image order updated successfully")


@router.put("/{image_id}/caption", response_model=ApiResult[DestinationImageResponse])
def update_image_caption(
    destination_id: int,
    image_id: int,
    request: DestinationImageCaption,
    service: DestinationImageService = Depends()
):
    """Update the caption of an image."""
    image = service.update_caption(destination_id, image_id, request.caption)
    return ApiResult.ok(image, "Image caption updated successfully")
