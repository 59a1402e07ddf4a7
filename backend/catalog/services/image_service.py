import logging
from typing import List, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from catalog.core.database import get_db
from catalog.core.exceptions import InvalidArgumentError, NotFoundError
from catalog.models.destination import Destination, DestinationImage
from catalog.repositories.destination_repository import DestinationImageRepository, DestinationRepository
from catalog.schemas.destination import (
    DestinationImageCreate,
    DestinationImageResponse,
    ordered_images,
    to_image_response,
)

logger = logging.getLogger(__name__)


class DestinationImageService:
    """Image metadata for a destination. Files themselves live elsewhere; images are referenced by URL."""

    def __init__(self, db: Session = Depends(get_db)):
        self.db = db
        self.destinations = DestinationRepository(db)
        self.images = DestinationImageRepository(db)

    def _get_destination_or_404(self, destination_id: int) -> Destination:
        destination = self.destinations.get(destination_id)
        if destination is None:
            raise NotFoundError(f"Destination not found with id: {destination_id}")
        return destination

    def _get_image_or_404(self, destination_id: int, image_id: int) -> DestinationImage:
        self._get_destination_or_404(destination_id)
        image = self.images.find_for_destination(destination_id, image_id)
        if image is None:
            raise NotFoundError(f"Image not found with id: {image_id}")
        return image

    def get_images(self, destination_id: int) -> List[DestinationImageResponse]:
        destination = self._get_destination_or_404(destination_id)
        return [to_image_response(image) for image in ordered_images(destination.images)]

    def add_images(self, destination_id: int, images: List[DestinationImageCreate]) -> List[DestinationImageResponse]:
        """Append images after the current highest display order."""
        destination = self._get_destination_or_404(destination_id)
        current_max = max((image.display_order for image in destination.images), default=-1)

        created = []
        for offset, request in enumerate(images, start=1):
            image = DestinationImage(
                image_url=request.image_url.strip(),
                caption=request.caption,
                display_order=current_max + offset,
            )
            destination.images.append(image)
            created.append(image)

        self.destinations.commit()
        for image in created:
            self.db.refresh(image)
        logger.info(f"Added {len(created)} images to destination {destination_id}")
        return [to_image_response(image) for image in created]

    def delete_image(self, destination_id: int, image_id: int) -> DestinationImageResponse:
        image = self._get_image_or_404(destination_id, image_id)
        removed = to_image_response(image)
        self.images.delete(image)
        self.images.commit()
        logger.info(f"Deleted image {image_id} from destination {destination_id}")
        return removed

    def reorder_image(self, destination_id: int, image_id: int, display_order: int) -> DestinationImageResponse:
        if display_order is None or display_order < 0:
            raise InvalidArgumentError(
                "Invalid display order", {"displayOrder": "Display order must be a non-negative integer"}
            )
        image = self._get_image_or_404(destination_id, image_id)
        old_order = image.display_order
        image.display_order = display_order
        image = self.images.save(image)
        logger.info(
            f"Moved image {image_id} of destination {destination_id} from position {old_order} to {display_order}"
        )
        return to_image_response(image)

    def update_caption(self, destination_id: int, image_id: int, caption: Optional[str]) -> DestinationImageResponse:
        image = self._get_image_or_404(destination_id, image_id)
        image.caption = caption
        image = self.images.save(image)
        logger.info(f"Updated caption of image {image_id} in destination {destination_id}")
        return to_image_response(image)
