from typing import List

from sqlalchemy.orm import selectinload

from catalog.models.destination import Destination, DestinationImage
from .base import SqlAlchemyRepository


class DestinationRepository(SqlAlchemyRepository[Destination]):
    model = Destination

    def _base_query(self):
        return self.session.query(Destination).options(
            selectinload(Destination.city),
            selectinload(Destination.tags),
            selectinload(Destination.images),
        )

    def find_active(self) -> List[Destination]:
        return (
            self._base_query()
            .filter(Destination.active.is_(True))
            .order_by(Destination.id)
            .all()
        )

    def find_popular(self, limit: int) -> List[Destination]:
        return (
            self._base_query()
            .filter(Destination.active.is_(True))
            .order_by(
                Destination.average_rating.desc(),
                Destination.review_count.desc(),
                Destination.name.asc(),
                Destination.id.asc(),
            )
            .limit(limit)
            .all()
        )


class DestinationImageRepository(SqlAlchemyRepository[DestinationImage]):
    model = DestinationImage

    def find_for_destination(self, destination_id: int, image_id: int):
        return (
            self.session.query(DestinationImage)
            .filter(
                DestinationImage.id == image_id,
                DestinationImage.destination_id == destination_id,
            )
            .first()
        )
