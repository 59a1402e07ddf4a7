from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import selectinload

from catalog.models.city import City
from catalog.query.paging import FetchPlan
from .base import SqlAlchemyRepository


def escape_like(term: str) -> str:
    """Make %, _ and the escape character match literally in a LIKE pattern."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class CityRepository(SqlAlchemyRepository[City]):
    model = City

    def _base_query(self):
        return self.session.query(City).options(selectinload(City.destinations))

    def find_by_name(self, name: str) -> Optional[City]:
        """Case-insensitive exact name lookup."""
        return (
            self._base_query()
            .filter(func.lower(City.name) == name.strip().lower())
            .order_by(City.id)
            .first()
        )

    def find_by_region(self, region: str) -> List[City]:
        return self._base_query().filter(City.region == region).order_by(City.name, City.id).all()

    def find_popular(self) -> List[City]:
        return self._base_query().filter(City.is_popular.is_(True)).order_by(City.name, City.id).all()

    def find_all_by_name(self) -> List[City]:
        return self._base_query().order_by(City.name, City.id).all()

    def search_by_name(self, term: str, plan: FetchPlan) -> Tuple[List[City], int]:
        pattern = f"%{escape_like(term.strip().lower())}%"
        query = self._base_query().filter(func.lower(City.name).like(pattern, escape="\\"))
        total = query.count()
        ordered = plan.order(query.all())
        return plan.slice(ordered), total

    def find_regions(self) -> List[str]:
        rows = self.session.query(City.region).distinct().order_by(City.region).all()
        return [row[0] for row in rows]
