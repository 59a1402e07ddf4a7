"""Validation of page/size/sort parameters into a deterministic fetch plan."""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from catalog.core.config import settings
from catalog.core.exceptions import raise_if_errors

SORT_DIRECTIONS = ("asc", "desc")

DESTINATION_SORT_FIELDS = {
    "id": "id",
    "name": "name",
    "type": "type",
    "price": "price",
    "averageRating": "average_rating",
    "reviewCount": "review_count",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}

CITY_SORT_FIELDS = {
    "id": "id",
    "name": "name",
    "region": "region",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


def _sort_value(value: Any) -> Any:
    if isinstance(value, str):
        return value.casefold()
    return value


@dataclass(frozen=True)
class FetchPlan:
    page: int
    size: int
    sort_by: str
    attribute: str
    descending: bool = False

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def limit(self) -> int:
        return self.size

    def order(self, items: Iterable[Any]) -> List[Any]:
        """
        Sort items by the plan's attribute. Equal keys keep id order and
        missing values go last ascending, first descending.
        """
        by_id = sorted(items, key=lambda item: item.id)
        present = [item for item in by_id if getattr(item, self.attribute) is not None]
        missing = [item for item in by_id if getattr(item, self.attribute) is None]

        # list.sort is stable for reverse=True as well
        present.sort(key=lambda item: _sort_value(getattr(item, self.attribute)), reverse=self.descending)
        return missing + present if self.descending else present + missing

    def slice(self, ordered: List[Any]) -> List[Any]:
        return ordered[self.offset:self.offset + self.limit]


def _lookup_attribute(sort_by: str, sortable: Dict[str, str]) -> Optional[str]:
    if sort_by in sortable:
        return sortable[sort_by]
    if sort_by in sortable.values():
        return sort_by
    return None


def resolve_fetch_plan(
    page: Optional[int],
    size: Optional[int],
    sort_by: Optional[str],
    sort_direction: Optional[str],
    sortable: Dict[str, str],
    default_sort: str = "name",
) -> FetchPlan:
    """
    Normalize caller pagination into a FetchPlan.

    Out-of-range values are rejected, never clamped. Every problem is
    reported together in a single InvalidArgumentError.
    """
    errors = {}

    page = 0 if page is None else page
    size = settings.default_page_size if size is None else size
    sort_by = default_sort if sort_by is None or not sort_by.strip() else sort_by.strip()
    direction = "asc" if sort_direction is None or not sort_direction.strip() else sort_direction.strip().lower()

    if page < 0:
        errors["page"] = "Page index must not be negative"
    if size < 1 or size > settings.max_page_size:
        errors["size"] = f"Page size must be between 1 and {settings.max_page_size}"

    attribute = _lookup_attribute(sort_by, sortable)
    if attribute is None:
        errors["sortBy"] = f"Cannot sort by '{sort_by}'. Allowed fields: {', '.join(sortable)}"
    if direction not in SORT_DIRECTIONS:
        errors["sortDirection"] = "Sort direction must be 'asc' or 'desc'"

    raise_if_errors(errors, "Invalid pagination or sort parameters")

    return FetchPlan(
        page=page,
        size=size,
        sort_by=sort_by,
        attribute=attribute,
        descending=direction == "desc",
    )
