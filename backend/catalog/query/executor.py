import math
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterable, List, Sequence, Tuple, TypeVar

from catalog.query.paging import FetchPlan
from catalog.query.predicates import Predicate, all_of

T = TypeVar("T")
U = TypeVar("U")


@dataclass
class Page(Generic[T]):
    """A content slice plus the counts needed to navigate the full result."""

    content: List[T]
    page: int
    size: int
    total_elements: int

    @property
    def total_pages(self) -> int:
        if self.total_elements == 0:
            return 0
        return math.ceil(self.total_elements / self.size)

    @property
    def first(self) -> bool:
        return self.page == 0

    @property
    def last(self) -> bool:
        return self.page + 1 >= self.total_pages

    @property
    def empty(self) -> bool:
        return len(self.content) == 0

    @property
    def number_of_elements(self) -> int:
        return len(self.content)

    @property
    def has_next(self) -> bool:
        return not self.last

    @property
    def has_previous(self) -> bool:
        return not self.first

    def map(self, mapper: Callable[[T], U]) -> "Page[U]":
        return Page(
            content=[mapper(item) for item in self.content],
            page=self.page,
            size=self.size,
            total_elements=self.total_elements,
        )


def apply_fetch_plan(items: Iterable[Any], predicate: Predicate, plan: FetchPlan) -> Tuple[List[Any], int]:
    """Filter, order and slice. The total is counted before slicing."""
    matching = [item for item in items if predicate(item)]
    ordered = plan.order(matching)
    return plan.slice(ordered), len(matching)


@dataclass
class QueryExecutor:
    """
    Runs predicates and a fetch plan against an entity store.

    `implicit_predicates` are appended to every query and cannot be
    removed by callers; destination reads use it for the active flag.
    """

    store: Any
    implicit_predicates: Sequence[Predicate] = field(default_factory=tuple)

    def execute(self, predicates: Iterable[Predicate], plan: FetchPlan) -> Page:
        combined = all_of(list(predicates) + list(self.implicit_predicates))
        content, total = self.store.find_all(combined, plan)
        return Page(content=content, page=plan.page, size=plan.size, total_elements=total)
