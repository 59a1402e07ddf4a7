from datetime import datetime
from typing import Callable, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from catalog.query.executor import Page

T = TypeVar("T")


class CamelModel(BaseModel):
    """Serializes as camelCase, accepts camelCase or snake_case input."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class ApiResult(BaseModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None
    timestamp: datetime = Field(default_factory=datetime.now)

    @classmethod
    def ok(cls, data: T = None, message: Optional[str] = None) -> "ApiResult[T]":
        return cls(success=True, message=message, data=data)


class PageResponse(CamelModel, Generic[T]):
    content: List[T]
    page: int
    size: int
    total_elements: int
    total_pages: int
    first: bool
    last: bool
    empty: bool
    number_of_elements: int
    has_next: bool
    has_previous: bool

    @classmethod
    def from_page(cls, page: Page, mapper: Optional[Callable] = None) -> "PageResponse[T]":
        if mapper is not None:
            page = page.map(mapper)
        return cls(
            content=page.content,
            page=page.page,
            size=page.size,
            total_elements=page.total_elements,
            total_pages=page.total_pages,
            first=page.first,
            last=page.last,
            empty=page.empty,
            number_of_elements=page.number_of_elements,
            has_next=page.has_next,
            has_previous=page.has_previous,
        )
