"""Unit tests for the sort/page resolver."""

from types import SimpleNamespace

import pytest

from catalog.core.exceptions import InvalidArgumentError
from catalog.query.paging import CITY_SORT_FIELDS, DESTINATION_SORT_FIELDS, resolve_fetch_plan


def item(id, **values):
    return SimpleNamespace(id=id, **values)


class TestResolveFetchPlan:
    def test_defaults(self):
        plan = resolve_fetch_plan(None, None, None, None, DESTINATION_SORT_FIELDS)
        assert plan.page == 0
        assert plan.size == 20
        assert plan.attribute == "name"
        assert plan.descending is False
        assert plan.offset == 0
        assert plan.limit == 20

    def test_offset_is_page_times_size(self):
        plan = resolve_fetch_plan(3, 15, "name", "asc", DESTINATION_SORT_FIELDS)
        assert plan.offset == 45
        assert plan.limit == 15

    @pytest.mark.parametrize("size", [0, 101, -5])
    def test_size_outside_range_is_rejected(self, size):
        with pytest.raises(InvalidArgumentError) as exc_info:
            resolve_fetch_plan(0, size, "name", "asc", DESTINATION_SORT_FIELDS)
        assert "size" in exc_info.value.errors

    @pytest.mark.parametrize("size", [1, 100])
    def test_size_bounds_are_inclusive(self, size):
        assert resolve_fetch_plan(0, size, "name", "asc", DESTINATION_SORT_FIELDS).size == size

    def test_negative_page_is_rejected(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            resolve_fetch_plan(-1, 20, "name", "asc", DESTINATION_SORT_FIELDS)
        assert "page" in exc_info.value.errors

    def test_unknown_sort_field_is_rejected(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            resolve_fetch_plan(0, 20, "password", "asc", DESTINATION_SORT_FIELDS)
        assert "sortBy" in exc_info.value.errors

    def test_city_fields_do_not_include_destination_fields(self):
        with pytest.raises(InvalidArgumentError):
            resolve_fetch_plan(0, 20, "price", "asc", CITY_SORT_FIELDS)

    def test_direction_is_case_insensitive(self):
        assert resolve_fetch_plan(0, 20, "name", "DESC", DESTINATION_SORT_FIELDS).descending is True
        assert resolve_fetch_plan(0, 20, "name", "Asc", DESTINATION_SORT_FIELDS).descending is False

    def test_invalid_direction_is_rejected(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            resolve_fetch_plan(0, 20, "name", "up", DESTINATION_SORT_FIELDS)
        assert "sortDirection" in exc_info.value.errors

    def test_all_problems_are_reported_together(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            resolve_fetch_plan(-1, 500, "nope", "sideways", DESTINATION_SORT_FIELDS)
        assert set(exc_info.value.errors) == {"page", "size", "sortBy", "sortDirection"}

    def test_camel_and_snake_case_sort_fields(self):
        camel = resolve_fetch_plan(0, 20, "averageRating", "asc", DESTINATION_SORT_FIELDS)
        snake = resolve_fetch_plan(0, 20, "average_rating", "asc", DESTINATION_SORT_FIELDS)
        assert camel.attribute == snake.attribute == "average_rating"


class TestOrdering:
    def test_ties_are_broken_by_id(self):
        items = [item(3, name="Fes"), item(1, name="Fes"), item(2, name="Fes")]
        plan = resolve_fetch_plan(0, 20, "name", "asc", CITY_SORT_FIELDS)
        assert [i.id for i in plan.order(items)] == [1, 2, 3]

    def test_ties_keep_id_order_when_descending(self):
        items = [item(3, name="Fes"), item(1, name="Agadir"), item(2, name="Fes")]
        plan = resolve_fetch_plan(0, 20, "name", "desc", CITY_SORT_FIELDS)
        assert [i.id for i in plan.order(items)] == [2, 3, 1]

    def test_repeated_ordering_is_identical(self):
        items = [item(i, name=["b", "a"][i % 2]) for i in range(10, 0, -1)]
        plan = resolve_fetch_plan(0, 20, "name", "asc", CITY_SORT_FIELDS)
        assert [i.id for i in plan.order(items)] == [i.id for i in plan.order(reversed(items))]

    def test_string_sort_ignores_case(self):
        items = [item(1, name="tangier"), item(2, name="Agadir"), item(3, name="Rabat")]
        plan = resolve_fetch_plan(0, 20, "name", "asc", CITY_SORT_FIELDS)
        assert [i.name for i in plan.order(items)] == ["Agadir", "Rabat", "tangier"]

    def test_missing_values_sort_last_ascending_and_first_descending(self):
        items = [item(1, price=None), item(2, price=10), item(3, price=5)]
        ascending = resolve_fetch_plan(0, 20, "price", "asc", DESTINATION_SORT_FIELDS)
        descending = resolve_fetch_plan(0, 20, "price", "desc", DESTINATION_SORT_FIELDS)
        assert [i.id for i in ascending.order(items)] == [3, 2, 1]
        assert [i.id for i in descending.order(items)] == [1, 2, 3]

    def test_slice(self):
        items = [item(i, name=f"city-{i:02d}") for i in range(1, 8)]
        plan = resolve_fetch_plan(1, 3, "name", "asc", CITY_SORT_FIELDS)
        assert [i.id for i in plan.slice(plan.order(items))] == [4, 5, 6]
