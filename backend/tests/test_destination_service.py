"""Service-level tests for destination and image use cases."""

from decimal import Decimal

import pytest

from catalog.core.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from catalog.models import Destination, DestinationImage, DestinationTag, DestinationType
from catalog.schemas.destination import (
    DestinationCreate,
    DestinationImageCreate,
    DestinationSearchRequest,
    DestinationUpdate,
)
from catalog.services.destination_service import DestinationService
from catalog.services.image_service import DestinationImageService


@pytest.fixture
def service(db):
    return DestinationService(db)


@pytest.fixture
def images(db):
    return DestinationImageService(db)


@pytest.fixture
def chefchaouen(make_city):
    return make_city()


@pytest.fixture
def marrakech(make_city):
    return make_city(name="Marrakech", region="Marrakech-Safi", latitude=31.6295, longitude=-7.9811)


class TestCreate:
    def test_create_with_tags_and_images(self, service, chefchaouen):
        created = service.create_destination(
            DestinationCreate(
                name="Blue Pearl Medina",
                type="HISTORICAL",
                cityId=chefchaouen.id,
                price="12.50",
                latitude=35.1681,
                longitude=-5.2636,
                tags=["unesco", " walking ", ""],
                imageUrls=["https://img.example/a.jpg", "https://img.example/b.jpg"],
            )
        )
        assert created.id is not None
        assert created.type == DestinationType.HISTORICAL
        assert created.city.name == "Chefchaouen"
        assert created.price == Decimal("12.50")
        assert created.tags == ["unesco", "walking"]
        assert created.image_urls == ["https://img.example/a.jpg", "https://img.example/b.jpg"]
        assert created.active is True
        assert created.average_rating == 0.0
        assert created.review_count == 0

    def test_unknown_city(self, service):
        request = DestinationCreate(name="Nowhere", type="BEACH", city_id=404, latitude=0, longitude=0)
        with pytest.raises(NotFoundError):
            service.create_destination(request)


class TestReads:
    def test_inactive_destination_is_readable_by_id_only(self, service, chefchaouen, make_destination):
        hidden = make_destination(chefchaouen, name="Closed Kasbah", active=False)
        make_destination(chefchaouen)

        assert service.get_destination_by_id(hidden.id).active is False
        listed = service.get_all_destinations()
        assert [d.name for d in listed.content] == ["Blue Pearl Medina"]
        assert listed.total_elements == 1
        assert service.search_destinations(DestinationSearchRequest(name="kasbah")).empty

    def test_unknown_id(self, service):
        with pytest.raises(NotFoundError):
            service.get_destination_by_id(12345)

    def test_by_city(self, service, chefchaouen, marrakech, make_destination):
        make_destination(chefchaouen, name="Ras El Maa")
        make_destination(chefchaouen, name="Kasbah Museum")
        make_destination(marrakech, name="Jemaa el-Fnaa")

        page = service.get_destinations_by_city(chefchaouen.id)
        assert [d.name for d in page.content] == ["Kasbah Museum", "Ras El Maa"]
        with pytest.raises(NotFoundError):
            service.get_destinations_by_city(999)

    def test_by_type(self, service, chefchaouen, make_destination):
        make_destination(chefchaouen, name="Akchour Waterfalls", type=DestinationType.NATURE)
        make_destination(chefchaouen, name="Kasbah Museum", type=DestinationType.MUSEUM)
        page = service.get_destinations_by_type(DestinationType.NATURE)
        assert [d.name for d in page.content] == ["Akchour Waterfalls"]

    def test_types(self, service):
        types = service.get_destination_types()
        assert len(types) == 12
        assert DestinationType.BEACH in types

    def test_popular_ordering(self, service, chefchaouen, make_destination):
        make_destination(chefchaouen, name="B", average_rating=4.5, review_count=10)
        make_destination(chefchaouen, name="A", average_rating=4.5, review_count=10)
        make_destination(chefchaouen, name="C", average_rating=4.5, review_count=50)
        make_destination(chefchaouen, name="D", average_rating=4.9, review_count=1)
        make_destination(chefchaouen, name="E", average_rating=5.0, review_count=99, active=False)

        assert [d.name for d in service.get_popular_destinations(10)] == ["D", "C", "A", "B"]
        assert [d.name for d in service.get_popular_destinations(2)] == ["D", "C"]

    @pytest.mark.parametrize("limit", [0, 51])
    def test_popular_limit_range(self, service, limit):
        with pytest.raises(InvalidArgumentError) as exc_info:
            service.get_popular_destinations(limit)
        assert "limit" in exc_info.value.errors


class TestSearch:
    @pytest.fixture(autouse=True)
    def catalog(self, chefchaouen, marrakech, make_destination):
        make_destination(chefchaouen, name="Blue Pearl Medina", price=0, average_rating=4.8, tags=["unesco"])
        make_destination(
            chefchaouen,
            name="Akchour Waterfalls",
            type=DestinationType.NATURE,
            latitude=35.2406,
            longitude=-5.1717,
            price=15,
            average_rating=4.6,
            tags=["hiking"],
        )
        make_destination(
            marrakech,
            name="Jardin Majorelle",
            type=DestinationType.NATURE,
            price=150,
            average_rating=4.7,
            tags=["garden", "unesco"],
        )
        make_destination(marrakech, name="Jemaa el-Fnaa", price=None, average_rating=4.2)

    def names(self, service, **criteria):
        return [d.name for d in service.search_destinations(DestinationSearchRequest(**criteria)).content]

    def test_no_criteria_returns_everything_active(self, service):
        assert self.names(service) == ["Akchour Waterfalls", "Blue Pearl Medina", "Jardin Majorelle", "Jemaa el-Fnaa"]

    def test_price_range_excludes_unpriced(self, service):
        assert self.names(service, min_price=0, max_price=20) == ["Akchour Waterfalls", "Blue Pearl Medina"]

    def test_type_and_rating(self, service):
        assert self.names(service, type="NATURE", min_rating=4.65) == ["Jardin Majorelle"]

    def test_tags(self, service):
        assert self.names(service, tags=["unesco"]) == ["Blue Pearl Medina", "Jardin Majorelle"]

    def test_location(self, service):
        assert self.names(service, latitude=35.1681, longitude=-5.2636, radius_km=50) == [
            "Akchour Waterfalls",
            "Blue Pearl Medina",
        ]

    def test_sorting_and_paging(self, service):
        page = service.search_destinations(
            DestinationSearchRequest(sort_by="averageRating", sort_direction="desc", page=1, size=2)
        )
        assert [d.name for d in page.content] == ["Akchour Waterfalls", "Jemaa el-Fnaa"]
        assert page.total_elements == 4
        assert page.last

    def test_invalid_criteria_and_paging_are_reported_together(self, service):
        with pytest.raises(InvalidArgumentError) as exc_info:
            service.search_destinations(
                DestinationSearchRequest(min_price=-1, min_rating=7, page=-1, size=500, sort_by="secret")
            )
        assert {"minPrice", "minRating", "page", "size", "sortBy"} <= set(exc_info.value.errors)


class TestNearby:
    def test_nearby_scenario(self, service, chefchaouen, marrakech, make_destination):
        make_destination(chefchaouen, name="Blue Pearl Medina", latitude=35.1681, longitude=-5.2636)
        make_destination(marrakech, name="Jemaa el-Fnaa")
        make_destination(chefchaouen, name="Closed Kasbah", active=False)

        nearby = service.get_nearby_destinations(35.1681, -5.2636, 50)
        assert [d.name for d in nearby] == ["Blue Pearl Medina"]
        assert nearby[0].distance_km == 0.0

    def test_one_kilometer_radius(self, service, chefchaouen, make_destination):
        make_destination(chefchaouen, name="Blue Pearl Medina", latitude=35.1681, longitude=-5.2636)

        from_medina = service.get_nearby_destinations(35.1681, -5.2636, 1)
        assert [d.name for d in from_medina] == ["Blue Pearl Medina"]
        assert from_medina[0].distance_km == pytest.approx(0.0)
        assert service.get_nearby_destinations(31.6295, -7.9811, 1) == []

    def test_limit(self, service, chefchaouen, make_destination):
        for index in range(5):
            make_destination(chefchaouen, name=f"Spot {index}", latitude=35.1681 + index * 0.01)
        nearby = service.get_nearby_destinations(35.1681, -5.2636, limit=3)
        assert [d.name for d in nearby] == ["Spot 0", "Spot 1", "Spot 2"]

    def test_invalid_arguments(self, service):
        with pytest.raises(InvalidArgumentError) as exc_info:
            service.get_nearby_destinations(None, -5.0, 0)
        assert {"latitude", "radiusKm"} <= set(exc_info.value.errors)


class TestUpdate:
    def test_partial_update(self, service, chefchaouen, make_destination):
        destination = make_destination(chefchaouen, description="Old medina", tags=["unesco"], price=10)
        updated = service.update_destination(destination.id, DestinationUpdate(name="Medina of Chefchaouen"))
        assert updated.name == "Medina of Chefchaouen"
        assert updated.description == "Old medina"
        assert updated.tags == ["unesco"]
        assert updated.price == Decimal("10.00")
        assert updated.version == 2

    def test_explicit_null_clears_optional_fields(self, service, chefchaouen, make_destination):
        destination = make_destination(chefchaouen, description="Old medina", price=10)
        updated = service.update_destination(destination.id, DestinationUpdate(description=None, price=None))
        assert updated.description is None
        assert updated.price is None

    def test_null_on_required_field_is_rejected(self, service, chefchaouen, make_destination):
        destination = make_destination(chefchaouen)
        with pytest.raises(InvalidArgumentError) as exc_info:
            service.update_destination(destination.id, DestinationUpdate(type=None, latitude=None))
        assert set(exc_info.value.errors) == {"type", "latitude"}

    def test_collections_are_replaced_when_sent(self, db, service, chefchaouen, make_destination):
        destination = make_destination(chefchaouen, tags=["a", "b"], images=["https://img.example/1.jpg"])
        updated = service.update_destination(
            destination.id, DestinationUpdate(tags=["c"], image_urls=[])
        )
        assert updated.tags == ["c"]
        assert updated.image_urls == []
        assert db.query(DestinationTag).count() == 1
        assert db.query(DestinationImage).count() == 0

    def test_move_to_another_city(self, service, chefchaouen, marrakech, make_destination):
        destination = make_destination(chefchaouen)
        updated = service.update_destination(destination.id, DestinationUpdate(city_id=marrakech.id))
        assert updated.city_id == marrakech.id
        assert updated.city.name == "Marrakech"
        with pytest.raises(NotFoundError):
            service.update_destination(destination.id, DestinationUpdate(city_id=999))

    def test_outdated_version_is_a_conflict(self, service, chefchaouen, make_destination):
        destination = make_destination(chefchaouen)
        service.update_destination(destination.id, DestinationUpdate(name="First", version=1))
        with pytest.raises(ConflictError):
            service.update_destination(destination.id, DestinationUpdate(name="Second", version=1))


class TestDelete:
    def test_delete_removes_images_and_tags(self, db, service, chefchaouen, make_destination):
        destination = make_destination(chefchaouen, tags=["unesco"], images=["https://img.example/1.jpg"])
        service.delete_destination(destination.id)
        assert db.query(Destination).count() == 0
        assert db.query(DestinationTag).count() == 0
        assert db.query(DestinationImage).count() == 0

    def test_second_delete_is_not_found(self, service, chefchaouen, make_destination):
        destination = make_destination(chefchaouen)
        service.delete_destination(destination.id)
        with pytest.raises(NotFoundError):
            service.delete_destination(destination.id)


class TestImages:
    def test_add_appends_after_existing(self, images, chefchaouen, make_destination):
        destination = make_destination(chefchaouen, images=["https://img.example/1.jpg"])
        added = images.add_images(
            destination.id,
            [DestinationImageCreate(image_url="https://img.example/2.jpg", caption="Sunset")],
        )
        assert added[0].display_order == 1
        assert [i.image_url for i in images.get_images(destination.id)] == [
            "https://img.example/1.jpg",
            "https://img.example/2.jpg",
        ]

    def test_reorder_and_caption(self, images, chefchaouen, make_destination):
        destination = make_destination(chefchaouen, images=["https://img.example/1.jpg", "https://img.example/2.jpg"])
        first, second = images.get_images(destination.id)

        images.reorder_image(destination.id, first.id, 5)
        assert [i.id for i in images.get_images(destination.id)] == [second.id, first.id]

        assert images.update_caption(destination.id, second.id, "Main gate").caption == "Main gate"

        with pytest.raises(InvalidArgumentError):
            images.reorder_image(destination.id, first.id, -1)

    def test_delete_and_missing_image(self, images, chefchaouen, make_destination):
        destination = make_destination(chefchaouen, images=["https://img.example/1.jpg"])
        (image,) = images.get_images(destination.id)
        images.delete_image(destination.id, image.id)
        assert images.get_images(destination.id) == []
        with pytest.raises(NotFoundError):
            images.delete_image(destination.id, image.id)
        with pytest.raises(NotFoundError):
            images.get_images(999)
