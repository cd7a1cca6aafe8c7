"""Application tests for sale events, enrollment and cascades."""

import json
from datetime import datetime

import pytest
from catalogue.product.creation import CreateProduct
from catalogue.product.product import Product
from catalogue.product.removal import DeleteProduct
from catalogue.promotion.applicable_product import ApplicableProduct
from catalogue.promotion.enrollment import (
    AddProductsToEvent,
    RemoveApplicableProduct,
    RemoveProductsFromEvent,
    RemoveTimeSlot,
)
from catalogue.promotion.management import CreateSaleEvent, DeleteSaleEvent, UpdateSaleEvent
from catalogue.promotion.pricing import resolve_discount
from catalogue.promotion.sale_event import SaleEvent
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain


def _create_product(name="Bamboo Lamp"):
    return current_domain.process(
        CreateProduct(
            name=name,
            price=30.0,
            categories=json.dumps(["cat-home"]),
            description=f"{name} description",
            discount=5,
            quantity=10,
        ),
        asynchronous=False,
    )


def _create_event(**overrides):
    defaults = {
        "name": "Tet Sale",
        "description": "Lunar New Year promotion",
        "start_date": "2025-01-01",
        "end_date": "2025-01-10",
    }
    defaults.update(overrides)
    return current_domain.process(CreateSaleEvent(**defaults), asynchronous=False)


def _enroll(event_id, product_ids, discount=20, start="2025-01-01", end="2025-01-05"):
    return current_domain.process(
        AddProductsToEvent(
            event_id=event_id,
            product_ids=json.dumps(product_ids),
            discount=discount,
            start_date=start,
            end_date=end,
        ),
        asynchronous=False,
    )


def _event(event_id):
    return current_domain.repository_for(SaleEvent).get(event_id)


def _rows_for(event_id):
    return current_domain.repository_for(ApplicableProduct).for_event(event_id)


class TestCreateSaleEvent:
    def test_create(self):
        event_id = _create_event(uploaded_files=json.dumps(["tet.png"]))
        sale_event = _event(event_id)
        assert sale_event.applicable_product_ids == []
        assert sale_event.start_date == datetime(2025, 1, 1)
        assert sale_event.image_urls == ["/uploads/events/tet.png"]

    @pytest.mark.parametrize("field", ["name", "description", "start_date", "end_date"])
    def test_required_fields(self, field):
        with pytest.raises(ValidationError) as exc:
            _create_event(**{field: None})
        assert f"{field} is required" in str(exc.value)

    def test_invalid_image_links_are_tolerated(self):
        event_id = _create_event(image_links="[not json")
        assert _event(event_id).image_urls == []


class TestUpdateSaleEvent:
    def test_images_retained_without_new_ones(self):
        event_id = _create_event(image_links=json.dumps(["https://cdn.example.com/a.png"]))
        current_domain.process(UpdateSaleEvent(event_id=event_id, location="Da Nang"), asynchronous=False)

        sale_event = _event(event_id)
        assert sale_event.location == "Da Nang"
        assert sale_event.image_urls == ["https://cdn.example.com/a.png"]

    def test_images_replaced_when_supplied(self):
        event_id = _create_event(image_links=json.dumps(["https://cdn.example.com/a.png"]))
        current_domain.process(
            UpdateSaleEvent(event_id=event_id, uploaded_files=json.dumps(["b.png"])),
            asynchronous=False,
        )
        assert _event(event_id).image_urls == ["/uploads/events/b.png"]

    def test_unknown_event(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(UpdateSaleEvent(event_id="missing", name="x"), asynchronous=False)


class TestAddProductsToEvent:
    def test_creates_one_row_per_product(self):
        event_id = _create_event()
        p1, p2 = _create_product("Lamp"), _create_product("Vase")

        created = _enroll(event_id, [p1, p2])

        assert [item["product_id"] for item in created] == [p1, p2]
        assert len(_rows_for(event_id)) == 2
        assert _event(event_id).applicable_product_ids == [item["applicable_product_id"] for item in created]

    def test_empty_product_list_is_rejected(self):
        event_id = _create_event()
        with pytest.raises(ValidationError) as exc:
            _enroll(event_id, [])
        assert "non-empty list" in str(exc.value)

    def test_unknown_product_commits_nothing(self):
        event_id = _create_event()
        p1 = _create_product()

        with pytest.raises(ObjectNotFoundError):
            _enroll(event_id, [p1, "missing-product"])

        assert _rows_for(event_id) == []
        assert _event(event_id).applicable_product_ids == []

    def test_unknown_event(self):
        p1 = _create_product()
        with pytest.raises(ObjectNotFoundError):
            _enroll("missing-event", [p1])

    def test_window_must_be_ordered(self):
        event_id = _create_event()
        p1 = _create_product()
        with pytest.raises(ValidationError):
            _enroll(event_id, [p1], start="2025-01-05", end="2025-01-01")


class TestRemoveProductsFromEvent:
    def test_removes_rows_and_manifest_entries_by_product_id(self):
        event_id = _create_event()
        p1, p2 = _create_product("Lamp"), _create_product("Vase")
        created = _enroll(event_id, [p1, p2])

        current_domain.process(
            RemoveProductsFromEvent(event_id=event_id, product_ids=json.dumps([p1])),
            asynchronous=False,
        )

        assert _event(event_id).applicable_product_ids == [created[1]["applicable_product_id"]]
        assert [str(row.product_id) for row in _rows_for(event_id)] == [p2]
        assert resolve_discount(p1, at=datetime(2025, 1, 3)).is_in_event is False

    def test_unknown_event(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(
                RemoveProductsFromEvent(event_id="missing", product_ids=json.dumps(["p1"])),
                asynchronous=False,
            )


class TestRemoveApplicableProduct:
    def test_removes_single_enrollment(self):
        event_id = _create_event()
        p1 = _create_product()
        ap_id = _enroll(event_id, [p1])[0]["applicable_product_id"]

        current_domain.process(
            RemoveApplicableProduct(event_id=event_id, applicable_product_id=ap_id),
            asynchronous=False,
        )

        assert _rows_for(event_id) == []
        assert _event(event_id).applicable_product_ids == []

    def test_enrollment_of_another_event_is_not_found(self):
        event_a, event_b = _create_event(name="A"), _create_event(name="B")
        p1 = _create_product()
        ap_id = _enroll(event_a, [p1])[0]["applicable_product_id"]

        with pytest.raises(ObjectNotFoundError):
            current_domain.process(
                RemoveApplicableProduct(event_id=event_b, applicable_product_id=ap_id),
                asynchronous=False,
            )
        assert len(_rows_for(event_a)) == 1


class TestRemoveTimeSlot:
    def test_deletes_only_exact_matches(self):
        event_id = _create_event()
        p1, p2, p3 = _create_product("A"), _create_product("B"), _create_product("C")
        _enroll(event_id, [p1, p2], start="2025-01-01", end="2025-01-05")
        kept = _enroll(event_id, [p3], start="2025-01-01", end="2025-01-06")

        deleted = current_domain.process(
            RemoveTimeSlot(event_id=event_id, start="2025-01-01", end="2025-01-05"),
            asynchronous=False,
        )

        assert deleted == 2
        assert [str(row.product_id) for row in _rows_for(event_id)] == [p3]
        assert _event(event_id).applicable_product_ids == [kept[0]["applicable_product_id"]]

    def test_no_match_returns_zero(self):
        event_id = _create_event()
        deleted = current_domain.process(
            RemoveTimeSlot(event_id=event_id, start="2025-03-01", end="2025-03-02"),
            asynchronous=False,
        )
        assert deleted == 0

    def test_bounds_are_required(self):
        event_id = _create_event()
        with pytest.raises(ValidationError) as exc:
            current_domain.process(RemoveTimeSlot(event_id=event_id, start="2025-01-01"), asynchronous=False)
        assert "end is required" in str(exc.value)


class TestCascades:
    def test_deleting_event_deletes_its_rows(self):
        event_id = _create_event()
        p1 = _create_product()
        _enroll(event_id, [p1])

        removed = current_domain.process(DeleteSaleEvent(event_id=event_id), asynchronous=False)

        assert removed == 1
        assert current_domain.repository_for(ApplicableProduct).for_product(p1) == []
        with pytest.raises(ObjectNotFoundError):
            _event(event_id)

    def test_deleting_product_deletes_its_rows_and_manifest_entries(self):
        event_id = _create_event()
        p1, p2 = _create_product("Lamp"), _create_product("Vase")
        created = _enroll(event_id, [p1, p2])

        current_domain.process(DeleteProduct(product_id=p1), asynchronous=False)

        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Product).get(p1)
        assert [str(row.product_id) for row in _rows_for(event_id)] == [p2]
        assert _event(event_id).applicable_product_ids == [created[1]["applicable_product_id"]]
