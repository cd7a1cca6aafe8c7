"""Application tests for product creation and detail updates."""

import json

import pytest
from catalogue.product.creation import CreateProduct
from catalogue.product.details import UpdateProductDetails
from catalogue.product.product import Product
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain


def _create_product(**overrides):
    defaults = {
        "name": "Lacquer Bowl",
        "price": 40.0,
        "categories": json.dumps(["cat-home"]),
        "description": "Hand-lacquered bowl",
        "discount": 10,
        "quantity": 8,
    }
    defaults.update(overrides)
    return current_domain.process(CreateProduct(**defaults), asynchronous=False)


class TestCreateProductHandler:
    def test_create_product(self):
        product_id = _create_product()

        product = current_domain.repository_for(Product).get(product_id)
        assert product.name == "Lacquer Bowl"
        assert product.category_ids == ["cat-home"]
        assert product.quantity == 8

    def test_images_from_uploads_then_links(self):
        product_id = _create_product(
            uploaded_files=json.dumps(["bowl.jpg"]),
            image_links=json.dumps(["https://cdn.example.com/bowl-2.jpg"]),
        )
        product = current_domain.repository_for(Product).get(product_id)
        assert product.image_urls == ["/uploads/products/bowl.jpg", "https://cdn.example.com/bowl-2.jpg"]

    def test_malformed_links_are_ignored(self):
        product_id = _create_product(image_links='["https://cdn.example.com/x.jpg"')
        product = current_domain.repository_for(Product).get(product_id)
        assert product.image_urls == []

    @pytest.mark.parametrize("field", ["name", "price", "description", "discount", "quantity"])
    def test_missing_field_is_rejected(self, field):
        with pytest.raises(ValidationError) as exc:
            _create_product(**{field: None})
        assert f"{field} is required" in str(exc.value)

    def test_empty_categories_are_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _create_product(categories=json.dumps([]))
        assert "categories is required" in str(exc.value)

    def test_zero_discount_counts_as_missing(self):
        with pytest.raises(ValidationError) as exc:
            _create_product(discount=0)
        assert "discount is required" in str(exc.value)

    def test_zero_quantity_counts_as_missing(self):
        with pytest.raises(ValidationError):
            _create_product(quantity=0)


class TestUpdateProductDetailsHandler:
    def test_partial_update(self):
        product_id = _create_product()
        current_domain.process(UpdateProductDetails(product_id=product_id, price=35.0), asynchronous=False)

        product = current_domain.repository_for(Product).get(product_id)
        assert product.price == 35.0
        assert product.name == "Lacquer Bowl"

    def test_images_are_appended(self):
        product_id = _create_product(uploaded_files=json.dumps(["a.jpg"]))
        current_domain.process(
            UpdateProductDetails(product_id=product_id, uploaded_files=json.dumps(["b.jpg"])),
            asynchronous=False,
        )

        product = current_domain.repository_for(Product).get(product_id)
        assert product.image_urls == ["/uploads/products/a.jpg", "/uploads/products/b.jpg"]

    def test_unknown_product(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(UpdateProductDetails(product_id="missing", name="x"), asynchronous=False)
