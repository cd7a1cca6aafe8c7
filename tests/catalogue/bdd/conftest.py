"""Shared BDD fixtures and step definitions for the Catalogue domain."""

import json

import pytest
from catalogue.product.creation import CreateProduct
from catalogue.promotion.enrollment import AddProductsToEvent
from catalogue.promotion.management import CreateSaleEvent
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def reading():
    """Container for the most recent product read."""
    return {}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse("a product priced at {price:f} with a legacy discount of {discount:d}"),
    target_fixture="product_id",
)
def product_priced(price, discount):
    return current_domain.process(
        CreateProduct(
            name="Lacquer Bowl",
            price=price,
            categories=json.dumps(["cat-home"]),
            description="Hand-lacquered bowl",
            discount=discount,
            quantity=10,
        ),
        asynchronous=False,
    )


@given(
    parsers.cfparse('a sale event "{name}" running from {start} to {end}'),
    target_fixture="event_id",
)
def sale_event_running(name, start, end):
    return current_domain.process(
        CreateSaleEvent(name=name, description=f"{name} campaign", start_date=start, end_date=end),
        asynchronous=False,
    )


@given(parsers.cfparse("the product is enrolled at {discount:d} percent from {start} to {end}"))
def product_enrolled(product_id, event_id, discount, start, end):
    current_domain.process(
        AddProductsToEvent(
            event_id=event_id,
            product_ids=json.dumps([product_id]),
            discount=discount,
            start_date=start,
            end_date=end,
        ),
        asynchronous=False,
    )
