"""Catalogue bounded context: products, likes, promotional events and discounts."""

from protean.domain import Domain

from catalogue.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

catalogue = Domain(name="catalogue")
