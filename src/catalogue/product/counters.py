"""Product counters: like, view and sell increments.

Each increment is a read-modify-write on the aggregate, saved with Protean's
version check. A concurrent save makes the store raise ExpectedVersionError;
``process_with_retry`` re-runs the whole command against fresh state.
"""

import structlog
from protean import handle
from protean.exceptions import ExpectedVersionError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product
from shared.config import config

logger = structlog.get_logger(__name__)


@catalogue.command(part_of="Product")
class IncrementView:
    product_id: Identifier(required=True)


@catalogue.command(part_of="Product")
class IncrementSell:
    product_id: Identifier(required=True)


@catalogue.command_handler(part_of=Product)
class ProductCountersHandler:
    @handle(IncrementView)
    def increment_view(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.record_view()
        repo.add(product)
        return product.view_count

    @handle(IncrementSell)
    def increment_sell(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.record_sale()
        repo.add(product)
        return product.sell_count


def process_with_retry(command, attempts: int | None = None):
    """Process ``command``, retrying when a concurrent write wins the race."""
    attempts = attempts or config.COUNTER_RETRY_ATTEMPTS
    for attempt in range(1, attempts + 1):
        try:
            return current_domain.process(command, asynchronous=False)
        except ExpectedVersionError:
            if attempt == attempts:
                raise
            logger.warning(
                "Concurrent counter update, retrying",
                command=command.__class__.__name__,
                attempt=attempt,
            )
