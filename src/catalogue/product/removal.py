"""Product removal: command and handler.

Deleting a product also deletes its discount windows and pulls them from the
manifests of the events that listed them.
"""

from collections import defaultdict

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product
from catalogue.promotion.applicable_product import ApplicableProduct
from catalogue.promotion.sale_event import SaleEvent

logger = structlog.get_logger(__name__)


@catalogue.command(part_of="Product")
class DeleteProduct:
    product_id: Identifier(required=True)


@catalogue.command_handler(part_of=Product)
class DeleteProductHandler:
    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        ap_repo = current_domain.repository_for(ApplicableProduct)
        rows = ap_repo.for_product(product.id)

        by_event = defaultdict(list)
        for row in rows:
            by_event[str(row.event_id)].append(row.id)

        event_repo = current_domain.repository_for(SaleEvent)
        for event_id, ap_ids in by_event.items():
            try:
                sale_event = event_repo.get(event_id)
            except ObjectNotFoundError:
                continue
            sale_event.withdraw(ap_ids)
            event_repo.add(sale_event)

        ap_repo.delete_all(rows)

        if product.images:
            product.remove_images(list(product.images))
            repo.add(product)
        repo._dao.delete(product)

        logger.info("Product deleted", product_id=str(command.product_id), applicable_products_removed=len(rows))
        return len(rows)
