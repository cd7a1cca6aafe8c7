"""Product enrollment in sale events: commands and handler.

Every handler runs in a single unit of work: the ApplicableProduct rows and
the event's manifest are committed together or not at all.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product
from catalogue.promotion.applicable_product import ApplicableProduct
from catalogue.promotion.sale_event import SaleEvent
from shared.dates import parse_instant

logger = structlog.get_logger(__name__)


@catalogue.command(part_of="SaleEvent")
class AddProductsToEvent:
    event_id: Identifier(required=True)
    product_ids: Text()  # JSON array, order preserved
    discount: Float()
    start_date: String()
    end_date: String()


@catalogue.command(part_of="SaleEvent")
class RemoveProductsFromEvent:
    """Withdraw products, given by product id, from an event."""

    event_id: Identifier(required=True)
    product_ids: Text()  # JSON array


@catalogue.command(part_of="SaleEvent")
class RemoveApplicableProduct:
    event_id: Identifier(required=True)
    applicable_product_id: Identifier(required=True)


@catalogue.command(part_of="SaleEvent")
class RemoveTimeSlot:
    event_id: Identifier(required=True)
    start: String()
    end: String()


def _product_id_list(raw) -> list[str]:
    try:
        values = json.loads(raw) if raw else None
    except json.JSONDecodeError:
        values = None
    if not isinstance(values, list) or not values:
        raise ValidationError({"product_ids": ["product_ids must be a non-empty list"]})
    return [str(value) for value in values]


@catalogue.command_handler(part_of=SaleEvent)
class EnrollmentHandler:
    @handle(AddProductsToEvent)
    def add_products(self, command):
        product_ids = _product_id_list(command.product_ids)
        if command.discount is None:
            raise ValidationError({"discount": ["discount is required"]})
        start = parse_instant(command.start_date, "start_date")
        end = parse_instant(command.end_date, "end_date")

        repo = current_domain.repository_for(SaleEvent)
        sale_event = repo.get(command.event_id)

        product_repo = current_domain.repository_for(Product)
        for product_id in product_ids:
            product_repo.get(product_id)

        ap_repo = current_domain.repository_for(ApplicableProduct)
        rows = []
        for product_id in product_ids:
            row = ApplicableProduct(
                event_id=sale_event.id,
                product_id=product_id,
                discount=command.discount,
                start_date=start,
                end_date=end,
            )
            ap_repo.add(row)
            rows.append(row)

        sale_event.enroll(rows)
        repo.add(sale_event)

        logger.info(
            "Products enrolled in sale event",
            event_id=str(sale_event.id),
            product_count=len(rows),
            discount=command.discount,
        )
        return [{"applicable_product_id": str(row.id), "product_id": str(row.product_id)} for row in rows]

    @handle(RemoveProductsFromEvent)
    def remove_products(self, command):
        product_ids = _product_id_list(command.product_ids)

        repo = current_domain.repository_for(SaleEvent)
        sale_event = repo.get(command.event_id)

        ap_repo = current_domain.repository_for(ApplicableProduct)
        rows = ap_repo.for_event_and_products(sale_event.id, product_ids)

        sale_event.withdraw([row.id for row in rows])
        ap_repo.delete_all(rows)
        repo.add(sale_event)

        logger.info("Products withdrawn from sale event", event_id=str(sale_event.id), removed=len(rows))
        return str(sale_event.id)

    @handle(RemoveApplicableProduct)
    def remove_applicable_product(self, command):
        repo = current_domain.repository_for(SaleEvent)
        sale_event = repo.get(command.event_id)

        ap_repo = current_domain.repository_for(ApplicableProduct)
        try:
            row = ap_repo.get(command.applicable_product_id)
        except ObjectNotFoundError:
            row = None
        if row is None or str(row.event_id) != str(sale_event.id):
            raise ObjectNotFoundError(
                {"applicable_product": [f"Enrollment {command.applicable_product_id} not found in this event"]}
            )

        ap_repo.delete_all([row])
        sale_event.withdraw([row.id])
        repo.add(sale_event)
        return str(sale_event.id)

    @handle(RemoveTimeSlot)
    def remove_time_slot(self, command):
        missing = [field for field in ("start", "end") if not getattr(command, field)]
        if missing:
            raise ValidationError({field: [f"{field} is required"] for field in missing})
        start = parse_instant(command.start, "start")
        end = parse_instant(command.end, "end")

        repo = current_domain.repository_for(SaleEvent)
        sale_event = repo.get(command.event_id)

        ap_repo = current_domain.repository_for(ApplicableProduct)
        rows = ap_repo.in_slot(sale_event.id, start, end)
        deleted = ap_repo.delete_all(rows)

        sale_event.withdraw([row.id for row in rows])
        repo.add(sale_event)

        logger.info(
            "Time slot cleared",
            event_id=str(sale_event.id),
            start=start.isoformat(),
            end=end.isoformat(),
            deleted_count=deleted,
        )
        return deleted
