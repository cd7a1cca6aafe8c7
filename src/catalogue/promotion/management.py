"""SaleEvent management — create, update and delete campaigns."""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.promotion.applicable_product import ApplicableProduct
from catalogue.promotion.sale_event import SaleEvent
from catalogue.shared.images import collect_images
from shared.dates import parse_instant

logger = structlog.get_logger(__name__)


@catalogue.command(part_of="SaleEvent")
class CreateSaleEvent:
    name: String(max_length=255)
    description: Text()
    start_date: String()  # ISO date or datetime
    end_date: String()
    location: String(max_length=255)
    uploaded_files: Text()  # JSON array of stored file names
    image_links: Text()  # JSON array, or a single link


@catalogue.command(part_of="SaleEvent")
class UpdateSaleEvent:
    event_id: Identifier(required=True)
    name: String(max_length=255)
    description: Text()
    start_date: String()
    end_date: String()
    location: String(max_length=255)
    uploaded_files: Text()
    image_links: Text()


@catalogue.command(part_of="SaleEvent")
class DeleteSaleEvent:
    event_id: Identifier(required=True)


def _images(command) -> list[str]:
    uploads = json.loads(command.uploaded_files) if command.uploaded_files else []
    return collect_images("events", uploads=uploads, links=command.image_links)


@catalogue.command_handler(part_of=SaleEvent)
class ManageSaleEventHandler:
    @handle(CreateSaleEvent)
    def create_sale_event(self, command):
        missing = [
            field for field in ("name", "description", "start_date", "end_date") if not getattr(command, field)
        ]
        if missing:
            raise ValidationError({field: [f"{field} is required"] for field in missing})

        sale_event = SaleEvent.create(
            name=command.name,
            description=command.description,
            start_date=parse_instant(command.start_date, "start_date"),
            end_date=parse_instant(command.end_date, "end_date"),
            location=command.location,
            images=_images(command),
        )
        current_domain.repository_for(SaleEvent).add(sale_event)

        logger.info("Sale event created", event_id=str(sale_event.id), name=sale_event.name)
        return str(sale_event.id)

    @handle(UpdateSaleEvent)
    def update_sale_event(self, command):
        repo = current_domain.repository_for(SaleEvent)
        sale_event = repo.get(command.event_id)

        sale_event.update(
            name=command.name,
            description=command.description,
            start_date=parse_instant(command.start_date, "start_date") if command.start_date else None,
            end_date=parse_instant(command.end_date, "end_date") if command.end_date else None,
            location=command.location,
            images=_images(command),
        )
        repo.add(sale_event)
        return str(sale_event.id)

    @handle(DeleteSaleEvent)
    def delete_sale_event(self, command):
        repo = current_domain.repository_for(SaleEvent)
        sale_event = repo.get(command.event_id)

        ap_repo = current_domain.repository_for(ApplicableProduct)
        removed = ap_repo.delete_all(ap_repo.for_event(sale_event.id))
        repo._dao.delete(sale_event)

        logger.info("Sale event deleted", event_id=str(command.event_id), applicable_products_removed=removed)
        return removed
