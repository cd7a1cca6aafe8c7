"""Domain events for the SaleEvent aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, String, Text

from catalogue.domain import catalogue


@catalogue.event(part_of="SaleEvent")
class SaleEventCreated:
    __version__ = 1

    event_id: Identifier(required=True)
    name: String(required=True)
    start_date: DateTime(required=True)
    end_date: DateTime(required=True)
    created_at: DateTime(required=True)


@catalogue.event(part_of="SaleEvent")
class SaleEventUpdated:
    __version__ = 1

    event_id: Identifier(required=True)
    name: String()
    start_date: DateTime()
    end_date: DateTime()
    images_replaced: Boolean(default=False)


@catalogue.event(part_of="SaleEvent")
class ProductsEnrolled:
    """Products were enrolled in a campaign with one discount window."""

    __version__ = 1

    event_id: Identifier(required=True)
    applicable_product_ids: Text(required=True)  # JSON array
    product_ids: Text(required=True)  # JSON array
    discount: Float(required=True)
    start_date: DateTime(required=True)
    end_date: DateTime(required=True)


@catalogue.event(part_of="SaleEvent")
class ProductsWithdrawn:
    """ApplicableProduct ids were pulled from a campaign's manifest."""

    __version__ = 1

    event_id: Identifier(required=True)
    applicable_product_ids: Text(required=True)  # JSON array
