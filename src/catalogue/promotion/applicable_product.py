"""ApplicableProduct: one product's discount window within a SaleEvent."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier

from catalogue.domain import catalogue
from shared.dates import utc_now


@catalogue.aggregate
class ApplicableProduct:
    event_id: Identifier(required=True)
    product_id: Identifier(required=True)
    discount: Float(required=True, min_value=0.0, max_value=100.0)
    start_date: DateTime(required=True)
    end_date: DateTime(required=True)
    created_at: DateTime(default=utc_now)

    @invariant.post
    def window_must_be_ordered(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValidationError({"end_date": ["End date must not be before start date"]})

    def is_active_at(self, instant) -> bool:
        """Inclusive at both ends."""
        return self.start_date <= instant <= self.end_date

    def matches_slot(self, start, end) -> bool:
        return self.start_date == start and self.end_date == end


@catalogue.repository(part_of=ApplicableProduct)
class ApplicableProductRepository:
    """Lookups over discount windows.

    Filtering is done on ids in the store; window comparisons happen here so
    they behave the same on every provider.
    """

    def for_event(self, event_id) -> list[ApplicableProduct]:
        return self._dao.query.filter(event_id=str(event_id)).all().items

    def for_product(self, product_id) -> list[ApplicableProduct]:
        return self._dao.query.filter(product_id=str(product_id)).all().items

    def for_event_and_products(self, event_id, product_ids) -> list[ApplicableProduct]:
        wanted = {str(product_id) for product_id in product_ids}
        return [row for row in self.for_event(event_id) if str(row.product_id) in wanted]

    def in_slot(self, event_id, start, end) -> list[ApplicableProduct]:
        return [row for row in self.for_event(event_id) if row.matches_slot(start, end)]

    def active_for_product(self, product_id, instant=None) -> list[ApplicableProduct]:
        instant = instant or utc_now()
        return [row for row in self.for_product(product_id) if row.is_active_at(instant)]

    def delete_all(self, rows) -> int:
        for row in rows:
            self._dao.delete(row)
        return len(rows)
