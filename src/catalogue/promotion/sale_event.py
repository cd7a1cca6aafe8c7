"""SaleEvent aggregate: a promotional campaign and its enrollment manifest.

The manifest (``products``) holds ApplicableProduct ids, never product ids.
Rows stay independently addressable in the ApplicableProduct repository; the
manifest only records which of them belong to this campaign, in order.
"""

import json

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String, Text

from catalogue.domain import catalogue
from shared.dates import utc_now


@catalogue.aggregate
class SaleEvent:
    """Promotional campaign ("Event") with a time range and enrolled products."""

    name: String(required=True, max_length=255)
    description: Text(required=True)
    start_date: DateTime(required=True)
    end_date: DateTime(required=True)
    location: String(max_length=255)
    images: Text()  # JSON array of image paths/links
    products: Text()  # JSON array of ApplicableProduct ids
    created_at: DateTime(default=utc_now)
    updated_at: DateTime(default=utc_now)

    @invariant.post
    def start_must_not_be_after_end(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValidationError({"end_date": ["End date must not be before start date"]})

    @property
    def image_urls(self) -> list[str]:
        return json.loads(self.images) if self.images else []

    @property
    def applicable_product_ids(self) -> list[str]:
        return json.loads(self.products) if self.products else []

    @classmethod
    def create(cls, name, description, start_date, end_date, location=None, images=None):
        from catalogue.promotion.events import SaleEventCreated

        now = utc_now()
        sale_event = cls(
            name=name,
            description=description,
            start_date=start_date,
            end_date=end_date,
            location=location,
            images=json.dumps(list(images or [])),
            products=json.dumps([]),
            created_at=now,
            updated_at=now,
        )
        sale_event.raise_(
            SaleEventCreated(
                event_id=sale_event.id,
                name=name,
                start_date=start_date,
                end_date=end_date,
                created_at=now,
            )
        )
        return sale_event

    def update(self, name=None, description=None, start_date=None, end_date=None, location=None, images=None):
        """Apply supplied fields; a non-empty ``images`` list replaces the old one."""
        from catalogue.promotion.events import SaleEventUpdated

        with atomic_change(self):
            if name is not None:
                self.name = name
            if description is not None:
                self.description = description
            if start_date is not None:
                self.start_date = start_date
            if end_date is not None:
                self.end_date = end_date
            if location is not None:
                self.location = location
            if images:
                self.images = json.dumps(list(images))

        self.updated_at = utc_now()

        self.raise_(
            SaleEventUpdated(
                event_id=self.id,
                name=self.name,
                start_date=self.start_date,
                end_date=self.end_date,
                images_replaced=bool(images),
            )
        )

    def enroll(self, rows):
        """Append the ids of freshly created ApplicableProduct rows, in order."""
        from catalogue.promotion.events import ProductsEnrolled

        if not rows:
            return

        manifest = self.applicable_product_ids
        manifest.extend(str(row.id) for row in rows if str(row.id) not in manifest)
        self.products = json.dumps(manifest)
        self.updated_at = utc_now()

        first = rows[0]
        self.raise_(
            ProductsEnrolled(
                event_id=self.id,
                applicable_product_ids=json.dumps([str(row.id) for row in rows]),
                product_ids=json.dumps([str(row.product_id) for row in rows]),
                discount=first.discount,
                start_date=first.start_date,
                end_date=first.end_date,
            )
        )

    def withdraw(self, applicable_product_ids) -> list[str]:
        """Pull ids from the manifest and return the ones that were present."""
        from catalogue.promotion.events import ProductsWithdrawn

        to_remove = {str(ap_id) for ap_id in applicable_product_ids}
        manifest = self.applicable_product_ids
        removed = [ap_id for ap_id in manifest if ap_id in to_remove]
        if not removed:
            return []

        self.products = json.dumps([ap_id for ap_id in manifest if ap_id not in to_remove])
        self.updated_at = utc_now()

        self.raise_(
            ProductsWithdrawn(
                event_id=self.id,
                applicable_product_ids=json.dumps(removed),
            )
        )
        return removed
