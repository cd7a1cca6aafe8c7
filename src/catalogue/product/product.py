"""Product aggregate root with Image entity."""

import json

from protean import atomic_change, invariant
from protean.exceptions import InvalidOperationError, ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Integer,
    String,
    Text,
)

from catalogue.domain import catalogue
from shared.dates import utc_now


def _dump_ids(values) -> str:
    """Serialise an ordered id list, dropping blanks and duplicates."""
    seen = []
    for value in values or []:
        value = str(value).strip()
        if value and value not in seen:
            seen.append(value)
    return json.dumps(seen)


def _load_ids(raw) -> list[str]:
    if not raw:
        return []
    return json.loads(raw)


@catalogue.entity(part_of="Product")
class Image:
    """Product image entity. ``url`` is an upload path or an external link."""

    url: String(required=True, max_length=500)
    display_order: Integer(default=0)


@catalogue.aggregate
class Product:
    """Product aggregate root."""

    name: String(required=True, max_length=255)
    description: Text()
    price: Float(required=True, min_value=0.01)
    discount: Float(default=0.0, min_value=0.0, max_value=100.0)
    quantity: Integer(default=0, min_value=0)
    like_count: Integer(default=0, min_value=0)
    view_count: Integer(default=0, min_value=0)
    sell_count: Integer(default=0, min_value=0)
    categories: Text()  # JSON array of category ids
    images: HasMany(Image)
    created_at: DateTime(default=utc_now)
    updated_at: DateTime(default=utc_now)

    @invariant.post
    def cannot_sell_more_than_quantity(self):
        if (self.sell_count or 0) > (self.quantity or 0):
            raise ValidationError({"sell_count": ["Sold count cannot exceed quantity"]})

    @property
    def category_ids(self) -> list[str]:
        return _load_ids(self.categories)

    @property
    def image_urls(self) -> list[str]:
        return [image.url for image in sorted(self.images, key=lambda i: i.display_order or 0)]

    def in_category(self, category_id) -> bool:
        return str(category_id) in self.category_ids

    @classmethod
    def create(cls, name, price, categories, description, discount, quantity, images=None):
        from catalogue.product.events import ProductCreated

        now = utc_now()
        product = cls(
            name=name,
            description=description,
            price=price,
            discount=discount,
            quantity=quantity,
            categories=_dump_ids(categories),
            created_at=now,
            updated_at=now,
        )

        for url in images or []:
            product._append_image(url)

        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=name,
                price=price,
                categories=product.categories,
                image_count=len(product.images),
                created_at=now,
            )
        )
        return product

    def _append_image(self, url):
        image = Image(url=url, display_order=len(self.images))
        self.add_images(image)
        return image

    def update_details(
        self,
        name=None,
        description=None,
        price=None,
        discount=None,
        quantity=None,
        categories=None,
    ):
        from catalogue.product.events import ProductDetailsUpdated

        with atomic_change(self):
            if name is not None:
                self.name = name
            if description is not None:
                self.description = description
            if price is not None:
                self.price = price
            if discount is not None:
                self.discount = discount
            if quantity is not None:
                self.quantity = quantity
            if categories is not None:
                self.categories = _dump_ids(categories)

        self.updated_at = utc_now()

        self.raise_(
            ProductDetailsUpdated(
                product_id=self.id,
                name=self.name,
                price=self.price,
                discount=self.discount,
                quantity=self.quantity,
                categories=self.categories,
            )
        )

    def append_images(self, urls):
        """New images go after the existing ones; nothing is replaced."""
        from catalogue.product.events import ProductImagesAdded

        urls = [url for url in urls or [] if url]
        if not urls:
            return []

        added = [self._append_image(url) for url in urls]
        self.updated_at = utc_now()

        self.raise_(
            ProductImagesAdded(
                product_id=self.id,
                urls=json.dumps(urls),
                image_count=len(self.images),
            )
        )
        return added

    def record_like(self, user_id):
        from catalogue.product.events import ProductLiked

        self.like_count = (self.like_count or 0) + 1
        self.raise_(ProductLiked(product_id=self.id, user_id=user_id, like_count=self.like_count))

    def record_unlike(self, user_id):
        from catalogue.product.events import ProductUnliked

        self.like_count = max((self.like_count or 0) - 1, 0)
        self.raise_(ProductUnliked(product_id=self.id, user_id=user_id, like_count=self.like_count))

    def record_view(self):
        self.view_count = (self.view_count or 0) + 1

    def record_sale(self):
        from catalogue.product.events import ProductSold

        if (self.sell_count or 0) >= (self.quantity or 0):
            raise InvalidOperationError({"quantity": ["Product is out of stock"]})

        self.sell_count = (self.sell_count or 0) + 1
        self.raise_(
            ProductSold(
                product_id=self.id,
                sell_count=self.sell_count,
                remaining=self.quantity - self.sell_count,
            )
        )
