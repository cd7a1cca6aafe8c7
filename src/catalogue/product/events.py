"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from catalogue.domain import catalogue


@catalogue.event(part_of="Product")
class ProductCreated:
    """A new product was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    price: Float(required=True)
    categories: Text()
    image_count: Integer(default=0)
    created_at: DateTime(required=True)


@catalogue.event(part_of="Product")
class ProductDetailsUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    name: String()
    price: Float()
    discount: Float()
    quantity: Integer()
    categories: Text()


@catalogue.event(part_of="Product")
class ProductImagesAdded:
    """Images were appended after the product's existing ones."""

    __version__ = 1

    product_id: Identifier(required=True)
    urls: Text(required=True)  # JSON array
    image_count: Integer(required=True)


@catalogue.event(part_of="Product")
class ProductLiked:
    __version__ = 1

    product_id: Identifier(required=True)
    user_id: Identifier(required=True)
    like_count: Integer(required=True)


@catalogue.event(part_of="Product")
class ProductUnliked:
    __version__ = 1

    product_id: Identifier(required=True)
    user_id: Identifier(required=True)
    like_count: Integer(required=True)


@catalogue.event(part_of="Product")
class ProductSold:
    """One unit of the product was sold."""

    __version__ = 1

    product_id: Identifier(required=True)
    sell_count: Integer(required=True)
    remaining: Integer(required=True)
