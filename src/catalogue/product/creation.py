"""Product creation — command and handler."""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product
from catalogue.shared.images import collect_images

logger = structlog.get_logger(__name__)

REQUIRED_FIELDS = ("name", "price", "categories", "description", "discount", "quantity")


@catalogue.command(part_of="Product")
class CreateProduct:
    name: String(max_length=255)
    price: Float()
    categories: Text()  # JSON array of category ids
    description: Text()
    discount: Float()
    quantity: Integer()
    uploaded_files: Text()  # JSON array of stored file names
    image_links: Text()  # JSON array, or a single link


@catalogue.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        categories = json.loads(command.categories) if command.categories else []
        values = {
            "name": command.name,
            "price": command.price,
            "categories": categories,
            "description": command.description,
            "discount": command.discount,
            "quantity": command.quantity,
        }
        # Plain truthiness: a discount or quantity of 0 counts as missing
        missing = [field for field in REQUIRED_FIELDS if not values[field]]
        if missing:
            raise ValidationError({field: [f"{field} is required"] for field in missing})

        uploads = json.loads(command.uploaded_files) if command.uploaded_files else []
        images = collect_images("products", uploads=uploads, links=command.image_links)

        product = Product.create(images=images, **values)
        current_domain.repository_for(Product).add(product)

        logger.info("Product created", product_id=str(product.id), image_count=len(images))
        return str(product.id)
