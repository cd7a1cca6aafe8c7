"""Product details management — command and handler."""

import json

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product
from catalogue.shared.images import collect_images


@catalogue.command(part_of="Product")
class UpdateProductDetails:
    product_id: Identifier(required=True)
    name: String(max_length=255)
    description: Text()
    price: Float()
    discount: Float()
    quantity: Integer()
    categories: Text()  # JSON array, replaces the current set
    uploaded_files: Text()
    image_links: Text()


@catalogue.command_handler(part_of=Product)
class ManageProductDetailsHandler:
    @handle(UpdateProductDetails)
    def update_details(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        product.update_details(
            name=command.name,
            description=command.description,
            price=command.price,
            discount=command.discount,
            quantity=command.quantity,
            categories=json.loads(command.categories) if command.categories is not None else None,
        )

        uploads = json.loads(command.uploaded_files) if command.uploaded_files else []
        product.append_images(collect_images("products", uploads=uploads, links=command.image_links))

        repo.add(product)
        return str(product.id)
