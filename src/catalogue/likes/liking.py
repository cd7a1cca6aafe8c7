"""Like and unlike — commands and handler.

A like touches two aggregates: the user's LikeList (created lazily on the
first like) and the product's like counter. Both are saved in one unit of work.
"""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.likes.like_list import LikeList
from catalogue.product.product import Product


@catalogue.command(part_of="LikeList")
class LikeProduct:
    product_id: Identifier(required=True)
    user_id: Identifier(required=True)


@catalogue.command(part_of="LikeList")
class UnlikeProduct:
    product_id: Identifier(required=True)
    user_id: Identifier(required=True)


@catalogue.command_handler(part_of=LikeList)
class LikeListHandler:
    @handle(LikeProduct)
    def like_product(self, command):
        product_repo = current_domain.repository_for(Product)
        product = product_repo.get(command.product_id)

        repo = current_domain.repository_for(LikeList)
        like_list = repo.for_user(command.user_id) or LikeList.start(command.user_id)
        like_list.like(product.id)
        repo.add(like_list)

        product.record_like(command.user_id)
        product_repo.add(product)
        return product.like_count

    @handle(UnlikeProduct)
    def unlike_product(self, command):
        product_repo = current_domain.repository_for(Product)
        product = product_repo.get(command.product_id)

        repo = current_domain.repository_for(LikeList)
        like_list = repo.for_user(command.user_id) or LikeList.start(command.user_id)
        like_list.unlike(product.id)
        repo.add(like_list)

        product.record_unlike(command.user_id)
        product_repo.add(product)
        return product.like_count
