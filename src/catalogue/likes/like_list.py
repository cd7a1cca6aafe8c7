"""LikeList aggregate: the products a user has liked."""

import json

from protean.exceptions import InvalidOperationError, ObjectNotFoundError
from protean.fields import DateTime, Identifier, Text

from catalogue.domain import catalogue
from shared.dates import utc_now


def like_list_id(user_id) -> str:
    return f"likes-{user_id}"


@catalogue.aggregate
class LikeList:
    user_id: Identifier(required=True)
    products: Text()  # JSON array of product ids, each at most once
    created_at: DateTime(default=utc_now)
    updated_at: DateTime(default=utc_now)

    @classmethod
    def start(cls, user_id) -> "LikeList":
        """One list per user: the identity is derived from the user id."""
        return cls(id=like_list_id(user_id), user_id=str(user_id))

    @property
    def product_ids(self) -> list[str]:
        return json.loads(self.products) if self.products else []

    def contains(self, product_id) -> bool:
        return str(product_id) in self.product_ids

    def like(self, product_id):
        if self.contains(product_id):
            raise InvalidOperationError({"product_id": ["You have already liked this product"]})
        self.products = json.dumps([*self.product_ids, str(product_id)])
        self.updated_at = utc_now()

    def unlike(self, product_id):
        if not self.contains(product_id):
            raise InvalidOperationError({"product_id": ["Product is not in your like list"]})
        self.products = json.dumps([pid for pid in self.product_ids if pid != str(product_id)])
        self.updated_at = utc_now()


@catalogue.repository(part_of=LikeList)
class LikeListRepository:
    def for_user(self, user_id) -> LikeList | None:
        try:
            return self.get(like_list_id(user_id))
        except ObjectNotFoundError:
            return None
