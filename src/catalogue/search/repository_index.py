"""Search adapter that scans the Product repository.

Terms are matched case-insensitively against name and description. Hits are
ranked by the number of distinct terms matched, name matches counting double,
then by name.
"""

import re

from protean.utils.globals import current_domain

from catalogue.product.product import Product
from catalogue.search.port import ProductSearchIndex, SearchPage

_TOKEN = re.compile(r"\w+", re.UNICODE)


def tokenize(text: str | None) -> list[str]:
    return [token.lower() for token in _TOKEN.findall(text or "")]


def product_document(product: Product) -> dict:
    return {
        "id": str(product.id),
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "discount": product.discount,
        "categories": product.category_ids,
        "images": product.image_urls,
    }


def score(terms: list[str], product: Product) -> int:
    name_tokens = set(tokenize(product.name))
    description_tokens = set(tokenize(product.description))
    total = 0
    for term in terms:
        if any(token.startswith(term) for token in name_tokens):
            total += 2
        elif any(token.startswith(term) for token in description_tokens):
            total += 1
    return total


class RepositorySearchIndex(ProductSearchIndex):
    def search(self, query: str, offset: int, limit: int) -> SearchPage:
        terms = list(dict.fromkeys(tokenize(query)))
        if not terms:
            return SearchPage()

        products = current_domain.repository_for(Product)._dao.query.all().items
        scored = [(score(terms, product), product) for product in products]
        matches = sorted(
            ((s, p) for s, p in scored if s > 0),
            key=lambda pair: (-pair[0], (pair[1].name or "").lower()),
        )

        page = matches[offset : offset + limit]
        return SearchPage(
            hits=[product_document(product) for _, product in page],
            estimated_total=len(matches),
        )
