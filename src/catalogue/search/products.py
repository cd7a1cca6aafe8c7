"""Product search and category listing."""

from dataclasses import dataclass

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from catalogue.product.product import Product
from catalogue.search import get_search_index
from shared.config import config


@dataclass(frozen=True)
class SearchResult:
    results: list[dict]
    total: int
    page: int
    limit: int


def _positive(value, field: str, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError({field: [f"{field} must be a positive integer"]}) from None
    if number < 1:
        raise ValidationError({field: [f"{field} must be a positive integer"]})
    return number


def search_products(query: str | None, page=None, limit=None) -> SearchResult:
    if not query or not query.strip():
        raise ValidationError({"q": ["Search query is required"]})

    page = _positive(page, "page", 1)
    limit = min(_positive(limit, "limit", config.SEARCH_DEFAULT_LIMIT), config.SEARCH_MAX_LIMIT)

    found = get_search_index().search(query.strip(), offset=(page - 1) * limit, limit=limit)
    return SearchResult(results=found.hits, total=found.estimated_total, page=page, limit=limit)


def products_in_category(category_id: str | None) -> list[Product]:
    if not category_id or not str(category_id).strip():
        raise ValidationError({"category_id": ["Category id is required"]})

    products = current_domain.repository_for(Product)._dao.query.all().items
    return [product for product in products if product.in_category(category_id)]
