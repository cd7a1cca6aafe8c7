"""Product search index factory.

Provides get_search_index() / set_search_index() to swap implementations:
- RepositorySearchIndex scans the Product repository (default)
- MeilisearchIndex when MEILI_URL is configured
"""

from catalogue.search.port import ProductSearchIndex
from catalogue.search.repository_index import RepositorySearchIndex
from shared.config import config

_current_index: ProductSearchIndex | None = None


def get_search_index() -> ProductSearchIndex:
    """Return the current search index. Defaults to RepositorySearchIndex."""
    global _current_index
    if _current_index is None:
        if config.MEILI_URL:
            from catalogue.search.meilisearch_index import MeilisearchIndex

            _current_index = MeilisearchIndex(config.MEILI_URL, config.MEILI_API_KEY, config.MEILI_INDEX)
        else:
            _current_index = RepositorySearchIndex()
    return _current_index


def set_search_index(index: ProductSearchIndex) -> None:
    """Override the active search index (useful for tests)."""
    global _current_index
    _current_index = index


def reset_search_index() -> None:
    """Reset to default search index."""
    global _current_index
    _current_index = None
