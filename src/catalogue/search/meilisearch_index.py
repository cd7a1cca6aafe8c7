"""Search adapter backed by a Meilisearch server.

Documents share the shape produced by ``product_document`` so both adapters
return interchangeable hits.
"""

import meilisearch
import structlog

from catalogue.search.port import ProductSearchIndex, SearchPage
from catalogue.search.repository_index import product_document

logger = structlog.get_logger(__name__)


class MeilisearchIndex(ProductSearchIndex):
    def __init__(self, url: str = "", api_key: str | None = None, index_name: str = "products", client=None):
        self.index_name = index_name
        self._client = client or meilisearch.Client(url, api_key)

    @property
    def index(self):
        return self._client.index(self.index_name)

    def search(self, query: str, offset: int, limit: int) -> SearchPage:
        result = self.index.search(query, {"offset": offset, "limit": limit})
        hits = list(result.get("hits", []))
        return SearchPage(hits=hits, estimated_total=result.get("estimatedTotalHits", len(hits)))

    def index_products(self, products) -> None:
        documents = [product_document(product) for product in products]
        if documents:
            self.index.add_documents(documents, primary_key="id")
            logger.info("Products indexed", index=self.index_name, count=len(documents))

    def remove_product(self, product_id: str) -> None:
        self.index.delete_document(str(product_id))
