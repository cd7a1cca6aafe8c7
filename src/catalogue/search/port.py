"""Product search index port (abstract interface).

The catalogue only ever talks to this contract, so a hosted full-text engine
can replace the default repository scan without touching application code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class SearchPage:
    """One page of hits plus the engine's estimate of all matches."""

    hits: list[dict] = field(default_factory=list)
    estimated_total: int = 0


class ProductSearchIndex(ABC):
    @abstractmethod
    def search(self, query: str, offset: int, limit: int) -> SearchPage:
        """Return hits ``offset`` to ``offset + limit`` for ``query``."""
        ...
