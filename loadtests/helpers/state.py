"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state; nothing is shared
between users. State tracks entity IDs returned by creation endpoints so
follow-up operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class ProductState:
    """Tracks state for a single simulated product lifecycle."""

    product_id: str | None = None
    view_count: int = 0
    sell_count: int = 0
    liked: bool = False


@dataclass
class SaleEventState:
    """Tracks state for a sale event campaign and its enrolled products."""

    event_id: str | None = None
    product_ids: list[str] = field(default_factory=list)
    applicable_product_ids: list[str] = field(default_factory=list)
    window: tuple[str, str] | None = None


@dataclass
class ChatState:
    """Tracks state for a buyer's conversation with the store."""

    buyer_id: str | None = None
    product_id: str | None = None
    chat_id: str | None = None
    message_count: int = 0
