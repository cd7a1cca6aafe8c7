"""Real-time channel port (abstract interface).

Delivery is at most once: a subscriber that is offline, or whose buffer is
full, misses the notification and catches up from the persisted history.
"""

from abc import ABC, abstractmethod


class RealtimeChannel(ABC):
    @abstractmethod
    def publish(self, session_id: str, recipient_ids: list[str], event: str, payload: dict) -> int:
        """Offer ``payload`` to everyone interested; returns the number of connections reached."""
        ...
