"""Messaging bounded context: buyer/store chat and contact messages.

Chat history is persisted on the ChatSession aggregate and is the source of
truth. Live delivery over the real-time channel is best effort only.
"""

import structlog
from protean.domain import Domain

messaging = Domain(name="messaging")

logger = structlog.get_logger(__name__)
