"""Live delivery of chat messages over the real-time channel.

Runs after the message is committed. Failures here never affect the stored
history; clients reconcile from it on reconnect.
"""

import structlog
from protean.utils.mixins import handle

from messaging.chat.events import MessageSent
from messaging.chat.session import ChatSession
from messaging.domain import messaging
from messaging.realtime import get_channel

logger = structlog.get_logger(__name__)


@messaging.event_handler(part_of=ChatSession)
class MessageDeliveryHandler:
    @handle(MessageSent)
    def on_message_sent(self, event: MessageSent) -> None:
        payload = {
            "session_id": str(event.session_id),
            "product_id": str(event.product_id),
            "message": {
                "id": str(event.message_id),
                "sender_id": str(event.sender_id),
                "content": event.content,
                "sent_at": event.sent_at.isoformat(),
                "is_read": False,
            },
        }
        reached = get_channel().publish(
            str(event.session_id),
            [str(event.sender_id), str(event.recipient_id)],
            "receive-message",
            payload,
        )
        logger.debug("Message pushed", session_id=str(event.session_id), connections=reached)
