"""StartChatSession: a buyer opens a conversation about a product.

The store side is a fixed admin account unless a recipient is given.
Several sessions for the same pair and product may exist.
"""

from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from messaging.chat.session import ChatSession
from messaging.domain import logger, messaging
from shared.config import config


@messaging.command(part_of="ChatSession")
class StartChatSession:
    sender_id = Identifier(required=True)
    recipient_id = Identifier()
    product_id = Identifier(required=True)


@messaging.command_handler(part_of=ChatSession)
class StartChatSessionHandler:
    @handle(StartChatSession)
    def start_chat_session(self, command):
        session = ChatSession.start(
            buyer_id=command.sender_id,
            recipient_id=command.recipient_id or config.ADMIN_ID,
            product_id=command.product_id,
        )
        current_domain.repository_for(ChatSession).add(session)

        logger.info(
            "Chat session started",
            session_id=str(session.id),
            product_id=str(command.product_id),
        )
        return str(session.id)
