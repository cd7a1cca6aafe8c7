"""Domain events for the ChatSession aggregate."""

from protean.fields import DateTime, Identifier, Integer, Text

from messaging.domain import messaging


@messaging.event(part_of="ChatSession")
class ChatSessionStarted:
    """A buyer opened a conversation with the store about a product."""

    __version__ = 1

    session_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    recipient_id = Identifier(required=True)
    product_id = Identifier(required=True)
    started_at = DateTime(required=True)


@messaging.event(part_of="ChatSession")
class MessageSent:
    __version__ = 1

    session_id = Identifier(required=True)
    message_id = Identifier(required=True)
    sender_id = Identifier(required=True)
    recipient_id = Identifier(required=True)
    product_id = Identifier(required=True)
    content = Text(required=True)
    sent_at = DateTime(required=True)


@messaging.event(part_of="ChatSession")
class MessagesRead:
    """A participant read every message the other side had sent."""

    __version__ = 1

    session_id = Identifier(required=True)
    reader_id = Identifier(required=True)
    read_count = Integer(required=True)
    read_at = DateTime(required=True)
