"""ChatSession aggregate: one thread between a buyer and the store about a product.

Messages are append-only. Each carries a server-assigned timestamp and a
sequence number that fixes their order within the session.
"""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    HasMany,
    Identifier,
    Integer,
    Text,
)

from messaging.chat.events import ChatSessionStarted, MessageSent, MessagesRead
from messaging.domain import messaging
from shared.dates import utc_now


@messaging.entity(part_of="ChatSession")
class Message:
    sender_id = Identifier(required=True)
    content = Text(required=True)
    sent_at = DateTime(required=True)
    sequence = Integer(default=0)
    is_read = Boolean(default=False)


@messaging.aggregate
class ChatSession:
    buyer_id = Identifier(required=True)
    recipient_id = Identifier(required=True)
    product_id = Identifier(required=True)
    messages = HasMany(Message)
    created_at = DateTime()
    last_message_at = DateTime()

    @invariant.post
    def participants_must_differ(self):
        if self.buyer_id and self.buyer_id == self.recipient_id:
            raise ValidationError({"recipient_id": ["A chat needs two different participants"]})

    @property
    def participants(self) -> list[str]:
        return [str(self.buyer_id), str(self.recipient_id)]

    @property
    def last_activity(self):
        return self.last_message_at or self.created_at

    def involves(self, user_id) -> bool:
        return str(user_id) in self.participants

    def other_participant(self, user_id) -> str:
        return str(self.recipient_id) if str(user_id) == str(self.buyer_id) else str(self.buyer_id)

    def ordered_messages(self) -> list[Message]:
        return sorted(self.messages, key=lambda m: (m.sequence or 0, m.sent_at))

    @classmethod
    def start(cls, buyer_id, recipient_id, product_id):
        now = utc_now()
        session = cls(
            buyer_id=buyer_id,
            recipient_id=recipient_id,
            product_id=product_id,
            created_at=now,
        )
        session.raise_(
            ChatSessionStarted(
                session_id=session.id,
                buyer_id=buyer_id,
                recipient_id=recipient_id,
                product_id=product_id,
                started_at=now,
            )
        )
        return session

    def send(self, sender_id, content) -> Message:
        if not self.involves(sender_id):
            raise ValidationError({"sender_id": ["Only participants can post in this chat"]})

        content = (content or "").strip()
        if not content:
            raise ValidationError({"content": ["Message content cannot be empty"]})

        now = utc_now()
        message = Message(
            sender_id=sender_id,
            content=content,
            sent_at=now,
            sequence=len(self.messages),
        )
        self.add_messages(message)
        self.last_message_at = now

        self.raise_(
            MessageSent(
                session_id=self.id,
                message_id=message.id,
                sender_id=sender_id,
                recipient_id=self.other_participant(sender_id),
                product_id=self.product_id,
                content=content,
                sent_at=now,
            )
        )
        return message

    def mark_read(self, reader_id) -> int:
        """Mark everything the other participant sent as read; returns how many changed."""
        if not self.involves(reader_id):
            raise ValidationError({"reader_id": ["Only participants can read this chat"]})

        unread = [m for m in self.messages if str(m.sender_id) != str(reader_id) and not m.is_read]
        for message in unread:
            message.is_read = True

        if unread:
            self.raise_(
                MessagesRead(
                    session_id=self.id,
                    reader_id=reader_id,
                    read_count=len(unread),
                    read_at=utc_now(),
                )
            )
        return len(unread)


@messaging.repository(part_of=ChatSession)
class ChatSessionRepository:
    def for_user(self, user_id) -> list[ChatSession]:
        """Sessions the user takes part in, most recent activity first."""
        user_id = str(user_id)
        as_buyer = self._dao.query.filter(buyer_id=user_id).all().items
        as_recipient = self._dao.query.filter(recipient_id=user_id).all().items
        sessions = {str(s.id): s for s in [*as_buyer, *as_recipient]}
        return sorted(sessions.values(), key=lambda s: s.last_activity, reverse=True)

    def for_product_and_user(self, product_id, user_id) -> list[ChatSession]:
        return [s for s in self.for_user(user_id) if str(s.product_id) == str(product_id)]
