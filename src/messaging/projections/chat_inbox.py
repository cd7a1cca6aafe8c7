"""ChatInbox: per-participant summary of each chat session."""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, Integer, Text
from protean.utils.globals import current_domain

from messaging.chat.events import ChatSessionStarted, MessageSent, MessagesRead
from messaging.chat.session import ChatSession
from messaging.domain import messaging

PREVIEW_LENGTH = 120


@messaging.projection
class ChatInbox:
    inbox_id = Identifier(identifier=True, required=True)  # "<session_id>:<user_id>"
    session_id = Identifier(required=True)
    user_id = Identifier(required=True)
    counterpart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    last_message = Text()
    last_sender_id = Identifier()
    last_message_at = DateTime()
    message_count = Integer(default=0)
    unread_count = Integer(default=0)
    started_at = DateTime()


def inbox_key(session_id, user_id) -> str:
    return f"{session_id}:{user_id}"


def _preview(content: str) -> str:
    if len(content) <= PREVIEW_LENGTH:
        return content
    return content[: PREVIEW_LENGTH - 1] + "…"


@messaging.projector(projector_for=ChatInbox, aggregates=[ChatSession])
class ChatInboxProjector:
    @on(ChatSessionStarted)
    def on_session_started(self, event):
        repo = current_domain.repository_for(ChatInbox)
        for user_id, counterpart_id in (
            (event.buyer_id, event.recipient_id),
            (event.recipient_id, event.buyer_id),
        ):
            repo.add(
                ChatInbox(
                    inbox_id=inbox_key(event.session_id, user_id),
                    session_id=event.session_id,
                    user_id=user_id,
                    counterpart_id=counterpart_id,
                    product_id=event.product_id,
                    started_at=event.started_at,
                )
            )

    @on(MessageSent)
    def on_message_sent(self, event):
        repo = current_domain.repository_for(ChatInbox)
        for user_id in (event.sender_id, event.recipient_id):
            try:
                entry = repo.get(inbox_key(event.session_id, user_id))
            except ObjectNotFoundError:
                continue

            entry.last_message = _preview(event.content)
            entry.last_sender_id = event.sender_id
            entry.last_message_at = event.sent_at
            entry.message_count = (entry.message_count or 0) + 1
            if str(user_id) != str(event.sender_id):
                entry.unread_count = (entry.unread_count or 0) + 1
            repo.add(entry)

    @on(MessagesRead)
    def on_messages_read(self, event):
        repo = current_domain.repository_for(ChatInbox)
        try:
            entry = repo.get(inbox_key(event.session_id, event.reader_id))
        except ObjectNotFoundError:
            return

        entry.unread_count = 0
        repo.add(entry)
