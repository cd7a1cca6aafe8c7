"""SendMessage and MarkSessionRead — commands and handler."""

from protean.fields import Identifier, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from messaging.chat.session import ChatSession
from messaging.domain import messaging


@messaging.command(part_of="ChatSession")
class SendMessage:
    session_id = Identifier(required=True)
    sender_id = Identifier(required=True)
    content = Text()


@messaging.command(part_of="ChatSession")
class MarkSessionRead:
    session_id = Identifier(required=True)
    reader_id = Identifier(required=True)


@messaging.command_handler(part_of=ChatSession)
class ChatMessagesHandler:
    @handle(SendMessage)
    def send_message(self, command):
        repo = current_domain.repository_for(ChatSession)
        session = repo.get(command.session_id)
        message = session.send(command.sender_id, command.content)
        repo.add(session)
        return str(message.id)

    @handle(MarkSessionRead)
    def mark_session_read(self, command):
        repo = current_domain.repository_for(ChatSession)
        session = repo.get(command.session_id)
        count = session.mark_read(command.reader_id)
        repo.add(session)
        return count
