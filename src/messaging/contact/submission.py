"""SubmitContactMessage — command and handler."""

from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from messaging.contact.contact_message import ContactMessage
from messaging.domain import logger, messaging


@messaging.command(part_of="ContactMessage")
class SubmitContactMessage:
    user_id = Identifier()
    name = String(required=True, max_length=150)
    email = String(required=True, max_length=254)
    phone = String(max_length=30)
    title = String(max_length=255)
    message = Text(required=True)


@messaging.command_handler(part_of=ContactMessage)
class SubmitContactMessageHandler:
    @handle(SubmitContactMessage)
    def submit_contact_message(self, command):
        contact = ContactMessage(
            user_id=command.user_id,
            name=command.name.strip(),
            email=command.email.strip(),
            phone=command.phone,
            title=command.title,
            message=command.message,
        )
        current_domain.repository_for(ContactMessage).add(contact)

        logger.info("Contact message received", contact_id=str(contact.id), user_id=command.user_id)
        return str(contact.id)
