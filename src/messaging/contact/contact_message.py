"""ContactMessage aggregate: a message sent through the storefront contact form."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, Text

from messaging.domain import messaging
from shared.dates import utc_now


@messaging.aggregate
class ContactMessage:
    user_id = Identifier()  # set when the sender is signed in
    name = String(required=True, max_length=150)
    email = String(required=True, max_length=254)
    phone = String(max_length=30)
    title = String(max_length=255)
    message = Text(required=True)
    created_at = DateTime(default=utc_now)

    @invariant.post
    def email_must_look_valid(self):
        email = self.email or ""
        local, _, domain = email.partition("@")
        if not local or not domain:
            raise ValidationError({"email": ["Email address is not valid"]})
