"""
Contact message service for the App Store site API.

Handles visitor submissions from the contact form and the admin-side
read/reply mutations on stored messages.
"""
import logging

from email_validator import validate_email, EmailNotValidError

from services.errors import NotFoundError, StoreError, ValidationError
from utils import spawn_background, to_object_id, utcnow

logger = logging.getLogger(__name__)


class MessageService:
    """Service for contact messages."""

    def __init__(
        self,
        messages_collection=None,
        activity=None,
        email_relay=None
    ):
        """
        Initialize MessageService with optional dependency injection.
        """
        if messages_collection is None:
            from database import messages_collection as default_messages
            messages_collection = default_messages
        if activity is None:
            from services.activity_service import activity_service
            activity = activity_service
        if email_relay is None:
            from services.email_service import email_relay as default_relay
            email_relay = default_relay
        self.messages = messages_collection
        self.activity = activity
        self.email_relay = email_relay

    # =========================================================================
    # Visitor submission
    # =========================================================================

    @staticmethod
    def validate_submission(name: str, email: str, message: str) -> dict:
        """
        Check the contact form fields before any network call.

        Returns:
            The cleaned fields

        Raises:
            ValidationError: a field is empty or the email is malformed
        """
        name = (name or "").strip()
        email = (email or "").strip()
        message = (message or "").strip()

        if not name or not email or not message:
            raise ValidationError("name, email and message are required")

        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValidationError(str(e), message_key="errors.invalidEmail")

        return {"name": name, "email": email, "message": message}

    async def submit(self, name: str, email: str, message: str) -> dict:
        """
        Store a contact message and relay it to the support mailbox.

        The relay runs in the background after the insert; its outcome does
        not change the result.

        Raises:
            ValidationError: invalid form fields
            StoreError: the message could not be saved
        """
        fields = self.validate_submission(name, email, message)

        doc = {
            **fields,
            "isRead": False,
            "isReplied": False,
            "createdAt": utcnow(),
        }
        try:
            result = await self.messages.insert_one(doc)
        except Exception as e:
            logger.error(f"Error saving contact message: {e}")
            raise StoreError(str(e), message_key="contact.error")
        doc["_id"] = result.inserted_id

        spawn_background(
            self.email_relay.send_contact_message(fields["name"], fields["email"], fields["message"]),
            name="contact-email"
        )
        return doc

    # =========================================================================
    # Admin reads and mutations
    # =========================================================================

    async def get(self, message_id: str) -> dict:
        oid = to_object_id(message_id)
        try:
            message = await self.messages.find_one({"_id": oid}) if oid else None
        except Exception as e:
            logger.error(f"Error loading message {message_id}: {e}")
            raise StoreError(str(e), message_key="notify.messageError")
        if not message:
            raise NotFoundError("message", message_id)
        return message

    async def mark_read(self, message_id: str, admin: dict, is_read: bool = True) -> dict:
        message = await self.get(message_id)
        try:
            await self.messages.update_one({"_id": message["_id"]}, {"$set": {"isRead": is_read}})
        except Exception as e:
            logger.error(f"Error updating message {message_id}: {e}")
            raise StoreError(str(e), message_key="notify.messageError")

        self.activity.record_in_background(
            admin,
            "mark_message_read" if is_read else "mark_message_unread",
            "messages",
            f"Message from {message['email']} marked {'read' if is_read else 'unread'}",
            resource_id=message_id
        )
        message["isRead"] = is_read
        return message

    async def reply(self, message_id: str, text: str, admin: dict) -> dict:
        text = (text or "").strip()
        if not text:
            raise ValidationError("reply message is required")

        message = await self.get(message_id)
        reply = {"message": text, "sentAt": utcnow(), "sentBy": admin.get("email")}
        try:
            await self.messages.update_one(
                {"_id": message["_id"]},
                {"$set": {"reply": reply, "isReplied": True, "isRead": True}}
            )
        except Exception as e:
            logger.error(f"Error replying to message {message_id}: {e}")
            raise StoreError(str(e), message_key="notify.messageError")

        self.activity.record_in_background(
            admin, "reply_message", "messages", f"Replied to {message['email']}", resource_id=message_id
        )
        message.update({"reply": reply, "isReplied": True, "isRead": True})
        return message


# Singleton instance for production use
message_service = MessageService()
