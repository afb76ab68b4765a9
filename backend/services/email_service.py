"""
Outbound email relay for contact-form submissions.

Posts the submission to the EmailJS REST API, which forwards it to the
support mailbox. Sending is best-effort: callers schedule it in the
background and a failure here never affects saving the message.
"""
import logging
from typing import Optional

import httpx

from config import (
    EMAILJS_API_URL, EMAILJS_SERVICE_ID, EMAILJS_TEMPLATE_ID, EMAILJS_USER_ID,
    SUPPORT_MAILBOX_NAME, EMAIL_TIMEOUT_SECONDS
)

logger = logging.getLogger(__name__)


class EmailRelayError(Exception):
    """Error from the email relay API."""

    def __init__(self, message: str, status_code: int = 0):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class EmailRelay:
    """Client for the EmailJS send endpoint."""

    def __init__(
        self,
        api_url: str = EMAILJS_API_URL,
        service_id: str = EMAILJS_SERVICE_ID,
        template_id: str = EMAILJS_TEMPLATE_ID,
        user_id: str = EMAILJS_USER_ID,
        to_name: str = SUPPORT_MAILBOX_NAME,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_url = api_url
        self.service_id = service_id
        self.template_id = template_id
        self.user_id = user_id
        self.to_name = to_name
        self._client = client

    @property
    def enabled(self) -> bool:
        return bool(self.service_id and self.template_id and self.user_id)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=EMAIL_TIMEOUT_SECONDS)
        return self._client

    def build_payload(self, name: str, email: str, message: str) -> dict:
        return {
            "service_id": self.service_id,
            "template_id": self.template_id,
            "user_id": self.user_id,
            "template_params": {
                "from_name": name,
                "from_email": email,
                "message": message,
                "to_name": self.to_name,
            },
        }

    async def send_contact_message(self, name: str, email: str, message: str) -> bool:
        """
        Relay one contact submission.

        Returns:
            True when the relay accepted it, False when sending is disabled

        Raises:
            EmailRelayError: the relay rejected the request or was unreachable
        """
        if not self.enabled:
            logger.info("Email relay not configured; skipping contact notification")
            return False

        try:
            response = await self._get_client().post(
                self.api_url, json=self.build_payload(name, email, message)
            )
        except httpx.HTTPError as e:
            raise EmailRelayError(f"Email relay unreachable: {e}")

        if not response.is_success:
            raise EmailRelayError(
                f"HTTP {response.status_code}: {response.text}",
                status_code=response.status_code
            )
        return True

    async def aclose(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None


# Singleton instance for production use
email_relay = EmailRelay()
