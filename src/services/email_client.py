"""
Transactional email client.

This module sends email through a Postmark-style HTTP API: one POST to
`{base_url}/email` per message, authenticated with a server token header.

Usage:
    from services.email_client import EmailClient

    client = EmailClient(
        base_url="https://api.postmarkapp.com",
        sender=SubscriberEmail.parse("newsletter@mydomain.com"),
        authorization_token="server-token"
    )
    client.send_email(recipient, "Welcome!", "<h1>Hi</h1>", "Hi")
"""

import logging
import time
from typing import Dict, Optional

import httpx

from domain.models import SubscriberEmail

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0
AUTHORIZATION_HEADER = 'X-Postmark-Server-Token'


# ============================================================================
# Custom Exception Classes
# ============================================================================

class SendError(Exception):
    """Base class for email delivery failures."""
    pass


class SendTransportError(SendError):
    """Raised when the request never completed (timeout, DNS, connection refused)."""
    pass


class ProviderRejectedError(SendError):
    """Raised when the provider received the request and answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int, body: str = ''):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


# ============================================================================
# Client
# ============================================================================

class EmailClient:
    """
    Client for the email delivery provider.

    Holds no per-message state; one instance can be reused for every send.
    Every request is bounded by the configured timeout and is attempted
    exactly once.
    """

    def __init__(
        self,
        base_url: str,
        sender: SubscriberEmail,
        authorization_token: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None
    ):
        """
        Initialize the email client.

        Args:
            base_url: Provider base URL (without the /email path)
            sender: Address the emails are sent from
            authorization_token: Provider server token
            timeout_seconds: Per-request timeout, must be positive
            transport: Optional httpx transport (tests use httpx.MockTransport)

        Raises:
            ValueError: If timeout_seconds is not positive
        """
        if timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {timeout_seconds}")

        self.base_url = base_url.rstrip('/')
        self.sender = sender
        self.timeout_seconds = timeout_seconds
        self._authorization_token = authorization_token
        self._client = httpx.Client(
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport
        )

        logger.info(
            f"Email client initialized: base_url={self.base_url}, "
            f"sender={sender}, timeout={timeout_seconds}s, no retries"
        )

    def build_url(self) -> str:
        """Return the provider endpoint that accepts outbound emails."""
        return f"{self.base_url}/email"

    def build_request_payload(
        self,
        recipient: SubscriberEmail,
        subject: str,
        html_content: str,
        text_content: str
    ) -> Dict[str, str]:
        """
        Build the JSON body expected by the provider.

        Returns:
            Dict with From, To, Subject, HtmlBody and TextBody
        """
        return {
            'From': self.sender.value,
            'To': recipient.value,
            'Subject': subject,
            'HtmlBody': html_content,
            'TextBody': text_content,
        }

    def send_email(
        self,
        recipient: SubscriberEmail,
        subject: str,
        html_content: str,
        text_content: str
    ) -> None:
        """
        Send a single email through the provider.

        Args:
            recipient: Validated recipient address
            subject: Subject line
            html_content: HTML body
            text_content: Plain-text body

        Raises:
            SendTransportError: If the request could not be completed
                (including when the timeout is exceeded)
            ProviderRejectedError: If the provider answered with a non-2xx status
        """
        start_time = time.time()
        payload = self.build_request_payload(recipient, subject, html_content, text_content)

        logger.info(f"Sending email: to={recipient}, subject={subject}")

        try:
            response = self._client.post(
                self.build_url(),
                headers={AUTHORIZATION_HEADER: self._authorization_token},
                json=payload
            )
        except httpx.TimeoutException as e:
            logger.error(
                f"Email request timed out after {self.timeout_seconds}s: "
                f"to={recipient}, error={e}"
            )
            raise SendTransportError(
                f"Email provider did not respond within {self.timeout_seconds}s"
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Email request failed: to={recipient}, error={e}")
            raise SendTransportError(f"Could not reach email provider: {e}") from e

        if not response.is_success:
            logger.error(
                f"Email provider rejected message: to={recipient}, "
                f"status={response.status_code}, body={response.text[:200]}"
            )
            raise ProviderRejectedError(
                f"Email provider responded with status {response.status_code}",
                status_code=response.status_code,
                body=response.text
            )

        elapsed = time.time() - start_time
        logger.info(f"Email sent: to={recipient}, status={response.status_code}, elapsed={elapsed:.3f}s")

    def close(self) -> None:
        """Release the underlying HTTP connection pool."""
        self._client.close()

    def __enter__(self) -> 'EmailClient':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
