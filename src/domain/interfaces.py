"""
Contracts for the collaborators the subscription workflow calls into.

The workflow depends on these structural protocols rather than on the
DynamoDB and HTTP adapters, so tests can hand it any object with the
right methods.
"""

import uuid
from datetime import datetime
from typing import Protocol, runtime_checkable

from .models import SubscriberEmail


@runtime_checkable
class SubscriptionStore(Protocol):
    """Durable storage for subscription records."""

    def insert(
        self,
        subscriber_id: uuid.UUID,
        email: str,
        name: str,
        subscribed_at: datetime,
        status: str
    ) -> None:
        """Persist one record. Raises StoreError when the write is rejected or fails."""
        ...


@runtime_checkable
class EmailSender(Protocol):
    """Outbound transactional email."""

    def send_email(
        self,
        recipient: SubscriberEmail,
        subject: str,
        html_content: str,
        text_content: str
    ) -> None:
        """Send one email. Raises SendError on transport failure or provider rejection."""
        ...
