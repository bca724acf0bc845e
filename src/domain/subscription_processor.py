"""
Subscription pipeline - core business logic.

This module handles the onboarding of a new newsletter subscriber:
1. Validate the submitted name and email
2. Generate an identifier and subscription timestamp
3. Persist the record with status "invited"
4. Send the confirmation email
5. Return result (one of four outcomes)

Persistence is a precondition for notification: no email is sent for a
subscriber that was not stored. A record whose email failed is left in
place, and no step is retried.
"""

import logging
from datetime import datetime, timezone

from .interfaces import EmailSender, SubscriptionStore
from .models import (
    SubscriberDetails,
    SubscriberValidationError,
    SubscriptionFormData,
    SubscriptionOutcome,
    SubscriptionRecord,
    SubscriptionResult,
)
from services.email_client import SendError
from services.subscriptions_store import StoreError

logger = logging.getLogger(__name__)

CONFIRMATION_SUBJECT = 'Welcome to our newsletter!'
CONFIRMATION_HTML_BODY = '<h1>Welcome to our newsletter!</h1>'
CONFIRMATION_TEXT_BODY = 'Welcome to our newsletter!'


class SubscriptionProcessor:
    """
    Handles the persist-then-notify subscription pipeline.

    Holds no per-submission state; one instance serves every request.
    Returns SubscriptionResult for explicit success/failure handling.
    """

    def __init__(self, store: SubscriptionStore, email_client: EmailSender):
        """
        Initialize subscription processor.

        Args:
            store: Datastore the subscription record is inserted into
            email_client: Sender used for the confirmation email
        """
        self.store = store
        self.email_client = email_client

    def process_submission(self, form: SubscriptionFormData) -> SubscriptionResult:
        """
        Process a single subscription form submission.

        Args:
            form: Raw name and email as submitted

        Returns:
            SubscriptionResult with the outcome the submission reached
        """
        logger.info(f"Adding new subscriber: email={form.email}, name={form.name}")

        try:
            details = SubscriberDetails.from_form(form)
        except SubscriberValidationError as e:
            logger.warning(f"Rejected subscription: {e}")
            return SubscriptionResult(
                outcome=SubscriptionOutcome.REJECTED_INVALID_INPUT,
                error=e,
                error_message=str(e)
            )

        record = SubscriptionRecord.new(details, subscribed_at=datetime.now(timezone.utc))

        try:
            self._insert_subscriber(record)
        except StoreError as e:
            logger.error(f"Failed to persist subscriber {record.subscriber_id}: {e}")
            return SubscriptionResult(
                outcome=SubscriptionOutcome.FAILED_PERSISTENCE,
                error=e,
                error_message=str(e)
            )

        try:
            self._send_confirmation_email(details)
        except SendError as e:
            # Record stays persisted; reconciliation is left to a later process
            logger.error(
                f"Subscriber {record.subscriber_id} persisted but confirmation email failed: {e}"
            )
            return SubscriptionResult(
                outcome=SubscriptionOutcome.FAILED_NOTIFICATION,
                subscriber_id=record.subscriber_id,
                error=e,
                error_message=str(e)
            )

        logger.info(f"Subscriber {record.subscriber_id} added and invited")

        return SubscriptionResult(
            outcome=SubscriptionOutcome.ACCEPTED,
            subscriber_id=record.subscriber_id
        )

    def _insert_subscriber(self, record: SubscriptionRecord) -> None:
        """
        Save the subscription record to the datastore.

        Raises:
            StoreError: If the datastore rejects the write
        """
        self.store.insert(
            subscriber_id=record.subscriber_id,
            email=record.email,
            name=record.name,
            subscribed_at=record.subscribed_at,
            status=record.status
        )

    def _send_confirmation_email(self, details: SubscriberDetails) -> None:
        """
        Send the confirmation email to a newly persisted subscriber.

        Raises:
            SendError: If the email could not be delivered to the provider
        """
        logger.info(f"Sending subscriber confirmation email to {details.email}")
        self.email_client.send_email(
            details.email,
            CONFIRMATION_SUBJECT,
            CONFIRMATION_HTML_BODY,
            CONFIRMATION_TEXT_BODY
        )
