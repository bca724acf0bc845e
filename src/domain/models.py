"""
Data models for the subscription domain.

These type-safe data structures define clear contracts between components.
SubscriberName and SubscriberEmail validate on construction, so an invalid
instance can never exist.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from .validation import is_valid_email, is_valid_name

INVITED_STATUS = 'invited'


# ============================================================================
# Validation Errors
# ============================================================================

class SubscriberValidationError(ValueError):
    """Raised when submitted subscriber data fails validation."""

    def __init__(self, message: str, value: str):
        super().__init__(message)
        self.value = value


class InvalidNameError(SubscriberValidationError):
    """Raised when a subscriber name fails name validation."""
    pass


class InvalidEmailError(SubscriberValidationError):
    """Raised when a subscriber email fails email validation."""
    pass


# ============================================================================
# Value Objects
# ============================================================================

@dataclass(frozen=True)
class SubscriberName:
    """
    Validated subscriber name.

    Attributes:
        value: The name exactly as submitted (not trimmed)
    """
    value: str

    def __post_init__(self):
        if not is_valid_name(self.value):
            raise InvalidNameError(f"{self.value!r} failed name validation", self.value)

    @classmethod
    def parse(cls, raw: str) -> 'SubscriberName':
        """
        Parse a raw string into a SubscriberName.

        Raises:
            InvalidNameError: If the name is empty, too long, or contains
                forbidden characters
        """
        return cls(raw)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SubscriberEmail:
    """
    Validated subscriber email address.

    Attributes:
        value: The address exactly as submitted
    """
    value: str

    def __post_init__(self):
        if not is_valid_email(self.value):
            raise InvalidEmailError(f"{self.value!r} failed email validation", self.value)

    @classmethod
    def parse(cls, raw: str) -> 'SubscriberEmail':
        """
        Parse a raw string into a SubscriberEmail.

        Raises:
            InvalidEmailError: If the string is not a well-formed address
        """
        return cls(raw)

    def __str__(self) -> str:
        return self.value


# ============================================================================
# Submission and Aggregates
# ============================================================================

@dataclass
class SubscriptionFormData:
    """Raw form fields as received at the HTTP boundary."""
    name: str
    email: str


@dataclass(frozen=True)
class SubscriberDetails:
    """
    A validated subscriber.

    Attributes:
        name: Validated subscriber name
        email: Validated subscriber email
    """
    name: SubscriberName
    email: SubscriberEmail

    @classmethod
    def from_form(cls, form: SubscriptionFormData) -> 'SubscriberDetails':
        """
        Validate raw form data into SubscriberDetails.

        The name is checked before the email; when both are invalid the
        name error is the one raised.

        Raises:
            InvalidNameError: If the name is invalid
            InvalidEmailError: If the name is valid but the email is not
        """
        name = SubscriberName.parse(form.name)
        email = SubscriberEmail.parse(form.email)
        return cls(name=name, email=email)


@dataclass(frozen=True)
class SubscriptionRecord:
    """
    A subscription as persisted in the datastore.

    Attributes:
        subscriber_id: Identifier generated by the workflow
        email: Subscriber email address
        name: Subscriber name
        subscribed_at: Timezone-aware UTC time of the submission
        status: Lifecycle status ("invited" until confirmed)
    """
    subscriber_id: uuid.UUID
    email: str
    name: str
    subscribed_at: datetime
    status: str = INVITED_STATUS

    @classmethod
    def new(cls, details: SubscriberDetails, subscribed_at: datetime) -> 'SubscriptionRecord':
        """Create an invited record with a freshly generated identifier."""
        return cls(
            subscriber_id=uuid.uuid4(),
            email=details.email.value,
            name=details.name.value,
            subscribed_at=subscribed_at,
        )


# ============================================================================
# Workflow Result
# ============================================================================

class SubscriptionOutcome(Enum):
    """Terminal states of a subscription submission."""
    ACCEPTED = 'accepted'
    REJECTED_INVALID_INPUT = 'rejected_invalid_input'
    FAILED_PERSISTENCE = 'failed_persistence'
    FAILED_NOTIFICATION = 'failed_notification'


@dataclass
class SubscriptionResult:
    """
    Result of processing one subscription submission.

    This explicit result type makes success/failure handling clear
    and prevents exceptions from being used for control flow.

    Attributes:
        outcome: Which terminal state the submission reached
        subscriber_id: Identifier of the persisted record (if persisted)
        error: Exception that caused a non-accepted outcome
        error_message: Error description (if processing failed)
    """
    outcome: SubscriptionOutcome
    subscriber_id: Optional[uuid.UUID] = None
    error: Optional[Exception] = None
    error_message: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.outcome is SubscriptionOutcome.ACCEPTED

    @property
    def is_client_error(self) -> bool:
        """True when the submission itself was at fault, not infrastructure."""
        return self.outcome is SubscriptionOutcome.REJECTED_INVALID_INPUT

    def __repr__(self) -> str:
        """Human-readable representation for logging."""
        if self.accepted:
            return f"SubscriptionResult(outcome=accepted, subscriber_id={self.subscriber_id})"
        else:
            return f"SubscriptionResult(outcome={self.outcome.value}, error={self.error_message})"
