"""
Environment configuration for the subscription Lambda.

All settings come from environment variables (set in the SAM template or
the Lambda console) and are validated once by load_settings().
"""

import logging
import os
from dataclasses import dataclass

from domain.validation import is_valid_email

logger = logging.getLogger(__name__)

DEFAULT_EMAIL_TIMEOUT_SECONDS = 10.0


class ConfigurationError(Exception):
    """Raised when module configuration is invalid or missing."""
    pass


@dataclass(frozen=True)
class Settings:
    """
    Validated runtime settings.

    Attributes:
        subscriptions_table_name: DynamoDB table for subscription records
        email_base_url: Email provider base URL (no trailing slash)
        email_sender_address: Address confirmation emails are sent from
        email_authorization_token: Email provider server token
        email_timeout_seconds: Per-request timeout for the email provider
        environment: Deployment environment name (dev, prod, ...)
        log_level: Root logger level name
        aws_region: Region for AWS clients
    """
    subscriptions_table_name: str
    email_base_url: str
    email_sender_address: str
    email_authorization_token: str
    email_timeout_seconds: float = DEFAULT_EMAIL_TIMEOUT_SECONDS
    environment: str = 'dev'
    log_level: str = 'INFO'
    aws_region: str = 'us-west-2'


def _require(name: str) -> str:
    """Read a required environment variable."""
    value = os.environ.get(name, '').strip()
    if not value:
        raise ConfigurationError(
            f"{name} environment variable is required but not set. "
            f"Please configure this in your SAM template or Lambda environment."
        )
    return value


def _read_timeout() -> float:
    raw = os.environ.get('EMAIL_TIMEOUT_SECONDS', '').strip()
    if not raw:
        return DEFAULT_EMAIL_TIMEOUT_SECONDS

    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigurationError(f"EMAIL_TIMEOUT_SECONDS must be a number, got: '{raw}'")

    if timeout <= 0:
        raise ConfigurationError(f"EMAIL_TIMEOUT_SECONDS must be positive, got: {timeout}")
    return timeout


def load_settings() -> Settings:
    """
    Read and validate settings from environment variables.

    Returns:
        Settings: The validated settings

    Raises:
        ConfigurationError: If a required variable is missing or invalid
    """
    email_base_url = _require('EMAIL_BASE_URL').rstrip('/')
    if not email_base_url.startswith(('http://', 'https://')):
        raise ConfigurationError(
            f"EMAIL_BASE_URL has invalid format. "
            f"Expected URL starting with 'http://' or 'https://', "
            f"got: '{email_base_url[:50]}'"
        )

    email_sender_address = _require('EMAIL_SENDER_ADDRESS')
    if not is_valid_email(email_sender_address):
        raise ConfigurationError(f"EMAIL_SENDER_ADDRESS is not a valid email: '{email_sender_address}'")

    settings = Settings(
        subscriptions_table_name=_require('SUBSCRIPTIONS_TABLE_NAME'),
        email_base_url=email_base_url,
        email_sender_address=email_sender_address,
        email_authorization_token=_require('EMAIL_AUTHORIZATION_TOKEN'),
        email_timeout_seconds=_read_timeout(),
        environment=os.environ.get('ENVIRONMENT', 'dev'),
        log_level=os.environ.get('LOG_LEVEL', 'INFO').upper(),
        aws_region=os.environ.get('AWS_REGION', os.environ.get('AWS_DEFAULT_REGION', 'us-west-2')),
    )

    logger.info(
        f"Settings loaded: environment={settings.environment}, "
        f"table={settings.subscriptions_table_name}, email_base_url={settings.email_base_url}"
    )
    return settings
