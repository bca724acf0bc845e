"""
AWS Lambda handlers for the newsletter subscription API (API Gateway proxy events).

Thin orchestration layer that decodes the form body and delegates to
SubscriptionProcessor, then maps the outcome to an HTTP status code.
"""

import base64
import json
import logging
from typing import Dict, Any, Optional
from urllib.parse import parse_qs

from config import load_settings
from domain.models import SubscriberEmail, SubscriptionFormData, SubscriptionOutcome
from domain.subscription_processor import SubscriptionProcessor
from services.email_client import EmailClient
from services.subscriptions_store import DynamoDBSubscriptionStore

settings = load_settings()

# Configure logging
logger = logging.getLogger()
logger.setLevel(settings.log_level)

# Add console handler for local testing (AWS Lambda provides handlers automatically)
if not logger.handlers:
    console_handler = logging.StreamHandler()
    console_handler.setLevel(settings.log_level)
    formatter = logging.Formatter('%(levelname)s - %(name)s - %(message)s')
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

STATUS_CODES = {
    SubscriptionOutcome.ACCEPTED: 200,
    SubscriptionOutcome.REJECTED_INVALID_INPUT: 400,
    SubscriptionOutcome.FAILED_PERSISTENCE: 500,
    SubscriptionOutcome.FAILED_NOTIFICATION: 500,
}


def build_processor() -> SubscriptionProcessor:
    """Wire the processor to DynamoDB and the email provider from settings."""
    store = DynamoDBSubscriptionStore(
        table_name=settings.subscriptions_table_name,
        region_name=settings.aws_region
    )
    email_client = EmailClient(
        base_url=settings.email_base_url,
        sender=SubscriberEmail.parse(settings.email_sender_address),
        authorization_token=settings.email_authorization_token,
        timeout_seconds=settings.email_timeout_seconds
    )
    return SubscriptionProcessor(store=store, email_client=email_client)


# Initialize processor once at module level (reused across invocations)
subscription_processor = build_processor()


def _response(status_code: int, body: Dict[str, Any]) -> Dict[str, Any]:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(body)
    }


def parse_form_body(event: Dict[str, Any]) -> Optional[SubscriptionFormData]:
    """
    Decode an x-www-form-urlencoded request body into SubscriptionFormData.

    Args:
        event: API Gateway proxy event

    Returns:
        SubscriptionFormData, or None if the name or email field is missing
    """
    body = event.get('body') or ''
    if event.get('isBase64Encoded'):
        body = base64.b64decode(body).decode('utf-8')

    fields = parse_qs(body, keep_blank_values=True)
    if 'name' not in fields or 'email' not in fields:
        return None

    return SubscriptionFormData(name=fields['name'][0], email=fields['email'][0])


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Handle POST /subscriptions.

    Expected body (application/x-www-form-urlencoded):
        name=Dylan%20Kirby&email=dk%40gmail.com

    Returns:
        200 when subscribed and invited, 400 for missing or invalid fields,
        500 when storage or the confirmation email failed
    """
    logger.info(f"Environment: {settings.environment}")

    try:
        form = parse_form_body(event)
    except (ValueError, UnicodeDecodeError) as e:
        logger.warning(f"Could not decode request body: {e}")
        return _response(400, {'error': 'Request body could not be decoded'})

    if form is None:
        return _response(400, {'error': 'name and email are required'})

    try:
        result = subscription_processor.process_submission(form)
    except Exception as e:
        logger.error(f"Unexpected error processing subscription: {e}", exc_info=True)
        return _response(500, {'error': 'Internal server error'})

    status_code = STATUS_CODES[result.outcome]
    logger.info(f"Subscription processed: {result!r} -> {status_code}")

    if result.accepted:
        return _response(200, {'status': 'subscribed', 'subscriberId': str(result.subscriber_id)})
    if result.is_client_error:
        return _response(400, {'error': result.error_message})
    return _response(status_code, {'error': 'Internal server error'})


def health_check(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Simple health check endpoint for monitoring.
    """
    return _response(200, {
        'status': 'healthy',
        'environment': settings.environment
    })
