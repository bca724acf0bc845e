"""
DynamoDB storage for subscription records.

This module provides the datastore adapter the subscription workflow
persists into. Each record is written with a single conditional put so an
existing identifier is rejected rather than overwritten.
"""

import logging
import os
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)

# Configure DynamoDB client with timeouts to prevent infinite hangs
dynamodb_config = Config(
    retries={
        'max_attempts': 1,  # 1 attempt total (no retries)
        'mode': 'standard'
    },
    connect_timeout=10,  # 10 seconds to establish connection
    read_timeout=30      # 30 seconds max for reading response
)


class StoreError(Exception):
    """Raised when a subscription record could not be persisted."""

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.error_code = error_code


def build_item(
    subscriber_id: uuid.UUID,
    email: str,
    name: str,
    subscribed_at: datetime,
    status: str
) -> Dict[str, Dict[str, str]]:
    """
    Build the DynamoDB item for a subscription record.

    Returns:
        Item in DynamoDB attribute-value format
    """
    return {
        'id': {'S': str(subscriber_id)},
        'email': {'S': email},
        'name': {'S': name},
        'subscribed_at': {'S': subscribed_at.isoformat()},
        'status': {'S': status},
    }


class DynamoDBSubscriptionStore:
    """Subscription records stored in a DynamoDB table keyed by `id`."""

    def __init__(
        self,
        table_name: str,
        client: Optional[Any] = None,
        region_name: Optional[str] = None
    ):
        """
        Initialize the store.

        Args:
            table_name: DynamoDB table holding subscriptions
            client: Optional pre-built boto3 DynamoDB client
            region_name: AWS region used when building the client

        Raises:
            ValueError: If table_name is empty
        """
        if not table_name:
            raise ValueError("DynamoDB table name cannot be empty")

        self.table_name = table_name

        if client is None:
            region = region_name or os.environ.get('AWS_REGION', os.environ.get('AWS_DEFAULT_REGION', 'us-west-2'))
            client = boto3.client('dynamodb', region_name=region, config=dynamodb_config)
            logger.info(
                f"DynamoDB client initialized: region={region}, "
                f"connect_timeout=10s, read_timeout=30s, max_attempts=1 (no retries)"
            )

        self._client = client

    def insert(
        self,
        subscriber_id: uuid.UUID,
        email: str,
        name: str,
        subscribed_at: datetime,
        status: str
    ) -> None:
        """
        Persist a subscription record.

        Args:
            subscriber_id: Identifier generated by the workflow
            email: Subscriber email
            name: Subscriber name
            subscribed_at: Time of subscription (timezone-aware)
            status: Record status

        Raises:
            StoreError: If DynamoDB rejects the write or cannot be reached
        """
        item = build_item(subscriber_id, email, name, subscribed_at, status)

        try:
            logger.info(f"Saving subscriber to DynamoDB: table={self.table_name}, id={subscriber_id}")

            self._client.put_item(
                TableName=self.table_name,
                Item=item,
                ConditionExpression='attribute_not_exists(id)'
            )

            logger.info(f"Saved subscriber: id={subscriber_id}")

        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', 'Unknown')
            error_message = e.response.get('Error', {}).get('Message', str(e))

            logger.error(
                f"Failed to save subscriber: "
                f"table={self.table_name}, id={subscriber_id}, "
                f"error_code={error_code}, error_message={error_message}"
            )

            if error_code == 'ConditionalCheckFailedException':
                raise StoreError(f"Subscriber id already exists: {subscriber_id}", error_code) from e
            raise StoreError(f"DynamoDB write failed: {error_message}", error_code) from e

        except BotoCoreError as e:
            logger.error(f"Failed to reach DynamoDB: table={self.table_name}, error={e}")
            raise StoreError(f"DynamoDB unavailable: {e}") from e
