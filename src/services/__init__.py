"""
Adapters for the external services the subscription workflow depends on.

This package contains the DynamoDB subscription store and the HTTP client
for the transactional email provider.
"""

__all__ = ['email_client', 'subscriptions_store']
