"""
Pytest configuration and fixtures for all tests.
"""

import os
import sys
import pytest

# Add src to Python path before any imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

# Set up test environment variables before importing any modules
os.environ.setdefault('SUBSCRIPTIONS_TABLE_NAME', 'subscriptions-test')
os.environ.setdefault('EMAIL_BASE_URL', 'https://email-provider.test-api.com')
os.environ.setdefault('EMAIL_SENDER_ADDRESS', 'newsletter@mydomain.com')
os.environ.setdefault('EMAIL_AUTHORIZATION_TOKEN', 'test-server-token')
os.environ.setdefault('AWS_DEFAULT_REGION', 'us-west-2')
os.environ.setdefault('ENVIRONMENT', 'test')
os.environ.setdefault('LOG_LEVEL', 'INFO')


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Set up test environment variables for all tests."""
    # Environment variables are already set above
    yield
