"""
Tests for the transactional email client.
"""

import json

import httpx
import pytest
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

from domain.models import SubscriberEmail
from services.email_client import (
    AUTHORIZATION_HEADER,
    EmailClient,
    ProviderRejectedError,
    SendError,
    SendTransportError,
)

BASE_URL = 'https://email-provider.test-api.com'


def make_client(handler, **kwargs):
    """Build an EmailClient whose requests are answered by handler."""
    return EmailClient(
        base_url=kwargs.pop('base_url', BASE_URL),
        sender=SubscriberEmail.parse("test@test.com"),
        authorization_token="AB123",
        transport=httpx.MockTransport(handler),
        **kwargs
    )


@pytest.fixture
def recipient():
    return SubscriberEmail.parse("test@gmail.com")


class TestBuildRequest:
    """Test URL and payload construction."""

    def test_build_url_appends_email_path(self):
        client = make_client(lambda request: httpx.Response(200))

        assert client.build_url() == f"{BASE_URL}/email"

    def test_build_url_strips_trailing_slash(self):
        client = make_client(lambda request: httpx.Response(200), base_url=BASE_URL + '/')

        assert client.build_url() == f"{BASE_URL}/email"

    def test_payload_fields(self, recipient):
        client = make_client(lambda request: httpx.Response(200))

        payload = client.build_request_payload(recipient, "Subject", "<h1>Hi</h1>", "Hi")

        assert payload == {
            'From': 'test@test.com',
            'To': 'test@gmail.com',
            'Subject': 'Subject',
            'HtmlBody': '<h1>Hi</h1>',
            'TextBody': 'Hi',
        }

    def test_non_positive_timeout_rejected(self):
        with pytest.raises(ValueError, match="timeout_seconds must be positive"):
            make_client(lambda request: httpx.Response(200), timeout_seconds=0)


class TestSendEmail:
    """Test sending email through the provider."""

    def test_send_email_fires_single_post_to_base_url(self, recipient):
        """Test request method, path, headers and JSON body."""
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={'MessageID': 'abc'})

        client = make_client(handler)

        result = client.send_email(recipient, "Test Email", "<h1> Test </h1>", "Test")

        assert result is None
        assert len(requests) == 1
        request = requests[0]
        assert request.method == 'POST'
        assert str(request.url) == f"{BASE_URL}/email"
        assert request.headers[AUTHORIZATION_HEADER] == 'AB123'
        assert request.headers['Content-Type'] == 'application/json'
        body = json.loads(request.content)
        assert set(body) == {'From', 'To', 'Subject', 'HtmlBody', 'TextBody'}
        assert body['To'] == 'test@gmail.com'
        assert body['From'] == 'test@test.com'

    @pytest.mark.parametrize("status_code", [200, 201, 202])
    def test_2xx_is_success(self, recipient, status_code):
        client = make_client(lambda request: httpx.Response(status_code))

        client.send_email(recipient, "Subject", "<p>Body</p>", "Body")

    @pytest.mark.parametrize("status_code", [400, 401, 422, 500, 503])
    def test_non_2xx_raises_provider_rejected(self, recipient, status_code):
        client = make_client(lambda request: httpx.Response(status_code, text="nope"))

        with pytest.raises(ProviderRejectedError) as exc_info:
            client.send_email(recipient, "Subject", "<p>Body</p>", "Body")

        assert exc_info.value.status_code == status_code
        assert exc_info.value.body == "nope"
        assert isinstance(exc_info.value, SendError)

    def test_timeout_raises_transport_error(self, recipient):
        """Test a provider slower than the timeout surfaces as a transport failure."""
        def handler(request):
            raise httpx.ReadTimeout("Timed out after 10s", request=request)

        client = make_client(handler)

        with pytest.raises(SendTransportError, match="did not respond within 10.0s"):
            client.send_email(recipient, "Subject", "<p>Body</p>", "Body")

    def test_connection_refused_raises_transport_error(self, recipient):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        client = make_client(handler)

        with pytest.raises(SendTransportError) as exc_info:
            client.send_email(recipient, "Subject", "<p>Body</p>", "Body")

        assert not isinstance(exc_info.value, ProviderRejectedError)
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_timeout_is_applied_to_requests(self, recipient):
        """Test every request carries the configured finite timeout."""
        seen = []

        def handler(request):
            seen.append(request.extensions['timeout'])
            return httpx.Response(200)

        client = make_client(handler, timeout_seconds=2.5)
        client.send_email(recipient, "Subject", "<p>Body</p>", "Body")

        assert seen[0]['read'] == 2.5
        assert seen[0]['connect'] == 2.5

    def test_client_is_reusable_across_sends(self, recipient):
        calls = []

        def handler(request):
            calls.append(json.loads(request.content)['To'])
            return httpx.Response(200)

        with make_client(handler) as client:
            client.send_email(recipient, "One", "<p>1</p>", "1")
            client.send_email(SubscriberEmail.parse("dk@gmail.com"), "Two", "<p>2</p>", "2")

        assert calls == ['test@gmail.com', 'dk@gmail.com']


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
