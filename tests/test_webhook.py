"""Unit tests for the webhook client."""

import httpx
import pytest

from leadform.errors import (
    SubmissionTransportError,
    WebhookStatusError,
    WebhookTransportError,
)
from leadform.webhook import WebhookClient

from tests.conftest import WEBHOOK_URL, RecordingWebhook, mock_http_client


class TestPostJson:
    """Test the outbound POST."""

    @pytest.mark.asyncio
    async def test_returns_status_on_success(self):
        """Should return the 2xx status code."""
        webhook = RecordingWebhook(status_code=201)
        client = WebhookClient(WEBHOOK_URL, http_client=mock_http_client(webhook))

        assert await client.post_json({"telefone": "(11) 99999-8888"}) == 201
        assert webhook.bodies == [{"telefone": "(11) 99999-8888"}]

    @pytest.mark.asyncio
    async def test_non_ascii_sent_as_utf8(self):
        """Should encode accented text as UTF-8 JSON."""
        webhook = RecordingWebhook()
        client = WebhookClient(WEBHOOK_URL, http_client=mock_http_client(webhook))

        await client.post_json({"funcoes": ["Prospecção de leads"]})

        assert "Prospecção".encode("utf-8") in webhook.requests[0].content

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [301, 400, 404, 500, 503])
    async def test_non_2xx_raises_status_error(self, status):
        """Should raise WebhookStatusError carrying the status."""
        client = WebhookClient(
            WEBHOOK_URL, http_client=mock_http_client(RecordingWebhook(status_code=status))
        )
        with pytest.raises(WebhookStatusError) as exc_info:
            await client.post_json({})
        assert exc_info.value.status_code == status
        assert isinstance(exc_info.value, SubmissionTransportError)

    @pytest.mark.asyncio
    async def test_timeout_raises_transport_error(self):
        """Should wrap httpx errors in WebhookTransportError."""

        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = WebhookClient(WEBHOOK_URL, http_client=mock_http_client(handler))
        with pytest.raises(WebhookTransportError) as exc_info:
            await client.post_json({})
        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ReadTimeout)


class TestClientLifecycle:
    """Test client ownership."""

    @pytest.mark.asyncio
    async def test_injected_client_left_open(self):
        """Should not close a client it did not create."""
        http_client = mock_http_client(RecordingWebhook())
        async with WebhookClient(WEBHOOK_URL, http_client=http_client):
            pass
        assert http_client.is_closed is False
        await http_client.aclose()

    @pytest.mark.asyncio
    async def test_owned_client_closed(self):
        """Should close the client it created."""
        client = WebhookClient(WEBHOOK_URL, timeout=1.0)
        await client.aclose()
        assert client._client.is_closed is True
