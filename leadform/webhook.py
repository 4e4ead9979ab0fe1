"""Outbound submission call for the lead intake form."""

import json
import logging
from typing import Any, Dict, Optional

import httpx

from leadform.errors import WebhookStatusError, WebhookTransportError

logger = logging.getLogger(__name__)


class WebhookClient:
    """POSTs a JSON body to the intake webhook.

    Any 2xx answer is a success and its body is ignored. Everything else
    raises a ``SubmissionTransportError`` subclass. There are no retries.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.url = url
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = http_client is None

    async def post_json(self, payload: Dict[str, Any]) -> int:
        """Send ``payload`` and return the response status code.

        Raises:
            WebhookStatusError: The webhook answered with a non-2xx status
            WebhookTransportError: No response was received
        """
        body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        try:
            response = await self._client.post(
                self.url,
                content=body,
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as exc:
            raise WebhookTransportError(
                f"Submission request failed: {type(exc).__name__}: {exc}"
            ) from exc

        if not response.is_success:
            raise WebhookStatusError(
                f"Submission rejected with HTTP {response.status_code}",
                status_code=response.status_code,
            )

        logger.info("Submission delivered (HTTP %s)", response.status_code)
        return response.status_code

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "WebhookClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


__all__ = [
    "WebhookClient",
]
