# src/llm/transport.py — v1
"""Chat-completion transport over the official openai SDK.

Posts the request body exactly as built (see ChatRequest.to_wire) to
{base_url}/v1/chat/completions and returns the raw response text, leaving
parsing to llm.response_extractor. The SDK's automatic retries are disabled:
a timeout, connection failure or non-2xx status is reported once as
TransportError and the caller decides what to do.
"""

from __future__ import annotations

import logging
import time

import httpx
import openai

from imganalyzer.config.settings import Settings
from imganalyzer.core.errors import TransportError
from imganalyzer.core.models import ChatRequest

logger = logging.getLogger(__name__)


class ChatTransport:
    """Async client for an OpenAI-compatible chat-completions endpoint.

    Args:
        api_key: Bearer token.
        base_url: Server root, without the /v1 suffix.
        timeout_s: Per-request timeout in seconds.
        http_client: Optional httpx client (tests inject a MockTransport).
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com",
        timeout_s: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            base_url=f"{self._base_url}/v1",
            timeout=timeout_s,
            max_retries=0,
            http_client=http_client,
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, http_client: httpx.AsyncClient | None = None
    ) -> ChatTransport:
        return cls(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            timeout_s=settings.request_timeout_seconds,
            http_client=http_client,
        )

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}/v1/chat/completions"

    async def send(self, request: ChatRequest) -> str:
        """POST the request and return the response body text.

        Raises:
            TransportError: On timeout, network failure or non-2xx status.
        """
        t0 = time.monotonic()
        try:
            raw = await self._client.chat.completions.with_raw_response.create(
                **request.to_wire()
            )
        except openai.APITimeoutError as exc:
            raise TransportError(
                f"Request to {self.endpoint} timed out after {self._timeout_s}s"
            ) from exc
        except openai.APIConnectionError as exc:
            raise TransportError(f"Could not reach {self.endpoint}: {exc}") from exc
        except openai.APIStatusError as exc:
            raise TransportError(
                f"Model API returned HTTP {exc.status_code}: {exc.message}",
                status_code=exc.status_code,
            ) from exc
        except openai.OpenAIError as exc:
            raise TransportError(f"Model API call failed: {exc}") from exc

        latency_ms = int((time.monotonic() - t0) * 1000)
        logger.info(
            "Model call completed: model=%s status=%d latency_ms=%d",
            request.model, raw.http_response.status_code, latency_ms,
        )
        return raw.http_response.text

    async def close(self) -> None:
        await self._client.close()

    async def __aenter__(self) -> ChatTransport:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
