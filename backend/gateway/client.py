"""
GatewayClient: one provider-agnostic call path for every provider adapter.

lookup -> credential pre-flight -> format request -> POST with timeout -> classify -> parse.
Every failure leaves as a GatewayError subclass; raw httpx exceptions never escape.
"""
import logging
import os
import time
from typing import Sequence

import httpx

from gateway.config import get_settings
from gateway.errors import (
    ErrorKind,
    GatewayError,
    InvalidCredentialFormat,
    MissingCredential,
    UpstreamHttpError,
    UpstreamMalformedResponse,
    UpstreamTimeout,
)
from providers import REGISTRY, GenerationOptions, Message, NormalizedResult, ProviderAdapter, ProviderRegistry

logger = logging.getLogger(__name__)

_ERROR_TEXT_LIMIT = 500


def resolve_api_key(adapter: ProviderAdapter, supplied: str | None = None) -> str | None:
    """Request-supplied key wins; otherwise the first of the adapter's environment variables that is set."""
    if supplied:
        return supplied
    for name in adapter.env_keys:
        value = os.environ.get(name)
        if value:
            return value
    return None


class GatewayClient:
    def __init__(
        self,
        registry: ProviderRegistry = REGISTRY,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._registry = registry
        self._timeout = timeout
        self._transport = transport

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    def lookup(self, provider: str) -> ProviderAdapter:
        return self._registry.lookup(provider)

    async def call(
        self,
        provider: str,
        messages: Sequence[Message],
        api_key: str | None,
        options: GenerationOptions | None = None,
        timeout: float | None = None,
    ) -> NormalizedResult:
        adapter = self._registry.lookup(provider)
        name = adapter.provider_id.value
        if not messages:
            raise ValueError("messages must contain at least one message")
        if not api_key:
            raise MissingCredential(name, f"API key for {name} is required")
        if not adapter.validate_key(api_key):
            raise InvalidCredentialFormat(name, f"Invalid API key format for {name}")

        options = options or GenerationOptions()
        messages = list(messages)
        body = adapter.format_request(messages, options)
        headers = adapter.build_headers(api_key)
        url = adapter.build_endpoint(api_key, options)
        timeout = timeout or self._timeout or get_settings().timeout_sec

        start = time.monotonic()
        response = await self._post(name, url, headers, body, timeout)
        elapsed_ms = int((time.monotonic() - start) * 1000)

        if not response.is_success:
            message = self._error_message(adapter, response)
            logger.warning(
                "%s upstream error %s after %dms: %s",
                name,
                response.status_code,
                elapsed_ms,
                message,
                extra={"provider": name, "error_kind": ErrorKind.UPSTREAM_HTTP_ERROR.value, "latency_ms": elapsed_ms},
            )
            raise UpstreamHttpError(name, f"{adapter.display_name} API Error: {message}", status_code=response.status_code)

        try:
            data = response.json()
        except ValueError:
            logger.warning(
                "%s returned a non-JSON body with status %s",
                name,
                response.status_code,
                extra={"provider": name, "error_kind": ErrorKind.UPSTREAM_MALFORMED_RESPONSE.value},
            )
            raise UpstreamMalformedResponse(name, f"{adapter.display_name} returned a response that is not JSON") from None

        result = adapter.parse_response(data)
        logger.info(
            "%s call ok model=%s status=%s latency=%dms chars=%d",
            name,
            result.model or adapter.model_for(options),
            response.status_code,
            elapsed_ms,
            len(result.content),
            extra={"provider": name, "latency_ms": elapsed_ms},
        )
        return result

    async def _post(self, name: str, url: str, headers: dict, body: dict, timeout: float) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                return await client.post(url, headers=headers, json=body)
        except httpx.TimeoutException:
            logger.warning(
                "%s timed out after %ss",
                name,
                timeout,
                extra={"provider": name, "error_kind": ErrorKind.UPSTREAM_TIMEOUT.value},
            )
            raise UpstreamTimeout(name, f"{name} did not respond within {timeout:g}s") from None
        except httpx.TransportError as e:
            # connection refused, DNS, TLS: the provider could not be reached at all
            logger.warning(
                "%s transport error: %s",
                name,
                type(e).__name__,
                extra={"provider": name, "error_kind": ErrorKind.UPSTREAM_TIMEOUT.value},
            )
            raise UpstreamTimeout(name, f"Could not reach {name}: {type(e).__name__}") from None

    @staticmethod
    def _error_message(adapter: ProviderAdapter, response: httpx.Response) -> str:
        try:
            message = adapter.extract_error_message(response.json())
        except ValueError:
            message = None
        if message:
            return message
        text = response.text.strip()
        if text:
            return text[:_ERROR_TEXT_LIMIT]
        return response.reason_phrase or f"HTTP {response.status_code}"


_default_client: GatewayClient | None = None


def get_client() -> GatewayClient:
    global _default_client
    if _default_client is None:
        _default_client = GatewayClient()
    return _default_client


def set_client(client: GatewayClient | None) -> None:
    """Swap the process-wide client (tests inject one with a mock transport)."""
    global _default_client
    _default_client = client


__all__ = ["GatewayClient", "GatewayError", "get_client", "set_client", "resolve_api_key"]
