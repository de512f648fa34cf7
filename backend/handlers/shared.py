"""Shared request/response handling for Lambda and GCP."""
import json
import logging
from datetime import datetime, timezone

import core
from gateway.client import GatewayClient, get_client, resolve_api_key
from gateway.errors import ErrorKind, GatewayError
from gateway.health import probe_all
from gateway.streaming import collect_sse
from providers import GenerationOptions, Message, NormalizedResult

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}
JSON_HEADERS = {"Content-Type": "application/json", "Access-Control-Allow-Origin": "*"}
SSE_HEADERS = {
    "Content-Type": "text/event-stream",
    "Cache-Control": "no-cache",
    "Access-Control-Allow-Origin": "*",
}

ERROR_STATUS = {
    ErrorKind.MISSING_CREDENTIAL: 400,
    ErrorKind.INVALID_CREDENTIAL_FORMAT: 400,
    ErrorKind.UNSUPPORTED_PROVIDER: 400,
    ErrorKind.UPSTREAM_HTTP_ERROR: 502,
    ErrorKind.UPSTREAM_TIMEOUT: 504,
    ErrorKind.UPSTREAM_MALFORMED_RESPONSE: 502,
}

ERROR_HINTS = {
    ErrorKind.MISSING_CREDENTIAL: "Add an API key for this provider in settings or configure it on the server.",
    ErrorKind.INVALID_CREDENTIAL_FORMAT: "Check that the API key was copied completely and belongs to this provider.",
    ErrorKind.UNSUPPORTED_PROVIDER: "Choose one of the available providers.",
    ErrorKind.UPSTREAM_HTTP_ERROR: "Check that the API key is valid and the account has remaining quota.",
    ErrorKind.UPSTREAM_TIMEOUT: "Check your connection and try again; the provider may be overloaded.",
    ErrorKind.UPSTREAM_MALFORMED_RESPONSE: "The provider returned an unexpected response; try again or pick another model.",
}


def parse_body(body: str | bytes | dict | None) -> dict:
    if isinstance(body, dict):
        return body
    if isinstance(body, bytes):
        body = body.decode("utf-8")
    try:
        data = json.loads(body or "{}")
    except json.JSONDecodeError:
        raise ValueError("request body must be valid JSON") from None
    if not isinstance(data, dict):
        raise ValueError("request body must be a JSON object")
    return data


def parse_messages(raw) -> list[Message]:
    if not isinstance(raw, list) or not raw:
        raise ValueError("messages array required")
    return [Message.from_dict(m) for m in raw]


def require_provider(data: dict) -> str:
    provider = data.get("provider")
    if not provider or not isinstance(provider, str):
        raise ValueError("provider is required")
    return provider


def error_payload(exc: GatewayError) -> tuple[int, dict]:
    return ERROR_STATUS[exc.kind], {
        "error": exc.message,
        "kind": exc.kind.value,
        "provider": exc.provider,
        "upstream_status": exc.status_code,
        "hint": ERROR_HINTS[exc.kind],
    }


def serialize_result(result: NormalizedResult, content_field: str = "content") -> dict:
    return {
        "success": True,
        "provider": result.provider,
        content_field: result.content,
        "usage": result.usage,
        "model": result.model,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def health_payload(client: GatewayClient | None = None) -> dict:
    client = client or get_client()
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "providers": {a.provider_id.value: bool(resolve_api_key(a)) for a in client.registry.adapters()},
    }


def _json(status: int, payload) -> tuple[int, dict, str]:
    return status, JSON_HEADERS, json.dumps(payload)


async def _complete(result: NormalizedResult, options: GenerationOptions, content_field: str):
    if options.streaming:
        return 200, SSE_HEADERS, await collect_sse(result.content)
    return _json(200, serialize_result(result, content_field))


async def dispatch(method: str, path: str, body=None, client: GatewayClient | None = None) -> tuple[int, dict, str]:
    """Route one request to the gateway. Returns (status, headers, body text)."""
    method = (method or "GET").upper()
    path = "/" + (path or "").strip("/")
    if method == "OPTIONS":
        return 204, CORS_HEADERS, ""
    client = client or get_client()
    try:
        if path == "/api/health" and method == "GET":
            return _json(200, health_payload(client))
        if path == "/api/providers" and method == "GET":
            return _json(200, await probe_all(client))
        if path not in ("/api/chat", "/api/generate-website", "/api/test-connection"):
            return _json(404, {"error": "Not found"})
        if method != "POST":
            return _json(405, {"error": "Method not allowed"})

        data = parse_body(body)
        provider = require_provider(data)
        api_key = data.get("apiKey")
        if path == "/api/test-connection":
            status = await core.test_connection(provider, api_key, client=client)
            return _json(200, {"provider": provider, "status": status.value})

        options = GenerationOptions.from_dict(data.get("options"))
        if path == "/api/chat":
            messages = parse_messages(data.get("messages"))
            result = await core.chat(provider, messages, api_key, options, client=client)
            return await _complete(result, options, "content")

        prompt = data.get("prompt")
        if not isinstance(prompt, str) or not prompt.strip():
            raise ValueError("prompt is required")
        result = await core.generate_website(provider, prompt, api_key, options, client=client)
        return await _complete(result, options, "html")
    except GatewayError as e:
        status, payload = error_payload(e)
        return _json(status, payload)
    except ValueError as e:
        return _json(400, {"error": str(e)})
    except Exception as e:
        logger.exception("unhandled error for %s %s", method, path)
        return _json(500, {"error": str(e)})
