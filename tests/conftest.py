import json

import httpx
import pytest

from gateway.client import GatewayClient, set_client
from gateway.config import reset_settings

PROVIDER_ENV_KEYS = (
    "ANTHROPIC_API_KEY",
    "CLAUDE_API_KEY",
    "GEMINI_API_KEY",
    "GROQ_API_KEY",
    "XAI_API_KEY",
)

VALID_KEYS = {
    "claude": "sk-ant-api03-" + "a" * 32,
    "gemini": "AIzaSy" + "b" * 33,
    "groq": "gsk_" + "c" * 40,
    "xai": "xai-" + "d" * 40,
}

CLAUDE_OK = {
    "id": "msg_01",
    "type": "message",
    "role": "assistant",
    "model": "claude-3-5-sonnet-20241022",
    "content": [{"type": "text", "text": "hello"}],
    "usage": {"input_tokens": 12, "output_tokens": 1},
}

GEMINI_OK = {
    "candidates": [
        {"content": {"role": "model", "parts": [{"text": "hello"}]}, "finishReason": "STOP"},
    ],
    "usageMetadata": {"promptTokenCount": 12, "candidatesTokenCount": 1, "totalTokenCount": 13},
    "modelVersion": "gemini-1.5-flash",
}

OPENAI_OK = {
    "id": "chatcmpl-1",
    "object": "chat.completion",
    "model": "llama-3.3-70b-versatile",
    "choices": [{"index": 0, "message": {"role": "assistant", "content": "hello"}, "finish_reason": "stop"}],
    "usage": {"prompt_tokens": 12, "completion_tokens": 1, "total_tokens": 13},
}

OK_BODIES = {"claude": CLAUDE_OK, "gemini": GEMINI_OK, "groq": OPENAI_OK, "xai": OPENAI_OK}


class MockUpstream:
    """httpx transport that records every request and answers with a canned response."""

    def __init__(self, status_code: int = 200, json_body=None, text: str | None = None, exc: Exception | None = None):
        self.status_code = status_code
        self.json_body = json_body
        self.text = text
        self.exc = exc
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)

    def client(self, **kwargs) -> GatewayClient:
        return GatewayClient(transport=self.transport, **kwargs)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in PROVIDER_ENV_KEYS:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()
    set_client(None)
