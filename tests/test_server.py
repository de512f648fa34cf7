"""Tests for the FastAPI dev server."""
import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from conftest import OK_BODIES, VALID_KEYS, MockUpstream
from gateway.client import set_client
from gateway.config import reset_settings
from server import app


@pytest.fixture
def api():
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


def _install(mock: MockUpstream) -> MockUpstream:
    set_client(mock.client())
    return mock


class TestMeta:
    @pytest.mark.asyncio
    async def test_root(self, api):
        async with api:
            resp = await api.get("/")
        assert resp.status_code == 200
        assert resp.json()["ok"] is True

    @pytest.mark.asyncio
    async def test_health_reports_configured_keys(self, api, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", VALID_KEYS["groq"])
        async with api:
            resp = await api.get("/api/health")
        data = resp.json()
        assert data["status"] == "ok"
        assert data["providers"] == {"groq": True, "gemini": False, "claude": False, "xai": False}

    @pytest.mark.asyncio
    async def test_providers_probe(self, api, monkeypatch):
        monkeypatch.setenv("XAI_API_KEY", VALID_KEYS["xai"])
        _install(MockUpstream(json_body=OK_BODIES["xai"]))
        async with api:
            resp = await api.get("/api/providers")
        statuses = {p["id"]: p["status"] for p in resp.json()}
        assert statuses == {"groq": "offline", "gemini": "offline", "claude": "offline", "xai": "online"}


class TestChatEndpoint:
    @pytest.mark.asyncio
    async def test_json_response(self, api):
        mock = _install(MockUpstream(json_body=OK_BODIES["groq"]))
        payload = {
            "provider": "groq",
            "messages": [{"role": "user", "content": "hi"}],
            "apiKey": VALID_KEYS["groq"],
            "options": {"creativity": 40, "length": 800},
        }
        async with api:
            resp = await api.post("/api/chat", json=payload)
        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is True
        assert data["content"] == "hello"
        assert data["provider"] == "groq"
        assert data["usage"] == OK_BODIES["groq"]["usage"]
        sent = mock.last_json()
        assert sent["temperature"] == pytest.approx(0.4)
        assert sent["max_tokens"] == 800

    @pytest.mark.asyncio
    async def test_streaming_response(self, api, monkeypatch):
        monkeypatch.setenv("STREAM_CHARS_PER_SEC", "0")
        reset_settings()
        long_text = "<html><body>Hello, streaming world</body></html>"
        _install(MockUpstream(json_body={"choices": [{"message": {"content": long_text}}]}))
        payload = {
            "provider": "groq",
            "messages": [{"role": "user", "content": "hi"}],
            "apiKey": VALID_KEYS["groq"],
            "options": {"streaming": True},
        }
        async with api:
            resp = await api.post("/api/chat", json=payload)
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/event-stream")
        frames = [f for f in resp.text.split("\n\n") if f]
        assert frames[-1] == "data: [DONE]"
        chunks = [json.loads(f[len("data: ") :])["content"] for f in frames[:-1]]
        assert "".join(chunks) == long_text
        assert all(len(c) <= 5 for c in chunks)

    @pytest.mark.asyncio
    async def test_bad_key_is_400_without_upstream_call(self, api):
        mock = _install(MockUpstream(json_body=OK_BODIES["claude"]))
        payload = {"provider": "claude", "messages": [{"role": "user", "content": "hi"}], "apiKey": "bad-key"}
        async with api:
            resp = await api.post("/api/chat", json=payload)
        assert resp.status_code == 400
        data = resp.json()
        assert data["kind"] == "invalid_credential_format"
        assert data["provider"] == "claude"
        assert data["hint"]
        assert mock.call_count == 0

    @pytest.mark.asyncio
    async def test_upstream_error_is_502_with_message(self, api):
        _install(MockUpstream(status_code=429, json_body={"error": {"message": "Rate limit reached"}}))
        payload = {"provider": "groq", "messages": [{"role": "user", "content": "hi"}], "apiKey": VALID_KEYS["groq"]}
        async with api:
            resp = await api.post("/api/chat", json=payload)
        assert resp.status_code == 502
        data = resp.json()
        assert data["kind"] == "upstream_http_error"
        assert data["upstream_status"] == 429
        assert "Rate limit reached" in data["error"]

    @pytest.mark.asyncio
    async def test_timeout_is_504(self, api):
        _install(MockUpstream(exc=httpx.ReadTimeout("slow")))
        payload = {"provider": "xai", "messages": [{"role": "user", "content": "hi"}], "apiKey": VALID_KEYS["xai"]}
        async with api:
            resp = await api.post("/api/chat", json=payload)
        assert resp.status_code == 504
        assert resp.json()["kind"] == "upstream_timeout"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"provider": "groq", "messages": []},
            {"provider": "groq", "messages": [{"role": "robot", "content": "hi"}]},
            {"provider": "groq", "messages": [{"role": "user", "content": "hi"}], "options": {"creativity": 500}},
            {"provider": "groq", "messages": [{"role": "user", "content": "hi"}], "options": {"systemPrompt": 123}},
            {"provider": "groq", "messages": [{"role": "user", "content": "hi"}], "options": {"streaming": "false"}},
        ],
    )
    async def test_invalid_requests_are_400(self, api, payload):
        _install(MockUpstream(json_body=OK_BODIES["groq"]))
        payload["apiKey"] = VALID_KEYS["groq"]
        async with api:
            resp = await api.post("/api/chat", json=payload)
        assert resp.status_code == 400


class TestWebsiteEndpoint:
    @pytest.mark.asyncio
    async def test_returns_html_field(self, api):
        _install(MockUpstream(json_body={"content": [{"type": "text", "text": "<!DOCTYPE html>"}]}))
        payload = {"provider": "claude", "prompt": "coffee shop", "apiKey": VALID_KEYS["claude"]}
        async with api:
            resp = await api.post("/api/generate-website", json=payload)
        assert resp.status_code == 200
        assert resp.json()["html"] == "<!DOCTYPE html>"


class TestConnectionEndpoint:
    @pytest.mark.asyncio
    async def test_offline_with_bad_key(self, api):
        _install(MockUpstream(json_body=OK_BODIES["groq"]))
        async with api:
            resp = await api.post("/api/test-connection", json={"provider": "groq", "apiKey": "nope"})
        assert resp.json() == {"provider": "groq", "status": "offline"}


class TestUnexpectedErrors:
    @pytest.mark.asyncio
    async def test_non_gateway_exception_is_json_500(self, caplog):
        api = AsyncClient(transport=ASGITransport(app=app, raise_app_exceptions=False), base_url="http://test")
        payload = {"provider": "groq", "messages": [{"role": "user", "content": "hi"}], "apiKey": VALID_KEYS["groq"]}
        with patch("core.chat", AsyncMock(side_effect=RuntimeError("adapter bug"))):
            async with api:
                resp = await api.post("/api/chat", json=payload)
        assert resp.status_code == 500
        assert resp.json() == {"error": "adapter bug"}
        assert any(r.exc_info and r.name == "server" for r in caplog.records)
