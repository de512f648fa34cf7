"""
Local dev server for the AI gateway.
POST /api/chat, POST /api/generate-website (SSE typing effect when options.streaming is true),
POST /api/test-connection, GET /api/providers, GET /api/health.
Run from backend dir: python server.py  or  uvicorn server:app --reload --port 8080
"""
import logging
from pathlib import Path

from dotenv import load_dotenv

# Load .env: project root first, then backend. Only set if not already set so root keys win when backend/.env is empty.
_backend_dir = Path(__file__).resolve().parent
_root_dir = _backend_dir.parent
load_dotenv(_root_dir / ".env")
load_dotenv(_backend_dir / ".env", override=False)
load_dotenv(override=False)  # cwd .env if server run from another directory

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel

import core
from gateway.client import get_client
from gateway.errors import GatewayError
from gateway.health import probe_all
from gateway.logging_setup import setup_logging
from gateway.streaming import sse_frames
from handlers.shared import error_payload, health_payload, parse_messages, serialize_result
from providers import GenerationOptions, NormalizedResult

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="AI Website Generator Gateway")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class ChatRequest(BaseModel):
    provider: str
    messages: list[dict]
    apiKey: str | None = None
    options: dict | None = None


class WebsiteRequest(BaseModel):
    provider: str
    prompt: str
    apiKey: str | None = None
    options: dict | None = None


class ConnectionRequest(BaseModel):
    provider: str
    apiKey: str | None = None


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    status, payload = error_payload(exc)
    return JSONResponse(status_code=status, content=payload)


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("unhandled error for %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.get("/")
async def root():
    """Liveness check; confirms backend is up."""
    return {"ok": True, "service": "ai-gateway"}


@app.get("/api/health")
async def health():
    """Which providers have a server-side key configured. Makes no upstream calls."""
    return health_payload()


@app.get("/api/providers")
async def providers():
    return await probe_all(get_client())


def _respond(result: NormalizedResult, options: GenerationOptions, content_field: str):
    if options.streaming:
        return StreamingResponse(
            sse_frames(result.content),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        )
    return serialize_result(result, content_field)


@app.post("/api/chat")
async def chat(req: ChatRequest):
    messages = parse_messages(req.messages)
    options = GenerationOptions.from_dict(req.options)
    result = await core.chat(req.provider, messages, req.apiKey, options)
    return _respond(result, options, "content")


@app.post("/api/generate-website")
async def generate_website(req: WebsiteRequest):
    options = GenerationOptions.from_dict(req.options)
    result = await core.generate_website(req.provider, req.prompt, req.apiKey, options)
    return _respond(result, options, "html")


@app.post("/api/test-connection")
async def test_connection(req: ConnectionRequest):
    status = await core.test_connection(req.provider, req.apiKey)
    return {"provider": req.provider, "status": status.value}


if __name__ == "__main__":
    uvicorn.run("server:app", host="0.0.0.0", port=8080, reload=True)
