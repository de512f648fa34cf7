"""
Google Cloud Function (2nd gen) HTTP handler for the AI gateway API.
Deploy with: gcloud functions deploy ai-gateway --gen2 --runtime python311 --trigger-http ...
Set environment variables (e.g. ANTHROPIC_API_KEY, GEMINI_API_KEY, ...) in the function config.
"""
import asyncio
import json
import sys
from pathlib import Path

_backend_root = Path(__file__).resolve().parent.parent
if str(_backend_root) not in sys.path:
    sys.path.insert(0, str(_backend_root))

from gateway.logging_setup import setup_logging
from handlers.shared import JSON_HEADERS, dispatch

setup_logging()


def gateway_http(request):
    """HTTP Cloud Function entrypoint. Routes /api/chat, /api/generate-website, /api/test-connection,
    /api/providers and /api/health."""
    try:
        body = request.get_data(as_text=True) if hasattr(request, "get_data") else (request.data or b"").decode("utf-8")
        path = getattr(request, "path", None) or "/api/chat"
        status, headers, text = asyncio.run(dispatch(request.method, path, body or None))
        return (text, status, headers)
    except Exception as e:
        return (json.dumps({"error": str(e)}), 500, JSON_HEADERS)
