"""
AWS Lambda handler for the AI gateway API.
Configure the Lambda to use Python 3.11+, set handler to handlers.aws_lambda.handler,
and set environment variables for each provider API key you want to enable.
Works behind API Gateway REST (v1) and HTTP (v2) payloads and Lambda function URLs.
"""
import asyncio
import base64
import json
import sys
from pathlib import Path

# Ensure backend root is on path when running from Lambda (working dir is often the deployment package root)
_backend_root = Path(__file__).resolve().parent.parent
if str(_backend_root) not in sys.path:
    sys.path.insert(0, str(_backend_root))

from gateway.logging_setup import setup_logging
from handlers.shared import JSON_HEADERS, dispatch

setup_logging()


def _request_line(event: dict) -> tuple[str, str]:
    http = (event.get("requestContext") or {}).get("http") or {}
    method = event.get("httpMethod") or http.get("method") or "POST"
    path = event.get("rawPath") or event.get("path") or http.get("path") or "/api/chat"
    return method, path


def _body(event: dict):
    body = event.get("body")
    if body is None:
        return None
    if isinstance(body, dict):
        return body
    if event.get("isBase64Encoded"):
        return base64.b64decode(body).decode("utf-8")
    return body


def handler(event, context):
    try:
        method, path = _request_line(event)
        status, headers, body = asyncio.run(dispatch(method, path, _body(event)))
        return {"statusCode": status, "headers": headers, "body": body}
    except Exception as e:
        return {
            "statusCode": 500,
            "headers": JSON_HEADERS,
            "body": json.dumps({"error": str(e)}),
        }
