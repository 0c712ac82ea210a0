"""Helpers shared by the serverless function handlers."""

import asyncio
import json
from typing import Any, Coroutine, Optional, Union

from pydantic import BaseModel, ValidationError

from src.utils.errors import (
    AuthenticationError,
    CommentValidationError,
    SupabaseError,
    TaskNotFoundError,
    TaskValidationError,
)

JSON_HEADERS = {"Content-Type": "application/json; charset=utf-8"}

# First match wins
_STATUS_BY_ERROR: tuple[tuple[type[Exception], int], ...] = (
    (AuthenticationError, 401),
    (TaskNotFoundError, 404),
    (TaskValidationError, 400),
    (CommentValidationError, 400),
    (ValidationError, 400),
    (SupabaseError, 502),
)


def json_response(status_code: int, payload: Union[BaseModel, dict, list]) -> dict:
    """Build a Vercel-style response dict."""
    if isinstance(payload, BaseModel):
        body = payload.model_dump_json()
    else:
        body = json.dumps(payload, ensure_ascii=False, default=str)
    return {
        "statusCode": status_code,
        "headers": dict(JSON_HEADERS),
        "body": body,
    }


def status_for_error(exc: Exception) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


def error_response(exc: Exception) -> dict:
    status_code = status_for_error(exc)
    # Internal details stay in the logs
    message = str(exc) if status_code < 500 else "internal server error"
    if isinstance(exc, SupabaseError):
        message = "upstream store error"
    return json_response(status_code, {"error": message})


def parse_json_body(request: dict) -> dict:
    """Decode the request body; malformed or non-object JSON is a validation error."""
    raw_body = request.get("body") or ""
    if isinstance(raw_body, dict):
        return raw_body
    try:
        body = json.loads(raw_body) if raw_body else {}
    except json.JSONDecodeError as e:
        raise TaskValidationError(f"Invalid JSON body: {e}")
    if not isinstance(body, dict):
        raise TaskValidationError("JSON body must be an object")
    return body


def get_header(request: dict, name: str) -> Optional[str]:
    """Case-insensitive header lookup."""
    headers = request.get("headers", {}) or {}
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


def get_bearer_token(request: dict) -> Optional[str]:
    """Access token from an ``Authorization: Bearer ...`` header."""
    scheme, _, token = (get_header(request, "Authorization") or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def run_async(coro: Coroutine[Any, Any, Any]) -> Any:
    """Run a coroutine to completion from a synchronous handler."""
    try:
        loop = asyncio.get_event_loop()
    except RuntimeError:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
    if loop.is_closed():
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
    return loop.run_until_complete(coro)
