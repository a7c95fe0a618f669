"""
Input coercion.

Parsers accept whatever the caller already has in hand: decoded JSON,
raw bytes or text, SDK response objects, or an ``httpx.Response``. This
module turns all of those into plain JSON-like data without touching the
original object.
"""

import json
from typing import Any, Dict, Mapping, Optional, Tuple

import httpx

from ...errors import ValidationError

SSE_DATA_PREFIX = "data:"
SSE_DONE_MARKER = "[DONE]"


def _loads(text: str) -> Any:
    text = text.strip()
    # A single server-sent event line
    if text.startswith(SSE_DATA_PREFIX):
        text = text[len(SSE_DATA_PREFIX):].strip()
    if not text:
        raise ValidationError("empty response body")
    if text == SSE_DONE_MARKER:
        raise ValidationError("stream terminator carries no payload")
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(f"response body is not valid JSON ({e.msg})") from e
    except RecursionError as e:
        raise ValidationError("response body is nested too deeply to decode") from e


def coerce_payload(raw: Any) -> Any:
    """
    Convert a raw response into JSON-like data (dicts, lists, scalars).

    Args:
        raw: Parsed JSON, bytes, str, httpx.Response, or an object with model_dump()

    Returns:
        The decoded payload. Dicts and lists are returned as-is, never copied
        or modified.

    Raises:
        ValidationError: If the input cannot be decoded
    """
    if raw is None:
        raise ValidationError("response is empty")
    if isinstance(raw, (dict, list)):
        return raw
    if isinstance(raw, httpx.Response):
        try:
            text = raw.text
        except httpx.StreamError as e:
            # Streamed responses must be read (or iterated) by the caller first
            raise ValidationError(f"response body is unavailable ({type(e).__name__})") from e
        return _loads(text)
    if isinstance(raw, (bytes, bytearray)):
        try:
            return _loads(bytes(raw).decode("utf-8"))
        except UnicodeDecodeError as e:
            raise ValidationError("response body is not UTF-8 encoded") from e
    if isinstance(raw, str):
        return _loads(raw)
    if hasattr(raw, "model_dump"):
        return raw.model_dump(mode="json")
    raise ValidationError(f"unsupported response type: {type(raw).__name__}")


def transport_hints(raw: Any) -> Tuple[Dict[str, str], Optional[str]]:
    """Return (headers, url) carried by an httpx.Response, or empty hints."""
    if not isinstance(raw, httpx.Response):
        return {}, None
    try:
        url = str(raw.request.url)
    except RuntimeError:
        # Responses built by hand have no request attached
        url = None
    return dict(raw.headers), url


def normalize_headers(headers: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    if not headers:
        return {}
    return {str(key).lower(): str(value) for key, value in headers.items()}
