"""Content block builders shared by the provider parsers."""

import hashlib
import json
from typing import Any, Dict, Optional

from ...models.unified import ImageContent, ImageSource, Provider
from .context import ParseContext

RAW_ARGUMENTS_KEY = "_raw_arguments"


def stable_id(prefix: str, *parts: Any) -> str:
    """
    Derive a deterministic identifier from JSON-like data.

    Used when a provider omits an id, so that parsing the same input twice
    yields the same value.
    """
    digest = hashlib.sha256(
        json.dumps(parts, sort_keys=True, default=str).encode("utf-8")
    ).hexdigest()
    return f"{prefix}_{digest[:24]}"


def response_id(provider: Provider, payload: Any, given: Any = None) -> str:
    if isinstance(given, str) and given:
        return given
    return stable_id(provider.value, payload)


def parse_tool_arguments(arguments: Any, ctx: ParseContext, tool_name: Optional[str] = None) -> Dict[str, Any]:
    """
    Decode tool call arguments.

    Arguments may arrive as a JSON string (OpenAI family) or an object
    (Anthropic, Gemini, Ollama). Malformed JSON is kept as a string under
    ``_raw_arguments`` with a warning.
    """
    if arguments is None or arguments == "":
        return {}
    if isinstance(arguments, dict):
        return dict(arguments)
    if isinstance(arguments, str):
        try:
            decoded = json.loads(arguments)
        except json.JSONDecodeError:
            ctx.warn(f"Malformed JSON arguments for tool {tool_name or '<unnamed>'!r}; keeping raw string")
            return {RAW_ARGUMENTS_KEY: arguments}
        if isinstance(decoded, dict):
            return decoded
        ctx.warn(f"Tool {tool_name or '<unnamed>'!r} arguments are not a JSON object; keeping raw string")
        return {RAW_ARGUMENTS_KEY: arguments}
    ctx.warn(f"Unsupported arguments type {type(arguments).__name__} for tool {tool_name or '<unnamed>'!r}")
    return {RAW_ARGUMENTS_KEY: str(arguments)}


def arguments_to_string(arguments: Any) -> str:
    """Render tool arguments as a JSON string (legacy function_call form)."""
    if arguments is None:
        return ""
    if isinstance(arguments, str):
        return arguments
    return json.dumps(arguments, sort_keys=True)


def image_from_url(url: str, media_type: Optional[str] = None) -> ImageContent:
    """
    Build an image block from a URL.

    ``data:`` URLs become base64 sources so that consumers see one shape
    for inline images.
    """
    if url.startswith("data:") and ";base64," in url:
        header, data = url.split(";base64,", 1)
        return ImageContent(source=ImageSource(
            type="base64", data=data, media_type=header[len("data:"):] or media_type
        ))
    return ImageContent(source=ImageSource(type="url", url=url, media_type=media_type))


def image_from_base64(data: str, media_type: Optional[str] = None) -> ImageContent:
    return ImageContent(source=ImageSource(type="base64", data=data, media_type=media_type))


def text_of(value: Any) -> str:
    """
    Flatten tool result content to a string.

    Strings pass through, lists of text blocks are joined, anything else
    is JSON encoded.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        pieces = []
        for item in value:
            if isinstance(item, dict) and isinstance(item.get("text"), str):
                pieces.append(item["text"])
            elif isinstance(item, dict) and "json" in item:
                pieces.append(json.dumps(item["json"], sort_keys=True))
            elif isinstance(item, str):
                pieces.append(item)
            else:
                pieces.append(json.dumps(item, sort_keys=True, default=str))
        return "".join(pieces)
    return json.dumps(value, sort_keys=True, default=str)
