"""
Anthropic Messages content blocks.

Used by the Anthropic parser and by Bedrock's InvokeModel responses for
Claude models, which carry the same body.
"""

from typing import Any, Dict, List, Optional, Tuple

from ...core.normalization import (
    ParseContext,
    image_from_base64,
    image_from_url,
    parse_tool_arguments,
    stable_id,
    text_of,
)
from ...models.unified import Content, TextContent, ToolResultContent, ToolUseContent, UnifiedError

# Blocks kept in metadata instead of message content
THINKING_BLOCKS = ("thinking", "redacted_thinking")
SERVER_TOOL_BLOCKS = ("server_tool_use", "web_search_tool_result", "code_execution_tool_result")


def _image_block(block: Dict[str, Any]) -> Optional[Content]:
    source = block.get("source") or {}
    if source.get("type") == "base64" and source.get("data"):
        return image_from_base64(source["data"], source.get("media_type"))
    if source.get("type") == "url" and source.get("url"):
        return image_from_url(source["url"], source.get("media_type"))
    return None


def blocks_to_content(blocks: List[Any], ctx: ParseContext) -> Tuple[List[Content], Dict[str, Any]]:
    """
    Convert Anthropic content blocks.

    Returns:
        (content, extras) where extras holds thinking and server tool blocks
        under metadata keys.
    """
    content: List[Content] = []
    extras: Dict[str, List[Any]] = {}

    for position, block in enumerate(blocks):
        block_type = block.get("type")
        if block_type == "text":
            content.append(TextContent(text=str(block.get("text") or "")))
            if block.get("citations"):
                extras.setdefault("citations", []).extend(block["citations"])
        elif block_type == "tool_use":
            name = str(block.get("name") or "")
            content.append(ToolUseContent(
                id=block.get("id") or stable_id("toolu", name, block.get("input"), position),
                name=name,
                input=parse_tool_arguments(block.get("input"), ctx, name),
            ))
        elif block_type == "tool_result":
            content.append(ToolResultContent(
                tool_use_id=str(block.get("tool_use_id") or ""),
                content=text_of(block.get("content")),
                is_error=block.get("is_error"),
            ))
        elif block_type == "image":
            image = _image_block(block)
            if image is not None:
                content.append(image)
            else:
                ctx.warn("Skipping image block without a usable source")
        elif block_type in THINKING_BLOCKS:
            extras.setdefault("thinking", []).append(block)
        elif block_type in SERVER_TOOL_BLOCKS:
            extras.setdefault("server_tool_blocks", []).append(block)
        else:
            ctx.warn(f"Unsupported content block type {block_type!r} kept in metadata")
            extras.setdefault("unhandled_blocks", []).append(block)

    return content, extras


def validate_blocks(blocks: Any, ctx: ParseContext, field: str = "content") -> None:
    if not isinstance(blocks, list):
        ctx.error(f"missing required '{field}' array")
        return
    for i, block in enumerate(blocks):
        if not isinstance(block, dict) or not isinstance(block.get("type"), str):
            ctx.error(f"{field}[{i}] must be an object with a 'type'")


def extract_error(payload: Dict[str, Any]) -> Optional[UnifiedError]:
    """Read ``{"type": "error", "error": {"type": ..., "message": ...}}``."""
    error = payload.get("error")
    if payload.get("type") != "error" and not isinstance(error, dict):
        return None
    if not isinstance(error, dict):
        error = {}
    error_type = error.get("type")
    details = {key: value for key, value in error.items() if key not in ("type", "message")}
    if payload.get("request_id"):
        details["request_id"] = payload["request_id"]
    return UnifiedError(
        message=str(error.get("message") or "Unknown error"),
        code=error_type,
        type=error_type,
        details=details,
    )
