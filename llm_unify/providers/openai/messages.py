"""
Chat completion message helpers.

Shared by every parser that speaks the OpenAI ``choices[].message`` format,
including Hugging Face TGI's chat endpoint.
"""

from typing import Any, Dict, List, Optional

from ...core.normalization import (
    ParseContext,
    image_from_url,
    normalize_role,
    parse_tool_arguments,
    stable_id,
    text_of,
)
from ...core.normalization.content import arguments_to_string
from ...models.unified import (
    Content,
    FunctionCallContent,
    MessageRole,
    TextContent,
    ToolResultContent,
    ToolUseContent,
    UnifiedError,
    UnifiedMessage,
)

# Message fields kept in response metadata (first choice only)
MESSAGE_EXTRAS = ("refusal", "reasoning_content", "annotations", "audio")


def _opt_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def content_parts(value: Any, ctx: ParseContext) -> List[Content]:
    """Convert ``message.content`` (string or list of parts) into content blocks."""
    if value is None or value == "":
        return []
    if isinstance(value, str):
        return [TextContent(text=value)]
    if not isinstance(value, list):
        ctx.warn(f"Ignoring message content of type {type(value).__name__}")
        return []

    blocks: List[Content] = []
    for part in value:
        if isinstance(part, str):
            blocks.append(TextContent(text=part))
            continue
        if not isinstance(part, dict):
            ctx.warn(f"Ignoring content part of type {type(part).__name__}")
            continue
        part_type = part.get("type")
        if part_type == "text":
            blocks.append(TextContent(text=str(part.get("text") or "")))
        elif part_type == "image_url":
            image = part.get("image_url")
            url = image.get("url") if isinstance(image, dict) else image
            if isinstance(url, str) and url:
                blocks.append(image_from_url(url))
        else:
            ctx.warn(f"Skipping unsupported content part type {part_type!r}")
    return blocks


def tool_use_from_call(call: Any, ctx: ParseContext, position: int) -> Optional[ToolUseContent]:
    if not isinstance(call, dict):
        ctx.warn(f"Ignoring malformed tool call at position {position}")
        return None
    function = call.get("function") or {}
    name = str(function.get("name") or "")
    arguments = function.get("arguments")
    return ToolUseContent(
        id=call.get("id") or stable_id("call", name, arguments, position),
        name=name,
        input=parse_tool_arguments(arguments, ctx, name),
    )


def message_from_choice(choice: Dict[str, Any], ctx: ParseContext) -> UnifiedMessage:
    """
    Build a UnifiedMessage from one entry of ``choices``.

    Handles text and multi-part content, ``tool_calls``, the legacy
    ``function_call``, tool role messages and legacy completion choices
    that only carry ``text``.
    """
    message = choice.get("message")
    if not isinstance(message, dict):
        text = choice.get("text")
        content = [TextContent(text=text)] if isinstance(text, str) and text else []
        return UnifiedMessage(role=MessageRole.ASSISTANT, content=content)

    role = normalize_role(message.get("role"), ctx)
    tool_call_id = message.get("tool_call_id")

    if role == MessageRole.TOOL and tool_call_id:
        content: List[Content] = [
            ToolResultContent(tool_use_id=str(tool_call_id), content=text_of(message.get("content")))
        ]
    else:
        content = content_parts(message.get("content"), ctx)

    for position, call in enumerate(message.get("tool_calls") or []):
        block = tool_use_from_call(call, ctx, position)
        if block is not None:
            content.append(block)

    function_call = message.get("function_call")
    if isinstance(function_call, dict):
        content.append(FunctionCallContent(
            name=str(function_call.get("name") or ""),
            arguments=arguments_to_string(function_call.get("arguments")),
        ))

    return UnifiedMessage(
        role=role,
        content=content,
        name=message.get("name"),
        tool_call_id=_opt_str(tool_call_id),
    )


def message_extras(choice: Dict[str, Any]) -> Dict[str, Any]:
    """Provider extras on a choice that have no canonical field."""
    extras: Dict[str, Any] = {}
    message = choice.get("message")
    if isinstance(message, dict):
        for key in MESSAGE_EXTRAS:
            if message.get(key) is not None:
                extras[key] = message[key]
    if choice.get("logprobs") is not None:
        extras["logprobs"] = choice["logprobs"]
    return extras


def extract_error(payload: Dict[str, Any]) -> Optional[UnifiedError]:
    """
    Read the ``{"error": {...}}`` envelope used by OpenAI-compatible APIs.

    A bare string error (``{"error": "..."}``) is accepted as well.
    """
    error = payload.get("error")
    if isinstance(error, dict):
        status = error.get("status")
        return UnifiedError(
            message=str(error.get("message") or "Unknown error"),
            code=_opt_str(error.get("code")),
            type=_opt_str(error.get("type")),
            status_code=status if isinstance(status, int) else None,
            details={
                key: value for key, value in error.items()
                if key not in ("message", "code", "type", "status")
            },
        )
    if isinstance(error, str) and error:
        return UnifiedError(
            message=error,
            type="error",
            details={key: value for key, value in payload.items() if key != "error"},
        )
    return None
