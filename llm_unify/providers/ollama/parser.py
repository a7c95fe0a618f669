"""
Ollama parser.

Covers ``/api/chat`` (``message``) and ``/api/generate`` (``response``).
Streaming chunks have the same shape as complete responses, with
``done: false`` until the final chunk.
"""

from typing import Any, Dict, List, Optional

from ...core.normalization import (
    ParseContext,
    image_from_base64,
    normalize_role,
    parse_tool_arguments,
    stable_id,
)
from ...core.normalization.content import arguments_to_string
from ...core.normalization.stop_reasons import OLLAMA_STOP_REASONS
from ...core.normalization.usage import OLLAMA_USAGE
from ...models.provider_metadata import ProviderCapabilities, ProviderMetadata
from ...models.results import StreamChunk, StreamDelta, ToolCallDelta
from ...models.unified import (
    Content,
    MessageRole,
    Provider,
    TextContent,
    ToolUseContent,
    UnifiedError,
    UnifiedMessage,
    UnifiedResponse,
)
from ..base import ProviderParser

CONSUMED_KEYS = ("model", "message", "response", "done", "done_reason", "prompt_eval_count", "eval_count", "error")
DURATION_KEYS = ("total_duration", "load_duration", "prompt_eval_duration", "eval_duration")


def extract_error(payload: Dict[str, Any]) -> Optional[UnifiedError]:
    error = payload.get("error")
    if not isinstance(error, str):
        return None
    return UnifiedError(message=error, type="error")


def _stop_value(payload: Dict[str, Any]) -> Optional[str]:
    if payload.get("done_reason"):
        return payload["done_reason"]
    # Older servers report only done=true for a normal finish
    if payload.get("done") is True:
        return "stop"
    return None


def _counts(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Token counters live at the top level of the response."""
    return {key: payload[key] for key in ("prompt_eval_count", "eval_count") if key in payload}


def _tool_calls(message: Dict[str, Any], ctx: ParseContext) -> List[ToolUseContent]:
    blocks = []
    for position, call in enumerate(message.get("tool_calls") or []):
        function = call.get("function") if isinstance(call, dict) else None
        if not isinstance(function, dict):
            ctx.warn(f"Ignoring malformed tool call at position {position}")
            continue
        name = str(function.get("name") or "")
        blocks.append(ToolUseContent(
            id=call.get("id") or stable_id("call", name, function.get("arguments"), position),
            name=name,
            input=parse_tool_arguments(function.get("arguments"), ctx, name),
        ))
    return blocks


class OllamaParser(ProviderParser):
    """Parser for a local Ollama server."""

    provider = Provider.OLLAMA
    stop_reasons = OLLAMA_STOP_REASONS
    usage_fields = OLLAMA_USAGE
    metadata = ProviderMetadata(
        id=Provider.OLLAMA,
        name="Ollama",
        description="Locally served open models",
        base_url="http://localhost:11434/api",
        docs_url="https://github.com/ollama/ollama/blob/main/docs/api.md",
        authentication_type="none",
        capabilities=ProviderCapabilities(
            streaming=True,
            function_calling=True,
            tool_use=True,
            vision=True,
            json_mode=True,
            system_messages=True,
            modalities=("text", "image"),
        ),
    )

    def validate(self, payload: Any, ctx: ParseContext) -> None:
        if not self.require_object(payload, ctx):
            return
        if extract_error(payload) is not None:
            return
        message = payload.get("message")
        if message is not None:
            if not isinstance(message, dict):
                ctx.error("'message' must be an object")
        elif not isinstance(payload.get("response"), str):
            ctx.error("missing required 'message' (chat) or 'response' (generate) field")

    def _message(self, payload: Dict[str, Any], ctx: ParseContext) -> UnifiedMessage:
        message = payload.get("message")
        if not isinstance(message, dict):
            text = payload.get("response") or ""
            return UnifiedMessage(role=MessageRole.ASSISTANT, content=[TextContent(text=text)] if text else [])

        content: List[Content] = []
        if message.get("content"):
            content.append(TextContent(text=str(message["content"])))
        for image in message.get("images") or []:
            if isinstance(image, str):
                content.append(image_from_base64(image))
        content.extend(_tool_calls(message, ctx))
        return UnifiedMessage(role=normalize_role(message.get("role"), ctx), content=content)

    def _metadata(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        metadata = self.passthrough(payload, CONSUMED_KEYS)
        message = payload.get("message")
        if isinstance(message, dict) and message.get("thinking"):
            metadata["thinking"] = message["thinking"]
        if payload.get("thinking"):
            metadata["thinking"] = payload["thinking"]
        return metadata

    def build_response(self, payload: Dict[str, Any], raw: Any, ctx: ParseContext) -> UnifiedResponse:
        error = extract_error(payload)
        messages = [] if error is not None else [self._message(payload, ctx)]
        return self.assemble(
            payload, raw, ctx, messages,
            model=payload.get("model"),
            stop_value=_stop_value(payload),
            usage=self.usage(_counts(payload), ctx),
            metadata=self._metadata(payload),
            error=error,
        )

    def validate_chunk(self, payload: Any, ctx: ParseContext) -> None:
        if not self.require_object(payload, ctx):
            return
        if extract_error(payload) is None and "message" not in payload and "response" not in payload:
            ctx.error("stream chunk has neither 'message' nor 'response'")

    def build_chunk(self, payload: Dict[str, Any], raw: Any, ctx: ParseContext) -> StreamChunk:
        message = payload.get("message")
        role = None
        text = payload.get("response") or None
        tool_delta = None
        metadata: Dict[str, Any] = {}

        if isinstance(message, dict):
            role = normalize_role(message["role"], ctx) if message.get("role") else None
            text = message.get("content") or None
            calls = [call for call in message.get("tool_calls") or [] if isinstance(call, dict)]
            if calls:
                # Ollama sends each tool call complete, never as fragments
                function = calls[0].get("function") or {}
                tool_delta = ToolCallDelta(
                    index=0,
                    id=calls[0].get("id"),
                    name=function.get("name"),
                    arguments=arguments_to_string(function.get("arguments")),
                )
                if len(calls) > 1:
                    metadata["additional_tool_calls"] = calls[1:]
            if message.get("thinking"):
                metadata["thinking"] = message["thinking"]

        usage = None
        if payload.get("done") is True:
            metadata.update({key: payload[key] for key in DURATION_KEYS if key in payload})
            usage = self.usage(_counts(payload), ctx)

        return self.chunk(
            raw,
            model=payload.get("model"),
            event_type="done" if payload.get("done") else "delta",
            delta=StreamDelta(text=text, tool_call_delta=tool_delta, role=role),
            stop_reason=self.stop_reason(_stop_value(payload), ctx),
            usage=usage,
            error=extract_error(payload),
            metadata=metadata,
        )
