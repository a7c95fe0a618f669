"""
Cohere chat parser.

Two API generations are in use:

- v1 ``/chat`` returns ``text``, ``generation_id``, ``tool_calls`` with
  ``parameters`` objects and token counts under ``meta.tokens``.
- v2 ``/v2/chat`` returns a ``message`` with a ``content`` array,
  OpenAI-like ``tool_calls`` and counts under ``usage.tokens``.

Both are handled by one parser; the payload decides which path is used.
"""

from typing import Any, Dict, Optional

from ...core.normalization import (
    ParseContext,
    normalize_role,
    parse_tool_arguments,
    stable_id,
)
from ...core.normalization.content import arguments_to_string
from ...core.normalization.stop_reasons import COHERE_STOP_REASONS
from ...core.normalization.usage import COHERE_USAGE
from ...models.provider_metadata import ProviderCapabilities, ProviderMetadata
from ...models.results import StreamChunk, StreamDelta, ToolCallDelta
from ...models.unified import (
    MessageRole,
    Provider,
    TextContent,
    ToolUseContent,
    UnifiedError,
    UnifiedMessage,
    UnifiedResponse,
)
from ..base import ProviderParser
from ..openai.messages import content_parts, tool_use_from_call

V1_CONSUMED_KEYS = ("text", "generation_id", "response_id", "finish_reason", "tool_calls", "meta", "model")
V2_CONSUMED_KEYS = ("id", "message", "finish_reason", "usage", "model")
MESSAGE_EXTRAS = ("tool_plan", "citations")


def _is_v2(payload: Dict[str, Any]) -> bool:
    return isinstance(payload.get("message"), dict)


def extract_error(payload: Dict[str, Any]) -> Optional[UnifiedError]:
    """Cohere errors are a bare ``{"message": "..."}`` object."""
    message = payload.get("message")
    if not isinstance(message, str) or "text" in payload or "generation_id" in payload:
        return None
    return UnifiedError(
        message=message,
        type="error",
        details={key: value for key, value in payload.items() if key != "message"},
    )


def _split_usage(block: Any) -> Optional[Dict[str, Any]]:
    """
    Flatten ``{"tokens": {...}, "billed_units": {...}}``.

    ``tokens`` holds the counts; billed units are kept under ``billed_*``
    keys in usage metadata.
    """
    if not isinstance(block, dict):
        return None
    counts = dict(block.get("tokens") or {})
    for key, value in (block.get("billed_units") or {}).items():
        counts[f"billed_{key}"] = value
    if not block.get("tokens") and isinstance(block.get("billed_units"), dict):
        # Older responses only report billed units
        for key in ("input_tokens", "output_tokens"):
            if key in block["billed_units"]:
                counts.setdefault(key, block["billed_units"][key])
    return counts


class CohereParser(ProviderParser):
    """Parser for Cohere Chat v1 and v2 responses."""

    provider = Provider.COHERE
    stop_reasons = COHERE_STOP_REASONS
    usage_fields = COHERE_USAGE
    metadata = ProviderMetadata(
        id=Provider.COHERE,
        name="Cohere",
        description="Command models via the Chat API",
        api_version="v2",
        base_url="https://api.cohere.com/v2",
        docs_url="https://docs.cohere.com/reference/chat",
        authentication_type="bearer",
        capabilities=ProviderCapabilities(
            streaming=True,
            function_calling=True,
            tool_use=True,
            json_mode=True,
            system_messages=True,
            max_context_window=128000,
            max_output_tokens=4096,
            modalities=("text",),
        ),
    )

    def validate(self, payload: Any, ctx: ParseContext) -> None:
        if not self.require_object(payload, ctx):
            return
        if extract_error(payload) is not None:
            return
        if _is_v2(payload):
            content = payload["message"].get("content")
            if content is not None and not isinstance(content, list):
                ctx.error("'message.content' must be an array")
        elif not isinstance(payload.get("text"), str):
            ctx.error("missing required 'text' (v1) or 'message' (v2) field")

    def build_response(self, payload: Dict[str, Any], raw: Any, ctx: ParseContext) -> UnifiedResponse:
        error = extract_error(payload)
        if error is not None:
            return self.assemble(payload, raw, ctx, [], metadata=self.passthrough(payload, ("message",)), error=error)
        if _is_v2(payload):
            return self._build_v2(payload, raw, ctx)
        return self._build_v1(payload, raw, ctx)

    def _build_v1(self, payload: Dict[str, Any], raw: Any, ctx: ParseContext) -> UnifiedResponse:
        content = [TextContent(text=payload["text"])] if payload["text"] else []
        for position, call in enumerate(payload.get("tool_calls") or []):
            if not isinstance(call, dict):
                ctx.warn(f"Ignoring malformed tool call at position {position}")
                continue
            name = str(call.get("name") or "")
            content.append(ToolUseContent(
                id=stable_id("call", name, call.get("parameters"), position),
                name=name,
                input=parse_tool_arguments(call.get("parameters"), ctx, name),
            ))

        meta = payload.get("meta") or {}
        metadata = self.passthrough(payload, V1_CONSUMED_KEYS)
        if payload.get("response_id"):
            metadata["response_id"] = payload["response_id"]
        if meta.get("api_version"):
            metadata["api_version"] = meta["api_version"]

        return self.assemble(
            payload, raw, ctx,
            [UnifiedMessage(role=MessageRole.ASSISTANT, content=content)],
            model=payload.get("model"),
            given_id=payload.get("generation_id") or payload.get("response_id"),
            stop_value=payload.get("finish_reason"),
            usage=self.usage(_split_usage(meta), ctx),
            metadata=metadata,
        )

    def _build_v2(self, payload: Dict[str, Any], raw: Any, ctx: ParseContext) -> UnifiedResponse:
        message = payload["message"]
        content = content_parts(message.get("content"), ctx)
        for position, call in enumerate(message.get("tool_calls") or []):
            block = tool_use_from_call(call, ctx, position)
            if block is not None:
                content.append(block)

        metadata = self.passthrough(payload, V2_CONSUMED_KEYS)
        metadata.update({key: message[key] for key in MESSAGE_EXTRAS if message.get(key) is not None})

        return self.assemble(
            payload, raw, ctx,
            [UnifiedMessage(role=normalize_role(message.get("role"), ctx), content=content)],
            model=payload.get("model"),
            given_id=payload.get("id"),
            stop_value=payload.get("finish_reason"),
            usage=self.usage(_split_usage(payload.get("usage")), ctx),
            metadata=metadata,
        )

    def validate_chunk(self, payload: Any, ctx: ParseContext) -> None:
        if not self.require_object(payload, ctx):
            return
        if not isinstance(payload.get("event_type") or payload.get("type"), str):
            ctx.error("stream event is missing its 'event_type' (v1) or 'type' (v2)")

    def build_chunk(self, payload: Dict[str, Any], raw: Any, ctx: ParseContext) -> StreamChunk:
        if isinstance(payload.get("event_type"), str):
            fields = self._v1_event(payload, ctx)
        else:
            fields = self._v2_event(payload, ctx)
        return self.chunk(raw, **fields)

    def _v1_event(self, payload: Dict[str, Any], ctx: ParseContext) -> Dict[str, Any]:
        event_type = payload["event_type"]
        fields: Dict[str, Any] = {"event_type": event_type, "delta": StreamDelta(), "metadata": {}}

        if event_type == "stream-start":
            fields["id"] = payload.get("generation_id")
            fields["delta"] = StreamDelta(role=MessageRole.ASSISTANT)
        elif event_type == "text-generation":
            fields["delta"] = StreamDelta(text=payload.get("text"))
        elif event_type == "tool-calls-chunk":
            call = payload.get("tool_call_delta") or {}
            if call:
                index = call.get("index")
                fields["delta"] = StreamDelta(tool_call_delta=ToolCallDelta(
                    index=index if isinstance(index, int) else 0,
                    name=call.get("name"),
                    arguments=arguments_to_string(call.get("parameters")) if "parameters" in call else None,
                ))
            elif payload.get("text"):
                fields["metadata"]["tool_plan"] = payload["text"]
        elif event_type == "tool-calls-generation":
            fields["metadata"]["tool_calls"] = payload.get("tool_calls") or []
        elif event_type in ("citation-generation", "search-queries-generation", "search-results"):
            fields["metadata"].update({key: value for key, value in payload.items() if key != "event_type"})
        elif event_type == "stream-end":
            response = payload.get("response") or {}
            fields["stop_reason"] = self.stop_reason(payload.get("finish_reason"), ctx)
            fields["id"] = response.get("generation_id")
            if isinstance(response.get("meta"), dict):
                fields["usage"] = self.usage(_split_usage(response["meta"]), ctx)
        else:
            ctx.warn(f"Unknown stream event type {event_type!r}")
        return fields

    def _v2_event(self, payload: Dict[str, Any], ctx: ParseContext) -> Dict[str, Any]:
        event_type = payload["type"]
        index = payload.get("index")
        delta = payload.get("delta") or {}
        message = delta.get("message") or {}
        fields: Dict[str, Any] = {
            "event_type": event_type,
            "index": index if isinstance(index, int) else 0,
            "delta": StreamDelta(),
            "metadata": {},
        }

        if event_type == "message-start":
            fields["id"] = payload.get("id")
            fields["delta"] = StreamDelta(role=normalize_role(message.get("role"), ctx))
        elif event_type in ("content-start", "content-delta"):
            text = (message.get("content") or {}).get("text")
            fields["delta"] = StreamDelta(text=text if text else None)
        elif event_type == "tool-plan-delta":
            fields["metadata"]["tool_plan"] = message.get("tool_plan")
        elif event_type in ("tool-call-start", "tool-call-delta"):
            call = message.get("tool_calls") or {}
            function = call.get("function") or {}
            fields["delta"] = StreamDelta(tool_call_delta=ToolCallDelta(
                index=fields["index"],
                id=call.get("id"),
                name=function.get("name"),
                arguments=function.get("arguments"),
            ))
        elif event_type in ("citation-start", "citation-end"):
            fields["metadata"]["citations"] = message.get("citations")
        elif event_type == "message-end":
            fields["stop_reason"] = self.stop_reason(delta.get("finish_reason"), ctx)
            if isinstance(delta.get("usage"), dict):
                fields["usage"] = self.usage(_split_usage(delta["usage"]), ctx)
            if isinstance(delta.get("error"), str):
                fields["error"] = UnifiedError(message=delta["error"], type="error")
        elif event_type not in ("content-end", "tool-call-end", "debug"):
            ctx.warn(f"Unknown stream event type {event_type!r}")
        return fields
