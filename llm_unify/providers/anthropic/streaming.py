"""Anthropic Messages streaming events."""

from typing import Any, Dict

from ...core.normalization import ParseContext, UsageFields, extract_usage, normalize_role, normalize_stop_reason
from ...core.normalization.stop_reasons import StopReasonTable
from ...models.results import StreamDelta, ToolCallDelta
from .blocks import extract_error

STREAM_EVENT_TYPES = frozenset({
    "message_start",
    "content_block_start",
    "content_block_delta",
    "content_block_stop",
    "message_delta",
    "message_stop",
    "ping",
    "error",
})


def event_fields(
    payload: Dict[str, Any],
    ctx: ParseContext,
    stop_reasons: StopReasonTable,
    usage_fields: UsageFields,
) -> Dict[str, Any]:
    """Map one server-sent event onto StreamChunk fields."""
    event_type = payload.get("type")
    index = payload.get("index")
    fields: Dict[str, Any] = {
        "event_type": event_type,
        "index": index if isinstance(index, int) else 0,
        "delta": StreamDelta(),
        "metadata": {},
    }

    if event_type == "message_start":
        message = payload.get("message") or {}
        fields["id"] = message.get("id")
        fields["model"] = message.get("model")
        fields["delta"] = StreamDelta(role=normalize_role(message.get("role"), ctx))
        if isinstance(message.get("usage"), dict):
            fields["usage"] = extract_usage(message["usage"], usage_fields, ctx)

    elif event_type == "content_block_start":
        block = payload.get("content_block") or {}
        if block.get("type") == "tool_use":
            fields["delta"] = StreamDelta(tool_call_delta=ToolCallDelta(
                index=fields["index"], id=block.get("id"), name=block.get("name"), arguments="",
            ))
        elif block.get("type") == "text":
            fields["delta"] = StreamDelta(text=block.get("text") or None)
        else:
            fields["metadata"]["content_block"] = block

    elif event_type == "content_block_delta":
        delta = payload.get("delta") or {}
        delta_type = delta.get("type")
        if delta_type == "text_delta":
            fields["delta"] = StreamDelta(text=delta.get("text"))
        elif delta_type == "input_json_delta":
            fields["delta"] = StreamDelta(tool_call_delta=ToolCallDelta(
                index=fields["index"], arguments=delta.get("partial_json"),
            ))
        elif delta_type in ("thinking_delta", "signature_delta", "citations_delta"):
            fields["metadata"][delta_type] = delta
        else:
            ctx.warn(f"Unsupported content block delta type {delta_type!r} kept in metadata")
            fields["metadata"]["unhandled_delta"] = delta

    elif event_type == "message_delta":
        delta = payload.get("delta") or {}
        if delta.get("stop_reason"):
            fields["stop_reason"], _ = normalize_stop_reason(delta["stop_reason"], stop_reasons, ctx)
        if delta.get("stop_sequence"):
            fields["metadata"]["stop_sequence"] = delta["stop_sequence"]
        if isinstance(payload.get("usage"), dict):
            fields["usage"] = extract_usage(payload["usage"], usage_fields, ctx)

    elif event_type == "error":
        fields["error"] = extract_error(payload)

    elif event_type not in STREAM_EVENT_TYPES:
        ctx.warn(f"Unknown stream event type {event_type!r}")

    return fields
