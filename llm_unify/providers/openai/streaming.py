"""Normalization of ``chat.completion.chunk`` streaming events."""

from typing import Any, Dict, Optional

from ...core.normalization import ParseContext, UsageFields, extract_usage, normalize_role, normalize_stop_reason
from ...core.normalization.stop_reasons import StopReasonTable
from ...models.results import StreamDelta, ToolCallDelta
from .messages import extract_error

CHUNK_METADATA_KEYS = ("created", "system_fingerprint", "service_tier", "citations", "search_results")


def tool_call_delta(call: Any, position: int = 0) -> Optional[ToolCallDelta]:
    if not isinstance(call, dict):
        return None
    function = call.get("function") or {}
    index = call.get("index")
    return ToolCallDelta(
        index=index if isinstance(index, int) else position,
        id=call.get("id"),
        name=function.get("name"),
        arguments=function.get("arguments"),
    )


def _delta_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return "".join(
            part.get("text", "") for part in value
            if isinstance(part, dict) and part.get("type") == "text"
        )
    return None


def chunk_fields(
    payload: Dict[str, Any],
    ctx: ParseContext,
    stop_reasons: StopReasonTable,
    usage_fields: UsageFields,
) -> Dict[str, Any]:
    """
    Map one chunk onto StreamChunk fields.

    Only the first choice populates the delta; any further choices are kept
    in metadata untouched.
    """
    choices = payload.get("choices") or []
    first = choices[0] if choices and isinstance(choices[0], dict) else {}
    delta = first.get("delta")
    if not isinstance(delta, dict):
        delta = {}

    metadata: Dict[str, Any] = {key: payload[key] for key in CHUNK_METADATA_KEYS if key in payload}
    if len(choices) > 1:
        metadata["additional_choices"] = choices[1:]
    if delta.get("reasoning_content") is not None:
        metadata["reasoning_content"] = delta["reasoning_content"]
    if first.get("logprobs") is not None:
        metadata["logprobs"] = first["logprobs"]

    tool_delta = None
    tool_calls = delta.get("tool_calls") or []
    if tool_calls:
        tool_delta = tool_call_delta(tool_calls[0])
        if len(tool_calls) > 1:
            metadata["additional_tool_call_deltas"] = [
                d.model_dump() for d in (tool_call_delta(c, i) for i, c in enumerate(tool_calls[1:], 1)) if d
            ]
    elif isinstance(delta.get("function_call"), dict):
        function_call = delta["function_call"]
        tool_delta = ToolCallDelta(name=function_call.get("name"), arguments=function_call.get("arguments"))

    role = normalize_role(delta["role"], ctx) if delta.get("role") else None

    stop_reason = None
    if first.get("finish_reason"):
        stop_reason, _ = normalize_stop_reason(first["finish_reason"], stop_reasons, ctx)

    usage = None
    if isinstance(payload.get("usage"), dict):
        usage = extract_usage(payload["usage"], usage_fields, ctx)

    index = first.get("index", 0)
    model = payload.get("model")
    return {
        "id": payload.get("id") if isinstance(payload.get("id"), str) else None,
        "model": model if isinstance(model, str) else None,
        "index": index if isinstance(index, int) else 0,
        "event_type": payload.get("object") or "chat.completion.chunk",
        "delta": StreamDelta(text=_delta_text(delta.get("content")), tool_call_delta=tool_delta, role=role),
        "stop_reason": stop_reason,
        "usage": usage,
        "error": extract_error(payload),
        "metadata": metadata,
    }
