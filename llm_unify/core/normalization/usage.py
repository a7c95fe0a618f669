"""
Usage normalization module.

Maps provider token counters onto TokenUsage. Every parser goes through
``extract_usage`` so totals are computed the same way everywhere.
"""

from typing import Any, Dict, Mapping, NamedTuple, Optional, Sequence

from ...models.unified import TokenUsage
from .context import ParseContext


class UsageFields(NamedTuple):
    """Provider field names for input, output and total token counts."""
    input: Sequence[str]
    output: Sequence[str]
    total: Sequence[str] = ()


OPENAI_USAGE = UsageFields(("prompt_tokens",), ("completion_tokens",), ("total_tokens",))
ANTHROPIC_USAGE = UsageFields(("input_tokens",), ("output_tokens",))
GOOGLE_USAGE = UsageFields(("promptTokenCount",), ("candidatesTokenCount",), ("totalTokenCount",))
BEDROCK_USAGE = UsageFields(("inputTokens",), ("outputTokens",), ("totalTokens",))
COHERE_USAGE = UsageFields(("input_tokens",), ("output_tokens",))
OLLAMA_USAGE = UsageFields(("prompt_eval_count",), ("eval_count",))
HUGGINGFACE_USAGE = UsageFields(("prompt_tokens", "input_tokens"), ("generated_tokens", "completion_tokens"), ("total_tokens",))

# OpenAI nests extra counters in *_tokens_details objects
DETAIL_COUNTERS = {
    "prompt_tokens_details": {
        "cached_tokens": "cached_tokens",
        "audio_tokens": "input_audio_tokens",
    },
    "completion_tokens_details": {
        "reasoning_tokens": "reasoning_tokens",
        "audio_tokens": "output_audio_tokens",
        "accepted_prediction_tokens": "accepted_prediction_tokens",
        "rejected_prediction_tokens": "rejected_prediction_tokens",
    },
}


def _as_count(value: Any, field: str, ctx: ParseContext) -> Optional[int]:
    """Coerce a token count to a non-negative int; None means absent."""
    if value is None:
        return None
    if isinstance(value, bool):
        ctx.warn(f"Ignoring non-numeric token count {field}={value!r}")
        return 0
    if isinstance(value, int):
        count = value
    elif isinstance(value, float) and value.is_integer():
        count = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        count = int(value.strip())
    else:
        ctx.warn(f"Ignoring non-numeric token count {field}={value!r}")
        return 0
    if count < 0:
        ctx.warn(f"Ignoring negative token count {field}={count}")
        return 0
    return count


def _first_count(usage_data: Mapping[str, Any], names: Sequence[str], ctx: ParseContext) -> Optional[int]:
    for name in names:
        if usage_data.get(name) is not None:
            return _as_count(usage_data[name], name, ctx)
    return None


def extract_usage(
    usage_data: Optional[Mapping[str, Any]],
    fields: UsageFields,
    ctx: ParseContext,
    extra: Optional[Dict[str, Any]] = None,
) -> TokenUsage:
    """
    Normalize provider usage data.

    Args:
        usage_data: Raw usage object from the provider (may be None)
        fields: Where this provider keeps its counters
        ctx: Parse context for coercion warnings
        extra: Additional counters to keep in usage metadata

    Returns:
        TokenUsage whose total is the provider's own total when reported,
        otherwise input + output. Counters outside ``fields`` are copied
        into metadata unchanged.
    """
    metadata: Dict[str, Any] = dict(extra or {})
    if not isinstance(usage_data, Mapping):
        if usage_data is not None:
            ctx.warn(f"Ignoring malformed usage data of type {type(usage_data).__name__}")
        return TokenUsage(metadata=metadata)

    input_tokens = _first_count(usage_data, fields.input, ctx)
    output_tokens = _first_count(usage_data, fields.output, ctx)
    total_tokens = _first_count(usage_data, fields.total, ctx)

    input_tokens = input_tokens or 0
    output_tokens = output_tokens or 0
    if total_tokens is None:
        total_tokens = input_tokens + output_tokens

    consumed = set(fields.input) | set(fields.output) | set(fields.total)
    for key, value in usage_data.items():
        if key not in consumed:
            metadata[key] = value

    # Flatten well-known nested counters next to the verbatim copies
    for details_key, counters in DETAIL_COUNTERS.items():
        details = usage_data.get(details_key)
        if isinstance(details, Mapping):
            for source, target in counters.items():
                if details.get(source) is not None and target not in metadata:
                    metadata[target] = details[source]

    return TokenUsage(
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        total_tokens=total_tokens,
        metadata=metadata,
    )
