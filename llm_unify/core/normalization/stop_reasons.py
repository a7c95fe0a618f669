"""
Stop reason normalization.

Each provider has an explicit table from its own finish/stop values to
StopReason. Values a provider documents but that have no canonical
counterpart map to UNKNOWN without a warning; values missing from the table
map to UNKNOWN with a warning. The original value is always preserved in
StopReasonMetadata.
"""

from typing import Any, Dict, Optional, Tuple

from ...errors import NormalizationWarning
from ...models.unified import StopReason, StopReasonMetadata
from .context import ParseContext

StopReasonTable = Dict[str, StopReason]


def stop_table(mapping: Dict[str, StopReason]) -> StopReasonTable:
    """Build a case-insensitive lookup table."""
    return {key.lower(): value for key, value in mapping.items()}


OPENAI_STOP_REASONS = stop_table({
    "stop": StopReason.END_TURN,
    "length": StopReason.MAX_TOKENS,
    "tool_calls": StopReason.TOOL_USE,
    "function_call": StopReason.TOOL_USE,
    "content_filter": StopReason.CONTENT_FILTER,
})

MISTRAL_STOP_REASONS = stop_table({
    "stop": StopReason.END_TURN,
    "length": StopReason.MAX_TOKENS,
    "model_length": StopReason.MAX_TOKENS,
    "tool_calls": StopReason.TOOL_USE,
    "error": StopReason.UNKNOWN,
})

TOGETHER_STOP_REASONS = stop_table({
    "stop": StopReason.END_TURN,
    "eos": StopReason.END_TURN,
    "length": StopReason.MAX_TOKENS,
    "tool_calls": StopReason.TOOL_USE,
    "function_call": StopReason.TOOL_USE,
    "content_filter": StopReason.CONTENT_FILTER,
})

ANTHROPIC_STOP_REASONS = stop_table({
    "end_turn": StopReason.END_TURN,
    "stop_sequence": StopReason.END_TURN,
    "max_tokens": StopReason.MAX_TOKENS,
    "model_context_window_exceeded": StopReason.MAX_TOKENS,
    "tool_use": StopReason.TOOL_USE,
    "refusal": StopReason.CONTENT_FILTER,
    "pause_turn": StopReason.UNKNOWN,
})

BEDROCK_STOP_REASONS = stop_table({
    "end_turn": StopReason.END_TURN,
    "stop_sequence": StopReason.END_TURN,
    "max_tokens": StopReason.MAX_TOKENS,
    "tool_use": StopReason.TOOL_USE,
    "guardrail_intervened": StopReason.CONTENT_FILTER,
    "content_filtered": StopReason.CONTENT_FILTER,
})

GOOGLE_STOP_REASONS = stop_table({
    "STOP": StopReason.END_TURN,
    "MAX_TOKENS": StopReason.MAX_TOKENS,
    "SAFETY": StopReason.CONTENT_FILTER,
    "RECITATION": StopReason.CONTENT_FILTER,
    "BLOCKLIST": StopReason.CONTENT_FILTER,
    "PROHIBITED_CONTENT": StopReason.CONTENT_FILTER,
    "SPII": StopReason.CONTENT_FILTER,
    "IMAGE_SAFETY": StopReason.CONTENT_FILTER,
    "MALFORMED_FUNCTION_CALL": StopReason.UNKNOWN,
    "LANGUAGE": StopReason.UNKNOWN,
    "OTHER": StopReason.UNKNOWN,
    "FINISH_REASON_UNSPECIFIED": StopReason.UNKNOWN,
})

# Prompt-level blocks reported in promptFeedback.blockReason
GOOGLE_BLOCK_REASONS = stop_table({
    "SAFETY": StopReason.CONTENT_FILTER,
    "BLOCKLIST": StopReason.CONTENT_FILTER,
    "PROHIBITED_CONTENT": StopReason.CONTENT_FILTER,
    "IMAGE_SAFETY": StopReason.CONTENT_FILTER,
    "OTHER": StopReason.CONTENT_FILTER,
    "BLOCK_REASON_UNSPECIFIED": StopReason.UNKNOWN,
})

COHERE_STOP_REASONS = stop_table({
    "COMPLETE": StopReason.END_TURN,
    "STOP_SEQUENCE": StopReason.END_TURN,
    "MAX_TOKENS": StopReason.MAX_TOKENS,
    "ERROR_LIMIT": StopReason.MAX_TOKENS,
    "TOOL_CALL": StopReason.TOOL_USE,
    "ERROR_TOXIC": StopReason.CONTENT_FILTER,
    "ERROR": StopReason.UNKNOWN,
    "USER_CANCEL": StopReason.UNKNOWN,
})

OLLAMA_STOP_REASONS = stop_table({
    "stop": StopReason.END_TURN,
    "length": StopReason.MAX_TOKENS,
    "load": StopReason.UNKNOWN,
    "unload": StopReason.UNKNOWN,
})

HUGGINGFACE_STOP_REASONS = stop_table({
    "eos_token": StopReason.END_TURN,
    "stop_sequence": StopReason.END_TURN,
    "stop": StopReason.END_TURN,
    "length": StopReason.MAX_TOKENS,
    "tool_calls": StopReason.TOOL_USE,
})


def normalize_stop_reason(
    value: Any,
    table: StopReasonTable,
    ctx: ParseContext,
) -> Tuple[StopReason, Optional[StopReasonMetadata]]:
    """
    Map a provider stop/finish value through ``table``.

    Returns:
        (stop_reason, metadata). Metadata is None when the provider reported
        no value at all.
    """
    if value is None or value == "":
        return StopReason.UNKNOWN, None
    original = str(value)
    reason = table.get(original.lower())
    if reason is None:
        ctx.warn(NormalizationWarning("stop reason", original, StopReason.UNKNOWN, ctx.provider.value))
        return StopReason.UNKNOWN, StopReasonMetadata(original_value=original, was_recognized=False)
    return reason, StopReasonMetadata(original_value=original, was_recognized=True)
