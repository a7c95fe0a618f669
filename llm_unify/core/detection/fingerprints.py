"""
Response-shape fingerprints.

Structural tests over a decoded payload. Strong fingerprints rely on keys
only one provider emits; weak ones on combinations another provider could
plausibly produce.
"""

import re
from typing import Any, Dict, Optional

from ...config.constants import (
    BEDROCK_MODEL_PATTERN,
    OPENAI_COMPATIBLE_PROVIDERS,
    OPENAI_FAMILY_AMBIGUITY_WARNING,
    SHAPE_CONFIDENCE,
    WEAK_SHAPE_CONFIDENCE,
)
from ...models.results import DetectionMethod
from ...models.unified import Provider
from ...providers.anthropic.bedrock import CONVERSE_EVENTS, STREAM_EXCEPTIONS
from ...providers.anthropic.streaming import STREAM_EVENT_TYPES
from .signals import Signal

# Providers whose parser accepts the ``choices`` format
CHOICES_FORMAT_PROVIDERS = OPENAI_COMPATIBLE_PROVIDERS | {Provider.HUGGINGFACE}

COHERE_V1_EVENTS = frozenset({
    "stream-start",
    "text-generation",
    "tool-calls-chunk",
    "tool-calls-generation",
    "citation-generation",
    "search-queries-generation",
    "search-results",
    "stream-end",
})
COHERE_V2_EVENTS = frozenset({
    "message-start",
    "content-start",
    "content-delta",
    "content-end",
    "tool-plan-delta",
    "tool-call-start",
    "tool-call-delta",
    "tool-call-end",
    "citation-start",
    "citation-end",
    "message-end",
})


def _shape(provider: Provider, confidence: float = SHAPE_CONFIDENCE, warnings=()) -> Signal:
    return Signal(provider, confidence, DetectionMethod.RESPONSE_FORMAT, tuple(warnings))


def _openai_family(payload: Dict[str, Any], model: Optional[Signal]) -> Signal:
    """Pick a member of the OpenAI-compatible family from a ``choices`` payload."""
    if "citations" in payload or "search_results" in payload:
        return _shape(Provider.PERPLEXITY)
    if model is not None and not model.ambiguous and model.provider in CHOICES_FORMAT_PROVIDERS:
        return _shape(model.provider)
    return _shape(Provider.OPENAI, warnings=(OPENAI_FAMILY_AMBIGUITY_WARNING,))


def _anthropic_or_bedrock(model_id: Optional[str]) -> Signal:
    if model_id and re.search(BEDROCK_MODEL_PATTERN, model_id.lower()):
        return _shape(Provider.BEDROCK)
    return _shape(Provider.ANTHROPIC)


def _typed_blocks(value: Any) -> bool:
    return isinstance(value, list) and all(
        isinstance(block, dict) and isinstance(block.get("type"), str) for block in value
    )


def response_fingerprint(payload: Any, model_id: Optional[str], model: Optional[Signal]) -> Optional[Signal]:
    """Fingerprint a complete (non-streaming) response body."""
    if isinstance(payload, list):
        if payload and all(isinstance(item, dict) and "generated_text" in item for item in payload):
            return _shape(Provider.HUGGINGFACE)
        return None
    if not isinstance(payload, dict) or not payload:
        return None

    if isinstance(payload.get("choices"), list):
        return _openai_family(payload, model)
    if payload.get("type") == "error" and isinstance(payload.get("error"), dict):
        return _anthropic_or_bedrock(model_id)
    if _typed_blocks(payload.get("content")) and (payload["content"] or payload.get("type") == "message"):
        return _anthropic_or_bedrock(model_id)
    if isinstance(payload.get("output"), dict) and "message" in payload["output"]:
        return _shape(Provider.BEDROCK)
    if isinstance(payload.get("candidates"), list) or isinstance(payload.get("promptFeedback"), dict):
        return _shape(Provider.GOOGLE)
    if isinstance(payload.get("text"), str) and "generation_id" in payload:
        return _shape(Provider.COHERE)
    if "done" in payload and ("message" in payload or "response" in payload):
        return _shape(Provider.OLLAMA)

    # Weaker fingerprints
    message = payload.get("message")
    if isinstance(message, dict) and isinstance(message.get("content"), list) and "finish_reason" in payload:
        return _shape(Provider.COHERE, WEAK_SHAPE_CONFIDENCE)
    if payload.get("object") == "error":
        return _shape(Provider.MISTRAL, WEAK_SHAPE_CONFIDENCE)
    error = payload.get("error")
    if isinstance(error, dict) and isinstance(error.get("status"), str) and "code" in error:
        return _shape(Provider.GOOGLE, WEAK_SHAPE_CONFIDENCE)
    if isinstance(payload.get("generated_text"), str):
        return _shape(Provider.HUGGINGFACE, WEAK_SHAPE_CONFIDENCE)
    if "estimated_time" in payload and "error" in payload:
        return _shape(Provider.HUGGINGFACE, WEAK_SHAPE_CONFIDENCE)
    if isinstance(payload.get("__type"), str):
        return _shape(Provider.BEDROCK, WEAK_SHAPE_CONFIDENCE)
    if isinstance(error, dict) and "message" in error and "type" in error:
        return _shape(Provider.OPENAI, WEAK_SHAPE_CONFIDENCE, (OPENAI_FAMILY_AMBIGUITY_WARNING,))
    return None


def chunk_fingerprint(payload: Any, model_id: Optional[str], model: Optional[Signal]) -> Optional[Signal]:
    """Fingerprint one streaming chunk; falls back to response fingerprints."""
    if not isinstance(payload, dict) or not payload:
        return None

    if isinstance(payload.get("choices"), list):
        return _openai_family(payload, model)
    if payload.get("type") in STREAM_EVENT_TYPES:
        return _anthropic_or_bedrock(model_id)
    if payload.get("event_type") in COHERE_V1_EVENTS or payload.get("type") in COHERE_V2_EVENTS:
        return _shape(Provider.COHERE)
    if any(isinstance(payload.get(name), dict) for name in CONVERSE_EVENTS + STREAM_EXCEPTIONS):
        return _shape(Provider.BEDROCK)
    if "contentBlockIndex" in payload:
        return _shape(Provider.BEDROCK, WEAK_SHAPE_CONFIDENCE)
    if isinstance(payload.get("candidates"), list):
        return _shape(Provider.GOOGLE)
    if isinstance(payload.get("token"), dict):
        return _shape(Provider.HUGGINGFACE)
    if "done" in payload and ("message" in payload or "response" in payload):
        return _shape(Provider.OLLAMA)
    return response_fingerprint(payload, model_id, model)
