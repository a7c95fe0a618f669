"""
Transport and model-name detection signals.

Each function inspects one kind of evidence and returns a Signal, or None
when the evidence says nothing.
"""

import re
from typing import Any, Mapping, NamedTuple, Optional, Tuple

from ...config.constants import (
    AMBIGUOUS_MODEL_CONFIDENCE,
    AMBIGUOUS_MODEL_PATTERN,
    HEADER_CONFIDENCE,
    HEADER_SIGNALS,
    MODEL_CATALOG_CONFIDENCE,
    MODEL_NAME_PATTERNS,
    OPENAI_FAMILY_AMBIGUITY_WARNING,
    URL_SIGNALS,
)
from ...models.results import DetectionMethod
from ...models.unified import Provider
from ..catalog import ModelCatalog
from ..normalization import normalize_headers


class Signal(NamedTuple):
    provider: Provider
    confidence: float
    method: DetectionMethod
    warnings: Tuple[str, ...] = ()
    # True when the evidence fits several OpenAI-compatible providers
    ambiguous: bool = False


def header_signal(headers: Optional[Mapping[str, Any]]) -> Optional[Signal]:
    names = normalize_headers(headers).keys()
    for prefix, provider in HEADER_SIGNALS:
        if any(name.startswith(prefix) for name in names):
            return Signal(provider, HEADER_CONFIDENCE, DetectionMethod.HEADER)
    return None


def url_signal(url: Optional[str]) -> Optional[Signal]:
    if not url:
        return None
    lowered = str(url).lower()
    for pattern, provider, confidence in URL_SIGNALS:
        if re.search(pattern, lowered):
            return Signal(provider, confidence, DetectionMethod.URL)
    return None


def model_signal(model_id: Optional[str], catalog: ModelCatalog) -> Optional[Signal]:
    """
    Match a model id against the catalog, then the prefix table.

    Open-weight names (llama, mixtral, qwen...) that several OpenAI-compatible
    hosts serve resolve to openai with a warning.
    """
    if not model_id:
        return None
    owner = catalog.detect_provider_from_model(model_id)
    if owner is not None:
        return Signal(owner, MODEL_CATALOG_CONFIDENCE, DetectionMethod.MODEL_NAME)
    lowered = model_id.lower()
    for pattern, provider, confidence in MODEL_NAME_PATTERNS:
        if re.search(pattern, lowered):
            return Signal(provider, confidence, DetectionMethod.MODEL_NAME)
    if re.search(AMBIGUOUS_MODEL_PATTERN, lowered):
        return Signal(
            Provider.OPENAI,
            AMBIGUOUS_MODEL_CONFIDENCE,
            DetectionMethod.MODEL_NAME,
            (OPENAI_FAMILY_AMBIGUITY_WARNING,),
            ambiguous=True,
        )
    return None


def model_id_of(payload: Any) -> Optional[str]:
    """Find the model identifier wherever the provider puts it."""
    if isinstance(payload, list):
        payload = payload[0] if payload and isinstance(payload[0], dict) else {}
    if not isinstance(payload, dict):
        return None
    for key in ("model", "modelVersion", "modelId"):
        if isinstance(payload.get(key), str) and payload[key]:
            return payload[key]
    message = payload.get("message")
    if isinstance(message, dict) and isinstance(message.get("model"), str):
        return message["model"]
    return None
