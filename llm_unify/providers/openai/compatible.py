"""Providers that reuse the OpenAI chat completions format."""

from typing import Any, Dict, Optional

from ...core.normalization.stop_reasons import MISTRAL_STOP_REASONS, TOGETHER_STOP_REASONS
from ...models.provider_metadata import ProviderCapabilities, ProviderMetadata
from ...models.unified import Provider, UnifiedError
from .messages import extract_error
from .parser import OpenAICompatibleParser


class MistralParser(OpenAICompatibleParser):
    provider = Provider.MISTRAL
    stop_reasons = MISTRAL_STOP_REASONS
    metadata = ProviderMetadata(
        id=Provider.MISTRAL,
        name="Mistral AI",
        description="Mistral and Mixtral models",
        api_version="v1",
        base_url="https://api.mistral.ai/v1",
        docs_url="https://docs.mistral.ai/api/",
        authentication_type="bearer",
        capabilities=ProviderCapabilities(
            function_calling=True,
            tool_use=True,
            vision=True,
            json_mode=True,
            max_context_window=131072,
            max_output_tokens=8192,
            modalities=("text", "image"),
        ),
    )

    def extract_error(self, payload: Dict[str, Any]) -> Optional[UnifiedError]:
        # {"object": "error", "message": ..., "type": ..., "code": ...}
        if payload.get("object") == "error":
            code = payload.get("code")
            return UnifiedError(
                message=str(payload.get("message") or "Unknown error"),
                code=None if code is None else str(code),
                type=payload.get("type"),
                details={"param": payload["param"]} if payload.get("param") is not None else {},
            )
        # Request validation failures: {"detail": [{"loc": ..., "msg": ..., "type": ...}]}
        detail = payload.get("detail")
        if isinstance(detail, list) and "choices" not in payload:
            first = detail[0] if detail and isinstance(detail[0], dict) else {}
            return UnifiedError(
                message=str(first.get("msg") or "Request validation failed"),
                type="invalid_request_error",
                status_code=422,
                details={"detail": detail},
            )
        return extract_error(payload)


class XAIParser(OpenAICompatibleParser):
    provider = Provider.XAI
    metadata = ProviderMetadata(
        id=Provider.XAI,
        name="xAI",
        description="Grok models",
        api_version="v1",
        base_url="https://api.x.ai/v1",
        docs_url="https://docs.x.ai/api",
        authentication_type="bearer",
        capabilities=ProviderCapabilities(
            function_calling=True,
            tool_use=True,
            vision=True,
            json_mode=True,
            max_context_window=131072,
            max_output_tokens=32768,
            modalities=("text", "image"),
        ),
    )


class PerplexityParser(OpenAICompatibleParser):
    """Perplexity adds ``citations`` and ``search_results``; both land in metadata."""

    provider = Provider.PERPLEXITY
    metadata = ProviderMetadata(
        id=Provider.PERPLEXITY,
        name="Perplexity",
        description="Search-grounded Sonar models",
        base_url="https://api.perplexity.ai",
        docs_url="https://docs.perplexity.ai/api-reference",
        authentication_type="bearer",
        capabilities=ProviderCapabilities(
            json_mode=True,
            max_context_window=127072,
            max_output_tokens=8192,
        ),
    )


class TogetherParser(OpenAICompatibleParser):
    provider = Provider.TOGETHER
    stop_reasons = TOGETHER_STOP_REASONS
    metadata = ProviderMetadata(
        id=Provider.TOGETHER,
        name="Together AI",
        description="Hosted open-weight models",
        api_version="v1",
        base_url="https://api.together.xyz/v1",
        docs_url="https://docs.together.ai/reference",
        authentication_type="bearer",
        capabilities=ProviderCapabilities(
            function_calling=True,
            tool_use=True,
            vision=True,
            json_mode=True,
            max_context_window=131072,
            max_output_tokens=8192,
            modalities=("text", "image"),
        ),
    )


class FireworksParser(OpenAICompatibleParser):
    provider = Provider.FIREWORKS
    metadata = ProviderMetadata(
        id=Provider.FIREWORKS,
        name="Fireworks AI",
        description="Hosted open-weight models",
        api_version="v1",
        base_url="https://api.fireworks.ai/inference/v1",
        docs_url="https://docs.fireworks.ai/api-reference",
        authentication_type="bearer",
        capabilities=ProviderCapabilities(
            function_calling=True,
            tool_use=True,
            vision=True,
            json_mode=True,
            max_context_window=131072,
            max_output_tokens=16384,
            modalities=("text", "image"),
        ),
    )
