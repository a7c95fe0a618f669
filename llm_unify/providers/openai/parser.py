"""
OpenAI chat completions parser.

``OpenAICompatibleParser`` implements the shared ``choices[].message`` wire
format; OpenAI and the compatible providers only differ in metadata, stop
value tables and error envelopes.
"""

from typing import Any, Dict, Optional

from ...core.normalization import ParseContext
from ...core.normalization.stop_reasons import OPENAI_STOP_REASONS
from ...core.normalization.usage import OPENAI_USAGE
from ...models.provider_metadata import ProviderCapabilities, ProviderMetadata
from ...models.results import StreamChunk
from ...models.unified import Provider, UnifiedError, UnifiedResponse
from ..base import ProviderParser
from .messages import extract_error, message_extras, message_from_choice
from .streaming import chunk_fields

# Top-level fields with a canonical home
CONSUMED_KEYS = ("id", "model", "choices", "usage", "error")


class OpenAICompatibleParser(ProviderParser):
    """Parser for APIs speaking the OpenAI chat completions format."""

    stop_reasons = OPENAI_STOP_REASONS
    usage_fields = OPENAI_USAGE

    def extract_error(self, payload: Dict[str, Any]) -> Optional[UnifiedError]:
        return extract_error(payload)

    def validate(self, payload: Any, ctx: ParseContext) -> None:
        if not self.require_object(payload, ctx):
            return
        if self.extract_error(payload) is not None:
            return
        choices = payload.get("choices")
        if not isinstance(choices, list):
            ctx.error("missing required 'choices' array")
            return
        for i, choice in enumerate(choices):
            if not isinstance(choice, dict):
                ctx.error(f"choices[{i}] must be an object")
            elif not isinstance(choice.get("message"), dict) and not isinstance(choice.get("text"), str):
                ctx.error(f"choices[{i}] has no 'message' object")

    def build_response(self, payload: Dict[str, Any], raw: Any, ctx: ParseContext) -> UnifiedResponse:
        error = self.extract_error(payload)
        choices = payload.get("choices") or []
        if error is None and not choices:
            ctx.warn("Response contains no choices")

        messages = [message_from_choice(choice, ctx) for choice in choices]

        metadata = self.passthrough(payload, CONSUMED_KEYS)
        if choices:
            metadata.update(message_extras(choices[0]))
        if len(choices) > 1:
            metadata["finish_reasons"] = [choice.get("finish_reason") for choice in choices]

        return self.assemble(
            payload, raw, ctx, messages,
            model=payload.get("model"),
            given_id=payload.get("id"),
            stop_value=choices[0].get("finish_reason") if choices else None,
            usage=self.usage(payload.get("usage"), ctx),
            metadata=metadata,
            error=error,
        )

    def validate_chunk(self, payload: Any, ctx: ParseContext) -> None:
        if not self.require_object(payload, ctx):
            return
        if self.extract_error(payload) is not None:
            return
        if not isinstance(payload.get("choices"), list):
            ctx.error("stream chunk is missing the 'choices' array")

    def build_chunk(self, payload: Dict[str, Any], raw: Any, ctx: ParseContext) -> StreamChunk:
        fields = chunk_fields(payload, ctx, self.stop_reasons, self.usage_fields)
        error = self.extract_error(payload)
        if error is not None:
            fields["error"] = error
        return self.chunk(raw, **fields)


class OpenAIParser(OpenAICompatibleParser):
    provider = Provider.OPENAI
    metadata = ProviderMetadata(
        id=Provider.OPENAI,
        name="OpenAI",
        description="GPT and o-series models via the Chat Completions API",
        api_version="v1",
        base_url="https://api.openai.com/v1",
        docs_url="https://platform.openai.com/docs/api-reference/chat",
        authentication_type="bearer",
        capabilities=ProviderCapabilities(
            streaming=True,
            function_calling=True,
            tool_use=True,
            vision=True,
            json_mode=True,
            system_messages=True,
            max_context_window=128000,
            max_output_tokens=65536,
            modalities=("text", "image", "audio"),
        ),
    )
