"""Anthropic Messages API parser."""

from typing import Any, Dict, Optional

from ...core.normalization import ParseContext, UsageFields, extract_usage, normalize_role
from ...core.normalization.stop_reasons import ANTHROPIC_STOP_REASONS
from ...core.normalization.usage import ANTHROPIC_USAGE
from ...models.provider_metadata import ProviderCapabilities, ProviderMetadata
from ...models.results import StreamChunk
from ...models.unified import Provider, UnifiedMessage, UnifiedResponse
from ..base import ProviderParser
from .blocks import blocks_to_content, extract_error, validate_blocks
from .streaming import event_fields

CONSUMED_KEYS = ("id", "model", "role", "content", "stop_reason", "usage", "error")


class AnthropicParser(ProviderParser):
    """
    Parser for the Messages API.

    A response is a single assistant message whose ``content`` is a list of
    typed blocks. Error bodies use ``{"type": "error", "error": {...}}``.
    """

    provider = Provider.ANTHROPIC
    stop_reasons = ANTHROPIC_STOP_REASONS
    usage_fields = ANTHROPIC_USAGE
    metadata = ProviderMetadata(
        id=Provider.ANTHROPIC,
        name="Anthropic",
        description="Claude models via the Messages API",
        api_version="2023-06-01",
        base_url="https://api.anthropic.com/v1",
        docs_url="https://docs.anthropic.com/en/api/messages",
        authentication_type="api_key",
        capabilities=ProviderCapabilities(
            streaming=True,
            function_calling=False,
            tool_use=True,
            vision=True,
            json_mode=False,
            system_messages=True,
            max_context_window=200000,
            max_output_tokens=64000,
            modalities=("text", "image"),
        ),
    )

    def validate(self, payload: Any, ctx: ParseContext) -> None:
        if not self.require_object(payload, ctx):
            return
        if extract_error(payload) is not None:
            return
        validate_blocks(payload.get("content"), ctx)

    def build_response(self, payload: Dict[str, Any], raw: Any, ctx: ParseContext) -> UnifiedResponse:
        return build_message_response(self, payload, raw, ctx)

    def validate_chunk(self, payload: Any, ctx: ParseContext) -> None:
        if not self.require_object(payload, ctx):
            return
        if not isinstance(payload.get("type"), str):
            ctx.error("stream event is missing its 'type'")

    def build_chunk(self, payload: Dict[str, Any], raw: Any, ctx: ParseContext) -> StreamChunk:
        return self.chunk(raw, **event_fields(payload, ctx, self.stop_reasons, self.usage_fields))


def build_message_response(
    parser: ProviderParser,
    payload: Dict[str, Any],
    raw: Any,
    ctx: ParseContext,
    usage_fields: Optional[UsageFields] = None,
) -> UnifiedResponse:
    """Build a response from a Messages API body on behalf of ``parser``."""
    error = extract_error(payload)
    messages = []
    metadata = parser.passthrough(payload, CONSUMED_KEYS)

    if error is None:
        content, extras = blocks_to_content(payload.get("content") or [], ctx)
        metadata.update(extras)
        messages.append(UnifiedMessage(role=normalize_role(payload.get("role"), ctx), content=content))

    return parser.assemble(
        payload, raw, ctx, messages,
        model=payload.get("model"),
        given_id=payload.get("id"),
        stop_value=payload.get("stop_reason"),
        usage=extract_usage(payload.get("usage"), usage_fields or parser.usage_fields, ctx),
        metadata=metadata,
        error=error,
    )
