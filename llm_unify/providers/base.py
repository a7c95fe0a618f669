"""
Base Provider Parser Interface

This module defines the abstract base class for all provider parsers.
Each provider implementation translates one provider's JSON shape into the
canonical model and must implement the hooks declared here.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..config.constants import UNKNOWN_MODEL_ID
from ..config.settings import Settings, resolve_settings
from ..core.catalog import ModelCatalog, get_catalog
from ..core.normalization import (
    ParseContext,
    UsageFields,
    coerce_payload,
    extract_usage,
    normalize_stop_reason,
    response_id,
)
from ..core.normalization.stop_reasons import StopReasonTable
from ..errors import ParserError
from ..models.provider_metadata import ProviderMetadata
from ..models.results import ParseResult, StreamChunk
from ..models.unified import (
    ModelInfo,
    Provider,
    StopReason,
    TokenUsage,
    UnifiedError,
    UnifiedMessage,
    UnifiedResponse,
)
from ..observability.logging import ParserLogger


def _detach(value: Any, raw: Any) -> Any:
    """
    Deep-copy a built response or chunk so it shares no containers with the
    caller's input. ``raw`` itself is re-attached uncopied.
    """
    return value.model_copy(update={"raw": None}).model_copy(update={"raw": raw}, deep=True)


class ProviderParser(ABC):
    """
    Abstract base class for provider parsers.

    ``parse`` and ``parse_stream_chunk`` are fixed entry points: they coerce
    the input, run validation, call the provider hooks and convert every
    outcome into a ParseResult. Nothing raises across them.

    Subclasses implement:
    - ``validate``: report missing required fields as errors
    - ``build_response``: translate a validated payload
    - ``validate_chunk`` / ``build_chunk``: the same for streaming chunks

    All per-call state lives in the ParseContext passed to the hooks, so one
    parser instance can serve concurrent callers.
    """

    provider: Provider
    metadata: ProviderMetadata
    stop_reasons: StopReasonTable = {}
    usage_fields: UsageFields

    def __init__(self, settings: Optional[Settings] = None, catalog: Optional[ModelCatalog] = None):
        self.settings = resolve_settings(settings)
        self.catalog = catalog or get_catalog()
        self.logger = ParserLogger(self.provider.value)

    def get_metadata(self) -> ProviderMetadata:
        return self.metadata

    def parse(self, raw: Any) -> ParseResult:
        """
        Parse a complete provider response.

        Args:
            raw: Decoded JSON, bytes, str, SDK object or httpx.Response

        Returns:
            ParseResult with a UnifiedResponse on success. Structural problems
            yield success=False with errors; recoverable oddities are warnings.
        """
        return self._run("parse", raw, self.validate, self.build_response)

    def parse_stream_chunk(self, chunk: Any) -> ParseResult:
        """
        Parse one streaming chunk in isolation.

        Returns:
            ParseResult with a StreamChunk on success
        """
        return self._run("parse_stream_chunk", chunk, self.validate_chunk, self.build_chunk)

    def _run(self, method: str, raw: Any, validate: Callable, build: Callable) -> ParseResult:
        ctx = self.new_context()
        value = None
        with self.logger.track_parse(method) as tracking:
            try:
                payload = coerce_payload(raw)
                validate(payload, ctx)
                if not ctx.failed:
                    value = _detach(build(payload, raw, ctx), raw)
            except ParserError as e:
                ctx.error(e)
            except Exception as e:
                # A payload shape no hook anticipated; report it, never raise
                self.logger.error(f"Unexpected error in {method}", parse_id=tracking['parse_id'], error=e)
                ctx.errors.append(f"Unexpected error while parsing {self.provider.value} payload: {e}")

            tracking['success'] = not ctx.failed
            tracking['errors'] = len(ctx.errors)
            tracking['warnings'] = len(ctx.warnings)
            if isinstance(value, UnifiedResponse):
                tracking['model'] = value.model.id
                self.logger.log_usage(value.usage, value.model.id, tracking['parse_id'])

        if ctx.failed:
            return ParseResult.failure(ctx.errors, ctx.warnings)
        return ParseResult.ok(value, ctx.warnings)

    def new_context(self) -> ParseContext:
        return ParseContext(self.provider, fallback_role=self.settings.fallback_role)

    # Hooks

    @abstractmethod
    def validate(self, payload: Any, ctx: ParseContext) -> None:
        """Record an error in ``ctx`` for every missing or malformed required field."""

    @abstractmethod
    def build_response(self, payload: Any, raw: Any, ctx: ParseContext) -> UnifiedResponse:
        """Translate a validated payload into a UnifiedResponse."""

    def validate_chunk(self, payload: Any, ctx: ParseContext) -> None:
        if not isinstance(payload, dict):
            ctx.error("stream chunk must be a JSON object")

    @abstractmethod
    def build_chunk(self, payload: Any, raw: Any, ctx: ParseContext) -> StreamChunk:
        """Translate one validated streaming chunk."""

    # Shared helpers

    def require_object(self, payload: Any, ctx: ParseContext) -> bool:
        if not isinstance(payload, dict):
            ctx.error(f"expected a JSON object, got {type(payload).__name__}")
            return False
        return True

    def model_info(self, model_id: Any) -> ModelInfo:
        """Describe the model, enriched from the catalog when it is known."""
        if not isinstance(model_id, str) or not model_id:
            return ModelInfo(id=UNKNOWN_MODEL_ID)
        entry = self.catalog.get_model(model_id, self.provider)
        if entry is None:
            return ModelInfo(id=model_id)
        return ModelInfo(
            id=model_id,
            display_name=entry.display_name,
            context_window=entry.context_window,
            max_output_tokens=entry.max_output_tokens,
        )

    def usage(self, usage_data: Any, ctx: ParseContext, extra: Optional[Dict[str, Any]] = None) -> TokenUsage:
        return extract_usage(usage_data, self.usage_fields, ctx, extra)

    def stop_reason(self, value: Any, ctx: ParseContext, table: Optional[StopReasonTable] = None) -> Optional[StopReason]:
        """Normalize a chunk-level stop value; None when the chunk carries none."""
        if value is None or value == "":
            return None
        reason, _ = normalize_stop_reason(value, table if table is not None else self.stop_reasons, ctx)
        return reason

    @staticmethod
    def passthrough(payload: Dict[str, Any], consumed: Iterable[str]) -> Dict[str, Any]:
        """Copy top-level fields without a canonical home into metadata."""
        skip = set(consumed)
        return {key: value for key, value in payload.items() if key not in skip}

    def assemble(
        self,
        payload: Any,
        raw: Any,
        ctx: ParseContext,
        messages: List[UnifiedMessage],
        model: Any = None,
        given_id: Any = None,
        stop_value: Any = None,
        stop_table: Optional[StopReasonTable] = None,
        stop_override: Optional[StopReason] = None,
        usage: Optional[TokenUsage] = None,
        metadata: Optional[Dict[str, Any]] = None,
        error: Optional[UnifiedError] = None,
    ) -> UnifiedResponse:
        """
        Build the UnifiedResponse common to every provider.

        Args:
            stop_value: Provider stop/finish value, normalized via ``stop_table``
            stop_override: Canonical reason to report instead of the table result
                (the original value is still recorded in stop_reason_metadata)
        """
        stop, stop_metadata = normalize_stop_reason(
            stop_value, stop_table if stop_table is not None else self.stop_reasons, ctx
        )
        if stop_override is not None:
            stop = stop_override
        return UnifiedResponse(
            id=response_id(self.provider, payload, given_id),
            provider=self.provider,
            model=self.model_info(model),
            messages=messages,
            stop_reason=stop,
            stop_reason_metadata=stop_metadata,
            usage=usage or TokenUsage(),
            metadata=metadata or {},
            error=error,
            raw=raw,
        )

    def chunk(self, raw: Any, **fields) -> StreamChunk:
        return StreamChunk(provider=self.provider, raw=raw, **fields)
