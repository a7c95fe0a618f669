"""
Hugging Face parser.

The Inference API and Text Generation Inference (TGI) return several
shapes depending on the task and endpoint:

- text generation: ``[{"generated_text": ...}]`` or a single object with
  optional ``details``
- conversational: ``generated_text`` plus a ``conversation`` history
- TGI ``/v1/chat/completions``: the OpenAI ``choices`` format
"""

from typing import Any, Dict, List, Optional

from ...core.normalization import ParseContext
from ...core.normalization.stop_reasons import HUGGINGFACE_STOP_REASONS
from ...core.normalization.usage import HUGGINGFACE_USAGE
from ...models.provider_metadata import ProviderCapabilities, ProviderMetadata
from ...models.results import StreamChunk, StreamDelta
from ...models.unified import MessageRole, Provider, TextContent, UnifiedError, UnifiedMessage, UnifiedResponse
from ..base import ProviderParser
from ..openai.messages import message_extras, message_from_choice
from ..openai.streaming import chunk_fields

CHAT_CONSUMED_KEYS = ("id", "model", "choices", "usage", "error")
GENERATION_CONSUMED_KEYS = ("generated_text", "details", "conversation", "model", "error")


def extract_error(payload: Any) -> Optional[UnifiedError]:
    """Read ``{"error": "...", "estimated_time": 20.0}``; ``error`` may be a list."""
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if isinstance(error, list):
        error = "; ".join(str(item) for item in error)
    if isinstance(error, dict):
        return UnifiedError(
            message=str(error.get("message") or "Unknown error"),
            code=error.get("code") if isinstance(error.get("code"), str) else None,
            type=error.get("type") if isinstance(error.get("type"), str) else None,
            details={key: value for key, value in error.items() if key not in ("message", "code", "type")},
        )
    if not isinstance(error, str) or not error:
        return None
    error_type = payload.get("error_type")
    details = {key: value for key, value in payload.items() if key not in ("error", "error_type")}
    return UnifiedError(
        message=error,
        # A model that is still loading answers 503 with an estimated_time
        type=error_type if isinstance(error_type, str) else ("model_loading" if "estimated_time" in payload else "error"),
        status_code=503 if "estimated_time" in payload else None,
        details=details,
    )


def _is_chat(payload: Any) -> bool:
    return isinstance(payload, dict) and isinstance(payload.get("choices"), list)


def _generated_usage(details: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(details, dict):
        return None
    counts: Dict[str, Any] = {}
    if details.get("generated_tokens") is not None:
        counts["generated_tokens"] = details["generated_tokens"]
    # prefill tokens are only listed when decoder_input_details was requested
    if isinstance(details.get("prefill"), list) and details["prefill"]:
        counts["prompt_tokens"] = len(details["prefill"])
    return counts


class HuggingFaceParser(ProviderParser):
    """Parser for the Hugging Face Inference API and TGI servers."""

    provider = Provider.HUGGINGFACE
    stop_reasons = HUGGINGFACE_STOP_REASONS
    usage_fields = HUGGINGFACE_USAGE
    metadata = ProviderMetadata(
        id=Provider.HUGGINGFACE,
        name="Hugging Face",
        description="Hosted inference and Text Generation Inference servers",
        base_url="https://api-inference.huggingface.co/models",
        docs_url="https://huggingface.co/docs/text-generation-inference",
        authentication_type="bearer",
        capabilities=ProviderCapabilities(
            streaming=True,
            function_calling=True,
            tool_use=True,
            json_mode=True,
            system_messages=True,
            modalities=("text",),
        ),
    )

    def validate(self, payload: Any, ctx: ParseContext) -> None:
        if isinstance(payload, list):
            if not payload:
                ctx.error("generation list is empty")
            for i, item in enumerate(payload):
                if not isinstance(item, dict) or not isinstance(item.get("generated_text"), str):
                    ctx.error(f"[{i}] must be an object with 'generated_text'")
            return
        if not self.require_object(payload, ctx):
            return
        if extract_error(payload) is not None:
            return
        if _is_chat(payload):
            for i, choice in enumerate(payload["choices"]):
                if not isinstance(choice, dict) or not isinstance(choice.get("message"), dict):
                    ctx.error(f"choices[{i}] has no 'message' object")
        elif not isinstance(payload.get("generated_text"), str):
            ctx.error("missing required 'generated_text' or 'choices' field")

    def build_response(self, payload: Any, raw: Any, ctx: ParseContext) -> UnifiedResponse:
        if isinstance(payload, list):
            return self._build_generations(payload, payload, raw, ctx)
        error = extract_error(payload)
        if error is not None:
            return self.assemble(
                payload, raw, ctx, [],
                model=payload.get("model"),
                metadata=self.passthrough(payload, ("error", "error_type", "model")),
                error=error,
            )
        if _is_chat(payload):
            return self._build_chat(payload, raw, ctx)
        return self._build_generations(payload, [payload], raw, ctx)

    def _build_chat(self, payload: Dict[str, Any], raw: Any, ctx: ParseContext) -> UnifiedResponse:
        choices = payload["choices"]
        if not choices:
            ctx.warn("Response contains no choices")
        metadata = self.passthrough(payload, CHAT_CONSUMED_KEYS)
        if choices:
            metadata.update(message_extras(choices[0]))
        if len(choices) > 1:
            metadata["finish_reasons"] = [choice.get("finish_reason") for choice in choices]
        return self.assemble(
            payload, raw, ctx,
            [message_from_choice(choice, ctx) for choice in choices],
            model=payload.get("model"),
            given_id=payload.get("id"),
            stop_value=choices[0].get("finish_reason") if choices else None,
            usage=self.usage(payload.get("usage"), ctx),
            metadata=metadata,
        )

    def _build_generations(self, payload: Any, items: List[Dict[str, Any]], raw: Any, ctx: ParseContext) -> UnifiedResponse:
        first = items[0]
        messages = [
            UnifiedMessage(
                role=MessageRole.ASSISTANT,
                content=[TextContent(text=item["generated_text"])] if item["generated_text"] else [],
            )
            for item in items
        ]

        metadata = self.passthrough(first, GENERATION_CONSUMED_KEYS)
        details = first.get("details")
        if isinstance(details, dict):
            metadata.update({key: details[key] for key in ("seed", "tokens", "best_of_sequences") if key in details})
        conversation = first.get("conversation")
        if isinstance(conversation, dict):
            metadata["conversation"] = conversation
        if len(items) > 1:
            metadata["num_generations"] = len(items)

        return self.assemble(
            payload, raw, ctx, messages,
            model=first.get("model"),
            stop_value=details.get("finish_reason") if isinstance(details, dict) else None,
            usage=self.usage(_generated_usage(details), ctx),
            metadata=metadata,
        )

    def validate_chunk(self, payload: Any, ctx: ParseContext) -> None:
        if not self.require_object(payload, ctx):
            return
        if extract_error(payload) is not None or _is_chat(payload):
            return
        if "token" not in payload and "generated_text" not in payload:
            ctx.error("stream chunk has neither 'token' nor 'choices'")

    def build_chunk(self, payload: Dict[str, Any], raw: Any, ctx: ParseContext) -> StreamChunk:
        if _is_chat(payload):
            return self.chunk(raw, **chunk_fields(payload, ctx, self.stop_reasons, self.usage_fields))

        token = payload.get("token")
        metadata: Dict[str, Any] = {}
        text = None
        if isinstance(token, dict):
            metadata["token"] = {key: token[key] for key in ("id", "logprob", "special") if key in token}
            # Special tokens (e.g. </s>) are not part of the generated text
            if not token.get("special"):
                text = token.get("text")

        details = payload.get("details")
        usage = None
        stop_reason = None
        if isinstance(details, dict):
            stop_reason = self.stop_reason(details.get("finish_reason"), ctx)
            usage = self.usage(_generated_usage(details), ctx)
        if isinstance(payload.get("generated_text"), str):
            metadata["generated_text"] = payload["generated_text"]

        index = payload.get("index", 0)
        return self.chunk(
            raw,
            index=index if isinstance(index, int) else 0,
            event_type="token" if details is None else "final",
            delta=StreamDelta(text=text),
            stop_reason=stop_reason,
            usage=usage,
            error=extract_error(payload),
            metadata=metadata,
        )
