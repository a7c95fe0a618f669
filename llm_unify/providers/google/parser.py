"""
Google Gemini parser.

GenerateContent responses carry ``candidates[].content.parts[]``. Streaming
chunks are partial GenerateContentResponse objects with the same layout, so
the part conversion is shared.
"""

import json
from typing import Any, Dict, List, Optional, Tuple

from ...core.normalization import (
    ParseContext,
    image_from_base64,
    image_from_url,
    normalize_role,
    parse_tool_arguments,
    stable_id,
    text_of,
)
from ...core.normalization.stop_reasons import GOOGLE_BLOCK_REASONS, GOOGLE_STOP_REASONS
from ...core.normalization.usage import GOOGLE_USAGE
from ...models.provider_metadata import ProviderCapabilities, ProviderMetadata
from ...models.results import StreamChunk, StreamDelta, ToolCallDelta
from ...models.unified import (
    Content,
    Provider,
    StopReason,
    TextContent,
    ToolResultContent,
    ToolUseContent,
    UnifiedError,
    UnifiedMessage,
    UnifiedResponse,
)
from ..base import ProviderParser

CONSUMED_KEYS = ("candidates", "usageMetadata", "modelVersion", "responseId", "error")
CANDIDATE_METADATA_KEYS = ("safetyRatings", "citationMetadata", "groundingMetadata", "avgLogprobs", "logprobsResult")


def parts_to_content(parts: List[Any], ctx: ParseContext) -> Tuple[List[Content], Dict[str, Any]]:
    """Convert Gemini parts; thought parts and unknown parts go to extras."""
    content: List[Content] = []
    extras: Dict[str, List[Any]] = {}

    for position, part in enumerate(parts):
        if not isinstance(part, dict):
            ctx.warn(f"Ignoring content part of type {type(part).__name__}")
        elif part.get("thought") and "text" in part:
            extras.setdefault("thoughts", []).append(part["text"])
        elif "text" in part:
            content.append(TextContent(text=str(part["text"] or "")))
        elif isinstance(part.get("functionCall"), dict):
            call = part["functionCall"]
            name = str(call.get("name") or "")
            content.append(ToolUseContent(
                # Gemini only returns ids on some endpoints
                id=call.get("id") or stable_id("call", name, call.get("args"), position),
                name=name,
                input=parse_tool_arguments(call.get("args"), ctx, name),
            ))
        elif isinstance(part.get("functionResponse"), dict):
            response = part["functionResponse"]
            content.append(ToolResultContent(
                tool_use_id=str(response.get("id") or response.get("name") or ""),
                content=text_of(response.get("response")),
            ))
        elif isinstance(part.get("inlineData"), dict):
            inline = part["inlineData"]
            content.append(image_from_base64(str(inline.get("data") or ""), inline.get("mimeType")))
        elif isinstance(part.get("fileData"), dict):
            file_data = part["fileData"]
            content.append(image_from_url(str(file_data.get("fileUri") or ""), file_data.get("mimeType")))
        else:
            ctx.warn(f"Unsupported Gemini part {sorted(part)!r} kept in metadata")
            extras.setdefault("unhandled_parts", []).append(part)

    return content, extras


def extract_error(payload: Dict[str, Any]) -> Optional[UnifiedError]:
    """Read ``{"error": {"code": 400, "message": ..., "status": ...}}``."""
    error = payload.get("error")
    if not isinstance(error, dict):
        return None
    code = error.get("code")
    status = error.get("status")
    return UnifiedError(
        message=str(error.get("message") or "Unknown error"),
        code=status,
        type=status,
        status_code=code if isinstance(code, int) else None,
        details={key: value for key, value in error.items() if key not in ("code", "message", "status")},
    )


def _block_reason(payload: Dict[str, Any]) -> Optional[str]:
    feedback = payload.get("promptFeedback")
    if isinstance(feedback, dict) and feedback.get("blockReason"):
        return feedback["blockReason"]
    return None


class GoogleParser(ProviderParser):
    """Parser for Gemini GenerateContent responses."""

    provider = Provider.GOOGLE
    stop_reasons = GOOGLE_STOP_REASONS
    usage_fields = GOOGLE_USAGE
    metadata = ProviderMetadata(
        id=Provider.GOOGLE,
        name="Google Gemini",
        description="Gemini models via the Generative Language API",
        api_version="v1beta",
        base_url="https://generativelanguage.googleapis.com/v1beta",
        docs_url="https://ai.google.dev/api/generate-content",
        authentication_type="api_key",
        capabilities=ProviderCapabilities(
            streaming=True,
            function_calling=True,
            tool_use=True,
            vision=True,
            json_mode=True,
            system_messages=True,
            max_context_window=2097152,
            max_output_tokens=8192,
            modalities=("text", "image", "audio", "video"),
        ),
    )

    def validate(self, payload: Any, ctx: ParseContext) -> None:
        if not self.require_object(payload, ctx):
            return
        if extract_error(payload) is not None or _block_reason(payload):
            return
        candidates = payload.get("candidates")
        if not isinstance(candidates, list):
            ctx.error("missing required 'candidates' array")
            return
        for i, candidate in enumerate(candidates):
            if not isinstance(candidate, dict):
                ctx.error(f"candidates[{i}] must be an object")
                continue
            content = candidate.get("content")
            if content is not None and not isinstance(content, dict):
                ctx.error(f"candidates[{i}].content must be an object")
            elif isinstance(content, dict) and not isinstance(content.get("parts", []), list):
                ctx.error(f"candidates[{i}].content.parts must be an array")

    def build_response(self, payload: Dict[str, Any], raw: Any, ctx: ParseContext) -> UnifiedResponse:
        error = extract_error(payload)
        candidates = payload.get("candidates") or []
        metadata = self.passthrough(payload, CONSUMED_KEYS)
        if payload.get("modelVersion"):
            metadata["modelVersion"] = payload["modelVersion"]

        messages = []
        has_tool_call = False
        for candidate in candidates:
            content_obj = candidate.get("content") or {}
            content, extras = parts_to_content(content_obj.get("parts") or [], ctx)
            has_tool_call = has_tool_call or any(isinstance(block, ToolUseContent) for block in content)
            messages.append(UnifiedMessage(role=normalize_role(content_obj.get("role"), ctx), content=content))
            if candidate is candidates[0]:
                metadata.update(extras)
                metadata.update({key: candidate[key] for key in CANDIDATE_METADATA_KEYS if key in candidate})
        if len(candidates) > 1:
            metadata["finish_reasons"] = [candidate.get("finishReason") for candidate in candidates]

        stop_value = candidates[0].get("finishReason") if candidates else None
        stop_table = self.stop_reasons
        stop_override = None
        if not candidates and _block_reason(payload):
            # The prompt itself was rejected, nothing was generated
            stop_value = _block_reason(payload)
            stop_table = GOOGLE_BLOCK_REASONS
        elif error is None and not candidates:
            ctx.warn("Response contains no candidates")
        elif has_tool_call and str(stop_value).upper() == "STOP":
            # Gemini reports STOP for turns that end in a function call
            stop_override = StopReason.TOOL_USE

        return self.assemble(
            payload, raw, ctx, messages,
            model=payload.get("modelVersion") or payload.get("model"),
            given_id=payload.get("responseId"),
            stop_value=stop_value,
            stop_table=stop_table,
            stop_override=stop_override,
            usage=self.usage(payload.get("usageMetadata"), ctx),
            metadata=metadata,
            error=error,
        )

    def validate_chunk(self, payload: Any, ctx: ParseContext) -> None:
        if not self.require_object(payload, ctx):
            return
        if "candidates" in payload and not isinstance(payload["candidates"], list):
            ctx.error("stream chunk 'candidates' must be an array")

    def build_chunk(self, payload: Dict[str, Any], raw: Any, ctx: ParseContext) -> StreamChunk:
        candidates = payload.get("candidates") or []
        first = candidates[0] if candidates and isinstance(candidates[0], dict) else {}
        content_obj = first.get("content") or {}
        content, extras = parts_to_content(content_obj.get("parts") or [], ctx)

        metadata: Dict[str, Any] = dict(extras)
        metadata.update({key: first[key] for key in CANDIDATE_METADATA_KEYS if key in first})
        if payload.get("promptFeedback"):
            metadata["promptFeedback"] = payload["promptFeedback"]

        texts = [block.text for block in content if isinstance(block, TextContent)]
        tool_delta = None
        for position, block in enumerate(block for block in content if isinstance(block, ToolUseContent)):
            if tool_delta is None:
                tool_delta = ToolCallDelta(index=position, id=block.id, name=block.name, arguments=json.dumps(block.input))
            else:
                metadata.setdefault("additional_tool_calls", []).append(block.model_dump())

        stop_reason = self.stop_reason(first.get("finishReason"), ctx)
        if tool_delta is not None and stop_reason == StopReason.END_TURN:
            stop_reason = StopReason.TOOL_USE

        usage = None
        if isinstance(payload.get("usageMetadata"), dict):
            usage = self.usage(payload["usageMetadata"], ctx)

        index = first.get("index", 0)
        return self.chunk(
            raw,
            id=payload.get("responseId"),
            model=payload.get("modelVersion"),
            index=index if isinstance(index, int) else 0,
            event_type="generate_content_chunk",
            delta=StreamDelta(
                text="".join(texts) if texts else None,
                tool_call_delta=tool_delta,
                role=normalize_role(content_obj["role"], ctx) if content_obj.get("role") else None,
            ),
            stop_reason=stop_reason,
            usage=usage,
            error=extract_error(payload),
            metadata=metadata,
        )
