"""
AWS Bedrock parser.

Two response bodies are accepted: the Converse API
(``output.message.content[]`` with camelCase fields) and InvokeModel bodies
for Claude models, which are Anthropic Messages responses.
"""

from typing import Any, Dict, List, Optional, Tuple

from ...core.normalization import (
    ParseContext,
    image_from_base64,
    normalize_role,
    normalize_stop_reason,
    parse_tool_arguments,
    stable_id,
    text_of,
)
from ...core.normalization.stop_reasons import BEDROCK_STOP_REASONS
from ...core.normalization.usage import ANTHROPIC_USAGE, BEDROCK_USAGE
from ...models.provider_metadata import ProviderCapabilities, ProviderMetadata
from ...models.results import StreamChunk, StreamDelta, ToolCallDelta
from ...models.unified import (
    Content,
    Provider,
    TextContent,
    ToolResultContent,
    ToolUseContent,
    UnifiedError,
    UnifiedMessage,
    UnifiedResponse,
)
from ..base import ProviderParser
from .blocks import extract_error as extract_anthropic_error
from .blocks import validate_blocks
from .parser import build_message_response
from .streaming import STREAM_EVENT_TYPES, event_fields

CONVERSE_CONSUMED_KEYS = ("output", "stopReason", "usage", "modelId")

# ConverseStream event names, wrapped form: {"contentBlockDelta": {...}}
CONVERSE_EVENTS = (
    "messageStart",
    "contentBlockStart",
    "contentBlockDelta",
    "contentBlockStop",
    "messageStop",
    "metadata",
)
STREAM_EXCEPTIONS = (
    "internalServerException",
    "modelStreamErrorException",
    "validationException",
    "throttlingException",
    "serviceUnavailableException",
)


def _converse_blocks(blocks: List[Any], ctx: ParseContext) -> Tuple[List[Content], Dict[str, Any]]:
    content: List[Content] = []
    extras: Dict[str, List[Any]] = {}

    for position, block in enumerate(blocks):
        if "text" in block:
            content.append(TextContent(text=str(block["text"] or "")))
        elif isinstance(block.get("toolUse"), dict):
            tool = block["toolUse"]
            name = str(tool.get("name") or "")
            content.append(ToolUseContent(
                id=tool.get("toolUseId") or stable_id("tooluse", name, tool.get("input"), position),
                name=name,
                input=parse_tool_arguments(tool.get("input"), ctx, name),
            ))
        elif isinstance(block.get("toolResult"), dict):
            result = block["toolResult"]
            status = result.get("status")
            content.append(ToolResultContent(
                tool_use_id=str(result.get("toolUseId") or ""),
                content=text_of(result.get("content")),
                is_error=None if status is None else status == "error",
            ))
        elif isinstance(block.get("image"), dict):
            image = block["image"]
            data = (image.get("source") or {}).get("bytes")
            if isinstance(data, str) and data:
                media_type = f"image/{image['format']}" if image.get("format") else None
                content.append(image_from_base64(data, media_type))
            else:
                ctx.warn("Skipping image block without inline bytes")
        elif "reasoningContent" in block:
            extras.setdefault("reasoning", []).append(block["reasoningContent"])
        else:
            ctx.warn(f"Unsupported Converse content block {sorted(block)!r} kept in metadata")
            extras.setdefault("unhandled_blocks", []).append(block)

    return content, extras


def _is_converse(payload: Dict[str, Any]) -> bool:
    return "output" in payload


def _unwrap_event(payload: Dict[str, Any]) -> Tuple[Optional[str], Dict[str, Any]]:
    """
    Identify a ConverseStream event.

    boto3 yields wrapped events (``{"contentBlockDelta": {...}}``); raw event
    stream frames carry only the body, so fall back to its fields.
    """
    for name in CONVERSE_EVENTS + STREAM_EXCEPTIONS:
        if isinstance(payload.get(name), dict):
            return name, payload[name]
    if "delta" in payload and "contentBlockIndex" in payload:
        return "contentBlockDelta", payload
    if "start" in payload and "contentBlockIndex" in payload:
        return "contentBlockStart", payload
    if "stopReason" in payload:
        return "messageStop", payload
    if "usage" in payload and "metrics" in payload:
        return "metadata", payload
    if "contentBlockIndex" in payload:
        return "contentBlockStop", payload
    if set(payload) == {"role"}:
        return "messageStart", payload
    return None, payload


class BedrockParser(ProviderParser):
    """Parser for Bedrock Converse and Claude InvokeModel responses."""

    provider = Provider.BEDROCK
    stop_reasons = BEDROCK_STOP_REASONS
    usage_fields = BEDROCK_USAGE
    metadata = ProviderMetadata(
        id=Provider.BEDROCK,
        name="AWS Bedrock",
        description="Foundation models hosted on Amazon Bedrock",
        base_url="https://bedrock-runtime.us-east-1.amazonaws.com",
        docs_url="https://docs.aws.amazon.com/bedrock/latest/APIReference/API_runtime_Converse.html",
        authentication_type="aws_sigv4",
        capabilities=ProviderCapabilities(
            streaming=True,
            tool_use=True,
            vision=True,
            system_messages=True,
            max_context_window=200000,
            max_output_tokens=8192,
            modalities=("text", "image", "document"),
        ),
    )

    def extract_error(self, payload: Dict[str, Any]) -> Optional[UnifiedError]:
        anthropic_error = extract_anthropic_error(payload)
        if anthropic_error is not None:
            return anthropic_error
        # AWS JSON error body: {"message": "..."} plus an optional "__type"
        message = payload.get("message") if "Message" not in payload else payload["Message"]
        if isinstance(message, str) and "output" not in payload and "content" not in payload:
            error_type = payload.get("__type")
            if isinstance(error_type, str) and "#" in error_type:
                error_type = error_type.rsplit("#", 1)[-1]
            return UnifiedError(message=message, code=error_type, type=error_type or "BedrockError")
        return None

    def validate(self, payload: Any, ctx: ParseContext) -> None:
        if not self.require_object(payload, ctx):
            return
        if self.extract_error(payload) is not None:
            return
        if _is_converse(payload):
            message = (payload.get("output") or {}).get("message") if isinstance(payload.get("output"), dict) else None
            if not isinstance(message, dict):
                ctx.error("missing required 'output.message' object")
                return
            blocks = message.get("content")
            if not isinstance(blocks, list) or not all(isinstance(b, dict) for b in blocks):
                ctx.error("missing required 'output.message.content' array")
        elif "content" in payload:
            validate_blocks(payload.get("content"), ctx)
        else:
            ctx.error("missing required 'output.message' (Converse) or 'content' (InvokeModel) field")

    def build_response(self, payload: Dict[str, Any], raw: Any, ctx: ParseContext) -> UnifiedResponse:
        error = self.extract_error(payload)
        if error is None and not _is_converse(payload):
            return build_message_response(self, payload, raw, ctx, usage_fields=ANTHROPIC_USAGE)

        messages = []
        metadata = self.passthrough(payload, CONVERSE_CONSUMED_KEYS)
        if error is None:
            message = payload["output"]["message"]
            content, extras = _converse_blocks(message["content"], ctx)
            metadata.update(extras)
            messages.append(UnifiedMessage(role=normalize_role(message.get("role"), ctx), content=content))

        response_metadata = payload.get("ResponseMetadata") or {}
        return self.assemble(
            payload, raw, ctx, messages,
            model=payload.get("modelId"),
            given_id=response_metadata.get("RequestId"),
            stop_value=payload.get("stopReason"),
            usage=self.usage(payload.get("usage"), ctx),
            metadata=metadata,
            error=error,
        )

    def validate_chunk(self, payload: Any, ctx: ParseContext) -> None:
        if not self.require_object(payload, ctx):
            return
        if payload.get("type") in STREAM_EVENT_TYPES:
            return
        event, _ = _unwrap_event(payload)
        if event is None:
            ctx.error("unrecognized Bedrock stream event")

    def build_chunk(self, payload: Dict[str, Any], raw: Any, ctx: ParseContext) -> StreamChunk:
        if payload.get("type") in STREAM_EVENT_TYPES:
            # InvokeModelWithResponseStream for Claude relays Anthropic events
            return self.chunk(raw, **event_fields(payload, ctx, self.stop_reasons, ANTHROPIC_USAGE))

        event, body = _unwrap_event(payload)
        index = body.get("contentBlockIndex")
        fields: Dict[str, Any] = {
            "event_type": event,
            "index": index if isinstance(index, int) else 0,
            "delta": StreamDelta(),
            "metadata": {},
        }

        if event == "messageStart":
            fields["delta"] = StreamDelta(role=normalize_role(body.get("role"), ctx))
        elif event == "contentBlockStart":
            tool = (body.get("start") or {}).get("toolUse") or {}
            if tool:
                fields["delta"] = StreamDelta(tool_call_delta=ToolCallDelta(
                    index=fields["index"], id=tool.get("toolUseId"), name=tool.get("name"), arguments="",
                ))
        elif event == "contentBlockDelta":
            delta = body.get("delta") or {}
            if "text" in delta:
                fields["delta"] = StreamDelta(text=delta["text"])
            elif isinstance(delta.get("toolUse"), dict):
                fields["delta"] = StreamDelta(tool_call_delta=ToolCallDelta(
                    index=fields["index"], arguments=delta["toolUse"].get("input"),
                ))
            else:
                fields["metadata"]["delta"] = delta
        elif event == "messageStop":
            fields["stop_reason"], _ = normalize_stop_reason(body.get("stopReason"), self.stop_reasons, ctx)
            if body.get("additionalModelResponseFields"):
                fields["metadata"]["additionalModelResponseFields"] = body["additionalModelResponseFields"]
        elif event == "metadata":
            if isinstance(body.get("usage"), dict):
                fields["usage"] = self.usage(body["usage"], ctx)
            for key in ("metrics", "trace"):
                if key in body:
                    fields["metadata"][key] = body[key]
        elif event in STREAM_EXCEPTIONS:
            fields["error"] = UnifiedError(
                message=str(body.get("message") or event),
                code=event,
                type=event,
                details={key: value for key, value in body.items() if key != "message"},
            )

        return self.chunk(raw, **fields)
