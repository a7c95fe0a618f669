from .catalog import ModelEntry, ModelPricing
from .provider_metadata import ProviderCapabilities, ProviderMetadata
from .results import (
    DetectionMethod,
    DetectionResult,
    ParseResult,
    StreamChunk,
    StreamDelta,
    ToolCallDelta,
)
from .unified import (
    Content,
    ContentType,
    FunctionCallContent,
    ImageContent,
    ImageSource,
    MessageRole,
    ModelInfo,
    Provider,
    StopReason,
    StopReasonMetadata,
    TextContent,
    TokenUsage,
    ToolResultContent,
    ToolUseContent,
    UnifiedError,
    UnifiedMessage,
    UnifiedResponse,
    content_to_text,
)

__all__ = [
    "Content",
    "ContentType",
    "DetectionMethod",
    "DetectionResult",
    "FunctionCallContent",
    "ImageContent",
    "ImageSource",
    "MessageRole",
    "ModelEntry",
    "ModelInfo",
    "ModelPricing",
    "ParseResult",
    "Provider",
    "ProviderCapabilities",
    "ProviderMetadata",
    "StopReason",
    "StopReasonMetadata",
    "StreamChunk",
    "StreamDelta",
    "TextContent",
    "TokenUsage",
    "ToolCallDelta",
    "ToolResultContent",
    "ToolUseContent",
    "UnifiedError",
    "UnifiedMessage",
    "UnifiedResponse",
    "content_to_text",
]
