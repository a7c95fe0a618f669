"""
llm-unify - Provider response normalization for LLM APIs.

This package turns raw responses and streaming chunks from twelve LLM
providers into one canonical, typed representation:
- OpenAI-compatible APIs (OpenAI, Mistral, xAI, Perplexity, Together, Fireworks)
- Anthropic and AWS Bedrock
- Google Gemini, Cohere, Ollama and Hugging Face

Features:
- Provider detection from headers, URL, response shape and model name
- Stream chunk normalization
- Errors and warnings as values; nothing raises across the parse API
- Static model catalog with capability and pricing lookup
"""

__version__ = "0.1.0"

from .config.settings import Settings, load_settings
from .core.catalog import ModelCatalog, get_catalog
from .core.detection import ProviderDetector
from .core.registry import (
    ProviderRegistry,
    detect_provider,
    get_registry,
    parse_response,
    parse_stream_chunk,
    register,
    register_all_providers,
)
from .errors import (
    DetectionFailure,
    NormalizationWarning,
    ParserError,
    ProviderAPIError,
    ValidationError,
)
from .models import (
    Content,
    ContentType,
    DetectionMethod,
    DetectionResult,
    FunctionCallContent,
    ImageContent,
    ImageSource,
    MessageRole,
    ModelEntry,
    ModelInfo,
    ModelPricing,
    ParseResult,
    Provider,
    ProviderCapabilities,
    ProviderMetadata,
    StopReason,
    StopReasonMetadata,
    StreamChunk,
    StreamDelta,
    TextContent,
    TokenUsage,
    ToolCallDelta,
    ToolResultContent,
    ToolUseContent,
    UnifiedError,
    UnifiedMessage,
    UnifiedResponse,
)
from .providers import ProviderParser

__all__ = [
    # Registry and dispatch
    "ProviderRegistry",
    "ProviderDetector",
    "get_registry",
    "register",
    "register_all_providers",
    "parse_response",
    "parse_stream_chunk",
    "detect_provider",

    # Parser contract
    "ProviderParser",

    # Catalog
    "ModelCatalog",
    "get_catalog",

    # Configuration
    "Settings",
    "load_settings",

    # Models
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

    # Errors
    "ParserError",
    "ValidationError",
    "DetectionFailure",
    "NormalizationWarning",
    "ProviderAPIError",
]
