from .registry import (
    ProviderRegistry,
    detect_provider,
    get_registry,
    parse_response,
    parse_stream_chunk,
    register,
    register_all_providers,
)

__all__ = [
    "ProviderRegistry",
    "detect_provider",
    "get_registry",
    "parse_response",
    "parse_stream_chunk",
    "register",
    "register_all_providers",
]
