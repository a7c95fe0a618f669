from .content import (
    image_from_base64,
    image_from_url,
    parse_tool_arguments,
    response_id,
    stable_id,
    text_of,
)
from .context import ParseContext
from .payload import coerce_payload, normalize_headers, transport_hints
from .roles import normalize_role
from .stop_reasons import normalize_stop_reason
from .usage import UsageFields, extract_usage

__all__ = [
    "ParseContext",
    "UsageFields",
    "coerce_payload",
    "extract_usage",
    "image_from_base64",
    "image_from_url",
    "normalize_headers",
    "normalize_role",
    "normalize_stop_reason",
    "parse_tool_arguments",
    "response_id",
    "stable_id",
    "text_of",
    "transport_hints",
]
