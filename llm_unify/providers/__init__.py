"""
Provider Parsers Layer

One parser per provider. Each parser translates that provider's response and
streaming chunk JSON into the canonical model defined in ``llm_unify.models``.
"""

from typing import List, Optional

from ..config.settings import Settings
from ..core.catalog import ModelCatalog
from .anthropic import AnthropicParser, BedrockParser
from .base import ProviderParser
from .cohere import CohereParser
from .google import GoogleParser
from .huggingface import HuggingFaceParser
from .ollama import OllamaParser
from .openai import (
    FireworksParser,
    MistralParser,
    OpenAICompatibleParser,
    OpenAIParser,
    PerplexityParser,
    TogetherParser,
    XAIParser,
)

BUILTIN_PARSERS = (
    OpenAIParser,
    AnthropicParser,
    GoogleParser,
    MistralParser,
    CohereParser,
    XAIParser,
    PerplexityParser,
    TogetherParser,
    FireworksParser,
    BedrockParser,
    HuggingFaceParser,
    OllamaParser,
)


def builtin_parsers(settings: Optional[Settings] = None, catalog: Optional[ModelCatalog] = None) -> List[ProviderParser]:
    """Instantiate one parser for every supported provider."""
    return [parser_class(settings=settings, catalog=catalog) for parser_class in BUILTIN_PARSERS]


__all__ = [
    "AnthropicParser",
    "BedrockParser",
    "BUILTIN_PARSERS",
    "CohereParser",
    "FireworksParser",
    "GoogleParser",
    "HuggingFaceParser",
    "MistralParser",
    "OllamaParser",
    "OpenAICompatibleParser",
    "OpenAIParser",
    "PerplexityParser",
    "ProviderParser",
    "TogetherParser",
    "XAIParser",
    "builtin_parsers",
]
