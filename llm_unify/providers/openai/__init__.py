from .compatible import FireworksParser, MistralParser, PerplexityParser, TogetherParser, XAIParser
from .parser import OpenAICompatibleParser, OpenAIParser

__all__ = [
    "FireworksParser",
    "MistralParser",
    "OpenAICompatibleParser",
    "OpenAIParser",
    "PerplexityParser",
    "TogetherParser",
    "XAIParser",
]
