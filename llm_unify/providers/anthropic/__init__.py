from .bedrock import BedrockParser
from .parser import AnthropicParser

__all__ = ["AnthropicParser", "BedrockParser"]
