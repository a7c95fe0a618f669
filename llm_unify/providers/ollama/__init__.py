from .parser import OllamaParser

__all__ = ["OllamaParser"]
