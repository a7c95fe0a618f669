from .parser import HuggingFaceParser

__all__ = ["HuggingFaceParser"]
