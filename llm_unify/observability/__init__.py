from .logging import ParserLogger

__all__ = ["ParserLogger"]
