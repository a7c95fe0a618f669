from .parser import CohereParser

__all__ = ["CohereParser"]
