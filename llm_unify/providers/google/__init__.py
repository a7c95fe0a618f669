from .parser import GoogleParser

__all__ = ["GoogleParser"]
