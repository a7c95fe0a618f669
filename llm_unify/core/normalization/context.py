from typing import List, Union

from ...errors import NormalizationWarning, ParserError, ValidationError
from ...models.unified import MessageRole, Provider


class ParseContext:
    """
    Errors and warnings collected during one parse call.

    A fresh context is created per call, so parser instances stay free of
    per-call state and can be shared between threads.
    """

    def __init__(self, provider: Provider, fallback_role: MessageRole = MessageRole.USER):
        self.provider = provider
        self.fallback_role = fallback_role
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def error(self, message: Union[str, ParserError]) -> None:
        """Record a structural problem; plain strings are validation errors."""
        if isinstance(message, str):
            message = ValidationError(message, self.provider.value)
        self.errors.append(str(message))

    def warn(self, message: Union[str, NormalizationWarning]) -> None:
        text = str(message)
        # The same substitution can happen once per message or block
        if text not in self.warnings:
            self.warnings.append(text)

    @property
    def failed(self) -> bool:
        return bool(self.errors)
