"""
Error taxonomy for response parsing.

None of these exceptions cross the public parsing API: parsers raise them
internally and the parse boundary converts them into ``ParseResult`` errors
or warnings. ``ProviderAPIError`` is only raised on request, through
``UnifiedResponse.raise_for_error()``.
"""

from typing import Any, Dict, Optional


class ParserError(Exception):
    """
    Base exception for parsing failures.

    Attributes:
        message: Error message
        provider: Provider name, when known
    """

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.provider = provider


class ValidationError(ParserError):
    """A structurally required field is missing or malformed."""

    prefix = "Validation error"

    def __str__(self) -> str:
        return f"{self.prefix}: {self.message}"


class DetectionFailure(ParserError):
    """No detection signal cleared the acceptance threshold."""

    def __init__(self, message: str = "Unable to determine provider", provider: Optional[str] = None):
        super().__init__(message, provider)


class NormalizationWarning(ParserError):
    """
    An unrecognized value was replaced with a documented fallback.

    Recorded as a warning; the parse still succeeds.

    Attributes:
        field: Name of the normalized field (e.g. "role")
        value: The original, unrecognized value
        fallback: The value substituted for it
    """

    def __init__(self, field: str, value: Any, fallback: Any, provider: Optional[str] = None):
        self.field = field
        self.value = value
        self.fallback = fallback
        super().__init__(
            f"Unknown {field}: {value!r}, defaulting to {getattr(fallback, 'value', fallback)}",
            provider,
        )


class ProviderAPIError(ParserError):
    """The upstream provider returned an error payload instead of a completion."""

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        code: Optional[str] = None,
        error_type: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, provider)
        self.code = code
        self.error_type = error_type
        self.status_code = status_code
        self.details = details or {}

    def __str__(self) -> str:
        parts = [self.provider or "provider"]
        if self.status_code is not None:
            parts.append(str(self.status_code))
        if self.code:
            parts.append(self.code)
        return f"[{' '.join(parts)}] {self.message}"
