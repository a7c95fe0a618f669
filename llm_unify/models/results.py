"""Result envelopes returned by parsing and detection."""

from enum import Enum
from typing import Any, Dict, Generic, List, Optional, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .unified import MessageRole, Provider, StopReason, TokenUsage, UnifiedError

T = TypeVar("T")


class ParseResult(BaseModel, Generic[T]):
    """
    Outcome of a parse call.

    ``response`` is present exactly when ``success`` is true, and ``errors``
    is non-empty exactly when it is false. Warnings never affect ``success``.
    """
    success: bool
    response: Optional[T] = None
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_outcome(self):
        if self.success:
            if self.response is None:
                raise ValueError("a successful result must carry a response")
            if self.errors:
                raise ValueError("a successful result cannot carry errors")
        else:
            if self.response is not None:
                raise ValueError("a failed result cannot carry a response")
            if not self.errors:
                raise ValueError("a failed result must carry at least one error")
        return self

    @classmethod
    def ok(cls, response: T, warnings: Sequence[str] = ()) -> "ParseResult[T]":
        return cls(success=True, response=response, warnings=list(warnings))

    @classmethod
    def failure(cls, errors: Sequence[str], warnings: Sequence[str] = ()) -> "ParseResult[T]":
        return cls(success=False, errors=list(errors), warnings=list(warnings))

    def with_leading_warnings(self, warnings: Sequence[str]) -> "ParseResult[T]":
        """Return a copy with ``warnings`` placed before the existing ones."""
        if not warnings:
            return self
        return self.model_copy(update={"warnings": list(warnings) + self.warnings})


class DetectionMethod(str, Enum):
    """Signal that identified the provider."""
    HEADER = "header"
    URL = "url"
    RESPONSE_FORMAT = "response_format"
    MODEL_NAME = "model_name"


class DetectionResult(BaseModel):
    provider: Optional[Provider] = None
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    method: Optional[DetectionMethod] = None
    warnings: List[str] = Field(default_factory=list)

    @property
    def detected(self) -> bool:
        return self.provider is not None


class ToolCallDelta(BaseModel):
    """Incremental tool call data; ``arguments`` is a partial JSON string."""
    index: int = 0
    id: Optional[str] = None
    name: Optional[str] = None
    arguments: Optional[str] = None


class StreamDelta(BaseModel):
    text: Optional[str] = None
    tool_call_delta: Optional[ToolCallDelta] = None
    role: Optional[MessageRole] = None


class StreamChunk(BaseModel):
    """
    One normalized streaming event.

    Chunks are independent: nothing here refers to earlier chunks, and
    assembling a full message from a sequence is left to the caller.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    provider: Provider
    id: Optional[str] = None
    model: Optional[str] = None
    index: int = 0
    event_type: Optional[str] = None
    delta: StreamDelta = Field(default_factory=StreamDelta)
    stop_reason: Optional[StopReason] = None
    usage: Optional[TokenUsage] = None
    error: Optional[UnifiedError] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    raw: Any = Field(default=None, repr=False)
