"""
Canonical response model.

Every provider parser produces these types. Content blocks form a tagged
union on ``type``; consumers are expected to handle every variant, see
``content_to_text`` for the runtime-checked pattern.
"""

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..errors import ProviderAPIError


class Provider(str, Enum):
    """Supported LLM providers."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    MISTRAL = "mistral"
    GOOGLE = "google"
    COHERE = "cohere"
    XAI = "xai"
    PERPLEXITY = "perplexity"
    TOGETHER = "together"
    FIREWORKS = "fireworks"
    BEDROCK = "bedrock"
    OLLAMA = "ollama"
    HUGGINGFACE = "huggingface"


class MessageRole(str, Enum):
    """Canonical message roles."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class StopReason(str, Enum):
    """Why generation ended."""
    END_TURN = "end_turn"
    MAX_TOKENS = "max_tokens"
    TOOL_USE = "tool_use"
    CONTENT_FILTER = "content_filter"
    UNKNOWN = "unknown"


class ContentType(str, Enum):
    """Content block tags."""
    TEXT = "text"
    IMAGE = "image"
    TOOL_USE = "tool_use"
    TOOL_RESULT = "tool_result"
    FUNCTION_CALL = "function_call"


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ImageSource(BaseModel):
    type: Literal["url", "base64"]
    url: Optional[str] = None
    data: Optional[str] = None
    media_type: Optional[str] = None


class ImageContent(BaseModel):
    type: Literal["image"] = "image"
    source: ImageSource


class ToolUseContent(BaseModel):
    """A tool invocation requested by the model."""
    type: Literal["tool_use"] = "tool_use"
    id: str
    name: str
    input: Dict[str, Any] = Field(default_factory=dict)


class ToolResultContent(BaseModel):
    """The result of a tool invocation, fed back to the model."""
    type: Literal["tool_result"] = "tool_result"
    tool_use_id: str
    content: str
    is_error: Optional[bool] = None


class FunctionCallContent(BaseModel):
    """Legacy OpenAI ``function_call``; arguments stay a JSON string."""
    type: Literal["function_call"] = "function_call"
    name: str
    arguments: str = ""


Content = Annotated[
    Union[TextContent, ImageContent, ToolUseContent, ToolResultContent, FunctionCallContent],
    Field(discriminator="type"),
]


def content_to_text(block: Content) -> str:
    """
    Return the plain text carried by a content block.

    Only text blocks carry display text. Any type outside the Content union
    raises TypeError so that new variants cannot be ignored silently.
    """
    if isinstance(block, TextContent):
        return block.text
    if isinstance(block, (ImageContent, ToolUseContent, ToolResultContent, FunctionCallContent)):
        return ""
    raise TypeError(f"Unhandled content block: {type(block).__name__}")


class UnifiedMessage(BaseModel):
    role: MessageRole
    content: List[Content] = Field(default_factory=list)
    name: Optional[str] = None
    tool_call_id: Optional[str] = None

    @property
    def text(self) -> str:
        return "".join(content_to_text(block) for block in self.content)

    @property
    def tool_calls(self) -> List[ToolUseContent]:
        return [block for block in self.content if isinstance(block, ToolUseContent)]


class TokenUsage(BaseModel):
    """
    Normalized token counts.

    ``total_tokens`` is the provider's own total when it reports one, and
    ``input_tokens + output_tokens`` otherwise. Extra provider counters
    (cache, reasoning, audio tokens, billed units) are kept in ``metadata``.
    """
    input_tokens: int = Field(0, ge=0, description="Prompt/input tokens")
    output_tokens: int = Field(0, ge=0, description="Completion/output tokens")
    total_tokens: int = Field(0, ge=0, description="Total tokens")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Provider specific counters")


class ModelInfo(BaseModel):
    id: str
    display_name: Optional[str] = None
    context_window: Optional[int] = None
    max_output_tokens: Optional[int] = None


class UnifiedError(BaseModel):
    """An error reported by the upstream provider inside a response body."""
    message: str
    code: Optional[str] = None
    type: Optional[str] = None
    status_code: Optional[int] = None
    details: Dict[str, Any] = Field(default_factory=dict)


class StopReasonMetadata(BaseModel):
    original_value: str
    was_recognized: bool


class UnifiedResponse(BaseModel):
    """
    Provider independent view of a completed LLM response.

    ``raw`` holds the caller's original input object untouched. Provider
    fields with no canonical home are kept in ``metadata``. Parsers return
    copies, so editing ``metadata`` or message content never changes ``raw``.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str
    provider: Provider
    model: ModelInfo
    messages: List[UnifiedMessage] = Field(default_factory=list)
    stop_reason: StopReason = StopReason.UNKNOWN
    stop_reason_metadata: Optional[StopReasonMetadata] = None
    usage: TokenUsage = Field(default_factory=TokenUsage)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    error: Optional[UnifiedError] = None
    raw: Any = Field(default=None, repr=False)

    @property
    def text(self) -> str:
        """Concatenated text of all assistant messages."""
        return "".join(
            message.text for message in self.messages
            if message.role == MessageRole.ASSISTANT
        )

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def raise_for_error(self) -> None:
        """Raise ProviderAPIError if the provider returned an error payload."""
        if self.error is None:
            return
        raise ProviderAPIError(
            self.error.message,
            provider=self.provider.value,
            code=self.error.code,
            error_type=self.error.type,
            status_code=self.error.status_code,
            details=self.error.details,
        )
