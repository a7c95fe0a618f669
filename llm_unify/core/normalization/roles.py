"""Role normalization."""

from typing import Any, Optional

from ...errors import NormalizationWarning
from ...models.unified import MessageRole
from .context import ParseContext

# Provider role strings, lower-cased
ROLE_ALIASES = {
    "system": MessageRole.SYSTEM,
    "developer": MessageRole.SYSTEM,
    "user": MessageRole.USER,
    "human": MessageRole.USER,
    "assistant": MessageRole.ASSISTANT,
    "model": MessageRole.ASSISTANT,
    "chatbot": MessageRole.ASSISTANT,
    "bot": MessageRole.ASSISTANT,
    "tool": MessageRole.TOOL,
    "function": MessageRole.TOOL,
    "ipython": MessageRole.TOOL,
}


def normalize_role(
    value: Any,
    ctx: ParseContext,
    default: MessageRole = MessageRole.ASSISTANT,
    fallback: Optional[MessageRole] = None,
) -> MessageRole:
    """
    Map a provider role string to a MessageRole.

    Args:
        value: Role as reported by the provider
        ctx: Parse context receiving the warning for unknown roles
        default: Role used when the provider reports none
        fallback: Role substituted for unrecognized values (context default if None)

    Returns:
        The canonical role. Unknown values never raise; they produce the
        fallback role and one warning naming the value.
    """
    if value is None or value == "":
        return default
    role = ROLE_ALIASES.get(str(value).strip().lower())
    if role is not None:
        return role
    substitute = fallback or ctx.fallback_role
    ctx.warn(NormalizationWarning("role", value, substitute, ctx.provider.value))
    return substitute
