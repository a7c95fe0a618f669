"""
Provider metadata models.

Describes what each provider API supports. Instances are frozen: once a
parser is registered its metadata cannot change.
"""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .unified import Provider


class ProviderCapabilities(BaseModel):
    """Capabilities exposed by a provider API."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    streaming: bool = Field(True, description="Streaming response support")
    function_calling: bool = Field(False, description="Legacy function calling support")
    tool_use: bool = Field(False, description="Tool calling support")
    vision: bool = Field(False, description="Image input support")
    json_mode: bool = Field(False, description="Constrained JSON output support")
    system_messages: bool = Field(True, description="Supports a system role or instruction")

    max_context_window: Optional[int] = Field(None, description="Largest context window across models")
    max_output_tokens: Optional[int] = Field(None, description="Largest output limit across models")
    modalities: Tuple[str, ...] = Field(("text",), description="Supported input/output modalities")


class ProviderMetadata(BaseModel):
    """Static description of a provider API."""
    model_config = ConfigDict(frozen=True)

    id: Provider
    name: str
    description: str = ""
    api_version: Optional[str] = None
    base_url: Optional[str] = None
    docs_url: Optional[str] = None
    authentication_type: str = "api_key"
    capabilities: ProviderCapabilities = Field(default_factory=ProviderCapabilities)
