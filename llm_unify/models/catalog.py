from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .unified import Provider


class ModelPricing(BaseModel):
    """Per-1k-token pricing in ``currency``."""
    model_config = ConfigDict(frozen=True)

    input_cost_per_1k_tokens: float = Field(0.0, ge=0.0)
    output_cost_per_1k_tokens: float = Field(0.0, ge=0.0)
    cached_input_cost_per_1k_tokens: Optional[float] = Field(None, ge=0.0)
    currency: str = "USD"


class ModelEntry(BaseModel):
    """A single catalog row, keyed by (provider, id)."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(..., description="Provider model identifier")
    provider: Provider
    display_name: str
    description: str = ""
    family: Optional[str] = None
    variant: Optional[str] = None
    context_window: int = Field(..., gt=0, description="Maximum context window in tokens")
    max_output_tokens: int = Field(..., gt=0, description="Maximum output tokens")
    capabilities: Tuple[str, ...] = ()
    pricing: Optional[ModelPricing] = None
    aliases: Tuple[str, ...] = ()
    release_date: Optional[str] = None
    deprecated: bool = False
    deprecation_date: Optional[str] = None
    replacement_model: Optional[str] = None

    def has_capabilities(self, *capabilities: str) -> bool:
        return all(capability in self.capabilities for capability in capabilities)
