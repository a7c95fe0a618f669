"""
Model catalog lookup.

A read-only index over the static table in ``llm_unify.config.models``.
It backs the model-name detection signal and exposes capability, pricing
and deprecation data to callers. The catalog has no public write API;
changing it means changing the table.
"""

from functools import lru_cache
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from ...config.models import MODEL_CATALOG
from ...models.catalog import ModelEntry, ModelPricing
from ...models.unified import Provider, TokenUsage

PRICING_FIELDS = (
    "input_cost_per_1k_tokens",
    "output_cost_per_1k_tokens",
    "cached_input_cost_per_1k_tokens",
)

# Usage metadata keys for cached input tokens that are part of input_tokens
INCLUDED_CACHE_KEYS = ("cached_tokens", "cachedContentTokenCount")
# Usage metadata keys for cache reads billed outside input_tokens
SEPARATE_CACHE_KEYS = ("cache_read_input_tokens", "cacheReadInputTokens")

ProviderLike = Union[Provider, str]


def _count(metadata: Dict[str, Any], keys: Sequence[str]) -> int:
    for key in keys:
        value = metadata.get(key)
        if isinstance(value, int) and value > 0:
            return value
    return 0


def _entry_from_row(row: Dict[str, Any]) -> ModelEntry:
    values = dict(row)
    pricing = {field: values.pop(field) for field in PRICING_FIELDS if field in values}
    if pricing:
        values["pricing"] = ModelPricing(**pricing)
    return ModelEntry(**values)


def _strip_model_prefix(model_id: str) -> str:
    # Gemini reports model names as resource paths
    return model_id[len("models/"):] if model_id.startswith("models/") else model_id


class ModelCatalog:
    """Lookup and search over catalog entries keyed by (provider, model id)."""

    def __init__(self, rows: Optional[Iterable[Dict[str, Any]]] = None):
        self._entries: Dict[Tuple[Provider, str], ModelEntry] = {}
        self._aliases: Dict[Tuple[Provider, str], ModelEntry] = {}
        self._folded: Dict[Tuple[Provider, str], ModelEntry] = {}

        for row in (MODEL_CATALOG if rows is None else rows):
            entry = _entry_from_row(row)
            key = (entry.provider, entry.id)
            if key in self._entries:
                raise ValueError(f"Duplicate catalog entry: {entry.provider.value}/{entry.id}")
            self._entries[key] = entry
            self._folded.setdefault((entry.provider, entry.id.lower()), entry)
            for alias in entry.aliases:
                self._aliases[(entry.provider, alias)] = entry
                self._folded.setdefault((entry.provider, alias.lower()), entry)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, model_id: object) -> bool:
        return isinstance(model_id, str) and self.get_model(model_id) is not None

    def _lookup(self, provider: Provider, model_id: str) -> Optional[ModelEntry]:
        return (
            self._entries.get((provider, model_id))
            or self._aliases.get((provider, model_id))
            or self._folded.get((provider, model_id.lower()))
        )

    def get_model(self, model_id: str, provider: Optional[ProviderLike] = None) -> Optional[ModelEntry]:
        """
        Look up a model by id.

        Tries the exact id, then registered aliases, then a case-insensitive
        match. Without a provider the first matching entry in table order
        is returned.

        Args:
            model_id: Model identifier as reported by the provider
            provider: Restrict the lookup to one provider

        Returns:
            The catalog entry, or None if the model is unknown
        """
        if not model_id:
            return None
        model_id = _strip_model_prefix(model_id)
        providers = [Provider(provider)] if provider is not None else list(Provider)
        for candidate in providers:
            entry = self._lookup(candidate, model_id)
            if entry is not None:
                return entry
        return None

    def has_model(self, model_id: str, provider: Optional[ProviderLike] = None) -> bool:
        return self.get_model(model_id, provider) is not None

    def get_provider_models(self, provider: ProviderLike) -> List[ModelEntry]:
        provider = Provider(provider)
        return [entry for (owner, _), entry in self._entries.items() if owner == provider]

    def all_models(self) -> List[ModelEntry]:
        return list(self._entries.values())

    def get_model_capabilities(self, model_id: str, provider: Optional[ProviderLike] = None) -> Tuple[str, ...]:
        entry = self.get_model(model_id, provider)
        return entry.capabilities if entry else ()

    def search_models(
        self,
        provider: Optional[ProviderLike] = None,
        family: Optional[str] = None,
        variant: Optional[str] = None,
        capabilities: Optional[Sequence[str]] = None,
        predicate: Optional[Callable[[ModelEntry], bool]] = None,
        min_context_window: Optional[int] = None,
        max_cost: Optional[float] = None,
        deprecated: Optional[bool] = None,
    ) -> List[ModelEntry]:
        """
        Filter the catalog by several criteria at once.

        Args:
            provider: Only models of this provider
            family: Exact family name (e.g. "claude-3")
            variant: Exact variant name (e.g. "haiku")
            capabilities: Capability tags that must all be present
            predicate: Arbitrary extra filter
            min_context_window: Minimum context window in tokens
            max_cost: Maximum output cost per 1k tokens; unpriced models are excluded
            deprecated: Only deprecated (True) or only current (False) models

        Returns:
            Matching entries in catalog order
        """
        results = self.all_models()
        if provider is not None:
            wanted = Provider(provider)
            results = [m for m in results if m.provider == wanted]
        if family is not None:
            results = [m for m in results if m.family == family]
        if variant is not None:
            results = [m for m in results if m.variant == variant]
        if capabilities:
            results = [m for m in results if m.has_capabilities(*capabilities)]
        if min_context_window is not None:
            results = [m for m in results if m.context_window >= min_context_window]
        if max_cost is not None:
            results = [
                m for m in results
                if m.pricing is not None and m.pricing.output_cost_per_1k_tokens <= max_cost
            ]
        if deprecated is not None:
            results = [m for m in results if m.deprecated == deprecated]
        if predicate is not None:
            results = [m for m in results if predicate(m)]
        return results

    def detect_provider_from_model(self, model_id: str) -> Optional[Provider]:
        """
        Return the provider owning ``model_id``.

        Returns None when the id is unknown or is listed under more than one
        provider.
        """
        if not model_id:
            return None
        model_id = _strip_model_prefix(model_id)
        owners = {p for p in Provider if self._lookup(p, model_id) is not None}
        if len(owners) == 1:
            return owners.pop()
        return None

    def estimate_cost(
        self,
        usage: TokenUsage,
        model_id: str,
        provider: Optional[ProviderLike] = None,
    ) -> Optional[float]:
        """
        Estimate the USD cost of ``usage`` for a catalog model.

        Cached input tokens found in ``usage.metadata`` are billed at the
        cached rate when the model has one.

        Returns:
            Cost in the pricing currency, or None for unpriced or unknown models
        """
        entry = self.get_model(model_id, provider)
        if entry is None or entry.pricing is None:
            return None
        pricing = entry.pricing

        input_cost = (usage.input_tokens / 1000) * pricing.input_cost_per_1k_tokens
        output_cost = (usage.output_tokens / 1000) * pricing.output_cost_per_1k_tokens

        cached_rate = pricing.cached_input_cost_per_1k_tokens
        if cached_rate is None:
            return input_cost + output_cost

        # Cached tokens already counted in input_tokens are re-priced
        cache_savings = 0.0
        cached_tokens = _count(usage.metadata, INCLUDED_CACHE_KEYS)
        if cached_tokens:
            cache_savings = (cached_tokens / 1000) * (pricing.input_cost_per_1k_tokens - cached_rate)

        # Cache reads reported separately from input_tokens are added on top
        cache_reads = _count(usage.metadata, SEPARATE_CACHE_KEYS)
        cache_read_cost = (cache_reads / 1000) * cached_rate

        return input_cost + output_cost - cache_savings + cache_read_cost


@lru_cache(maxsize=1)
def get_catalog() -> ModelCatalog:
    """Return the process-wide catalog built from the static table."""
    return ModelCatalog()
