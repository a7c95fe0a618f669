"""Unit tests for the static model catalog."""

import pytest

from llm_unify.config.model_families import create_model_entry
from llm_unify.core.catalog import ModelCatalog
from llm_unify.models import ModelEntry, Provider, TokenUsage


def row(model_id, provider, **extra):
    values = {
        "id": model_id,
        "provider": provider,
        "display_name": model_id,
        "context_window": 4096,
        "max_output_tokens": 1024,
    }
    values.update(extra)
    return values


class TestModelCatalog:
    """Test catalog lookups."""

    def test_exact_lookup(self, catalog):
        """Test getting a model by its exact id."""
        entry = catalog.get_model("gpt-4o-mini")
        assert isinstance(entry, ModelEntry)
        assert entry.provider == Provider.OPENAI
        assert entry.display_name == "GPT-4o Mini"
        assert entry.pricing.input_cost_per_1k_tokens == 0.00015

    def test_alias_lookup(self, catalog):
        """Test aliases resolve to their model."""
        entry = catalog.get_model("claude-3-5-sonnet-latest")
        assert entry.id == "claude-3-5-sonnet-20240620"

    def test_case_insensitive_lookup(self, catalog):
        """Test ids match regardless of case."""
        assert catalog.get_model("GPT-4O").id == "gpt-4o"

    def test_gemini_resource_path(self, catalog):
        """Test Gemini's models/ prefix is ignored."""
        assert catalog.get_model("models/gemini-1.5-pro").provider == Provider.GOOGLE

    def test_provider_scoped_lookup(self, catalog):
        """Test a provider restricts the lookup."""
        assert catalog.get_model("gpt-4o", Provider.ANTHROPIC) is None
        assert catalog.get_model("gpt-4o", "openai").id == "gpt-4o"

    def test_unknown_model(self, catalog):
        """Test unknown ids return None."""
        assert catalog.get_model("not-a-model") is None
        assert catalog.get_model("") is None
        assert "not-a-model" not in catalog
        assert "gpt-4o" in catalog

    def test_family_defaults_inherited(self, catalog):
        """Test entries inherit family defaults they do not override."""
        entry = catalog.get_model("claude-3-haiku-20240307")
        assert entry.family == "claude-3"
        assert entry.context_window == 200000

    def test_entries_are_frozen(self, catalog):
        """Test catalog rows cannot be mutated."""
        entry = catalog.get_model("gpt-4o")
        with pytest.raises(Exception):
            entry.context_window = 1

    def test_every_provider_has_models(self, catalog):
        """Test the table covers every provider."""
        for provider in Provider:
            assert catalog.get_provider_models(provider), provider

    def test_duplicate_rows_rejected(self):
        """Test a table with duplicate keys is refused."""
        with pytest.raises(ValueError):
            ModelCatalog(rows=[row("m", "openai"), row("m", "openai")])

    def test_unknown_family_rejected(self):
        """Test model entries must name a known family."""
        with pytest.raises(ValueError):
            create_model_entry("no-such-family", "m", {})


class TestCatalogSearch:
    """Test multi-criterion search."""

    def test_search_by_provider_and_capability(self, catalog):
        """Test filtering by provider and capability tags."""
        results = catalog.search_models(provider=Provider.OPENAI, capabilities=["vision"])
        assert results
        assert all(m.provider == Provider.OPENAI and "vision" in m.capabilities for m in results)

    def test_search_by_family(self, catalog):
        """Test filtering by family."""
        ids = {m.id for m in catalog.search_models(family="claude-3")}
        assert "claude-3-opus-20240229" in ids
        assert "gpt-4o" not in ids

    def test_search_max_cost(self, catalog):
        """Test the max cost filter uses output pricing."""
        results = catalog.search_models(max_cost=0.001)
        assert results
        assert all(m.pricing.output_cost_per_1k_tokens <= 0.001 for m in results)

    def test_search_deprecated(self, catalog):
        """Test filtering on deprecation status."""
        deprecated = catalog.search_models(deprecated=True)
        assert "o1-preview" in {m.id for m in deprecated}
        assert all(m.deprecated for m in deprecated)
        assert all(not m.deprecated for m in catalog.search_models(deprecated=False))

    def test_search_predicate_and_context(self, catalog):
        """Test arbitrary predicates combine with other filters."""
        results = catalog.search_models(
            min_context_window=100000,
            predicate=lambda m: m.max_output_tokens >= 16384,
        )
        assert results
        assert all(m.context_window >= 100000 and m.max_output_tokens >= 16384 for m in results)

    def test_capabilities_lookup(self, catalog):
        """Test capability tags for a model."""
        assert "reasoning" in catalog.get_model_capabilities("o1-mini")
        assert catalog.get_model_capabilities("not-a-model") == ()


class TestProviderFromModel:
    """Test catalog-based provider detection."""

    def test_unique_owner(self, catalog):
        """Test a model listed once resolves to its provider."""
        assert catalog.detect_provider_from_model("command-r-plus") == Provider.COHERE
        assert catalog.detect_provider_from_model("anthropic.claude-3-haiku-20240307-v1:0") == Provider.BEDROCK

    def test_unknown_model(self, catalog):
        """Test unknown ids resolve to nothing."""
        assert catalog.detect_provider_from_model("mystery-model") is None
        assert catalog.detect_provider_from_model("") is None

    def test_shared_model_is_ambiguous(self):
        """Test a model listed under two providers resolves to nothing."""
        catalog = ModelCatalog(rows=[row("shared-model", "together"), row("shared-model", "fireworks")])
        assert catalog.detect_provider_from_model("shared-model") is None
        # Without a provider, lookup returns the first match in Provider order
        assert catalog.get_model("shared-model").provider == Provider.TOGETHER


class TestCostEstimation:
    """Test cost estimates from usage."""

    def test_basic_cost(self, catalog):
        """Test input and output tokens are priced per 1k."""
        usage = TokenUsage(input_tokens=1000, output_tokens=1000, total_tokens=2000)
        assert catalog.estimate_cost(usage, "gpt-4o-mini") == pytest.approx(0.00075)

    def test_cached_tokens_within_input(self, catalog):
        """Test OpenAI cached tokens are re-priced at the cached rate."""
        usage = TokenUsage(
            input_tokens=1000, output_tokens=1000, total_tokens=2000,
            metadata={"cached_tokens": 400},
        )
        assert catalog.estimate_cost(usage, "gpt-4o-mini") == pytest.approx(0.00072)

    def test_cache_reads_outside_input(self, catalog):
        """Test Anthropic cache reads are added at the cached rate."""
        usage = TokenUsage(
            input_tokens=1000, output_tokens=1000, total_tokens=2000,
            metadata={"cache_read_input_tokens": 2000},
        )
        assert catalog.estimate_cost(usage, "claude-3-haiku-20240307") == pytest.approx(0.00156)

    def test_unknown_or_unpriced_model(self):
        """Test models without pricing have no estimate."""
        catalog = ModelCatalog(rows=[row("free-model", "ollama")])
        usage = TokenUsage(input_tokens=10, output_tokens=10, total_tokens=20)
        assert catalog.estimate_cost(usage, "free-model") is None
        assert catalog.estimate_cost(usage, "not-a-model") is None
