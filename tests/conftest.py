"""Shared pytest fixtures for llm-unify tests."""

import pytest
from dotenv import load_dotenv

# Load environment variables from .env file for tests
load_dotenv()

from llm_unify.config.settings import Settings
from llm_unify.core.catalog import ModelCatalog, get_catalog
from llm_unify.core.normalization import ParseContext
from llm_unify.core.registry import ProviderRegistry
from llm_unify.models import MessageRole, Provider
from tests.helpers import payloads


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast isolated tests")
    config.addinivalue_line("markers", "integration: tests that go through the public API")
    config.addinivalue_line("markers", "slow: slow tests")


def pytest_collection_modifyitems(config, items):
    # Everything under tests/unit is a unit test
    for item in items:
        if "unit" in item.path.parts:
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def settings():
    """Default settings, independent of the environment."""
    return Settings()


@pytest.fixture
def catalog():
    """The static model catalog."""
    return get_catalog()


@pytest.fixture
def empty_catalog():
    """A catalog with no models, for tests that must not see catalog hits."""
    return ModelCatalog(rows=[])


@pytest.fixture
def registry(settings, catalog):
    """A fresh registry populated with the built-in parsers."""
    registry = ProviderRegistry(settings=settings, catalog=catalog)
    registry.register_all_providers()
    return registry


@pytest.fixture
def make_context():
    """Factory for per-call parse contexts."""
    def _make(provider=Provider.OPENAI, fallback_role=MessageRole.USER):
        return ParseContext(provider, fallback_role=fallback_role)
    return _make


@pytest.fixture
def scenario_a():
    return {
        "choices": [{"message": {"role": "assistant", "content": "hi"}}],
        "usage": {"prompt_tokens": 5, "completion_tokens": 2},
    }


@pytest.fixture
def scenario_b():
    return {
        "content": [{"type": "text", "text": "hello"}],
        "usage": {"input_tokens": 3, "output_tokens": 4},
    }


@pytest.fixture
def sample_payloads():
    """The payload factories module."""
    return payloads
