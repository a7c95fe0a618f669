# Model family base entries
from typing import Any, Dict

# Defaults shared by every model of a family; entries override per model
MODEL_FAMILIES = {
    "gpt-4": {
        "provider": "openai",
        "context_window": 128000,
        "max_output_tokens": 4096,
        "capabilities": ("text", "function_calling", "json_mode"),
    },
    "gpt-3.5": {
        "provider": "openai",
        "context_window": 16385,
        "max_output_tokens": 4096,
        "capabilities": ("text", "function_calling", "json_mode"),
    },
    "o1": {
        "provider": "openai",
        "context_window": 128000,
        "max_output_tokens": 32768,
        "capabilities": ("text", "reasoning"),
    },
    "claude-3": {
        "provider": "anthropic",
        "context_window": 200000,
        "max_output_tokens": 4096,
        "capabilities": ("text", "vision", "function_calling"),
    },
    "gemini": {
        "provider": "google",
        "context_window": 1000000,
        "max_output_tokens": 8192,
        "capabilities": ("text", "vision", "function_calling", "json_mode"),
    },
    "mistral": {
        "provider": "mistral",
        "context_window": 32768,
        "max_output_tokens": 4096,
        "capabilities": ("text", "function_calling", "json_mode"),
    },
    "mixtral": {
        "provider": "mistral",
        "context_window": 32768,
        "max_output_tokens": 4096,
        "capabilities": ("text", "function_calling"),
    },
    "command": {
        "provider": "cohere",
        "context_window": 128000,
        "max_output_tokens": 4096,
        "capabilities": ("text", "function_calling", "rag"),
    },
    "grok": {
        "provider": "xai",
        "context_window": 131072,
        "max_output_tokens": 4096,
        "capabilities": ("text", "function_calling"),
    },
    "sonar": {
        "provider": "perplexity",
        "context_window": 127072,
        "max_output_tokens": 4096,
        "capabilities": ("text", "online_search"),
    },
    "together-llama": {
        "provider": "together",
        "context_window": 8192,
        "max_output_tokens": 4096,
        "capabilities": ("text",),
    },
    "fireworks-llama": {
        "provider": "fireworks",
        "context_window": 8192,
        "max_output_tokens": 4096,
        "capabilities": ("text", "function_calling"),
    },
    "bedrock-claude": {
        "provider": "bedrock",
        "context_window": 200000,
        "max_output_tokens": 4096,
        "capabilities": ("text", "vision", "function_calling"),
    },
    "huggingface": {
        "provider": "huggingface",
        "context_window": 8192,
        "max_output_tokens": 4096,
        "capabilities": ("text",),
    },
    "ollama": {
        "provider": "ollama",
        "context_window": 8192,
        "max_output_tokens": 4096,
        "capabilities": ("text", "local"),
        "input_cost_per_1k_tokens": 0.0,
        "output_cost_per_1k_tokens": 0.0,
    },
}


def create_model_entry(family: str, model_id: str, overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Create a catalog entry by combining family defaults with model overrides."""
    if family not in MODEL_FAMILIES:
        raise ValueError(f"Unknown model family: {family}")

    base = MODEL_FAMILIES[family].copy()
    base.update(overrides)

    base["id"] = model_id
    base.setdefault("family", family)
    if "display_name" not in base:
        base["display_name"] = model_id.replace("-", " ").title()

    return base
