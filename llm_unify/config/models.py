# Model catalog table using family inheritance
from .model_families import create_model_entry

# Pricing is per 1k tokens in USD
MODEL_CATALOG = [
    # OpenAI
    create_model_entry("gpt-4", "gpt-4o", {
        "display_name": "GPT-4o",
        "description": "Multimodal flagship GPT-4 class model",
        "variant": "omni",
        "max_output_tokens": 16384,
        "capabilities": ("text", "vision", "function_calling", "json_mode"),
        "release_date": "2024-05-13",
        "input_cost_per_1k_tokens": 0.0025,
        "output_cost_per_1k_tokens": 0.01,
        "cached_input_cost_per_1k_tokens": 0.00125,
    }),
    create_model_entry("gpt-4", "gpt-4o-mini", {
        "display_name": "GPT-4o Mini",
        "description": "Smaller version of GPT-4o, faster and more cost-effective",
        "variant": "omni-mini",
        "max_output_tokens": 16384,
        "capabilities": ("text", "vision", "function_calling", "json_mode"),
        "release_date": "2024-07-18",
        "input_cost_per_1k_tokens": 0.00015,
        "output_cost_per_1k_tokens": 0.0006,
        "cached_input_cost_per_1k_tokens": 0.000075,
    }),
    create_model_entry("gpt-4", "gpt-4-turbo-2024-04-09", {
        "display_name": "GPT-4 Turbo",
        "description": "GPT-4 Turbo with vision",
        "variant": "turbo",
        "aliases": ("gpt-4-turbo",),
        "capabilities": ("text", "vision", "function_calling", "json_mode"),
        "release_date": "2024-04-09",
        "input_cost_per_1k_tokens": 0.01,
        "output_cost_per_1k_tokens": 0.03,
    }),
    create_model_entry("gpt-4", "gpt-4", {
        "display_name": "GPT-4",
        "description": "Standard GPT-4 model",
        "variant": "standard",
        "context_window": 8192,
        "capabilities": ("text", "function_calling"),
        "input_cost_per_1k_tokens": 0.03,
        "output_cost_per_1k_tokens": 0.06,
    }),
    create_model_entry("gpt-3.5", "gpt-3.5-turbo", {
        "display_name": "GPT-3.5 Turbo",
        "description": "Fast, inexpensive model for simple tasks",
        "variant": "turbo",
        "input_cost_per_1k_tokens": 0.0005,
        "output_cost_per_1k_tokens": 0.0015,
    }),
    create_model_entry("o1", "o1-preview", {
        "display_name": "O1 Preview",
        "description": "Reasoning model for complex tasks",
        "variant": "preview",
        "release_date": "2024-09-12",
        "deprecated": True,
        "deprecation_date": "2025-07-28",
        "replacement_model": "o1",
        "input_cost_per_1k_tokens": 0.015,
        "output_cost_per_1k_tokens": 0.06,
    }),
    create_model_entry("o1", "o1-mini", {
        "display_name": "O1 Mini",
        "description": "Faster, cheaper reasoning model",
        "variant": "mini",
        "max_output_tokens": 65536,
        "release_date": "2024-09-12",
        "input_cost_per_1k_tokens": 0.003,
        "output_cost_per_1k_tokens": 0.012,
    }),

    # Anthropic
    create_model_entry("claude-3", "claude-3-opus-20240229", {
        "display_name": "Claude 3 Opus",
        "description": "Most capable Claude 3 model",
        "variant": "opus",
        "aliases": ("claude-3-opus-latest",),
        "release_date": "2024-02-29",
        "input_cost_per_1k_tokens": 0.015,
        "output_cost_per_1k_tokens": 0.075,
    }),
    create_model_entry("claude-3", "claude-3-sonnet-20240229", {
        "display_name": "Claude 3 Sonnet",
        "description": "Balanced Claude 3 model",
        "variant": "sonnet",
        "release_date": "2024-02-29",
        "deprecated": True,
        "replacement_model": "claude-3-5-sonnet-20240620",
        "input_cost_per_1k_tokens": 0.003,
        "output_cost_per_1k_tokens": 0.015,
    }),
    create_model_entry("claude-3", "claude-3-5-sonnet-20240620", {
        "display_name": "Claude 3.5 Sonnet",
        "description": "Claude 3.5 Sonnet with improved reasoning and coding",
        "variant": "sonnet-3.5",
        "aliases": ("claude-3-5-sonnet-latest",),
        "max_output_tokens": 8192,
        "release_date": "2024-06-20",
        "input_cost_per_1k_tokens": 0.003,
        "output_cost_per_1k_tokens": 0.015,
        "cached_input_cost_per_1k_tokens": 0.0003,
    }),
    create_model_entry("claude-3", "claude-3-haiku-20240307", {
        "display_name": "Claude 3 Haiku",
        "description": "Fastest Claude 3 model",
        "variant": "haiku",
        "release_date": "2024-03-07",
        "input_cost_per_1k_tokens": 0.00025,
        "output_cost_per_1k_tokens": 0.00125,
        "cached_input_cost_per_1k_tokens": 0.00003,
    }),

    # Google
    create_model_entry("gemini", "gemini-1.5-pro", {
        "display_name": "Gemini 1.5 Pro",
        "description": "Long context multimodal model",
        "variant": "pro-1.5",
        "aliases": ("gemini-1.5-pro-latest",),
        "capabilities": ("text", "vision", "audio", "function_calling", "json_mode"),
        "input_cost_per_1k_tokens": 0.00125,
        "output_cost_per_1k_tokens": 0.005,
    }),
    create_model_entry("gemini", "gemini-1.5-flash", {
        "display_name": "Gemini 1.5 Flash",
        "description": "Fast, efficient multimodal model",
        "variant": "flash-1.5",
        "aliases": ("gemini-1.5-flash-latest",),
        "input_cost_per_1k_tokens": 0.000075,
        "output_cost_per_1k_tokens": 0.0003,
    }),
    create_model_entry("gemini", "gemini-1.0-pro", {
        "display_name": "Gemini 1.0 Pro",
        "description": "First generation Gemini text model",
        "variant": "pro-1.0",
        "context_window": 32768,
        "max_output_tokens": 2048,
        "capabilities": ("text", "function_calling"),
        "deprecated": True,
        "replacement_model": "gemini-1.5-flash",
        "input_cost_per_1k_tokens": 0.0005,
        "output_cost_per_1k_tokens": 0.0015,
    }),

    # Mistral
    create_model_entry("mistral", "mistral-large-latest", {
        "display_name": "Mistral Large",
        "description": "Flagship Mistral model",
        "variant": "large",
        "input_cost_per_1k_tokens": 0.002,
        "output_cost_per_1k_tokens": 0.006,
    }),
    create_model_entry("mistral", "mistral-medium-latest", {
        "display_name": "Mistral Medium",
        "description": "Intermediate Mistral model",
        "variant": "medium",
        "input_cost_per_1k_tokens": 0.0027,
        "output_cost_per_1k_tokens": 0.0081,
    }),
    create_model_entry("mistral", "mistral-small-latest", {
        "display_name": "Mistral Small",
        "description": "Cost-efficient Mistral model",
        "variant": "small",
        "input_cost_per_1k_tokens": 0.0002,
        "output_cost_per_1k_tokens": 0.0006,
    }),
    create_model_entry("mixtral", "open-mixtral-8x7b", {
        "display_name": "Mixtral 8x7B",
        "description": "Sparse mixture of experts model",
        "variant": "8x7b",
        "input_cost_per_1k_tokens": 0.0007,
        "output_cost_per_1k_tokens": 0.0007,
    }),
    create_model_entry("mixtral", "open-mixtral-8x22b", {
        "display_name": "Mixtral 8x22B",
        "description": "Larger sparse mixture of experts model",
        "variant": "8x22b",
        "context_window": 65536,
        "input_cost_per_1k_tokens": 0.002,
        "output_cost_per_1k_tokens": 0.006,
    }),

    # Cohere
    create_model_entry("command", "command-r-plus", {
        "display_name": "Command R+",
        "description": "Cohere's most capable retrieval-augmented model",
        "variant": "r-plus",
        "input_cost_per_1k_tokens": 0.0025,
        "output_cost_per_1k_tokens": 0.01,
    }),
    create_model_entry("command", "command-r", {
        "display_name": "Command R",
        "description": "Scalable retrieval-augmented model",
        "variant": "r",
        "input_cost_per_1k_tokens": 0.00015,
        "output_cost_per_1k_tokens": 0.0006,
    }),

    # xAI
    create_model_entry("grok", "grok-beta", {
        "display_name": "Grok Beta",
        "description": "xAI's Grok model",
        "variant": "beta",
        "input_cost_per_1k_tokens": 0.005,
        "output_cost_per_1k_tokens": 0.015,
    }),

    # Perplexity
    create_model_entry("sonar", "pplx-70b-online", {
        "display_name": "Perplexity 70B Online",
        "description": "Online model with web search",
        "family": "pplx",
        "variant": "70b-online",
        "deprecated": True,
        "replacement_model": "sonar",
        "input_cost_per_1k_tokens": 0.001,
        "output_cost_per_1k_tokens": 0.001,
    }),
    create_model_entry("sonar", "sonar", {
        "display_name": "Sonar",
        "description": "Lightweight search-grounded model",
        "variant": "base",
        "input_cost_per_1k_tokens": 0.001,
        "output_cost_per_1k_tokens": 0.001,
    }),

    # Together
    create_model_entry("together-llama", "meta-llama/Llama-3-70b-chat-hf", {
        "display_name": "LLaMA 3 70B Chat",
        "family": "llama-3",
        "variant": "70b-chat",
        "input_cost_per_1k_tokens": 0.0009,
        "output_cost_per_1k_tokens": 0.0009,
    }),
    create_model_entry("together-llama", "mistralai/Mixtral-8x7B-Instruct-v0.1", {
        "display_name": "Mixtral 8x7B Instruct",
        "family": "mixtral",
        "variant": "8x7b-instruct",
        "context_window": 32768,
        "input_cost_per_1k_tokens": 0.0006,
        "output_cost_per_1k_tokens": 0.0006,
    }),

    # Fireworks
    create_model_entry("fireworks-llama", "accounts/fireworks/models/llama-v2-70b-chat", {
        "display_name": "LLaMA 2 70B Chat",
        "family": "llama-2",
        "variant": "70b-chat",
        "context_window": 4096,
        "max_output_tokens": 2048,
        "input_cost_per_1k_tokens": 0.0009,
        "output_cost_per_1k_tokens": 0.0009,
    }),
    create_model_entry("fireworks-llama", "accounts/fireworks/models/llama-v3-70b-instruct", {
        "display_name": "LLaMA 3 70B Instruct",
        "family": "llama-3",
        "variant": "70b-instruct",
        "input_cost_per_1k_tokens": 0.0009,
        "output_cost_per_1k_tokens": 0.0009,
    }),

    # Bedrock
    create_model_entry("bedrock-claude", "anthropic.claude-3-opus-20240229-v1:0", {
        "display_name": "Claude 3 Opus (Bedrock)",
        "family": "claude-3",
        "variant": "opus",
        "input_cost_per_1k_tokens": 0.015,
        "output_cost_per_1k_tokens": 0.075,
    }),
    create_model_entry("bedrock-claude", "anthropic.claude-3-5-sonnet-20240620-v1:0", {
        "display_name": "Claude 3.5 Sonnet (Bedrock)",
        "family": "claude-3",
        "variant": "sonnet-3.5",
        "max_output_tokens": 8192,
        "input_cost_per_1k_tokens": 0.003,
        "output_cost_per_1k_tokens": 0.015,
    }),
    create_model_entry("bedrock-claude", "anthropic.claude-3-haiku-20240307-v1:0", {
        "display_name": "Claude 3 Haiku (Bedrock)",
        "family": "claude-3",
        "variant": "haiku",
        "input_cost_per_1k_tokens": 0.00025,
        "output_cost_per_1k_tokens": 0.00125,
    }),

    # Hugging Face
    create_model_entry("huggingface", "mistralai/Mistral-7B-Instruct-v0.2", {
        "display_name": "Mistral 7B Instruct",
        "family": "mistral",
        "variant": "7b-instruct",
        "context_window": 32768,
        "max_output_tokens": 8192,
    }),
    create_model_entry("huggingface", "HuggingFaceH4/zephyr-7b-beta", {
        "display_name": "Zephyr 7B Beta",
        "description": "Fine-tuned Mistral variant for helpfulness",
        "family": "zephyr",
        "variant": "7b-beta",
        "context_window": 32768,
        "max_output_tokens": 8192,
    }),
    create_model_entry("huggingface", "google/gemma-2-9b-it", {
        "display_name": "Gemma 2 9B IT",
        "family": "gemma",
        "variant": "2-9b-it",
        "max_output_tokens": 8192,
    }),
    create_model_entry("huggingface", "meta-llama/Meta-Llama-3-70B-Instruct", {
        "display_name": "LLaMA 3 70B Instruct",
        "family": "llama-3",
        "variant": "70b-instruct",
    }),
    create_model_entry("huggingface", "tiiuae/falcon-180B", {
        "display_name": "Falcon 180B",
        "family": "falcon",
        "variant": "180b",
        "context_window": 2048,
        "max_output_tokens": 2048,
    }),

    # Ollama
    create_model_entry("ollama", "llama3", {
        "display_name": "LLaMA 3 (Ollama)",
        "family": "llama-3",
        "variant": "base",
        "aliases": ("llama3:latest",),
    }),
    create_model_entry("ollama", "llama2", {
        "display_name": "LLaMA 2 (Ollama)",
        "family": "llama-2",
        "variant": "base",
        "context_window": 4096,
        "max_output_tokens": 2048,
        "aliases": ("llama2:latest",),
    }),
    create_model_entry("ollama", "gemma2", {
        "display_name": "Gemma 2 (Ollama)",
        "family": "gemma",
        "variant": "2",
        "aliases": ("gemma2:latest",),
    }),
    create_model_entry("ollama", "mistral", {
        "display_name": "Mistral 7B (Ollama)",
        "family": "mistral",
        "variant": "7b",
        "aliases": ("mistral:latest",),
    }),
]
