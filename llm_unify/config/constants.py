"""
Detection constants.

Confidence values and the acceptance threshold are tunable defaults. They
are ordered so that header > URL > response shape > model name whenever two
signals disagree.
"""

from ..models.unified import Provider

# Signal confidences
HEADER_CONFIDENCE = 0.95
URL_CONFIDENCE = 0.90
LOCAL_URL_CONFIDENCE = 0.85
SHAPE_CONFIDENCE = 0.85
WEAK_SHAPE_CONFIDENCE = 0.80
MODEL_CATALOG_CONFIDENCE = 0.90
AMBIGUOUS_MODEL_CONFIDENCE = 0.70

DEFAULT_ACCEPTANCE_THRESHOLD = 0.6

# Environment variables
DETECTION_THRESHOLD_ENV_VAR = "LLM_UNIFY_DETECTION_THRESHOLD"
FALLBACK_ROLE_ENV_VAR = "LLM_UNIFY_FALLBACK_ROLE"

UNKNOWN_MODEL_ID = "unknown"
UNABLE_TO_DETECT_MESSAGE = "Unable to determine provider"
OPENAI_FAMILY_AMBIGUITY_WARNING = (
    "Response uses the OpenAI-compatible format shared by several providers; "
    "defaulting to openai. Pass an explicit provider to disambiguate."
)

# Providers sharing the OpenAI chat completions wire format
OPENAI_COMPATIBLE_PROVIDERS = frozenset({
    Provider.OPENAI,
    Provider.MISTRAL,
    Provider.XAI,
    Provider.PERPLEXITY,
    Provider.TOGETHER,
    Provider.FIREWORKS,
})

# Header name prefixes (lower-case) that only one provider sends
HEADER_SIGNALS = (
    ("openai-version", Provider.OPENAI),
    ("openai-organization", Provider.OPENAI),
    ("openai-processing-ms", Provider.OPENAI),
    ("anthropic-version", Provider.ANTHROPIC),
    ("anthropic-organization-id", Provider.ANTHROPIC),
    ("anthropic-ratelimit-", Provider.ANTHROPIC),
    ("cohere-version", Provider.COHERE),
    ("x-amzn-bedrock-", Provider.BEDROCK),
    ("x-compute-type", Provider.HUGGINGFACE),
)

# (regex searched in the lower-cased URL, provider, confidence)
URL_SIGNALS = (
    (r"api\.openai\.com|\.openai\.azure\.com", Provider.OPENAI, URL_CONFIDENCE),
    (r"api\.anthropic\.com", Provider.ANTHROPIC, URL_CONFIDENCE),
    (r"api\.mistral\.ai", Provider.MISTRAL, URL_CONFIDENCE),
    (r"generativelanguage\.googleapis\.com|aiplatform\.googleapis\.com", Provider.GOOGLE, URL_CONFIDENCE),
    (r"api\.cohere\.(ai|com)", Provider.COHERE, URL_CONFIDENCE),
    (r"api\.x\.ai", Provider.XAI, URL_CONFIDENCE),
    (r"api\.perplexity\.ai", Provider.PERPLEXITY, URL_CONFIDENCE),
    (r"api\.together\.(xyz|ai)", Provider.TOGETHER, URL_CONFIDENCE),
    (r"api\.fireworks\.ai", Provider.FIREWORKS, URL_CONFIDENCE),
    (r"bedrock[\w.-]*\.amazonaws\.com", Provider.BEDROCK, URL_CONFIDENCE),
    (r"huggingface\.co|\.hf\.space", Provider.HUGGINGFACE, URL_CONFIDENCE),
    (r"(localhost|127\.0\.0\.1):11434", Provider.OLLAMA, LOCAL_URL_CONFIDENCE),
)

# Bedrock model ids carry a vendor prefix, optionally behind a region profile
BEDROCK_MODEL_PATTERN = r"^((us|eu|apac)\.)?(anthropic|amazon|meta|cohere|ai21|mistral)\."

# (regex matched against the model id, provider, confidence)
# Checked in order; more specific prefixes come first.
MODEL_NAME_PATTERNS = (
    (BEDROCK_MODEL_PATTERN, Provider.BEDROCK, 0.85),
    (r"^(gpt-|chatgpt-|o1|o3|o4|text-davinci|davinci|babbage)", Provider.OPENAI, 0.90),
    (r"^claude-", Provider.ANTHROPIC, 0.90),
    (r"^(mistral-|open-mistral|open-mixtral|codestral|ministral|pixtral|magistral)", Provider.MISTRAL, 0.90),
    (r"^(models/)?gemini-", Provider.GOOGLE, 0.90),
    (r"^(command|c4ai-)", Provider.COHERE, 0.90),
    (r"^grok-", Provider.XAI, 0.90),
    (r"^(sonar|pplx-|llama-3(\.1)?-sonar)", Provider.PERPLEXITY, 0.85),
    (r"^accounts/fireworks/", Provider.FIREWORKS, 0.90),
    (r"^(togethercomputer/|meta-llama/[\w.-]*-turbo$)", Provider.TOGETHER, 0.80),
)

# Open-weight model names served by several OpenAI-compatible hosts
AMBIGUOUS_MODEL_PATTERN = r"(llama|mixtral|mistral|qwen|hermes|nous|deepseek|gemma|phi-)"
