"""Unit tests for the OpenAI and OpenAI-compatible parsers."""

import json

import pytest

from llm_unify.models import (
    FunctionCallContent,
    ImageContent,
    MessageRole,
    Provider,
    StopReason,
    TextContent,
    ToolResultContent,
    ToolUseContent,
)
from llm_unify.providers import (
    FireworksParser,
    MistralParser,
    OpenAIParser,
    PerplexityParser,
    TogetherParser,
    XAIParser,
)
from tests.helpers import payloads


@pytest.fixture
def parser(settings, catalog):
    return OpenAIParser(settings=settings, catalog=catalog)


class TestOpenAIParser:
    """Test OpenAI chat completion parsing."""

    def test_basic_response(self, parser):
        """Test a plain text completion."""
        result = parser.parse(payloads.openai_chat())
        assert result.success is True
        assert result.warnings == []

        response = result.response
        assert response.id == "chatcmpl-abc123"
        assert response.provider == Provider.OPENAI
        assert response.model.id == "gpt-4o-mini"
        assert response.model.display_name == "GPT-4o Mini"
        assert response.model.context_window == 128000
        assert response.text == "Hello there!"
        assert response.messages[0].role == MessageRole.ASSISTANT
        assert response.stop_reason == StopReason.END_TURN
        assert response.stop_reason_metadata.original_value == "stop"
        assert (response.usage.input_tokens, response.usage.output_tokens, response.usage.total_tokens) == (12, 3, 15)

    def test_extra_fields_kept_in_metadata(self, parser):
        """Test unmapped fields are preserved."""
        response = parser.parse(payloads.openai_chat()).response
        assert response.metadata["system_fingerprint"] == "fp_44709d6fcb"
        assert response.metadata["object"] == "chat.completion"
        assert response.metadata["created"] == 1717000000
        assert "choices" not in response.metadata

    def test_raw_is_untouched(self, parser):
        """Test the caller's input is kept as-is and not modified."""
        payload = payloads.openai_chat()
        snapshot = json.dumps(payload, sort_keys=True)
        response = parser.parse(payload).response
        assert response.raw is payload
        assert json.dumps(payload, sort_keys=True) == snapshot

    def test_editing_metadata_leaves_raw_alone(self, parser):
        """Test metadata and usage are copies, not views into the input."""
        payload = payloads.openai_chat(
            citations=["https://example.com"],
            usage={"prompt_tokens": 12, "completion_tokens": 3,
                   "prompt_tokens_details": {"cached_tokens": 2}},
        )
        snapshot = json.dumps(payload, sort_keys=True)
        response = parser.parse(payload).response

        response.metadata["citations"].append("https://changed.example")
        response.usage.metadata["prompt_tokens_details"]["cached_tokens"] = 99
        assert json.dumps(payload, sort_keys=True) == snapshot
        assert response.raw is payload

    def test_tool_calls(self, parser):
        """Test tool calls become tool_use blocks with decoded input."""
        response = parser.parse(payloads.openai_tool_call()).response
        block = response.messages[0].content[0]
        assert isinstance(block, ToolUseContent)
        assert block.id == "call_weather"
        assert block.name == "get_weather"
        assert block.input == {"city": "Paris"}
        assert response.stop_reason == StopReason.TOOL_USE

    def test_tool_call_without_id_gets_stable_id(self, parser):
        """Test missing tool call ids are derived deterministically."""
        payload = payloads.openai_tool_call()
        del payload["choices"][0]["message"]["tool_calls"][0]["id"]
        first = parser.parse(payload).response.messages[0].tool_calls[0].id
        second = parser.parse(payload).response.messages[0].tool_calls[0].id
        assert first == second
        assert first.startswith("call_")

    def test_malformed_tool_arguments(self, parser):
        """Test bad argument JSON is kept with a warning."""
        payload = payloads.openai_tool_call()
        payload["choices"][0]["message"]["tool_calls"][0]["function"]["arguments"] = "{city: Paris"
        result = parser.parse(payload)
        assert result.success is True
        assert result.response.messages[0].tool_calls[0].input == {"_raw_arguments": "{city: Paris"}
        assert len(result.warnings) == 1

    def test_legacy_function_call(self, parser):
        """Test the legacy function_call field."""
        payload = payloads.openai_chat(choices=[{
            "index": 0,
            "message": {
                "role": "assistant",
                "content": None,
                "function_call": {"name": "lookup", "arguments": "{\"q\": \"x\"}"},
            },
            "finish_reason": "function_call",
        }])
        response = parser.parse(payload).response
        block = response.messages[0].content[0]
        assert isinstance(block, FunctionCallContent)
        assert block.arguments == "{\"q\": \"x\"}"
        assert response.stop_reason == StopReason.TOOL_USE

    def test_multipart_content(self, parser):
        """Test content given as a list of parts."""
        payload = payloads.openai_chat(choices=[{
            "index": 0,
            "message": {
                "role": "assistant",
                "content": [
                    {"type": "text", "text": "Look:"},
                    {"type": "image_url", "image_url": {"url": "https://example.com/cat.png"}},
                    {"type": "hologram"},
                ],
            },
            "finish_reason": "stop",
        }])
        result = parser.parse(payload)
        content = result.response.messages[0].content
        assert isinstance(content[0], TextContent)
        assert isinstance(content[1], ImageContent)
        assert content[1].source.url == "https://example.com/cat.png"
        assert len(content) == 2
        assert any("hologram" in warning for warning in result.warnings)

    def test_tool_role_message(self, parser):
        """Test tool role messages carry a tool_result block."""
        payload = payloads.openai_chat(choices=[{
            "index": 0,
            "message": {"role": "tool", "tool_call_id": "call_1", "content": "21C"},
            "finish_reason": "stop",
        }])
        message = parser.parse(payload).response.messages[0]
        assert message.role == MessageRole.TOOL
        assert message.tool_call_id == "call_1"
        assert message.content == [ToolResultContent(tool_use_id="call_1", content="21C")]

    def test_multiple_choices(self, parser):
        """Test every choice becomes a message; the first drives the stop reason."""
        payload = payloads.openai_chat(choices=[
            {"index": 0, "message": {"role": "assistant", "content": "A"}, "finish_reason": "length"},
            {"index": 1, "message": {"role": "assistant", "content": "B"}, "finish_reason": "stop"},
        ])
        response = parser.parse(payload).response
        assert [m.text for m in response.messages] == ["A", "B"]
        assert response.stop_reason == StopReason.MAX_TOKENS
        assert response.metadata["finish_reasons"] == ["length", "stop"]

    def test_refusal_and_cached_usage(self, parser):
        """Test message extras and nested usage details."""
        payload = payloads.openai_chat(
            usage={
                "prompt_tokens": 100,
                "completion_tokens": 20,
                "total_tokens": 120,
                "prompt_tokens_details": {"cached_tokens": 64},
            }
        )
        payload["choices"][0]["message"]["refusal"] = "I can't help with that."
        response = parser.parse(payload).response
        assert response.metadata["refusal"] == "I can't help with that."
        assert response.usage.metadata["cached_tokens"] == 64

    def test_unknown_finish_reason(self, parser):
        """Test unknown finish reasons warn and are preserved."""
        payload = payloads.openai_chat()
        payload["choices"][0]["finish_reason"] = "cosmic_ray"
        result = parser.parse(payload)
        assert result.response.stop_reason == StopReason.UNKNOWN
        assert result.response.stop_reason_metadata.was_recognized is False
        assert len(result.warnings) == 1

    def test_missing_id_is_deterministic(self, parser):
        """Test responses without an id get the same derived id each time."""
        payload = payloads.openai_chat()
        del payload["id"]
        assert parser.parse(payload).response.id == parser.parse(payload).response.id

    def test_error_payload(self, parser):
        """Test provider errors are surfaced in response.error."""
        result = parser.parse(payloads.openai_error())
        assert result.success is True
        response = result.response
        assert response.is_error is True
        assert response.error.message == "Incorrect API key provided"
        assert response.error.code == "invalid_api_key"
        assert response.error.type == "invalid_request_error"
        assert response.messages == []

    @pytest.mark.parametrize("payload,fragment", [
        ({}, "choices"),
        ({"choices": "nope"}, "choices"),
        ({"choices": [{"index": 0}]}, "choices[0]"),
        ({"choices": [42]}, "choices[0]"),
        ([1, 2], "expected a JSON object"),
    ])
    def test_validation_errors(self, parser, payload, fragment):
        """Test structurally invalid payloads fail."""
        result = parser.parse(payload)
        assert result.success is False
        assert result.response is None
        assert fragment in result.errors[0]
        assert result.errors[0].startswith("Validation error:")

    def test_json_text_input(self, parser):
        """Test raw JSON text is accepted."""
        result = parser.parse(json.dumps(payloads.openai_chat()))
        assert result.response.text == "Hello there!"

    def test_metadata(self, parser):
        """Test provider metadata."""
        metadata = parser.get_metadata()
        assert metadata.id == Provider.OPENAI
        assert metadata.capabilities.function_calling is True


class TestOpenAIStreaming:
    """Test chat.completion.chunk parsing."""

    def test_text_delta(self, parser):
        """Test a text delta chunk."""
        chunk = parser.parse_stream_chunk(payloads.openai_chunk("Hel")).response
        assert chunk.provider == Provider.OPENAI
        assert chunk.delta.text == "Hel"
        assert chunk.index == 0
        assert chunk.stop_reason is None
        assert chunk.event_type == "chat.completion.chunk"

    def test_role_chunk(self, parser):
        """Test the opening chunk carries the role."""
        payload = payloads.openai_chunk()
        payload["choices"][0]["delta"] = {"role": "assistant", "content": ""}
        chunk = parser.parse_stream_chunk(payload).response
        assert chunk.delta.role == MessageRole.ASSISTANT

    def test_tool_call_delta(self, parser):
        """Test tool call fragments."""
        payload = payloads.openai_chunk()
        payload["choices"][0]["delta"] = {"tool_calls": [
            {"index": 0, "id": "call_1", "type": "function", "function": {"name": "get_weather", "arguments": "{\"ci"}},
        ]}
        delta = parser.parse_stream_chunk(payload).response.delta.tool_call_delta
        assert (delta.index, delta.id, delta.name, delta.arguments) == (0, "call_1", "get_weather", "{\"ci")

    def test_final_chunk(self, parser):
        """Test the finishing chunk and the usage-only chunk."""
        finish = parser.parse_stream_chunk(payloads.openai_chunk("", finish_reason="stop")).response
        assert finish.stop_reason == StopReason.END_TURN

        usage_chunk = payloads.openai_chunk(choices=[], usage={"prompt_tokens": 5, "completion_tokens": 7})
        chunk = parser.parse_stream_chunk(usage_chunk).response
        assert chunk.usage.total_tokens == 12
        assert chunk.delta.text is None

    def test_sse_line(self, parser):
        """Test a raw server-sent event line."""
        line = "data: " + json.dumps(payloads.openai_chunk("lo"))
        assert parser.parse_stream_chunk(line).response.delta.text == "lo"

    def test_done_marker_is_invalid(self, parser):
        """Test the [DONE] terminator is not a chunk."""
        result = parser.parse_stream_chunk("data: [DONE]")
        assert result.success is False

    def test_chunk_without_choices(self, parser):
        """Test chunks must carry choices."""
        result = parser.parse_stream_chunk({"id": "x"})
        assert result.success is False


class TestCompatibleParsers:
    """Test providers sharing the OpenAI format."""

    @pytest.mark.parametrize("parser_class,provider", [
        (MistralParser, Provider.MISTRAL),
        (XAIParser, Provider.XAI),
        (PerplexityParser, Provider.PERPLEXITY),
        (TogetherParser, Provider.TOGETHER),
        (FireworksParser, Provider.FIREWORKS),
    ])
    def test_shared_format(self, settings, catalog, parser_class, provider):
        """Test each compatible parser reads the shared format."""
        response = parser_class(settings=settings, catalog=catalog).parse(payloads.openai_chat()).response
        assert response.provider == provider
        assert response.text == "Hello there!"
        assert response.usage.total_tokens == 15

    def test_mistral_model_length(self, settings, catalog):
        """Test Mistral's own finish reason."""
        payload = payloads.openai_chat(model="mistral-large-latest")
        payload["choices"][0]["finish_reason"] = "model_length"
        response = MistralParser(settings=settings, catalog=catalog).parse(payload).response
        assert response.stop_reason == StopReason.MAX_TOKENS
        assert response.model.display_name is not None

    def test_mistral_error(self, settings, catalog):
        """Test Mistral's error envelope."""
        payload = {"object": "error", "message": "Unauthorized", "type": "invalid_request_error", "code": 1000}
        response = MistralParser(settings=settings, catalog=catalog).parse(payload).response
        assert response.error.message == "Unauthorized"
        assert response.error.code == "1000"

    def test_mistral_validation_detail(self, settings, catalog):
        """Test request validation failures."""
        payload = {"detail": [{"loc": ["body", "model"], "msg": "field required", "type": "missing"}]}
        response = MistralParser(settings=settings, catalog=catalog).parse(payload).response
        assert response.error.status_code == 422
        assert response.error.message == "field required"

    def test_together_eos(self, settings, catalog):
        """Test Together's eos finish reason."""
        payload = payloads.openai_chat(model="meta-llama/Llama-3-70b-chat-hf")
        payload["choices"][0]["finish_reason"] = "eos"
        response = TogetherParser(settings=settings, catalog=catalog).parse(payload).response
        assert response.stop_reason == StopReason.END_TURN

    def test_perplexity_citations(self, settings, catalog):
        """Test citations land in metadata."""
        payload = payloads.openai_chat(model="sonar", citations=["https://example.com/a"])
        response = PerplexityParser(settings=settings, catalog=catalog).parse(payload).response
        assert response.metadata["citations"] == ["https://example.com/a"]
        assert response.model.display_name is not None

    def test_reasoning_content(self, settings, catalog):
        """Test reasoning_content on compatible hosts is preserved."""
        payload = payloads.openai_chat(model="accounts/fireworks/models/llama-v3-70b-instruct")
        payload["choices"][0]["message"]["reasoning_content"] = "thinking..."
        response = FireworksParser(settings=settings, catalog=catalog).parse(payload).response
        assert response.metadata["reasoning_content"] == "thinking..."
