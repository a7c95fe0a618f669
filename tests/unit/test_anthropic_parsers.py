"""Unit tests for the Anthropic and Bedrock parsers."""

import pytest

from llm_unify.models import (
    ImageContent,
    MessageRole,
    Provider,
    StopReason,
    TextContent,
    ToolResultContent,
    ToolUseContent,
)
from llm_unify.providers import AnthropicParser, BedrockParser
from tests.helpers import payloads


@pytest.fixture
def parser(settings, catalog):
    return AnthropicParser(settings=settings, catalog=catalog)


@pytest.fixture
def bedrock(settings, catalog):
    return BedrockParser(settings=settings, catalog=catalog)


class TestAnthropicParser:
    """Test Messages API parsing."""

    def test_basic_response(self, parser):
        """Test a plain text message."""
        result = parser.parse(payloads.anthropic_message())
        assert result.success is True
        assert result.warnings == []

        response = result.response
        assert response.id == "msg_01XFDUDYJgAACzvnptvVoYEL"
        assert response.provider == Provider.ANTHROPIC
        assert response.model.id == "claude-3-5-sonnet-20241022"
        assert response.text == "Hello from Claude"
        assert response.stop_reason == StopReason.END_TURN
        assert response.metadata["type"] == "message"

    def test_usage_cache_counters(self, parser):
        """Test cache counters stay outside the input count."""
        usage = parser.parse(payloads.anthropic_message()).response.usage
        assert (usage.input_tokens, usage.output_tokens, usage.total_tokens) == (20, 6, 26)
        assert usage.metadata["cache_read_input_tokens"] == 10

    def test_catalog_model(self, parser):
        """Test known models are enriched from the catalog."""
        response = parser.parse(payloads.anthropic_message(model="claude-3-haiku-20240307")).response
        assert response.model.display_name == "Claude 3 Haiku"
        assert response.model.context_window == 200000

    def test_tool_use_and_thinking(self, parser):
        """Test tool_use blocks and thinking blocks."""
        response = parser.parse(payloads.anthropic_tool_use()).response
        content = response.messages[0].content
        assert isinstance(content[0], TextContent)
        assert isinstance(content[1], ToolUseContent)
        assert content[1].id == "toolu_01"
        assert content[1].input == {"city": "Paris"}
        assert response.stop_reason == StopReason.TOOL_USE
        assert response.metadata["thinking"][0]["thinking"] == "The user wants weather."

    def test_tool_result_and_image_blocks(self, parser):
        """Test tool_result and image blocks."""
        payload = payloads.anthropic_message(content=[
            {"type": "tool_result", "tool_use_id": "toolu_01", "content": [{"type": "text", "text": "21C"}], "is_error": False},
            {"type": "image", "source": {"type": "base64", "media_type": "image/png", "data": "iVBORw0KGgo="}},
        ])
        content = parser.parse(payload).response.messages[0].content
        assert content[0] == ToolResultContent(tool_use_id="toolu_01", content="21C", is_error=False)
        assert isinstance(content[1], ImageContent)
        assert content[1].source.media_type == "image/png"

    def test_unknown_block_kept(self, parser):
        """Test unknown block types warn and stay in metadata."""
        block = {"type": "container_upload", "file_id": "f_1"}
        result = parser.parse(payloads.anthropic_message(content=[{"type": "text", "text": "hi"}, block]))
        assert result.success is True
        assert result.response.metadata["unhandled_blocks"] == [block]
        assert len(result.warnings) == 1

    @pytest.mark.parametrize("value,expected", [
        ("max_tokens", StopReason.MAX_TOKENS),
        ("stop_sequence", StopReason.END_TURN),
        ("refusal", StopReason.CONTENT_FILTER),
    ])
    def test_stop_reasons(self, parser, value, expected):
        """Test stop reason mapping."""
        response = parser.parse(payloads.anthropic_message(stop_reason=value)).response
        assert response.stop_reason == expected
        assert response.stop_reason_metadata.original_value == value

    def test_unknown_role(self, parser):
        """Test an unknown role yields the fallback and one warning."""
        result = parser.parse(payloads.anthropic_message(role="narrator"))
        assert result.response.messages[0].role == MessageRole.USER
        assert len(result.warnings) == 1
        assert "narrator" in result.warnings[0]

    def test_error_payload(self, parser):
        """Test error bodies are surfaced in response.error."""
        result = parser.parse(payloads.anthropic_error())
        assert result.success is True
        error = result.response.error
        assert error.message == "Overloaded"
        assert error.type == "overloaded_error"
        assert error.details["request_id"] == "req_011"
        assert result.response.messages == []

    @pytest.mark.parametrize("payload", [
        {},
        {"content": "hello"},
        {"content": [{"text": "no type"}]},
        {"choices": [{"message": {"role": "assistant", "content": "hi"}}]},
    ])
    def test_validation_errors(self, parser, payload):
        """Test payloads without typed content blocks fail."""
        result = parser.parse(payload)
        assert result.success is False
        assert result.errors[0].startswith("Validation error:")


class TestAnthropicStreaming:
    """Test Messages streaming events."""

    def test_message_start(self, parser):
        """Test message_start carries id, model, role and input usage."""
        chunk = parser.parse_stream_chunk({
            "type": "message_start",
            "message": {
                "id": "msg_1", "type": "message", "role": "assistant", "content": [],
                "model": "claude-3-haiku-20240307", "usage": {"input_tokens": 25, "output_tokens": 1},
            },
        }).response
        assert chunk.id == "msg_1"
        assert chunk.model == "claude-3-haiku-20240307"
        assert chunk.delta.role == MessageRole.ASSISTANT
        assert chunk.usage.input_tokens == 25

    def test_text_delta(self, parser):
        """Test text deltas keep their block index."""
        chunk = parser.parse_stream_chunk(
            {"type": "content_block_delta", "index": 1, "delta": {"type": "text_delta", "text": "Hi"}}
        ).response
        assert chunk.delta.text == "Hi"
        assert chunk.index == 1
        assert chunk.event_type == "content_block_delta"

    def test_tool_use_start_and_json_delta(self, parser):
        """Test tool_use blocks stream as tool call deltas."""
        start = parser.parse_stream_chunk({
            "type": "content_block_start", "index": 1,
            "content_block": {"type": "tool_use", "id": "toolu_1", "name": "get_weather", "input": {}},
        }).response
        assert start.delta.tool_call_delta.id == "toolu_1"
        assert start.delta.tool_call_delta.name == "get_weather"

        delta = parser.parse_stream_chunk({
            "type": "content_block_delta", "index": 1,
            "delta": {"type": "input_json_delta", "partial_json": "{\"city\": "},
        }).response
        assert delta.delta.tool_call_delta.arguments == "{\"city\": "
        assert delta.delta.tool_call_delta.index == 1

    def test_message_delta(self, parser):
        """Test the closing delta carries stop reason and output usage."""
        chunk = parser.parse_stream_chunk({
            "type": "message_delta",
            "delta": {"stop_reason": "end_turn", "stop_sequence": None},
            "usage": {"output_tokens": 15},
        }).response
        assert chunk.stop_reason == StopReason.END_TURN
        assert chunk.usage.output_tokens == 15

    def test_thinking_delta_in_metadata(self, parser):
        """Test thinking deltas are kept in metadata."""
        chunk = parser.parse_stream_chunk({
            "type": "content_block_delta", "index": 0,
            "delta": {"type": "thinking_delta", "thinking": "Let me see"},
        }).response
        assert chunk.delta.text is None
        assert chunk.metadata["thinking_delta"]["thinking"] == "Let me see"

    def test_error_event(self, parser):
        """Test stream error events."""
        chunk = parser.parse_stream_chunk(
            {"type": "error", "error": {"type": "overloaded_error", "message": "Overloaded"}}
        ).response
        assert chunk.error.type == "overloaded_error"

    def test_ping_and_unknown_events(self, parser):
        """Test ping is quiet and unknown events warn."""
        assert parser.parse_stream_chunk({"type": "ping"}).warnings == []
        result = parser.parse_stream_chunk({"type": "mystery_event"})
        assert result.success is True
        assert len(result.warnings) == 1

    def test_event_without_type(self, parser):
        """Test events must be typed."""
        assert parser.parse_stream_chunk({"index": 0}).success is False


class TestBedrockParser:
    """Test Bedrock Converse and InvokeModel parsing."""

    def test_converse_response(self, bedrock):
        """Test a Converse response."""
        result = bedrock.parse(payloads.bedrock_converse())
        assert result.success is True
        response = result.response
        assert response.provider == Provider.BEDROCK
        assert response.id == "b6f5a7c0-1111-2222-3333-444455556666"
        assert response.text == "Hello from Bedrock"
        assert response.stop_reason == StopReason.END_TURN
        assert (response.usage.input_tokens, response.usage.output_tokens, response.usage.total_tokens) == (9, 4, 13)
        assert response.metadata["metrics"] == {"latencyMs": 420}

    def test_converse_tool_use(self, bedrock):
        """Test Converse toolUse, toolResult and reasoning blocks."""
        payload = payloads.bedrock_converse(stopReason="tool_use")
        payload["output"]["message"]["content"] = [
            {"reasoningContent": {"reasoningText": {"text": "Need weather"}}},
            {"toolUse": {"toolUseId": "tooluse_1", "name": "get_weather", "input": {"city": "Paris"}}},
            {"toolResult": {"toolUseId": "tooluse_0", "content": [{"json": {"temp": 21}}], "status": "error"}},
        ]
        response = bedrock.parse(payload).response
        content = response.messages[0].content
        assert content[0] == ToolUseContent(id="tooluse_1", name="get_weather", input={"city": "Paris"})
        assert content[1].is_error is True
        assert content[1].content == "{\"temp\": 21}"
        assert response.metadata["reasoning"] == [{"reasoningText": {"text": "Need weather"}}]
        assert response.stop_reason == StopReason.TOOL_USE

    def test_converse_image(self, bedrock):
        """Test inline image bytes."""
        payload = payloads.bedrock_converse()
        payload["output"]["message"]["content"] = [{"image": {"format": "png", "source": {"bytes": "iVBORw0KGgo="}}}]
        image = bedrock.parse(payload).response.messages[0].content[0]
        assert image.source.media_type == "image/png"

    def test_guardrail_stop(self, bedrock):
        """Test guardrail interventions map to content_filter."""
        response = bedrock.parse(payloads.bedrock_converse(stopReason="guardrail_intervened")).response
        assert response.stop_reason == StopReason.CONTENT_FILTER

    def test_invoke_model_claude_body(self, bedrock):
        """Test Claude InvokeModel bodies use the Messages format."""
        payload = payloads.anthropic_message(model="anthropic.claude-3-haiku-20240307-v1:0")
        response = bedrock.parse(payload).response
        assert response.provider == Provider.BEDROCK
        assert response.text == "Hello from Claude"
        assert response.usage.total_tokens == 26
        assert response.model.display_name is not None

    def test_aws_error_body(self, bedrock):
        """Test AWS JSON error bodies."""
        result = bedrock.parse({"message": "Rate exceeded", "__type": "com.amazon.coral#ThrottlingException"})
        assert result.success is True
        assert result.response.error.message == "Rate exceeded"
        assert result.response.error.code == "ThrottlingException"

    @pytest.mark.parametrize("payload", [
        {},
        {"output": {}},
        {"output": {"message": {"content": "text"}}},
    ])
    def test_validation_errors(self, bedrock, payload):
        """Test structurally invalid bodies fail."""
        assert bedrock.parse(payload).success is False


class TestBedrockStreaming:
    """Test ConverseStream events."""

    def test_wrapped_text_delta(self, bedrock):
        """Test boto3's wrapped event form."""
        chunk = bedrock.parse_stream_chunk(
            {"contentBlockDelta": {"contentBlockIndex": 0, "delta": {"text": "Hi"}}}
        ).response
        assert chunk.event_type == "contentBlockDelta"
        assert chunk.delta.text == "Hi"

    def test_unwrapped_events(self, bedrock):
        """Test bare event bodies."""
        assert bedrock.parse_stream_chunk({"role": "assistant"}).response.delta.role == MessageRole.ASSISTANT
        stop = bedrock.parse_stream_chunk({"stopReason": "max_tokens"}).response
        assert stop.stop_reason == StopReason.MAX_TOKENS
        metadata = bedrock.parse_stream_chunk(
            {"usage": {"inputTokens": 3, "outputTokens": 5, "totalTokens": 8}, "metrics": {"latencyMs": 10}}
        ).response
        assert metadata.usage.total_tokens == 8
        assert metadata.metadata["metrics"] == {"latencyMs": 10}

    def test_tool_use_stream(self, bedrock):
        """Test tool use start and input deltas."""
        start = bedrock.parse_stream_chunk({"contentBlockStart": {
            "contentBlockIndex": 1, "start": {"toolUse": {"toolUseId": "tooluse_1", "name": "get_weather"}},
        }}).response
        assert start.delta.tool_call_delta.name == "get_weather"
        assert start.index == 1
        delta = bedrock.parse_stream_chunk({"contentBlockDelta": {
            "contentBlockIndex": 1, "delta": {"toolUse": {"input": "{\"city\""}},
        }}).response
        assert delta.delta.tool_call_delta.arguments == "{\"city\""

    def test_stream_exception(self, bedrock):
        """Test stream exceptions become chunk errors."""
        chunk = bedrock.parse_stream_chunk({"throttlingException": {"message": "Slow down"}}).response
        assert chunk.error.message == "Slow down"
        assert chunk.error.code == "throttlingException"

    def test_relayed_anthropic_event(self, bedrock):
        """Test Claude events relayed by InvokeModelWithResponseStream."""
        chunk = bedrock.parse_stream_chunk(
            {"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": "Hi"}}
        ).response
        assert chunk.provider == Provider.BEDROCK
        assert chunk.delta.text == "Hi"

    def test_unrecognized_event(self, bedrock):
        """Test unknown events fail validation."""
        assert bedrock.parse_stream_chunk({"foo": "bar"}).success is False
