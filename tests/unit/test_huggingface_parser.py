"""Unit tests for the Hugging Face parser."""

import pytest

from llm_unify.models import MessageRole, Provider, StopReason
from llm_unify.providers import HuggingFaceParser
from tests.helpers import payloads


@pytest.fixture
def parser(settings, catalog):
    return HuggingFaceParser(settings=settings, catalog=catalog)


class TestHuggingFaceParser:
    """Test Inference API and TGI responses."""

    def test_generation_list(self, parser):
        """Test the text generation list format."""
        result = parser.parse(payloads.huggingface_generation())
        assert result.success is True
        response = result.response
        assert response.provider == Provider.HUGGINGFACE
        assert response.text == "Hello from a hosted model"
        assert response.stop_reason == StopReason.UNKNOWN
        assert response.stop_reason_metadata is None
        assert response.usage.total_tokens == 0

    def test_multiple_generations(self, parser):
        """Test several sequences become several messages."""
        response = parser.parse([{"generated_text": "A"}, {"generated_text": "B"}]).response
        assert [m.text for m in response.messages] == ["A", "B"]
        assert response.metadata["num_generations"] == 2

    def test_tgi_details(self, parser):
        """Test TGI details provide stop reason and token counts."""
        payload = payloads.huggingface_tgi()
        payload["details"]["prefill"] = [{"id": 1, "text": "<s>"}, {"id": 2, "text": "Hi"}]
        response = parser.parse(payload).response
        assert response.text == "Hello from TGI"
        assert response.stop_reason == StopReason.END_TURN
        assert (response.usage.input_tokens, response.usage.output_tokens, response.usage.total_tokens) == (2, 4, 6)
        assert response.metadata["seed"] is None

    def test_length_stop(self, parser):
        """Test TGI length finishes."""
        payload = payloads.huggingface_tgi()
        payload["details"]["finish_reason"] = "length"
        assert parser.parse(payload).response.stop_reason == StopReason.MAX_TOKENS

    def test_conversational(self, parser):
        """Test only the reply becomes a message; history stays in metadata."""
        conversation = {"past_user_inputs": ["Hi"], "generated_responses": ["Hello!"]}
        response = parser.parse({"generated_text": "Hello!", "conversation": conversation}).response
        assert len(response.messages) == 1
        assert response.messages[0].role == MessageRole.ASSISTANT
        assert response.metadata["conversation"] == conversation

    def test_tgi_chat_completion(self, parser):
        """Test TGI's OpenAI-compatible chat endpoint."""
        payload = payloads.openai_chat(model="tgi", choices=[{
            "index": 0,
            "message": {"role": "assistant", "content": "Hi from TGI chat"},
            "finish_reason": "eos_token",
        }])
        response = parser.parse(payload).response
        assert response.text == "Hi from TGI chat"
        assert response.stop_reason == StopReason.END_TURN
        assert response.usage.total_tokens == 15
        assert response.id == "chatcmpl-abc123"

    def test_tgi_chat_multiple_choices(self, parser):
        """Test every choice's finish reason is listed."""
        payload = payloads.openai_chat(model="tgi", choices=[
            {"index": 0, "message": {"role": "assistant", "content": "A"}, "finish_reason": "eos_token"},
            {"index": 1, "message": {"role": "assistant", "content": "B"}, "finish_reason": "length"},
        ])
        response = parser.parse(payload).response
        assert [m.text for m in response.messages] == ["A", "B"]
        assert response.stop_reason == StopReason.END_TURN
        assert response.metadata["finish_reasons"] == ["eos_token", "length"]

    def test_conversation_is_copied(self, parser):
        """Test editing the conversation in metadata leaves the input alone."""
        conversation = {"past_user_inputs": ["Hi"], "generated_responses": ["Hello!"]}
        payload = {"generated_text": "Hello!", "conversation": conversation}
        response = parser.parse(payload).response
        response.metadata["conversation"]["past_user_inputs"].append("Bye")
        assert conversation["past_user_inputs"] == ["Hi"]

    def test_catalog_model(self, parser):
        """Test hosted models are enriched from the catalog."""
        payload = payloads.openai_chat(model="HuggingFaceH4/zephyr-7b-beta")
        assert parser.parse(payload).response.model.display_name is not None

    def test_model_loading_error(self, parser):
        """Test the 503 model-loading body."""
        result = parser.parse({"error": "Model gpt2 is currently loading", "estimated_time": 20.0})
        assert result.success is True
        error = result.response.error
        assert error.type == "model_loading"
        assert error.status_code == 503
        assert error.details["estimated_time"] == 20.0

    def test_error_list(self, parser):
        """Test errors reported as a list."""
        error = parser.parse({"error": ["first problem", "second problem"]}).response.error
        assert error.message == "first problem; second problem"

    @pytest.mark.parametrize("payload", [
        [],
        [{"text": "no generated_text"}],
        {"foo": "bar"},
        {"choices": [{"index": 0}]},
    ])
    def test_validation_errors(self, parser, payload):
        """Test unsupported shapes fail."""
        assert parser.parse(payload).success is False


class TestHuggingFaceStreaming:
    """Test TGI token streaming."""

    def test_token_chunk(self, parser):
        """Test an intermediate token."""
        chunk = parser.parse_stream_chunk(
            {"index": 3, "token": {"id": 15043, "text": " Hello", "logprob": -0.5, "special": False},
             "generated_text": None, "details": None}
        ).response
        assert chunk.event_type == "token"
        assert chunk.delta.text == " Hello"
        assert chunk.index == 3
        assert chunk.metadata["token"]["logprob"] == -0.5

    def test_special_token_has_no_text(self, parser):
        """Test special tokens are not emitted as text."""
        chunk = parser.parse_stream_chunk(
            {"token": {"id": 2, "text": "</s>", "logprob": 0.0, "special": True}, "generated_text": None}
        ).response
        assert chunk.delta.text is None

    def test_final_chunk(self, parser):
        """Test the final token carries details."""
        chunk = parser.parse_stream_chunk({
            "token": {"id": 2, "text": "</s>", "logprob": 0.0, "special": True},
            "generated_text": "Hello world",
            "details": {"finish_reason": "eos_token", "generated_tokens": 3, "seed": None},
        }).response
        assert chunk.event_type == "final"
        assert chunk.stop_reason == StopReason.END_TURN
        assert chunk.usage.output_tokens == 3
        assert chunk.metadata["generated_text"] == "Hello world"

    def test_chat_chunk(self, parser):
        """Test TGI's chat streaming uses the OpenAI chunk format."""
        chunk = parser.parse_stream_chunk(payloads.openai_chunk("Hi", model="tgi")).response
        assert chunk.provider == Provider.HUGGINGFACE
        assert chunk.delta.text == "Hi"

    def test_invalid_chunk(self, parser):
        """Test chunks need a token or choices."""
        assert parser.parse_stream_chunk({"index": 0}).success is False
