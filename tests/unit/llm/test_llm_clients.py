"""
Tests for the LLM clients and factory.

Test Strategy
-------------
- requests and the Anthropic SDK are mocked; no network access
- complete() is exercised through the base class on each client

Organization
------------
- TestLLMClientBase: complete(), usage accounting, protocol conformance
- TestOllamaClient: HTTP request/response handling
- TestClaudeClient: SDK parameter building and error mapping
- TestFactory: provider selection
"""

from concurrent.futures import ThreadPoolExecutor
from types import SimpleNamespace
from unittest.mock import MagicMock, Mock, patch

import pytest
import requests

from conceptforge.core.config import Config
from conceptforge.llm.base import (
    CompletionService,
    ConfigurationError,
    GenerationConfig,
    LLMError,
    RateLimitError,
)
from conceptforge.llm.claude import ClaudeClient
from conceptforge.llm.factory import get_llm_client
from conceptforge.llm.ollama import OllamaClient
from tests.fixtures.fakes import ScriptedLLM


def _ollama_response(status: int = 200, payload=None) -> Mock:
    response = Mock()
    response.status_code = status
    response.json.return_value = payload or {}
    return response


class TestLLMClientBase:
    """Tests for behaviour shared by every client."""

    def test_clients_are_completion_services(self):
        assert isinstance(ScriptedLLM(), CompletionService)
        assert isinstance(OllamaClient(), CompletionService)

    @pytest.mark.asyncio
    async def test_complete_passes_max_tokens_and_temperature(self):
        llm = ScriptedLLM()
        llm.default_temperature = 0.1

        with patch.object(llm, "generate", wraps=llm.generate) as generate:
            result = await llm.complete("Define 'ATP' in 1-2 sentences", max_tokens=100)

        assert result == "ATP is a term from the notes."
        config = generate.call_args.args[1]
        assert isinstance(config, GenerationConfig)
        assert config.max_tokens == 100
        assert config.temperature == 0.1

    @pytest.mark.asyncio
    async def test_complete_propagates_errors(self):
        llm = ScriptedLLM(fail_on="boom")

        with pytest.raises(LLMError):
            await llm.complete("boom", max_tokens=10)

    def test_usage_accounting(self):
        llm = ScriptedLLM()

        llm._record_usage(prompt_tokens=10, completion_tokens=5)
        llm._record_usage(prompt_tokens=1, completion_tokens=1)

        assert llm.get_usage() == {
            "prompt_tokens": 11,
            "completion_tokens": 6,
            "total_tokens": 17,
        }
        llm.reset_usage()
        assert llm.get_usage()["total_tokens"] == 0

    def test_usage_accounting_across_threads(self):
        llm = ScriptedLLM()

        def record(_):
            for _ in range(500):
                llm._record_usage(prompt_tokens=2, completion_tokens=1)

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(record, range(8)))

        assert llm.get_usage() == {
            "prompt_tokens": 8000,
            "completion_tokens": 4000,
            "total_tokens": 12000,
        }


class TestOllamaClient:
    """Tests for OllamaClient."""

    @patch("conceptforge.llm.ollama.requests.post")
    def test_generate(self, mock_post):
        mock_post.return_value = _ollama_response(
            payload={"response": "  ATP stores energy.  ", "prompt_eval_count": 12, "eval_count": 4}
        )
        client = OllamaClient(url="http://ollama:11434/", model="llama3")

        text = client.generate("Define ATP", GenerationConfig(max_tokens=100, temperature=0.2))

        assert text == "ATP stores energy."
        url = mock_post.call_args.args[0]
        body = mock_post.call_args.kwargs["json"]
        assert url == "http://ollama:11434/api/generate"
        assert body["model"] == "llama3"
        assert body["stream"] is False
        assert body["options"]["num_predict"] == 100
        assert body["options"]["temperature"] == 0.2
        assert client.get_usage()["total_tokens"] == 16

    @patch.dict("os.environ", {"OLLAMA_HOST": "http://gpu-box:11434"})
    def test_url_from_environment(self):
        assert OllamaClient().url == "http://gpu-box:11434"

    @patch("conceptforge.llm.ollama.requests.post")
    def test_options_include_stop_and_seed(self, mock_post):
        mock_post.return_value = _ollama_response(payload={"response": "ok"})
        client = OllamaClient()

        client.generate("p", GenerationConfig(stop_sequences=["\n\n"], seed=9))

        options = mock_post.call_args.kwargs["json"]["options"]
        assert options["stop"] == ["\n\n"]
        assert options["seed"] == 9

    @patch("conceptforge.llm.ollama.requests.post")
    def test_bad_status_raises(self, mock_post):
        mock_post.return_value = _ollama_response(status=500)

        with pytest.raises(LLMError, match="status 500"):
            OllamaClient().generate("p")

    @patch("conceptforge.llm.ollama.requests.post")
    def test_empty_response_raises(self, mock_post):
        mock_post.return_value = _ollama_response(payload={"response": ""})

        with pytest.raises(LLMError, match="Empty response"):
            OllamaClient().generate("p")

    @pytest.mark.parametrize(
        "error,match",
        [
            (requests.Timeout("slow"), "timed out"),
            (requests.ConnectionError("refused"), "Cannot connect"),
            (requests.RequestException("odd"), "request failed"),
        ],
    )
    def test_request_errors_wrapped(self, error, match):
        with patch("conceptforge.llm.ollama.requests.post", side_effect=error):
            with pytest.raises(LLMError, match=match):
                OllamaClient().generate("p")

    @patch("conceptforge.llm.ollama.requests.get")
    def test_is_available(self, mock_get):
        mock_get.return_value = _ollama_response(status=200)
        assert OllamaClient().is_available()

        mock_get.side_effect = requests.ConnectionError("down")
        assert not OllamaClient().is_available()

    @pytest.mark.asyncio
    @patch("conceptforge.llm.ollama.requests.post")
    async def test_complete(self, mock_post):
        mock_post.return_value = _ollama_response(payload={"response": "Energy."})

        result = await OllamaClient(temperature=0.4).complete("Define ATP", max_tokens=50)

        assert result == "Energy."
        options = mock_post.call_args.kwargs["json"]["options"]
        assert options["num_predict"] == 50
        assert options["temperature"] == 0.4


class TestClaudeClient:
    """Tests for ClaudeClient."""

    def _client_with_sdk(self, create_result=None, create_error=None):
        client = ClaudeClient(api_key="test-key", model="claude-test")
        sdk = MagicMock()
        if create_error is not None:
            sdk.messages.create.side_effect = create_error
        else:
            sdk.messages.create.return_value = create_result
        client._client = sdk
        return client, sdk

    def test_generate(self):
        response = SimpleNamespace(
            content=[SimpleNamespace(text="ATP is "), SimpleNamespace(text="energy.")],
            usage=SimpleNamespace(input_tokens=20, output_tokens=6),
        )
        client, sdk = self._client_with_sdk(response)

        text = client.generate("Define ATP", GenerationConfig(max_tokens=100))

        assert text == "ATP is energy."
        params = sdk.messages.create.call_args.kwargs
        assert params["model"] == "claude-test"
        assert params["max_tokens"] == 100
        assert params["messages"] == [{"role": "user", "content": "Define ATP"}]
        assert "top_p" not in params
        assert client.get_usage()["total_tokens"] == 26

    def test_rate_limit_mapped(self):
        client, _ = self._client_with_sdk(create_error=Exception("429 rate limit exceeded"))

        with pytest.raises(RateLimitError):
            client.generate("p")

    def test_other_errors_wrapped(self):
        client, _ = self._client_with_sdk(create_error=Exception("bad request"))

        with pytest.raises(LLMError, match="Claude generation failed"):
            client.generate("p")

    def test_empty_content_raises(self):
        response = SimpleNamespace(content=[], usage=None)
        client, _ = self._client_with_sdk(response)

        with pytest.raises(LLMError, match="Empty response"):
            client.generate("p")

    @patch.dict("os.environ", {}, clear=True)
    def test_missing_key(self):
        client = ClaudeClient()

        assert not client.is_available()
        with pytest.raises(ConfigurationError, match="ANTHROPIC_API_KEY"):
            _ = client.client


class TestFactory:
    """Tests for get_llm_client()."""

    def test_default_is_ollama(self):
        client = get_llm_client(Config())

        assert isinstance(client, OllamaClient)
        assert client.model_name == "qwen2.5:14b"

    def test_explicit_provider(self):
        config = Config()
        config.llm.claude.api_key = "k"

        client = get_llm_client(config, provider="Claude")

        assert isinstance(client, ClaudeClient)
        assert client.api_key == "k"

    def test_anthropic_alias(self):
        assert isinstance(get_llm_client(Config(), provider="anthropic"), ClaudeClient)

    def test_provider_settings_applied(self):
        config = Config()
        config.llm.ollama.model = "mistral"
        config.llm.ollama.temperature = 0.6

        client = get_llm_client(config)

        assert client.model_name == "mistral"
        assert client.default_temperature == 0.6

    def test_unknown_provider(self):
        with pytest.raises(ConfigurationError, match="Unknown LLM provider"):
            get_llm_client(Config(), provider="gpt")
