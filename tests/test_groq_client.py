"""
Tests for the Groq LLM caller

- Construction without an API key
- Async generation and the prompt -> text adapter
- Rate-limit detection, retry and backoff delays
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from mdindex.core.exceptions import ConfigurationError
from mdindex.llm.groq_client import GroqClient, _get_retry_delay, _is_rate_limit_error


def _response(content: str) -> MagicMock:
    response = MagicMock()
    response.choices[0].message.content = content
    return response


@pytest.fixture
def client() -> GroqClient:
    """GroqClient with the SDK classes mocked out."""
    with patch("mdindex.llm.groq_client.Groq"), patch("mdindex.llm.groq_client.AsyncGroq"):
        return GroqClient(api_key="test-key")


class TestGroqClient:
    """Tests for GroqClient."""

    def test_missing_api_key(self) -> None:
        with patch("mdindex.llm.groq_client.settings") as mock_settings, \
                patch.dict("os.environ", {}, clear=True):
            mock_settings.groq_api_key = None
            with pytest.raises(ConfigurationError, match="GROQ_API_KEY"):
                GroqClient()

    @pytest.mark.asyncio
    async def test_agenerate(self, client: GroqClient) -> None:
        client.async_client.chat.completions.create = AsyncMock(return_value=_response("hi"))

        assert await client.agenerate("hello", model="m", system_prompt="be brief") == "hi"
        kwargs = client.async_client.chat.completions.create.await_args.kwargs
        assert kwargs["model"] == "m"
        assert kwargs["messages"] == [
            {"role": "system", "content": "be brief"},
            {"role": "user", "content": "hello"},
        ]

    @pytest.mark.asyncio
    async def test_as_llm_function(self, client: GroqClient) -> None:
        client.async_client.chat.completions.create = AsyncMock(return_value=_response("summary"))
        llm = client.as_llm_function(model="small")

        assert await llm("prompt text") == "summary"
        kwargs = client.async_client.chat.completions.create.await_args.kwargs
        assert kwargs["model"] == "small"
        assert kwargs["messages"][-1]["content"] == "prompt text"

    @pytest.mark.asyncio
    async def test_retries_on_rate_limit(self, client: GroqClient) -> None:
        client.async_client.chat.completions.create = AsyncMock(
            side_effect=[Exception("Error code: 429 rate_limit_exceeded"), _response("ok")]
        )
        with patch("mdindex.llm.groq_client._get_retry_delay", return_value=0):
            assert await client.agenerate("x") == "ok"
        assert client.async_client.chat.completions.create.await_count == 2

    @pytest.mark.asyncio
    async def test_other_errors_raise(self, client: GroqClient) -> None:
        client.async_client.chat.completions.create = AsyncMock(
            side_effect=ValueError("bad request")
        )
        with pytest.raises(ValueError, match="bad request"):
            await client.agenerate("x")

    def test_generate_sync(self, client: GroqClient) -> None:
        client.client.chat.completions.create = MagicMock(return_value=_response("sync"))
        assert client.generate("x") == "sync"


class TestRetryHelpers:
    """Tests for rate-limit helpers."""

    def test_is_rate_limit_error(self) -> None:
        assert _is_rate_limit_error(Exception("HTTP 429 Too Many Requests"))
        assert _is_rate_limit_error(Exception("Rate limit reached"))
        assert not _is_rate_limit_error(Exception("connection reset"))

    def test_status_code_attribute(self) -> None:
        exc = Exception("boom")
        exc.status_code = 429
        assert _is_rate_limit_error(exc)

    def test_exponential_backoff(self) -> None:
        exc = Exception("429")
        assert _get_retry_delay(exc, 0) == 2.0
        assert _get_retry_delay(exc, 1) == 4.0
        assert _get_retry_delay(exc, 10) == 30.0

    def test_retry_after_header(self) -> None:
        exc = Exception("429")
        exc.headers = {"retry-after": "5"}
        assert _get_retry_delay(exc, 3) == 5.0
