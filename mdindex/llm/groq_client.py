"""
Groq Client - Default LLM caller for node summaries

The tree converter only needs an async ``prompt -> text`` function; this
client is the one the CLI plugs in. Rate-limit handling lives here, on the
caller side, so the conversion core never retries.
"""

from typing import Optional
import asyncio
import os
import time

from groq import Groq, AsyncGroq

from ..core.config import LLMFunction, settings
from ..core.exceptions import ConfigurationError
from ..observability.logging import get_logger

logger = get_logger(__name__)

# Retry settings for Groq rate limits
_MAX_RETRIES = 3
_BASE_DELAY_S = 2.0
_MAX_DELAY_S = 30.0


class GroqClient:
    """
    Client for Groq LLM API.

    Provides both sync and async interfaces.
    Includes automatic retry with exponential backoff for rate limiting.
    """

    def __init__(self, api_key: Optional[str] = None):
        api_key = api_key or settings.groq_api_key or os.getenv("GROQ_API_KEY")
        if not api_key:
            raise ConfigurationError("GROQ_API_KEY not set")

        self.client = Groq(api_key=api_key)
        self.async_client = AsyncGroq(api_key=api_key)

    @staticmethod
    def _build_messages(prompt: str, system_prompt: Optional[str]) -> list[dict]:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        return messages

    def generate(
        self,
        prompt: str,
        model: str = None,
        max_tokens: int = 1024,
        temperature: float = 0.0,
        system_prompt: Optional[str] = None
    ) -> str:
        """
        Generate a response synchronously with rate-limit retry.

        Args:
            prompt: User prompt
            model: Model to use (default from settings)
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            system_prompt: Optional system prompt

        Returns:
            Generated text
        """
        model = model or settings.summary_model
        messages = self._build_messages(prompt, system_prompt)

        for attempt in range(_MAX_RETRIES + 1):
            try:
                response = self.client.chat.completions.create(
                    model=model,
                    messages=messages,
                    max_tokens=max_tokens,
                    temperature=temperature
                )
                return response.choices[0].message.content or ""
            except Exception as exc:
                if _is_rate_limit_error(exc) and attempt < _MAX_RETRIES:
                    delay = _get_retry_delay(exc, attempt)
                    logger.warning(
                        "groq.rate_limited",
                        attempt=attempt + 1,
                        delay_s=delay,
                        model=model,
                    )
                    time.sleep(delay)
                else:
                    raise

    async def agenerate(
        self,
        prompt: str,
        model: str = None,
        max_tokens: int = 1024,
        temperature: float = 0.0,
        system_prompt: Optional[str] = None,
    ) -> str:
        """Generate a response asynchronously with rate-limit retry."""
        model = model or settings.summary_model
        messages = self._build_messages(prompt, system_prompt)

        for attempt in range(_MAX_RETRIES + 1):
            try:
                response = await self.async_client.chat.completions.create(
                    model=model,
                    messages=messages,
                    max_tokens=max_tokens,
                    temperature=temperature
                )
                return response.choices[0].message.content or ""
            except Exception as exc:
                if _is_rate_limit_error(exc) and attempt < _MAX_RETRIES:
                    delay = _get_retry_delay(exc, attempt)
                    logger.warning(
                        "groq.rate_limited",
                        attempt=attempt + 1,
                        delay_s=delay,
                        model=model,
                    )
                    await asyncio.sleep(delay)
                else:
                    raise

    def as_llm_function(self, model: Optional[str] = None) -> LLMFunction:
        """
        Adapt this client to the ``async (prompt) -> str`` contract.

        Args:
            model: Model override for every call made through the function.

        Returns:
            Coroutine function suitable for MarkdownOptions.llm.
        """
        async def _llm(prompt: str) -> str:
            return await self.agenerate(prompt=prompt, model=model)

        return _llm


def _is_rate_limit_error(exc: Exception) -> bool:
    """Check if an exception is a Groq rate-limit error (HTTP 429)."""
    exc_str = str(exc).lower()
    return (
        "429" in exc_str
        or "rate_limit" in exc_str
        or "rate limit" in exc_str
        or getattr(exc, "status_code", None) == 429
    )


def _get_retry_delay(exc: Exception, attempt: int) -> float:
    """Calculate retry delay with exponential backoff, respecting Retry-After."""
    retry_after = None
    if hasattr(exc, "headers"):
        retry_after = exc.headers.get("retry-after")  # type: ignore[union-attr]
    if hasattr(exc, "response") and hasattr(exc.response, "headers"):
        retry_after = exc.response.headers.get("retry-after")

    if retry_after:
        try:
            return min(float(retry_after), _MAX_DELAY_S)
        except (ValueError, TypeError):
            pass

    # Exponential backoff: 2s, 4s, 8s, capped at 30s
    return min(_BASE_DELAY_S * (2 ** attempt), _MAX_DELAY_S)
