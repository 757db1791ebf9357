"""Cloud LLM integration using Anthropic Claude API.

Composes answers from the selected note context. The API key is passed in
through CloudLLMConfig; nothing here reads the environment.
"""

import logging
import time
from dataclasses import dataclass

import anthropic

from .errors import (
    LLMAPIError,
    LLMAuthError,
    LLMConnectivityError,
    LLMNotConfiguredError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from .model import LLMResponse

logger = logging.getLogger(__name__)


@dataclass
class CloudLLMConfig:
    """Configuration for cloud LLM."""

    api_key: str
    model: str = "claude-3-5-haiku-latest"
    max_tokens: int = 400
    temperature: float = 0.3
    timeout_seconds: float = 30.0


class CloudLanguageModel:
    """Cloud-based language model using Claude API.

    Implements the LanguageModel protocol for cloud inference.
    """

    def __init__(self, config: CloudLLMConfig) -> None:
        """Initialize the cloud language model.

        A missing API key is reported when the model is first asked to
        generate, so commands that never call it still work.

        Args:
            config: Cloud LLM configuration.
        """
        self._config = config
        self._system_prompt: str | None = None
        self._client: anthropic.Anthropic | None = None
        if config.api_key:
            self._client = anthropic.Anthropic(
                api_key=config.api_key,
                timeout=config.timeout_seconds,
            )

    def generate(
        self,
        prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        """Generate a response using the cloud API.

        Args:
            prompt: User prompt.
            max_tokens: Maximum tokens (uses config default if None).
            temperature: Sampling temperature (uses config default if None).

        Returns:
            LLMResponse with generated text.

        Raises:
            LLMNotConfiguredError: If no API key is configured.
            LLMAuthError: If authentication fails.
            LLMRateLimitError: If the API is throttling requests.
            LLMTimeoutError: If the request times out.
            LLMConnectivityError: If the API cannot be reached.
            LLMAPIError: If the API returns any other error.
        """
        if self._client is None:
            raise LLMNotConfiguredError(
                "No API key configured for the answer model. "
                "Set answer.api_key or ANTHROPIC_API_KEY."
            )

        kwargs = {
            "model": self._config.model,
            "max_tokens": max_tokens or self._config.max_tokens,
            "temperature": temperature if temperature is not None else self._config.temperature,
            "messages": [{"role": "user", "content": prompt}],
        }

        if self._system_prompt:
            kwargs["system"] = self._system_prompt

        start_time = time.time()

        try:
            response = self._client.messages.create(**kwargs)
        except anthropic.AuthenticationError as e:
            raise LLMAuthError("Invalid API key. Please check the answer model configuration.") from e
        except anthropic.RateLimitError as e:
            raise LLMRateLimitError("Answer service is rate limiting requests.") from e
        except anthropic.APITimeoutError as e:
            # Timeout subclasses connection error, so it must be caught first
            raise LLMTimeoutError(
                f"Request timed out after {self._config.timeout_seconds} seconds."
            ) from e
        except anthropic.APIConnectionError as e:
            raise LLMConnectivityError(f"Failed to connect to Claude API: {e}") from e
        except anthropic.APIStatusError as e:
            raise LLMAPIError(f"API error: {e.message}", status_code=e.status_code) from e

        latency_ms = int((time.time() - start_time) * 1000)

        text = response.content[0].text if response.content else ""
        tokens = response.usage.input_tokens + response.usage.output_tokens

        logger.debug("Cloud response: %d tokens in %dms", tokens, latency_ms)

        return LLMResponse(
            text=text,
            tokens_used=tokens,
            model=self._config.model,
            latency_ms=latency_ms,
        )

    def set_system_prompt(self, prompt: str) -> None:
        """Set the system prompt.

        Args:
            prompt: System prompt to use.
        """
        self._system_prompt = prompt


__all__ = ["CloudLLMConfig", "CloudLanguageModel"]
