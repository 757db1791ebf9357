"""Ollama language model implementation.

Uses a local Ollama server for entity extraction so raw notes stay on the
machine and extraction costs nothing per token.
"""

import logging
import time

import ollama

from .errors import LLMAPIError, LLMConnectivityError
from .model import LLMResponse

logger = logging.getLogger(__name__)


class OllamaLanguageModel:
    """Language model using Ollama for local inference."""

    def __init__(
        self,
        model: str = "llama3.2:3b",
        host: str = "http://localhost:11434",
        max_tokens: int = 300,
        temperature: float = 0.1,
    ) -> None:
        """Initialize Ollama language model.

        Args:
            model: Ollama model name
            host: Ollama server URL
            max_tokens: Default maximum tokens to generate
            temperature: Default sampling temperature
        """
        self._model = model
        self._host = host
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._system_prompt: str = ""

        self._client = ollama.Client(host=host)

        logger.info("Ollama initialized with model: %s at %s", model, host)

    def _build_messages(self, prompt: str) -> list[dict[str, str]]:
        """Build message list for Ollama API."""
        messages = []
        if self._system_prompt:
            messages.append({"role": "system", "content": self._system_prompt})
        messages.append({"role": "user", "content": prompt})
        return messages

    def generate(
        self,
        prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        """Generate response for prompt.

        Args:
            prompt: Prompt text
            max_tokens: Maximum tokens (uses default if None)
            temperature: Sampling temperature (uses default if None)

        Returns:
            LLMResponse with generated text

        Raises:
            LLMAPIError: If the server returns an error
            LLMConnectivityError: If the server cannot be reached
        """
        max_tokens = max_tokens or self._max_tokens
        temperature = temperature if temperature is not None else self._temperature

        start_time = time.time()

        try:
            response = self._client.chat(
                model=self._model,
                messages=self._build_messages(prompt),
                options={
                    "num_predict": max_tokens,
                    "temperature": temperature,
                },
            )
        except ollama.ResponseError as e:
            logger.error("Ollama generation failed: %s", e.error)
            raise LLMAPIError(f"Ollama error: {e.error}", status_code=e.status_code) from e
        except ConnectionError as e:
            raise LLMConnectivityError(f"Cannot reach Ollama at {self._host}: {e}") from e

        latency_ms = int((time.time() - start_time) * 1000)

        response_text = response["message"]["content"]
        tokens_used = response.get("eval_count") or len(response_text.split())

        logger.debug("Generated %d tokens in %dms", tokens_used, latency_ms)

        return LLMResponse(
            text=response_text,
            tokens_used=tokens_used,
            model=self._model,
            latency_ms=latency_ms,
        )

    def set_system_prompt(self, prompt: str) -> None:
        """Set system prompt."""
        self._system_prompt = prompt

    @property
    def model(self) -> str:
        """Get model name."""
        return self._model

    @property
    def is_available(self) -> bool:
        """Check if Ollama server is available."""
        try:
            self._client.list()
            return True
        except (ollama.ResponseError, ConnectionError):
            return False


__all__ = ["OllamaLanguageModel"]
