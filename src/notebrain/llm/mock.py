"""Mock language model for testing.

Provides a controllable mock implementation for unit and integration testing.
"""

from .model import LLMResponse


class MockLanguageModel:
    """Mock language model for testing.

    Allows setting predetermined responses for predictable testing.
    """

    def __init__(self, response: str = "This is a mock response.") -> None:
        """Initialize mock language model."""
        self._system_prompt: str = ""
        self._response_text: str = response
        self._error: Exception | None = None
        self._prompts: list[str] = []

    def set_response(self, text: str) -> None:
        """Set the response to return on next generation.

        Args:
            text: Text to return
        """
        self._response_text = text
        self._error = None

    def set_error(self, error: Exception) -> None:
        """Set an error to raise on next generation.

        Args:
            error: Exception instance to raise
        """
        self._error = error

    def generate(
        self,
        prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        """Return preset response."""
        self._prompts.append(prompt)

        if self._error is not None:
            raise self._error

        return LLMResponse(
            text=self._response_text,
            tokens_used=len(self._response_text.split()) + len(prompt.split()),
            model="mock-model",
            latency_ms=0,
        )

    def set_system_prompt(self, prompt: str) -> None:
        """Set system prompt."""
        self._system_prompt = prompt

    @property
    def system_prompt(self) -> str:
        """Get current system prompt."""
        return self._system_prompt

    @property
    def call_count(self) -> int:
        """Get number of generate calls."""
        return len(self._prompts)

    @property
    def prompts(self) -> list[str]:
        """Get prompts received so far."""
        return self._prompts.copy()

    def clear(self) -> None:
        """Reset mock state."""
        self._response_text = "This is a mock response."
        self._prompts.clear()
        self._error = None


__all__ = ["MockLanguageModel"]
