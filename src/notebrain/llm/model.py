"""Language model protocol and data classes.

Defines the interface used for entity extraction and answer composition.
"""

from dataclasses import dataclass
from typing import Protocol


@dataclass
class LLMResponse:
    """Response from language model.

    Attributes:
        text: Generated response text
        tokens_used: Number of tokens consumed
        model: Model identifier
        latency_ms: Response latency in milliseconds
    """

    text: str
    tokens_used: int
    model: str
    latency_ms: int


class LanguageModel(Protocol):
    """Interface for language model inference.

    Each call is independent; implementations keep no conversation history.
    """

    def generate(
        self,
        prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        """Generate response for prompt.

        Args:
            prompt: Prompt text
            max_tokens: Maximum tokens to generate (model default if None)
            temperature: Sampling temperature (model default if None)

        Returns:
            LLMResponse with generated text

        Raises:
            LLMError: If generation fails
        """
        ...

    def set_system_prompt(self, prompt: str) -> None:
        """Set the system prompt sent with every request.

        Args:
            prompt: System prompt text
        """
        ...


__all__ = ["LLMResponse", "LanguageModel"]
