"""Language model module for notebrain.

Provides local (Ollama), cloud (Claude) and mock language models.
"""

from typing import TYPE_CHECKING

from .errors import (
    LLMAPIError,
    LLMAuthError,
    LLMConnectivityError,
    LLMError,
    LLMNotConfiguredError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from .mock import MockLanguageModel
from .model import LanguageModel, LLMResponse

if TYPE_CHECKING:
    from ..config import LLMConfig


def create_language_model(
    config: "LLMConfig | None" = None,
    use_mock: bool = False,
) -> LanguageModel:
    """Create a language model instance.

    Args:
        config: Model configuration (provider, model, credentials)
        use_mock: If True, return mock implementation for testing

    Returns:
        LanguageModel implementation

    Raises:
        ValueError: If the configured provider is unknown
    """
    if use_mock or (config is not None and config.provider == "mock"):
        return MockLanguageModel()

    if config is None:
        from ..config import LLMConfig

        config = LLMConfig()

    if config.provider == "ollama":
        from .ollama import OllamaLanguageModel

        return OllamaLanguageModel(
            model=config.model,
            host=config.host,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
        )
    if config.provider == "anthropic":
        from .cloud import CloudLanguageModel, CloudLLMConfig

        return CloudLanguageModel(
            CloudLLMConfig(
                api_key=config.api_key or "",
                model=config.model,
                max_tokens=config.max_tokens,
                temperature=config.temperature,
                timeout_seconds=config.timeout_seconds,
            )
        )
    raise ValueError(f"Unknown language model provider: {config.provider}")


__all__ = [
    "LLMAPIError",
    "LLMAuthError",
    "LLMConnectivityError",
    "LLMError",
    "LLMNotConfiguredError",
    "LLMRateLimitError",
    "LLMResponse",
    "LLMTimeoutError",
    "LanguageModel",
    "MockLanguageModel",
    "create_language_model",
]
