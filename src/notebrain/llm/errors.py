"""Error types for language model calls.

Adapters translate provider SDK exceptions into these so callers can map
failures to user-facing messages without importing provider packages.
"""


class LLMError(Exception):
    """Base exception for language model errors."""

    pass


class LLMTimeoutError(LLMError):
    """Raised when a model request times out."""

    pass


class LLMAuthError(LLMError):
    """Raised when the provider rejects the credentials."""

    pass


class LLMNotConfiguredError(LLMAuthError):
    """Raised when a model is used without credentials."""

    pass


class LLMRateLimitError(LLMError):
    """Raised when the provider is throttling requests."""

    pass


class LLMConnectivityError(LLMError):
    """Raised when the provider cannot be reached."""

    pass


class LLMAPIError(LLMError):
    """Raised when the provider returns an error response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize API error.

        Args:
            message: Error message.
            status_code: HTTP status code if available.
        """
        super().__init__(message)
        self.status_code = status_code


__all__ = [
    "LLMAPIError",
    "LLMAuthError",
    "LLMConnectivityError",
    "LLMError",
    "LLMNotConfiguredError",
    "LLMRateLimitError",
    "LLMTimeoutError",
]
