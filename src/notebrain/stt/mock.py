"""Mock transcriber for testing.

Provides a controllable mock implementation for unit and integration testing.
"""

from pathlib import Path

from .transcriber import TranscriptionError, TranscriptionResult, check_transcript


class MockTranscriber:
    """Mock transcriber for testing.

    Returns a preset transcript for any existing path.
    """

    def __init__(self, text: str = "") -> None:
        """Initialize mock transcriber."""
        self._response_text = text
        self._error_message: str | None = None
        self._paths: list[Path] = []

    def set_response(self, text: str) -> None:
        """Set the transcript to return.

        Args:
            text: Text to return
        """
        self._response_text = text
        self._error_message = None

    def set_error(self, message: str) -> None:
        """Set an error to raise on next transcription.

        Args:
            message: Error message
        """
        self._error_message = message

    def transcribe_file(self, path: Path) -> TranscriptionResult:
        """Return preset transcription result."""
        self._paths.append(path)

        if self._error_message:
            raise TranscriptionError(self._error_message)

        return TranscriptionResult(
            text=check_transcript(self._response_text),
            confidence=1.0,
            language="en",
            duration_ms=0,
        )

    @property
    def call_count(self) -> int:
        """Get number of transcribe calls."""
        return len(self._paths)


__all__ = ["MockTranscriber"]
