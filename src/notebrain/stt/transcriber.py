"""Transcriber protocol, result type, and input/output validation.

Defines the interface for speech-to-text transcription of recorded notes.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

MAX_FILE_MB = 25

_FILLER_RE = re.compile(r"^(you|uh|um|hmm)$", re.IGNORECASE)
_NO_ALNUM_RE = re.compile(r"^[^a-zA-Z0-9\s]+$")


class TranscriptionError(Exception):
    """Raised when audio cannot be turned into usable note text."""

    pass


@dataclass
class TranscriptionResult:
    """Result of speech-to-text transcription.

    Attributes:
        text: Transcribed text
        confidence: Language detection confidence (0.0 to 1.0)
        language: Detected language code (e.g., "en")
        duration_ms: Duration of audio processed in milliseconds
    """

    text: str
    confidence: float
    language: str
    duration_ms: int


class Transcriber(Protocol):
    """Interface for speech-to-text transcription."""

    def transcribe_file(self, path: Path) -> TranscriptionResult:
        """Transcribe an audio file to text.

        Args:
            path: Path to an audio file (wav, webm, mp4, m4a, ogg, mp3, flac)

        Returns:
            TranscriptionResult with transcribed text

        Raises:
            TranscriptionError: If the file is unusable or yields no speech
        """
        ...


def validate_audio_file(path: Path, max_file_mb: int = MAX_FILE_MB) -> int:
    """Check an audio file before decoding it.

    Args:
        path: Audio file path
        max_file_mb: Largest accepted file size in megabytes

    Returns:
        File size in bytes

    Raises:
        TranscriptionError: If the file is missing, empty, or too large
    """
    if not path.exists():
        raise TranscriptionError(f"Audio file not found: {path}")

    size = path.stat().st_size
    if size == 0:
        raise TranscriptionError("Audio file is empty")
    if size > max_file_mb * 1024 * 1024:
        raise TranscriptionError(f"Audio file too large (max {max_file_mb}MB)")
    return size


def is_low_quality(text: str) -> bool:
    """Detect transcripts that usually mean unusable audio."""
    return (
        len(text) < 3
        or bool(_FILLER_RE.match(text))
        or bool(_NO_ALNUM_RE.match(text))
        or (text == text.lower() and len(text) < 10)
    )


def check_transcript(text: str) -> str:
    """Validate a raw transcript and return it stripped.

    Raises:
        TranscriptionError: If no speech was detected or quality is too low
    """
    text = text.strip()
    if not text:
        raise TranscriptionError(
            "No speech detected in audio - recording may be too quiet or empty"
        )
    if is_low_quality(text):
        raise TranscriptionError(
            "Audio quality too low for transcription. "
            "Please speak more clearly and closer to the microphone."
        )
    return text


__all__ = [
    "MAX_FILE_MB",
    "TranscriptionError",
    "TranscriptionResult",
    "Transcriber",
    "check_transcript",
    "is_low_quality",
    "validate_audio_file",
]
