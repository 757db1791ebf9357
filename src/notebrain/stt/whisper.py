"""Faster-whisper transcriber implementation.

Uses faster-whisper (CTranslate2) for efficient speech-to-text on CPU/GPU.
"""

import logging
import time
from pathlib import Path
from typing import Any

from faster_whisper import WhisperModel

from .transcriber import (
    MAX_FILE_MB,
    TranscriptionError,
    TranscriptionResult,
    check_transcript,
    validate_audio_file,
)

logger = logging.getLogger(__name__)


class WhisperTranscriber:
    """Speech-to-text transcriber using faster-whisper.

    The model is loaded lazily on first use.
    """

    def __init__(
        self,
        model_size: str = "base.en",
        device: str = "cpu",
        compute_type: str = "int8",
        beam_size: int = 5,
        language: str = "en",
        max_file_mb: int = MAX_FILE_MB,
    ) -> None:
        """Initialize Whisper transcriber.

        Args:
            model_size: Whisper model size (tiny.en, base.en, small.en, etc.)
            device: Device to run on ("cpu", "cuda", "auto")
            compute_type: Computation type ("float16", "int8", "float32")
            beam_size: Beam search width
            language: Expected language code
            max_file_mb: Largest accepted audio file
        """
        self._model_size = model_size
        self._device = device
        self._compute_type = compute_type
        self._beam_size = beam_size
        self._language = language
        self._max_file_mb = max_file_mb
        self._model: Any = None

    def _ensure_model_loaded(self) -> None:
        """Load model if not already loaded."""
        if self._model is not None:
            return

        logger.info(
            "Loading Whisper model: %s (device=%s, compute=%s)",
            self._model_size,
            self._device,
            self._compute_type,
        )
        start = time.time()
        self._model = WhisperModel(
            self._model_size,
            device=self._device,
            compute_type=self._compute_type,
        )
        logger.info("Whisper model loaded in %.0fms", (time.time() - start) * 1000)

    def transcribe_file(self, path: Path) -> TranscriptionResult:
        """Transcribe an audio file to note text.

        Args:
            path: Audio file path

        Returns:
            TranscriptionResult with validated text

        Raises:
            TranscriptionError: If the file or the transcript is unusable
        """
        size = validate_audio_file(path, self._max_file_mb)
        logger.info("Processing audio file: %s, size: %.2fKB", path, size / 1024)

        self._ensure_model_loaded()
        start_time = time.time()

        try:
            segments, info = self._model.transcribe(
                str(path),
                language=self._language,
                beam_size=self._beam_size,
                temperature=0.2,
                vad_filter=True,
            )
            text = " ".join(segment.text.strip() for segment in segments)
        except (RuntimeError, ValueError, OSError) as e:
            raise TranscriptionError(
                f"Transcription failed: {e}. Please try recording again."
            ) from e

        latency_ms = int((time.time() - start_time) * 1000)
        logger.debug("Whisper transcription result in %dms: %r", latency_ms, text[:50])

        return TranscriptionResult(
            text=check_transcript(text),
            confidence=info.language_probability,
            language=info.language,
            duration_ms=int(info.duration * 1000),
        )

    @property
    def model_size(self) -> str:
        """Get model size."""
        return self._model_size

    @property
    def is_loaded(self) -> bool:
        """Check if model is loaded."""
        return self._model is not None


__all__ = ["WhisperTranscriber"]
