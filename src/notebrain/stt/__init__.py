"""Speech-to-text module for notebrain.

Provides transcription using faster-whisper or mock implementation.
"""

from typing import TYPE_CHECKING

from .mock import MockTranscriber
from .transcriber import (
    TranscriptionError,
    TranscriptionResult,
    Transcriber,
    check_transcript,
    validate_audio_file,
)

if TYPE_CHECKING:
    from ..config import STTConfig


def create_transcriber(
    config: "STTConfig | None" = None,
    use_mock: bool = False,
) -> Transcriber:
    """Create a transcriber instance.

    Args:
        config: STT configuration
        use_mock: If True, return mock implementation for testing

    Returns:
        Transcriber implementation
    """
    if use_mock:
        return MockTranscriber()

    from ..config import STTConfig
    from .whisper import WhisperTranscriber

    config = config or STTConfig()
    return WhisperTranscriber(
        model_size=config.model,
        device=config.device,
        compute_type=config.compute_type,
        beam_size=config.beam_size,
        language=config.language,
        max_file_mb=config.max_file_mb,
    )


__all__ = [
    "MockTranscriber",
    "TranscriptionError",
    "TranscriptionResult",
    "Transcriber",
    "check_transcript",
    "create_transcriber",
    "validate_audio_file",
]
