"""Unit tests for speech-to-text validation and transcribers."""

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from notebrain.config import STTConfig
from notebrain.stt import MockTranscriber, create_transcriber
from notebrain.stt.transcriber import (
    TranscriptionError,
    check_transcript,
    is_low_quality,
    validate_audio_file,
)


@pytest.fixture
def audio_file(tmp_path: Path) -> Path:
    path = tmp_path / "memo.webm"
    path.write_bytes(b"\x1a\x45\xdf\xa3" + b"\x00" * 1024)
    return path


class TestValidateAudioFile:
    """Tests for pre-decode file checks."""

    def test_valid_file(self, audio_file: Path) -> None:
        assert validate_audio_file(audio_file) == 1028

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(TranscriptionError, match="not found"):
            validate_audio_file(tmp_path / "missing.wav")

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.wav"
        path.write_bytes(b"")

        with pytest.raises(TranscriptionError, match="empty"):
            validate_audio_file(path)

    def test_too_large(self, audio_file: Path) -> None:
        with pytest.raises(TranscriptionError, match="too large"):
            validate_audio_file(audio_file, max_file_mb=0)


class TestCheckTranscript:
    """Tests for transcript quality checks."""

    @pytest.mark.parametrize("text", ["ok", "um", "You", "Hmm", "...", "?!", "yes okay"])
    def test_low_quality(self, text: str) -> None:
        assert is_low_quality(text)

    @pytest.mark.parametrize(
        "text", ["Call Sarah tomorrow", "remember to buy milk", "Buy milk", "I'm done"]
    )
    def test_acceptable(self, text: str) -> None:
        assert not is_low_quality(text)

    def test_strips_text(self) -> None:
        assert check_transcript("  Call Sarah tomorrow  ") == "Call Sarah tomorrow"

    def test_no_speech(self) -> None:
        with pytest.raises(TranscriptionError, match="No speech detected"):
            check_transcript("   ")

    def test_low_quality_raises(self) -> None:
        with pytest.raises(TranscriptionError, match="quality too low"):
            check_transcript("uh")


class TestMockTranscriber:
    """Tests for MockTranscriber."""

    def test_returns_preset(self, audio_file: Path) -> None:
        transcriber = MockTranscriber("Work: call Sarah about the budget")

        result = transcriber.transcribe_file(audio_file)

        assert result.text == "Work: call Sarah about the budget"
        assert transcriber.call_count == 1

    def test_set_error(self, audio_file: Path) -> None:
        transcriber = MockTranscriber("Call Sarah tomorrow")
        transcriber.set_error("decoder failed")

        with pytest.raises(TranscriptionError, match="decoder failed"):
            transcriber.transcribe_file(audio_file)

    def test_empty_preset_is_no_speech(self, audio_file: Path) -> None:
        with pytest.raises(TranscriptionError, match="No speech"):
            MockTranscriber().transcribe_file(audio_file)


class TestWhisperTranscriber:
    """Tests for WhisperTranscriber with the model patched out."""

    @pytest.fixture
    def whisper_model(self) -> Iterator[MagicMock]:
        with patch("notebrain.stt.whisper.WhisperModel") as model_cls:
            model = MagicMock()
            model_cls.return_value = model
            yield model

    def _segments(self, *texts: str) -> list[MagicMock]:
        return [MagicMock(text=text) for text in texts]

    def test_transcribe_file(self, whisper_model: MagicMock, audio_file: Path) -> None:
        from notebrain.stt.whisper import WhisperTranscriber

        info = MagicMock(language="en", language_probability=0.97, duration=2.5)
        whisper_model.transcribe.return_value = (
            iter(self._segments(" Call Sarah ", "about the budget. ")),
            info,
        )
        transcriber = WhisperTranscriber(model_size="tiny.en")

        result = transcriber.transcribe_file(audio_file)

        assert result.text == "Call Sarah about the budget."
        assert result.language == "en"
        assert result.duration_ms == 2500
        assert transcriber.is_loaded
        kwargs = whisper_model.transcribe.call_args.kwargs
        assert kwargs["language"] == "en"
        assert kwargs["vad_filter"] is True

    def test_validates_before_loading_model(self, whisper_model: MagicMock, tmp_path: Path) -> None:
        from notebrain.stt.whisper import WhisperTranscriber

        transcriber = WhisperTranscriber()

        with pytest.raises(TranscriptionError, match="not found"):
            transcriber.transcribe_file(tmp_path / "missing.wav")

        assert not transcriber.is_loaded

    def test_decoder_failure(self, whisper_model: MagicMock, audio_file: Path) -> None:
        from notebrain.stt.whisper import WhisperTranscriber

        whisper_model.transcribe.side_effect = RuntimeError("Invalid data found")

        with pytest.raises(TranscriptionError, match="Transcription failed"):
            WhisperTranscriber().transcribe_file(audio_file)

    def test_silence(self, whisper_model: MagicMock, audio_file: Path) -> None:
        from notebrain.stt.whisper import WhisperTranscriber

        whisper_model.transcribe.return_value = (iter([]), MagicMock(duration=1.0))

        with pytest.raises(TranscriptionError, match="No speech detected"):
            WhisperTranscriber().transcribe_file(audio_file)


class TestCreateTranscriber:
    """Tests for the create_transcriber factory."""

    def test_mock(self) -> None:
        assert isinstance(create_transcriber(use_mock=True), MockTranscriber)

    @patch("notebrain.stt.whisper.WhisperModel")
    def test_whisper_is_lazy(self, model_cls: MagicMock) -> None:
        from notebrain.stt.whisper import WhisperTranscriber

        transcriber = create_transcriber(STTConfig(model="small.en"))

        assert isinstance(transcriber, WhisperTranscriber)
        assert transcriber.model_size == "small.en"
        model_cls.assert_not_called()
