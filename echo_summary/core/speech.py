"""
Speech-to-text functionality using OpenAI Whisper.

SpeechProcessor wraps the Whisper transcription API for audio files.
WhisperTranscription exposes a recorded file through the start/stop
transcription capability used by the session controller.
"""

from pathlib import Path
from typing import Optional

from .capture import PartialCallback, TranscriptionUnavailable
from .config import ConfigError, config, get_client
from .types import Transcript


class SpeechError(Exception):
    """Raised when speech processing fails."""

    pass


SUPPORTED_EXTENSIONS = {".mp3", ".mp4", ".mpeg", ".mpga", ".m4a", ".wav", ".webm"}
MAX_AUDIO_BYTES = 25 * 1024 * 1024  # Whisper upload limit


def validate_audio_format(path: str) -> bool:
    """Check whether the file extension is accepted by Whisper."""
    return Path(path).suffix.lower() in SUPPORTED_EXTENSIONS


class SpeechProcessor:
    """
    Handles speech-to-text conversion using OpenAI Whisper.

    The language is detected by Whisper; no translation is requested.
    """

    def __init__(self, client=None):
        self.client = client if client is not None else get_client()
        self.model = config.asr_model

    def transcribe_audio(self, path: str) -> Transcript:
        """
        Transcribe audio file to text.

        Args:
            path: Path to the audio file

        Returns:
            Transcript object with text and detected language

        Raises:
            SpeechError: If transcription fails
            FileNotFoundError: If audio file doesn't exist
        """
        audio_path = Path(path)

        if not audio_path.exists():
            raise FileNotFoundError(f"Audio file not found: {path}")

        if not audio_path.is_file():
            raise SpeechError(f"Path is not a file: {path}")

        file_size = audio_path.stat().st_size
        if file_size > MAX_AUDIO_BYTES:
            raise SpeechError(f"Audio file too large: {file_size / 1024 / 1024:.1f}MB (max: 25MB)")

        try:
            with open(audio_path, "rb") as audio_file:
                response = self.client.audio.transcriptions.create(model=self.model, file=audio_file, response_format="verbose_json")
        except Exception as e:
            raise SpeechError(f"Failed to transcribe audio: {str(e)}")

        if hasattr(response, "text"):
            return Transcript(text=response.text.strip(), lang_hint=getattr(response, "language", "auto"))
        return Transcript(text=str(response).strip(), lang_hint="auto")


class WhisperTranscription:
    """
    Transcription capability over a recorded audio file.

    start() checks that the file can be transcribed; stop() runs Whisper and
    delivers the whole transcript as the final partial result.
    """

    def __init__(self, path: str, processor: Optional[SpeechProcessor] = None):
        self.path = path
        self.processor = processor
        self.language: Optional[str] = None
        self._on_partial: Optional[PartialCallback] = None

    def start(self, on_partial: PartialCallback) -> None:
        audio_path = Path(self.path)
        if not audio_path.is_file():
            raise TranscriptionUnavailable(f"Error: audio file not found: {self.path}")
        if not validate_audio_format(self.path):
            raise TranscriptionUnavailable(f"Error: unsupported audio format: {audio_path.suffix}")
        if self.processor is None:
            try:
                self.processor = SpeechProcessor()
            except ConfigError as e:
                raise TranscriptionUnavailable(f"Error: {e}") from e
        self._on_partial = on_partial

    def stop(self) -> None:
        if self._on_partial is None or self.processor is None:
            return
        on_partial, self._on_partial = self._on_partial, None
        try:
            transcript = self.processor.transcribe_audio(self.path)
        except (SpeechError, FileNotFoundError) as e:
            raise TranscriptionUnavailable(f"Error: {e}") from e
        self.language = transcript.lang_hint
        on_partial(transcript.text)
