"""
Capture capabilities consumed by the session controller.

Audio capture and speech transcription are provided by the host platform
(or by WhisperTranscription for recorded files). The controller only needs
start/stop controls and callbacks for amplitude samples and partial
transcripts.
"""

import math
from typing import Callable, Protocol, Sequence

PERMISSION_DENIED_MESSAGE = "Error: speech permission denied."

# Level scale: -50 dB maps to 0, 0 dB maps to 25
LEVEL_FLOOR_DB = -50.0
LEVEL_DIVISOR = 2.0

SamplesCallback = Callable[[Sequence[float]], None]
PartialCallback = Callable[[str], None]


class TranscriptionUnavailable(Exception):
    """Raised when speech transcription cannot run (e.g. permission denied)."""

    def __init__(self, message: str = PERMISSION_DENIED_MESSAGE):
        super().__init__(message)


class AudioCapture(Protocol):
    def start(self, on_samples: SamplesCallback) -> None: ...

    def stop(self) -> None: ...


class SpeechTranscription(Protocol):
    def start(self, on_partial: PartialCallback) -> None: ...

    def stop(self) -> None: ...


def mic_level(frames: Sequence[float]) -> float:
    """
    Convert a buffer of audio frames into a visual level.

    RMS amplitude is converted to decibels and rescaled so that -50 dB and
    below give 0 and full scale gives 25.
    """
    if not frames:
        return 0.0
    rms = math.sqrt(sum(f * f for f in frames) / len(frames))
    if rms <= 0.0:
        return 0.0
    db = 20 * math.log10(rms)
    return max(0.0, (db - LEVEL_FLOOR_DB) / LEVEL_DIVISOR)
