"""
Recording session controller.

SessionController owns the state of one record → stop → analyze cycle
(Idle → Recording → Analyzing → Done) and publishes every change to its
subscribers. Capture capabilities feed it partial transcripts and audio
samples; once recording stops the transcript is frozen and the keyword
pipeline runs exactly once.
"""

import logging
import threading
import time
from typing import Callable, List, Optional, Sequence

from .capture import AudioCapture, SpeechTranscription, TranscriptionUnavailable, mic_level
from .config import config
from .debug_log import DebugLogger
from .summary import build_report, is_too_short
from .tagger import GrammaticalTagger
from .types import KeywordReport, SessionPhase, SessionState

logger = logging.getLogger(__name__)

StateObserver = Callable[[SessionState], None]

ANALYSIS_FAILED_PREFIX = "Error: analysis failed: "


class SessionController:
    """
    Drives a recording session and runs keyword analysis when it stops.

    Args:
        tagger: Tagger used by the keyword pipeline
        transcription: Speech transcription capability (optional)
        audio: Audio capture capability for level metering (optional)
        analysis_delay: Seconds to wait before analysis, defaults to ECHO_ANALYSIS_DELAY
        sleep: Function used to wait out the delay
        debug_logger: Debug logger passed to the keyword pipeline
    """

    def __init__(
        self,
        tagger: GrammaticalTagger,
        transcription: Optional[SpeechTranscription] = None,
        audio: Optional[AudioCapture] = None,
        analysis_delay: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
        debug_logger: Optional[DebugLogger] = None,
    ):
        self.tagger = tagger
        self.transcription = transcription
        self.audio = audio
        self.analysis_delay = config.analysis_delay if analysis_delay is None else analysis_delay
        self.sleep = sleep
        self.debug_logger = debug_logger

        self._lock = threading.RLock()
        self._state = SessionState()
        self._observers: List[StateObserver] = []
        self._report: Optional[KeywordReport] = None

    def subscribe(self, observer: StateObserver) -> Callable[[], None]:
        """
        Register an observer called with every new state.

        Returns:
            A function that removes the observer
        """
        with self._lock:
            self._observers.append(observer)

        def unsubscribe() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe

    def snapshot(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def report(self) -> Optional[KeywordReport]:
        """Keyword report of the last completed analysis, if any."""
        with self._lock:
            return self._report

    def toggle(self) -> bool:
        """Start recording when not recording, stop otherwise."""
        with self._lock:
            recording = self._state.phase == SessionPhase.RECORDING
        return self.stop() if recording else self.start()

    def start(self) -> bool:
        """
        Begin a new session, discarding the previous transcript and summary.

        Returns:
            True if recording started
        """
        with self._lock:
            phase = self._state.phase
            if phase in (SessionPhase.RECORDING, SessionPhase.ANALYZING):
                logger.info(f"Ignoring start while {phase.value}")
                return False

            self._report = None
            self._replace(SessionState(phase=SessionPhase.RECORDING))

            if self.transcription is not None:
                try:
                    self.transcription.start(self.update_transcript)
                except TranscriptionUnavailable as e:
                    logger.warning(f"Speech transcription unavailable: {e}")
                    self._replace(SessionState(phase=SessionPhase.IDLE, transcript=str(e)))
                    return False

            if self.audio is not None:
                self.audio.start(self.feed_samples)
            return True

    def stop(self) -> bool:
        """
        Stop recording, freeze the transcript and analyze it.

        The lock is released while the delay and the analysis run, so capture
        callbacks and snapshot() never wait on the tagger. The ANALYZING phase
        keeps a second start() or stop() from getting in meanwhile.

        Returns:
            True if a recording was stopped and analyzed
        """
        with self._lock:
            if self._state.phase != SessionPhase.RECORDING:
                logger.info(f"Ignoring stop while {self._state.phase.value}")
                return False

            if self.audio is not None:
                self.audio.stop()
            if self.transcription is not None:
                try:
                    self.transcription.stop()
                except TranscriptionUnavailable as e:
                    logger.warning(f"Speech transcription failed: {e}")
                    self._update(transcript=str(e))

            transcript = self._state.transcript

            if is_too_short(transcript):
                self._report = build_report(transcript, self.tagger, self.debug_logger)
                self._update(phase=SessionPhase.DONE, level=0.0, summary=self._report.summary)
                return True

            self._update(phase=SessionPhase.ANALYZING, level=0.0)

        try:
            if self.analysis_delay > 0:
                self.sleep(self.analysis_delay)
            report = build_report(transcript, self.tagger, self.debug_logger)
        except Exception as e:
            logger.exception("Keyword analysis failed")
            with self._lock:
                self._report = None
                self._update(phase=SessionPhase.DONE, summary=f"{ANALYSIS_FAILED_PREFIX}{e}")
            return True

        with self._lock:
            self._report = report
            self._update(phase=SessionPhase.DONE, summary=report.summary)
        return True

    def update_transcript(self, text: str) -> None:
        """Replace the live transcript with a newer partial result."""
        with self._lock:
            if self._state.phase != SessionPhase.RECORDING:
                return
            self._update(transcript=text)

    def feed_samples(self, frames: Sequence[float]) -> None:
        """Update the microphone level from a buffer of audio frames."""
        with self._lock:
            if self._state.phase != SessionPhase.RECORDING:
                return
            self._update(level=mic_level(frames))

    def _update(self, **changes) -> None:
        self._replace(self._state.model_copy(update=changes))

    def _replace(self, state: SessionState) -> None:
        self._state = state
        for observer in list(self._observers):
            observer(state)
