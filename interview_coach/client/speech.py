"""
Speech Capture
Start/stop wrapper around a continuous speech recognizer that accumulates
only finalized text segments into a transcript.

SpeechCapture is an explicit two-state machine (idle / listening). A fresh
recognizer is built on every start, because restarting a stopped recognizer
instance is unreliable on speech platforms.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from interview_coach.core.constants import NO_SPEECH_TIMEOUT_SECONDS, TRANSCRIPT_PARAGRAPH_BREAK

logger = logging.getLogger(__name__)

# Error code a recognizer reports while waiting for the first words;
# the no-speech watchdog owns that case.
NO_SPEECH_ERROR = "no-speech"


class ListeningState(str, Enum):
    IDLE = "idle"
    LISTENING = "listening"


@dataclass
class RecognitionResult:
    """One recognized segment."""
    transcript: str
    is_final: bool


class Recognizer(ABC):
    """
    Abstract continuous speech recognizer.
    Implementations: TypedRecognizer

    The owner assigns the three callbacks before calling start().
    """

    on_result: Optional[Callable[[List[RecognitionResult]], None]] = None
    on_error: Optional[Callable[[str], None]] = None
    on_end: Optional[Callable[[], None]] = None

    @abstractmethod
    def start(self) -> None:
        """Begin delivering results."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop delivering results."""
        pass


RecognizerFactory = Callable[[], Recognizer]


class TypedRecognizer(Recognizer):
    """
    Recognizer fed by typed text, for terminals without a microphone.

    Each submitted line is delivered as one finalized result.
    """

    def __init__(self, lang: str = "en-US"):
        self.lang = lang
        self.active = False

    def start(self) -> None:
        if self.active:
            raise RuntimeError("recognizer already started")
        self.active = True

    def stop(self) -> None:
        if self.active:
            self.active = False
            if self.on_end:
                self.on_end()

    def submit(self, text: str, is_final: bool = True) -> None:
        if not self.active or self.on_result is None:
            return
        self.on_result([RecognitionResult(transcript=text, is_final=is_final)])

    def fail(self, code: str) -> None:
        if not self.active:
            return
        self.active = False
        if self.on_error:
            self.on_error(code)


class SpeechCapture:
    """
    Transcript buffer driven by a recognizer.

    Attributes:
        state: idle or listening
        transcript: Finalized segments, each followed by one space; a blank
            line separates recordings
        error: User-visible error text, or None
    """

    def __init__(
        self,
        recognizer_factory: Optional[RecognizerFactory],
        no_speech_timeout: Optional[float] = NO_SPEECH_TIMEOUT_SECONDS
    ):
        self._factory = recognizer_factory
        self.no_speech_timeout = no_speech_timeout
        self.state = ListeningState.IDLE
        self.transcript = ""
        self.error: Optional[str] = None
        self._recognizer: Optional[Recognizer] = None
        self._watchdog: Optional[asyncio.TimerHandle] = None

        if recognizer_factory is None:
            self.error = "Speech recognition is not supported on this platform."

    @property
    def is_listening(self) -> bool:
        return self.state == ListeningState.LISTENING

    @property
    def recognizer(self) -> Optional[Recognizer]:
        return self._recognizer

    def start_listening(self) -> bool:
        """
        Start a new recording.

        Returns:
            False if already listening, if no recognizer is available, or if
            the recognizer failed to start; True otherwise
        """
        if self._factory is None:
            self.error = "Speech recognition not initialized"
            return False

        if self.is_listening:
            return False

        self.error = None
        self._release_recognizer()

        try:
            recognizer = self._factory()
            recognizer.on_result = self._handle_results
            recognizer.on_error = self._handle_error
            recognizer.on_end = self._handle_end
            self.transcript = ""
            recognizer.start()
        except Exception as e:
            logger.error(f"Error starting speech recognition: {e}")
            self.error = "Error starting speech recognition. Please try again."
            self.state = ListeningState.IDLE
            return False

        self._recognizer = recognizer
        self.state = ListeningState.LISTENING
        self._arm_watchdog()
        logger.debug("Speech capture listening")
        return True

    def stop_listening(self) -> None:
        """Halt capture and start a new paragraph for the next recording."""
        if self._recognizer is None:
            return

        self._disarm_watchdog()
        self.state = ListeningState.IDLE
        self._recognizer.stop()
        self.transcript += TRANSCRIPT_PARAGRAPH_BREAK
        logger.debug("Speech capture stopped")

    def reset_transcript(self) -> None:
        """Clear the buffer; an active recording is restarted."""
        self.transcript = ""
        if self.is_listening:
            self.stop_listening()
            self.start_listening()

    def close(self) -> None:
        """Tear down the recognizer and watchdog without touching the transcript."""
        self._disarm_watchdog()
        self.state = ListeningState.IDLE
        self._release_recognizer()

    # ------------------------------------------------------------------
    # Recognizer callbacks
    # ------------------------------------------------------------------

    def _handle_results(self, results: List[RecognitionResult]) -> None:
        self._disarm_watchdog()
        for result in results:
            # Interim results are revised later; only finalized text is kept
            if not result.is_final:
                continue
            text = result.transcript.strip()
            if text:
                self.transcript += text + " "

    def _handle_error(self, code: str) -> None:
        logger.warning(f"Speech recognition error: {code}")
        self._disarm_watchdog()
        if code != NO_SPEECH_ERROR:
            self.error = f"Speech recognition error: {code}"
        self.state = ListeningState.IDLE

    def _handle_end(self) -> None:
        self._disarm_watchdog()
        self.state = ListeningState.IDLE

    # ------------------------------------------------------------------
    # No-speech watchdog
    # ------------------------------------------------------------------

    def _arm_watchdog(self) -> None:
        if not self.no_speech_timeout:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; no-speech watchdog disabled")
            return
        self._watchdog = loop.call_later(self.no_speech_timeout, self._on_no_speech)

    def _disarm_watchdog(self) -> None:
        if self._watchdog is not None:
            self._watchdog.cancel()
            self._watchdog = None

    def _on_no_speech(self) -> None:
        self._watchdog = None
        if self.is_listening and not self.transcript:
            self.error = "No speech detected. Please speak clearly."
            self.stop_listening()

    def _release_recognizer(self) -> None:
        recognizer, self._recognizer = self._recognizer, None
        if recognizer is None:
            return
        recognizer.on_result = None
        recognizer.on_error = None
        recognizer.on_end = None
        try:
            recognizer.stop()
        except Exception as e:
            logger.debug(f"Ignoring error while stopping previous recognizer: {e}")
