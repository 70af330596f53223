"""Microphone module — continuous speech-to-text feeding the typed input.

A ``Transcriber`` accumulates final fragments from a streaming
``TranscriptionSource`` and shows the latest interim fragment on top of
them until it is replaced or listening stops. Whether speech recognition
works at all is decided once at startup; an unsupported transcriber never
starts and the caller keeps the typed-input path.
"""

from typing import Callable, Optional
from dataclasses import dataclass, field
import logging
import threading
import time

from ..config import TranscriptionConfig
from ..core.state_machine import ListeningState, listening_state_machine

try:
    import speech_recognition as sr
except ImportError:
    sr = None

logger = logging.getLogger("rambl.mic")


@dataclass
class TranscriptionFragment:
    text: str
    is_final: bool = True
    confidence: float = 1.0
    timestamp: float = field(default_factory=time.time)


FragmentCallback = Callable[[TranscriptionFragment], None]
ErrorCallback = Callable[[Exception], None]
EndCallback = Callable[[], None]


class TranscriptionSource:
    """Streaming recognition capability."""

    def start(self, on_fragment: FragmentCallback, on_error: ErrorCallback, on_end: EndCallback) -> None:
        raise NotImplementedError

    def stop(self) -> None:
        raise NotImplementedError


class SpeechRecognitionSource(TranscriptionSource):
    """Microphone + Google Web Speech via the SpeechRecognition library.

    Only final fragments are produced; the library has no interim results.
    The loop only ends through ``stop()`` or an error, so ``on_end`` is never
    called. Each ``start()`` gets its own stop event, so a listener still
    blocked in ``listen()`` after ``stop()`` exits on its own without
    reporting anything.
    """

    join_timeout = 2.0

    def __init__(self, config: TranscriptionConfig = None):
        self.config = config or TranscriptionConfig()
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    @staticmethod
    def is_supported() -> bool:
        if sr is None:
            return False
        try:
            return bool(sr.Microphone.list_microphone_names())
        except Exception:
            # PyAudio missing or no input device
            return False

    def start(self, on_fragment, on_error, on_end):
        # the previous listener keeps its own (already set) event
        self._stop_event.set()
        stop_event = threading.Event()
        self._stop_event = stop_event
        recognizer = sr.Recognizer()
        recognizer.pause_threshold = self.config.pause_threshold
        recognizer.dynamic_energy_threshold = True
        self._thread = threading.Thread(
            target=self._listen_loop,
            args=(recognizer, stop_event, on_fragment, on_error, on_end),
            daemon=True,
        )
        self._thread.start()

    def stop(self):
        self._stop_event.set()
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join(timeout=self.join_timeout)
            if self._thread.is_alive():
                logger.debug("Listener still inside listen(); it will exit when that returns")

    def _listen_loop(self, recognizer, stop_event, on_fragment, on_error, on_end):
        try:
            with sr.Microphone() as source:
                recognizer.adjust_for_ambient_noise(source, duration=0.5)
                while not stop_event.is_set():
                    try:
                        audio = recognizer.listen(
                            source,
                            timeout=self.config.listen_timeout,
                            phrase_time_limit=self.config.phrase_time_limit,
                        )
                        if stop_event.is_set():
                            break
                        text = recognizer.recognize_google(audio, language=self.config.language)
                    except sr.WaitTimeoutError:
                        continue
                    except sr.UnknownValueError:
                        continue
                    if text and not stop_event.is_set():
                        on_fragment(TranscriptionFragment(text=text, is_final=True))
        except Exception as e:
            # a stopped listener stays silent; the transcriber may be on a newer run
            if not stop_event.is_set():
                on_error(e)


class Transcriber:
    def __init__(self, source: Optional[TranscriptionSource], supported: bool = True):
        self.source = source
        self._supported = bool(supported and source is not None)
        self._lock = threading.Lock()
        self._final_text = ""
        self._interim_text = ""
        self._started_at: Optional[float] = None
        self._stopped_at: Optional[float] = None
        self._sm = listening_state_machine(on_idle=self._on_idle)
        if not self._supported:
            logger.info("Speech recognition not supported; use typed input")

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def supported(self) -> bool:
        return self._supported

    @property
    def state(self) -> ListeningState:
        return self._sm.current_state

    def is_listening(self) -> bool:
        return self._sm.current_state == ListeningState.LISTENING

    @property
    def transcript(self) -> str:
        """Accumulated final text plus the current interim fragment."""
        with self._lock:
            if not self._interim_text:
                return self._final_text
            if not self._final_text:
                return self._interim_text
            return f"{self._final_text} {self._interim_text}"

    @property
    def final_text(self) -> str:
        with self._lock:
            return self._final_text

    @property
    def interim_text(self) -> str:
        with self._lock:
            return self._interim_text

    def elapsed_seconds(self) -> int:
        if self._started_at is None:
            return 0
        end = time.time() if self.is_listening() else (self._stopped_at or time.time())
        return int(end - self._started_at)

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    def start(self) -> bool:
        if not self._supported:
            return False
        if self.is_listening():
            return True

        with self._lock:
            self._final_text = ""
            self._interim_text = ""
        self._started_at = time.time()
        self._stopped_at = None
        self._sm.trigger("start")
        try:
            self.source.start(self._on_fragment, self._on_error, self._on_end)
        except Exception as e:
            self._on_error(e)
            return False
        return True

    def stop(self) -> None:
        if not self.is_listening():
            return
        self._sm.trigger("stop")
        try:
            self.source.stop()
        except Exception as e:
            logger.warning(f"Recognition source failed to stop cleanly: {e}")

    def take_transcript(self) -> str:
        """Return the stripped transcript and reset the buffer."""
        text = self.transcript.strip()
        with self._lock:
            self._final_text = ""
            self._interim_text = ""
        return text

    # ------------------------------------------------------------------
    # Source callbacks
    # ------------------------------------------------------------------

    def _on_fragment(self, fragment: TranscriptionFragment) -> None:
        if not self.is_listening():
            return
        text = fragment.text.strip()
        with self._lock:
            if fragment.is_final:
                if text:
                    self._final_text = f"{self._final_text} {text}" if self._final_text else text
                self._interim_text = ""
            else:
                self._interim_text = text

    def _on_error(self, error: Exception) -> None:
        logger.warning(f"Speech recognition error: {error}")
        self._sm.trigger("error")

    def _on_end(self) -> None:
        self._sm.trigger("end")

    def _on_idle(self) -> None:
        self._stopped_at = time.time()
        with self._lock:
            self._interim_text = ""


def format_elapsed(seconds: int) -> str:
    """Recording timer label, e.g. ``1:05``."""
    mins, secs = divmod(max(0, int(seconds)), 60)
    return f"{mins}:{secs:02d}"
