"""Runtime capability detection, done once at startup."""

from dataclasses import asdict, dataclass
from typing import Dict
import logging
import os

from .microphone import SpeechRecognitionSource
from .speaker import AudioPlayer

logger = logging.getLogger("rambl.capabilities")


@dataclass(frozen=True)
class Capabilities:
    speech_recognition: bool = False
    audio_output: bool = False
    completion: bool = False
    synthesis: bool = False

    def to_dict(self) -> Dict:
        return asdict(self)


def detect_capabilities(player: AudioPlayer = None) -> Capabilities:
    caps = Capabilities(
        speech_recognition=SpeechRecognitionSource.is_supported(),
        audio_output=(player or AudioPlayer()).is_available(),
        completion=bool(os.getenv("GEMINI_API_KEY")),
        synthesis=bool(os.getenv("ELEVENLABS_API_KEY")),
    )
    logger.info(f"Capabilities: {caps}")
    return caps
