"""Speaker module — ElevenLabs text-to-speech with pygame playback.

Assistant replies are synthesized with the voice paired to the active
preset and played immediately, replacing anything still playing. Any
failure is logged and the reply simply stays text-only.
"""

from typing import Optional
import io
import logging
import os
import re
import threading
import time

import requests

from ..config import TTSConfig
from .voices import get_voice_id

try:
    import pygame
except ImportError:
    pygame = None

logger = logging.getLogger("rambl.speaker")


class SynthesisError(Exception):
    """Raised when the speech service returns no usable audio."""


def clean_for_speech(text: str) -> str:
    """Strip formatting that causes TTS pauses or artifacts."""
    text = re.sub(r'\*+', '', text)
    text = re.sub(r'(?<!\w)_([^_]+)_(?!\w)', r'\1', text)
    text = re.sub(r'#+\s*', '', text)
    text = re.sub(r'^[\s]*[-•]\s*', '', text, flags=re.MULTILINE)
    text = text.replace('`', '')
    text = re.sub(r'  +', ' ', text)
    text = re.sub(r'\n+', ' ', text)
    return text.strip()


# ---------------------------------------------------------------------------
# Synthesis services
# ---------------------------------------------------------------------------

class SynthesisService:
    name: str = "base"

    def synthesize(self, text: str, voice_id: str) -> bytes:
        raise NotImplementedError


class ElevenLabsSynthesizer(SynthesisService):
    name = "ElevenLabs"

    def __init__(self, api_key: str, config: TTSConfig = None, session: requests.Session = None):
        self.config = config or TTSConfig()
        self.api_key = api_key
        self.model_id = os.getenv("ELEVENLABS_MODEL", self.config.model_id)
        self._session = session or requests.Session()

    @classmethod
    def from_env(cls, config: TTSConfig = None) -> Optional["ElevenLabsSynthesizer"]:
        key = os.getenv("ELEVENLABS_API_KEY", "")
        return cls(key, config) if key else None

    def synthesize(self, text: str, voice_id: str) -> bytes:
        t0 = time.time()
        r = self._session.post(
            f"https://api.elevenlabs.io/v1/text-to-speech/{voice_id}",
            headers={
                "xi-api-key": self.api_key,
                "Content-Type": "application/json",
                "Accept": "audio/mpeg",
            },
            json={
                "text": text,
                "model_id": self.model_id,
                "voice_settings": {
                    "stability": self.config.stability,
                    "similarity_boost": self.config.similarity_boost,
                },
            },
            timeout=self.config.timeout,
        )
        if r.status_code != 200:
            raise SynthesisError(f"ElevenLabs HTTP {r.status_code}: {r.text[:200]}")
        if len(r.content) < self.config.min_audio_bytes:
            raise SynthesisError(f"ElevenLabs response too small ({len(r.content)} bytes)")
        logger.info(f"ElevenLabs: {len(r.content)} bytes in {(time.time() - t0) * 1000:.0f}ms")
        return r.content


# ---------------------------------------------------------------------------
# Playback
# ---------------------------------------------------------------------------

class AudioPlayer:
    """pygame mixer playback. A new clip stops whatever is playing."""

    def __init__(self):
        self._ready = False
        self._lock = threading.Lock()

    def _ensure_mixer(self) -> bool:
        if self._ready:
            return True
        if pygame is None:
            return False
        try:
            pygame.mixer.init()
            self._ready = True
        except Exception as e:
            logger.warning(f"pygame mixer unavailable: {e}")
        return self._ready

    def is_available(self) -> bool:
        return self._ensure_mixer()

    def play(self, audio: bytes) -> None:
        with self._lock:
            if not self._ensure_mixer():
                raise RuntimeError("No audio output available")
            pygame.mixer.music.stop()
            pygame.mixer.music.load(io.BytesIO(audio), "mp3")
            pygame.mixer.music.play()

    def stop(self) -> None:
        with self._lock:
            if self._ready:
                pygame.mixer.music.stop()

    def is_playing(self) -> bool:
        return self._ready and bool(pygame.mixer.music.get_busy())


# ---------------------------------------------------------------------------
# Speaker
# ---------------------------------------------------------------------------

class SpeakerModule:
    def __init__(
        self,
        synthesizer: Optional[SynthesisService] = None,
        player: Optional[AudioPlayer] = None,
        config: TTSConfig = None,
    ):
        self.config = config or TTSConfig()
        self.synthesizer = synthesizer if synthesizer is not None else ElevenLabsSynthesizer.from_env(self.config)
        self.player = player if player is not None else AudioPlayer()

    def is_output_available(self) -> bool:
        return self.synthesizer is not None

    def speak(self, text: str, voice_id: str) -> bool:
        """Synthesize and play ``text``. Returns False when audio was skipped."""
        spoken = clean_for_speech(text or "")
        if not spoken:
            return False
        if self.synthesizer is None:
            logger.info("No speech service configured; staying text-only")
            return False

        try:
            audio = self.synthesizer.synthesize(spoken, voice_id)
        except Exception as e:
            logger.warning(f"{self.synthesizer.name} synthesis failed: {e}")
            return False

        try:
            self.player.play(audio)
        except Exception as e:
            logger.warning(f"Playback failed: {e}")
            return False
        return True

    def speak_for_preset(self, text: str, preset_id: Optional[str] = None) -> bool:
        return self.speak(text, get_voice_id(preset_id))

    def stop(self) -> None:
        try:
            self.player.stop()
        except Exception as e:
            logger.warning(f"Failed to stop playback: {e}")
