"""Chat session — one journaling conversation from first message to overview.

Architecture:
  typed or transcribed input → thread → CompletionGateway → thread → Speaker

Turns are appended strictly user-then-assistant. While a reply is
outstanding the session reports ``is_busy`` and ignores new submissions;
this is the only backpressure, nothing in the thread itself enforces it.
"""

from enum import Enum
from typing import Optional
import logging
import time

from ..config import CHAT_FALLBACK_MESSAGE, DIALOGUE_FALLBACK_MESSAGE
from ..modules.capabilities import Capabilities
from ..modules.presets import Preset, resolve_preset
from .conversation import ConversationThread, Turn, USER, ASSISTANT

logger = logging.getLogger("rambl.session")


class ChatMode(Enum):
    TEXT = "text"
    VOICE = "voice"


class ChatSession:
    def __init__(
        self,
        gateway,
        speaker=None,
        preset_id: Optional[str] = None,
        mode: ChatMode = ChatMode.TEXT,
        fallback_message: str = CHAT_FALLBACK_MESSAGE,
        capabilities: Optional[Capabilities] = None,
    ):
        self.gateway = gateway
        self.speaker = speaker
        self.fallback_message = fallback_message
        self.capabilities = capabilities
        self.thread = ConversationThread()
        self._preset = resolve_preset(preset_id)
        self._mode = ChatMode.TEXT
        self._busy = False
        self._started_at = time.time()
        self.set_mode(mode)

    @classmethod
    def reflection(cls, gateway, speaker=None, preset_id=None, **kwargs) -> "ChatSession":
        """Session for the guided reflection dialogue, with a gentler fallback."""
        kwargs.setdefault("fallback_message", DIALOGUE_FALLBACK_MESSAGE)
        return cls(gateway, speaker=speaker, preset_id=preset_id, **kwargs)

    # ==================================================================
    # Settings
    # ==================================================================

    @property
    def preset(self) -> Preset:
        return self._preset

    def set_preset(self, preset_id: Optional[str]) -> Preset:
        self._preset = resolve_preset(preset_id)
        return self._preset

    @property
    def mode(self) -> ChatMode:
        return self._mode

    def voice_input_available(self) -> bool:
        return self.capabilities is None or self.capabilities.speech_recognition

    def set_mode(self, mode: ChatMode) -> bool:
        if mode == ChatMode.VOICE and not self.voice_input_available():
            logger.info("Voice mode unavailable (no speech recognition); staying in text mode")
            self._mode = ChatMode.TEXT
            return False
        self._mode = mode
        return True

    @property
    def is_busy(self) -> bool:
        return self._busy

    # ==================================================================
    # Conversation
    # ==================================================================

    def submit(self, text: str) -> Optional[Turn]:
        """Send one user message; returns the assistant turn, or None if ignored."""
        content = (text or "").strip()
        if not content or self._busy:
            return None

        prior = self.thread.turns
        self.thread.add_user_message(content)
        self._busy = True
        try:
            reply = self.gateway.send_turn(
                prior, content,
                preset_id=self._preset.id,
                fallback_message=self.fallback_message,
            )
        finally:
            self._busy = False
        self.thread.append(reply)

        if self._mode == ChatMode.VOICE and self.speaker is not None:
            self.speaker.speak(reply.content, self._preset.voice_id)
        return reply

    def submit_transcript(self, transcriber) -> Optional[Turn]:
        """Stop listening and send whatever was transcribed."""
        transcriber.stop()
        return self.submit(transcriber.take_transcript())

    # ==================================================================
    # Wrap-up
    # ==================================================================

    def stats(self) -> dict:
        return {
            "duration_s": int(time.time() - self._started_at),
            "user_messages": self.thread.count(USER),
            "assistant_messages": self.thread.count(ASSISTANT),
        }

    def finish(self, analyzer, accent_color: str, store=None, user_id: Optional[str] = None):
        """Analyze the finished thread and optionally persist the session record."""
        analysis = analyzer.analyze(self.thread, accent_color)
        if store is not None and user_id:
            record = {
                "summary": analysis.summary,
                "words": analysis.words,
                "intensity_score": analysis.intensity_score,
            }
            try:
                store.save_conversation(user_id, record)
            except Exception as e:
                logger.warning(f"Could not save session record: {e}")
        logger.info(f"Session finished: {self.stats()}")
        return analysis
