"""Completion gateway — one request/response exchange per user turn.

The generative-text service is an injected ``CompletionService``. The
gateway resolves the personality preset, translates the thread into the
service's history format, and turns every failure into a fixed fallback
reply so a broken connection never blocks the conversation.
"""

import os
import logging
import time
from typing import Dict, List, Optional, Sequence, Union
from dataclasses import dataclass

import requests

from ..config import LLMConfig, CHAT_FALLBACK_MESSAGE
from ..core.conversation import Turn, ASSISTANT
from .presets import resolve_preset

logger = logging.getLogger("rambl.llm")

HistoryItem = Union[Turn, Dict]


# ---------------------------------------------------------------------------
# Response dataclass
# ---------------------------------------------------------------------------

@dataclass
class LLMResponse:
    text: str
    success: bool
    error_message: Optional[str] = None
    latency_ms: float = 0.0

    def to_dict(self) -> Dict:
        if self.success:
            return {"text": self.text}
        return {"error": self.error_message or "Failed to generate"}


class CompletionError(Exception):
    """Raised by a completion service when no usable reply was produced."""


# ---------------------------------------------------------------------------
# Service base
# ---------------------------------------------------------------------------

class CompletionService:
    name: str = "base"

    def complete(
        self,
        system_prompt: str,
        history: List[Dict],
        user_message: str,
        timeout: float = 15.0,
    ) -> str:
        """Return the reply text. ``history`` is already in service format."""
        raise NotImplementedError


# ---------------------------------------------------------------------------
# Gemini generateContent REST API
# ---------------------------------------------------------------------------

class GeminiCompletionService(CompletionService):
    name = "Gemini"

    def __init__(self, api_key: str, config: LLMConfig = None, session: requests.Session = None):
        config = config or LLMConfig()
        self.api_key = api_key
        self.model = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
        self.temperature = float(os.getenv("GEMINI_TEMPERATURE", config.temperature))
        self.max_tokens = int(os.getenv("GEMINI_MAX_TOKENS", config.max_output_tokens))
        self._session = session or requests.Session()

    def complete(self, system_prompt, history, user_message, timeout=15.0):
        url = (
            f"https://generativelanguage.googleapis.com/v1beta/models/"
            f"{self.model}:generateContent"
        )
        contents = list(history)
        contents.append({"role": "user", "parts": [{"text": user_message}]})

        payload = {
            "contents": contents,
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_tokens,
            },
        }
        if system_prompt:
            payload["systemInstruction"] = {"parts": [{"text": system_prompt}]}

        r = self._session.post(
            url, json=payload, timeout=timeout,
            params={"key": self.api_key},
            headers={"Content-Type": "application/json"},
        )
        if r.status_code != 200:
            raise CompletionError(f"Gemini HTTP {r.status_code}: {r.text[:200]}")

        data = r.json()
        candidates = data.get("candidates", [])
        if candidates:
            parts = candidates[0].get("content", {}).get("parts", [])
            text = "".join(p.get("text", "") for p in parts)
            if text.strip():
                return text
        raise CompletionError("Gemini returned no text")


# ---------------------------------------------------------------------------
# Gateway
# ---------------------------------------------------------------------------

class CompletionGateway:
    """Stateless bridge between a conversation thread and the completion service."""

    def __init__(self, service: Optional[CompletionService] = None, config: LLMConfig = None):
        self.config = config or LLMConfig()
        self.service = service if service is not None else self._init_service()
        if self.service is None:
            logger.warning("No completion service configured; replies will use fallback text")
        else:
            logger.info(f"Completion service: {self.service.name}")

    def _init_service(self) -> Optional[CompletionService]:
        key = os.getenv("GEMINI_API_KEY")
        if key:
            return GeminiCompletionService(key, self.config)
        return None

    @property
    def available(self) -> bool:
        return self.service is not None

    @staticmethod
    def map_history(history: Optional[Sequence[HistoryItem]]) -> List[Dict]:
        """Translate turns into service history; ``assistant`` becomes ``model``."""
        mapped = []
        for msg in history or []:
            role = msg.get("role") if isinstance(msg, dict) else getattr(msg, "role", "user")
            content = msg.get("content") if isinstance(msg, dict) else getattr(msg, "content", "")
            mapped.append({
                "role": "model" if role == ASSISTANT else "user",
                "parts": [{"text": content or ""}],
            })
        return mapped

    def request(
        self,
        user_message: str,
        history: Optional[Sequence[HistoryItem]] = None,
        preset_id: Optional[str] = None,
    ) -> LLMResponse:
        """Issue exactly one completion request. Never raises."""
        preset = resolve_preset(preset_id)
        if self.service is None:
            return LLMResponse(text="", success=False, error_message="No completion service configured")

        t0 = time.time()
        try:
            text = self.service.complete(
                preset.system_prompt,
                self.map_history(history),
                user_message,
                timeout=self.config.timeout,
            )
        except Exception as e:
            latency = (time.time() - t0) * 1000
            logger.warning(f"{self.service.name} failed ({latency:.0f}ms): {e}")
            return LLMResponse(text="", success=False, error_message=str(e), latency_ms=latency)

        latency = (time.time() - t0) * 1000
        if not text or not text.strip():
            logger.warning(f"{self.service.name}: empty response ({latency:.0f}ms)")
            return LLMResponse(text="", success=False, error_message="Empty response", latency_ms=latency)

        logger.info(f"{self.service.name} [{preset.id}]: {latency:.0f}ms")
        return LLMResponse(text=text.strip(), success=True, latency_ms=latency)

    def send_turn(
        self,
        thread_so_far: Sequence[HistoryItem],
        new_user_content: str,
        preset_id: Optional[str] = None,
        fallback_message: str = CHAT_FALLBACK_MESSAGE,
    ) -> Turn:
        """Return the assistant turn answering ``new_user_content``.

        ``thread_so_far`` holds the turns *before* the new user message. The
        caller appends both the user turn and the returned assistant turn.
        """
        content = (new_user_content or "").strip()
        if not content:
            raise ValueError("User message must not be empty")

        response = self.request(content, thread_so_far, preset_id)
        if response.success:
            return Turn.assistant(response.text)
        return Turn.assistant(fallback_message)
