"""Configuration for the journaling assistant.

All tunable parameters live here. Environment variables are loaded
from .env at import time via python-dotenv.
"""

from dataclasses import dataclass
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()


def default_data_dir() -> Path:
    """Per-user data directory; ``RAMBL_DATA_DIR`` overrides ``~/.rambl``."""
    return Path(os.getenv("RAMBL_DATA_DIR") or Path.home() / ".rambl")


DATA_DIR = default_data_dir()


# ---------------------------------------------------------------------------
# Module configs
# ---------------------------------------------------------------------------

@dataclass
class LLMConfig:
    """Completion service settings (API key and model read from env)."""
    timeout: float = 15.0
    temperature: float = 0.7
    max_output_tokens: int = 400


@dataclass
class TTSConfig:
    """Speech synthesis settings."""
    model_id: str = "eleven_monolingual_v1"
    timeout: float = 20.0
    stability: float = 0.6
    similarity_boost: float = 0.75
    min_audio_bytes: int = 200     # Smaller bodies are treated as failed syntheses


@dataclass
class TranscriptionConfig:
    """Microphone / STT settings."""
    language: str = "en-US"
    pause_threshold: float = 2.0      # Seconds of silence before a phrase is final
    listen_timeout: float = 10.0      # Max seconds to wait for speech to start
    phrase_time_limit: float = 60.0   # Max seconds of continuous speech per phrase


@dataclass
class AnalyticsConfig:
    """Keyword extraction and summary settings."""
    max_keywords: int = 12
    min_keyword_weight: float = 0.5
    min_token_length: int = 4
    summary_preset_id: str = "soothing"


@dataclass
class DashboardConfig:
    """Mood trend settings."""
    neutral_intensity: int = 50
    recent_session_limit: int = 5
    theme_limit: int = 6
    chart_width: float = 100.0
    chart_height: float = 60.0


@dataclass
class ThemeConfig:
    """UI theme persistence."""
    default_theme: str = "classic"
    cache_path: Path = DATA_DIR / "theme.json"
    remote_timeout: float = 10.0


# ---------------------------------------------------------------------------
# Fixed messages
# ---------------------------------------------------------------------------

CHAT_FALLBACK_MESSAGE = "Sorry, I encountered an error. Please try again."

DIALOGUE_FALLBACK_MESSAGE = (
    "I'm here for you. Sometimes I have trouble connecting, "
    "but please continue sharing."
)

SUMMARY_FALLBACK_MESSAGE = (
    "You took time to reflect and share your thoughts today. That takes courage. "
    "Remember, every conversation is a step toward understanding yourself better."
)

SUMMARY_PROMPT_TEMPLATE = (
    "Please provide a brief, compassionate 2-3 sentence summary of what this "
    "person shared and how they might be feeling. Here's what they said: \"{text}\""
)


# ---------------------------------------------------------------------------
# Keyword extraction
# ---------------------------------------------------------------------------

# Function words plus filler that shows up in spoken reflection.
STOP_WORDS = frozenset([
    "i", "me", "my", "myself", "we", "our", "ours", "you", "your", "he", "she",
    "it", "they", "what", "which", "who", "this", "that", "these", "those",
    "am", "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did",
    "will", "would", "could", "should", "may", "might", "must", "shall",
    "can", "need", "dare", "ought", "used",
    "a", "an", "the", "and", "but", "if", "or", "because", "as", "until", "while",
    "of", "at", "by", "for", "with", "about", "against", "between", "into",
    "through", "during", "before", "after", "above", "below", "to", "from",
    "up", "down", "in", "out", "on", "off", "over", "under",
    "again", "further", "then", "once", "here", "there",
    "when", "where", "why", "how", "all", "each", "few",
    "more", "most", "other", "some", "such", "no", "nor", "not", "only",
    "own", "same", "so", "than", "too", "very", "just",
    "don't", "dont", "im", "i'm", "its", "it's",
    "really", "like", "get", "got", "going", "go", "know", "think", "want",
    "feel", "feeling", "thing", "things", "lot",
])

# The active theme's accent color is prepended at extraction time.
KEYWORD_PALETTE = ["#7EC8E3", "#B4F8C8", "#FBE7C6", "#E0BBE4", "#FFAEBC"]
