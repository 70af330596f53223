"""Session analytics — mood map keywords, summary and intensity.

Runs once when a session ends. Keyword extraction is a deterministic
word-frequency pass over everything the user said; the summary is a single
completion request with the soothing preset and never comes back blank.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional
import logging
import re

from ..config import (
    AnalyticsConfig,
    KEYWORD_PALETTE,
    STOP_WORDS,
    SUMMARY_FALLBACK_MESSAGE,
    SUMMARY_PROMPT_TEMPLATE,
)
from ..core.conversation import ConversationThread, Turn, USER
from .llm_client import CompletionGateway
from .mood import MoodEstimator

logger = logging.getLogger("rambl.analytics")

_NON_ALPHA = re.compile(r"[^a-z]")


@dataclass(frozen=True)
class Keyword:
    text: str
    weight: float
    color: str

    def to_dict(self) -> Dict:
        return {"text": self.text, "weight": self.weight, "color": self.color}


@dataclass
class SessionAnalysis:
    keywords: List[Keyword]
    summary: str
    intensity_score: int
    exchange_count: int = 0
    words: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "keywords": [k.to_dict() for k in self.keywords],
            "summary": self.summary,
            "intensity": self.intensity_score,
            "exchanges": self.exchange_count,
        }


def tokenize(text: str, min_length: int = 4, stop_words: Iterable[str] = STOP_WORDS) -> List[str]:
    """Lower-case, split on whitespace, keep letters only, drop short and stop words."""
    stop = stop_words if isinstance(stop_words, (set, frozenset)) else set(stop_words)
    tokens = []
    for raw in text.lower().split():
        word = _NON_ALPHA.sub("", raw)
        if len(word) >= min_length and word not in stop:
            tokens.append(word)
    return tokens


def extract_keywords(
    text: str,
    accent_color: str,
    max_keywords: int = 12,
    min_weight: float = 0.5,
    min_length: int = 4,
) -> List[Keyword]:
    """Most frequent words, weighted against the top count and floored at ``min_weight``."""
    counts = Counter(tokenize(text, min_length))
    if not counts:
        return []

    # sorted() is stable, so equal counts keep first-seen order
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:max_keywords]
    max_count = ranked[0][1]
    palette = [accent_color] + KEYWORD_PALETTE

    return [
        Keyword(
            text=word[:1].upper() + word[1:],
            weight=max(min_weight, count / max_count),
            color=palette[i % len(palette)],
        )
        for i, (word, count) in enumerate(ranked)
    ]


class SessionAnalyzer:
    def __init__(
        self,
        gateway: CompletionGateway,
        mood_estimator: Optional[MoodEstimator] = None,
        config: AnalyticsConfig = None,
    ):
        self.gateway = gateway
        self.mood = mood_estimator or MoodEstimator()
        self.config = config or AnalyticsConfig()

    def keywords(self, user_text: str, accent_color: str) -> List[Keyword]:
        return extract_keywords(
            user_text,
            accent_color,
            max_keywords=self.config.max_keywords,
            min_weight=self.config.min_keyword_weight,
            min_length=self.config.min_token_length,
        )

    def summarize(self, user_text: str) -> str:
        if not user_text.strip():
            return SUMMARY_FALLBACK_MESSAGE
        response = self.gateway.request(
            SUMMARY_PROMPT_TEMPLATE.format(text=user_text),
            history=[],
            preset_id=self.config.summary_preset_id,
        )
        if response.success:
            return response.text
        logger.info(f"Summary unavailable ({response.error_message}); using canned reflection")
        return SUMMARY_FALLBACK_MESSAGE

    def analyze(self, thread, accent_color: str) -> SessionAnalysis:
        """Analyze a finished thread (a ConversationThread or a sequence of turns)."""
        turns: List[Turn] = list(thread.turns if isinstance(thread, ConversationThread) else thread)
        user_text = " ".join(t.content for t in turns if t.role == USER)

        keywords = self.keywords(user_text, accent_color)
        reading = self.mood.analyze(user_text)
        logger.info(
            f"Session analysis: {len(keywords)} keywords, "
            f"mood {self.mood.summarize(reading)} ({reading.score})"
        )
        return SessionAnalysis(
            keywords=keywords,
            summary=self.summarize(user_text),
            intensity_score=reading.score,
            exchange_count=len(turns),
            words=[k.text for k in keywords],
        )
