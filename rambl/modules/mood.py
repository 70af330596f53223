"""Lexicon-based mood estimation for journaling sessions.

Scores a reflection on a 0-100 scale where 50 is neutral, lower means a
heavier mood and higher a lighter one. The score is what the dashboard
charts as a session's intensity.
"""

from typing import Dict, List, Pattern, Tuple
from dataclasses import dataclass
import re

NEUTRAL_SCORE = 50
POINTS_PER_WEIGHT = 5

NEGATIVE_EMOTIONS = ("distress", "sadness", "anxiety", "anger")
POSITIVE_EMOTIONS = ("happiness", "hope")


@dataclass
class MoodReading:
    """Aggregated emotional signals from one piece of text."""
    primary_emotion: str
    intensity_level: int  # 1-5, where 5 is most intense
    score: int            # 0-100, 50 neutral
    emotional_keywords: List[str]
    emotion_scores: Dict[str, int]


class MoodEstimator:
    def __init__(self):
        # (phrase, weight) pairs; phrases match whole words of lower-cased text
        self.emotion_lexicon: Dict[str, List[Tuple[str, int]]] = {
            "distress": [
                ("can't go on", 5), ("falling apart", 5), ("can't take it anymore", 5),
                ("can't do this", 4), ("can't breathe", 4),
                ("overwhelmed", 3), ("desperate", 3), ("breaking point", 3),
                ("stressed", 2), ("struggling", 2), ("exhausted", 2), ("burnt out", 2),
            ],
            "sadness": [
                ("heartbroken", 4), ("grieving", 4), ("so sad", 4),
                ("crying", 3), ("depressed", 3), ("empty inside", 3),
                ("sad", 2), ("lonely", 2), ("miserable", 2), ("hopeless", 3),
                ("down", 1), ("miss", 1),
            ],
            "anxiety": [
                ("panicking", 4), ("terrified", 4), ("racing thoughts", 4),
                ("can't stop worrying", 4),
                ("anxious", 2), ("worried", 2), ("scared", 2), ("panic", 3),
                ("nervous", 1), ("uneasy", 1), ("restless", 1),
            ],
            "anger": [
                ("furious", 4), ("livid", 4), ("enraged", 4), ("hate", 3),
                ("angry", 2), ("frustrated", 2), ("irritated", 2), ("fed up", 2),
                ("annoyed", 1), ("upset", 2),
            ],
            "happiness": [
                ("thrilled", 3), ("overjoyed", 3), ("ecstatic", 3),
                ("happy", 2), ("excited", 2), ("grateful", 2), ("wonderful", 2),
                ("relieved", 2), ("calm", 1), ("good", 1), ("nice", 1), ("pleased", 1),
            ],
            "hope": [
                ("looking forward", 3), ("hopeful", 3), ("getting better", 3),
                ("proud", 2), ("feeling better", 2), ("improving", 2), ("motivated", 2),
            ],
        }
        self._patterns: Dict[str, Pattern] = {
            phrase: re.compile(r"\b" + re.escape(phrase) + r"\b")
            for phrases in self.emotion_lexicon.values()
            for phrase, _ in phrases
        }

    def analyze(self, text: str) -> MoodReading:
        text_lower = (text or "").lower()
        emotion_scores: Dict[str, int] = {}
        found_keywords: List[str] = []

        for emotion, phrases in self.emotion_lexicon.items():
            total = 0
            for phrase, weight in phrases:
                if self._patterns[phrase].search(text_lower):
                    total += weight
                    found_keywords.append(phrase)
            if total > 0:
                emotion_scores[emotion] = total

        if not emotion_scores:
            return MoodReading(
                primary_emotion="neutral",
                intensity_level=1,
                score=NEUTRAL_SCORE,
                emotional_keywords=[],
                emotion_scores={},
            )

        primary, primary_score = max(emotion_scores.items(), key=lambda x: x[1])
        negative = sum(emotion_scores.get(e, 0) for e in NEGATIVE_EMOTIONS)
        positive = sum(emotion_scores.get(e, 0) for e in POSITIVE_EMOTIONS)
        score = NEUTRAL_SCORE + (positive - negative) * POINTS_PER_WEIGHT

        return MoodReading(
            primary_emotion=primary,
            intensity_level=min(5, max(1, int(primary_score / 2) + 1)),
            score=max(0, min(100, score)),
            emotional_keywords=found_keywords,
            emotion_scores=emotion_scores,
        )

    def score(self, text: str) -> int:
        return self.analyze(text).score

    def summarize(self, reading: MoodReading) -> str:
        """Short label for logs, e.g. ``Moderate anxiety``."""
        intensity_word = ["minimal", "mild", "moderate", "strong", "critical"][
            reading.intensity_level - 1
        ]
        return f"{intensity_word.capitalize()} {reading.primary_emotion}"
