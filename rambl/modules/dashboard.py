"""Dashboard mood trend.

Sessions are bucketed by the weekday their timestamp falls on, not by
calendar date: a Tuesday three weeks ago lands in the same bucket as last
Tuesday. The seven labels are rotated so the window ends on today.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterable, List, Mapping, Optional, Tuple
import logging
import math

from ..config import DashboardConfig
from .record_store import ConversationRecord, RecordStore, parse_timestamp

logger = logging.getLogger("rambl.dashboard")

WEEKDAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


@dataclass(frozen=True)
class MoodSample:
    day: str
    value: int

    def to_dict(self) -> Dict:
        return {"day": self.day, "value": self.value}


def window_labels(today: Optional[date] = None) -> List[str]:
    """Weekday labels for the trailing 7-day window, oldest first, ending on ``today``."""
    today = today or date.today()
    idx = today.weekday()
    return WEEKDAY_LABELS[idx + 1:] + WEEKDAY_LABELS[:idx + 1]


def _session_fields(session) -> Tuple[Optional[datetime], Optional[float]]:
    if isinstance(session, ConversationRecord):
        return session.created_at, session.intensity_score
    if isinstance(session, Mapping):
        ts = session.get("created_at") or session.get("timestamp")
        intensity = session.get("intensity_score", session.get("intensity"))
    else:
        ts = getattr(session, "timestamp", None)
        intensity = getattr(session, "intensity", None)
    return (parse_timestamp(ts) if ts is not None else None), intensity


def _local_weekday(ts: datetime) -> int:
    if ts.tzinfo is not None:
        ts = ts.astimezone()
    return ts.weekday()


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def aggregate_mood(
    sessions: Iterable,
    today: Optional[date] = None,
    neutral: int = 50,
) -> List[MoodSample]:
    buckets: Dict[str, List[float]] = {label: [] for label in WEEKDAY_LABELS}
    for session in sessions:
        ts, intensity = _session_fields(session)
        if ts is None or intensity is None:
            continue
        buckets[WEEKDAY_LABELS[_local_weekday(ts)]].append(float(intensity))

    samples = []
    for label in window_labels(today):
        values = buckets[label]
        value = round_half_up(sum(values) / len(values)) if values else neutral
        samples.append(MoodSample(day=label, value=value))
    return samples


def mood_icon(intensity: Optional[float]) -> str:
    if intensity is None:
        return "😊"
    if intensity >= 70:
        return "😊"
    if intensity >= 40:
        return "😐"
    return "😔"


def chart_points(
    samples: List[MoodSample],
    width: float = 100.0,
    height: float = 60.0,
) -> List[Tuple[float, float]]:
    """SVG coordinates for the mood line, scaled against the highest value."""
    if not samples:
        return []
    max_value = max(max(s.value for s in samples), 1)
    step = width / (len(samples) - 1) if len(samples) > 1 else 0.0
    return [
        (i * step, height - (s.value / max_value) * height)
        for i, s in enumerate(samples)
    ]


def chart_path(samples: List[MoodSample], width: float = 100.0, height: float = 60.0) -> str:
    points = chart_points(samples, width, height)
    return " ".join(
        f"{'M' if i == 0 else 'L'} {x:g} {y:g}" for i, (x, y) in enumerate(points)
    )


class DashboardService:
    def __init__(self, store: RecordStore, config: DashboardConfig = None):
        self.store = store
        self.config = config or DashboardConfig()

    def build(self, user_id: str, today: Optional[date] = None) -> Dict:
        conversations = self.store.recent_conversations(user_id, limit=self.config.recent_session_limit)
        themes = self.store.top_themes(user_id, limit=self.config.theme_limit)
        avatar_url = self.store.avatar_url(user_id)
        mood = aggregate_mood(conversations, today=today, neutral=self.config.neutral_intensity)
        logger.info(f"Dashboard for {user_id}: {len(conversations)} conversations, {len(themes)} themes")
        return {
            "conversations": [
                dict(c.to_dict(), icon=mood_icon(c.intensity_score)) for c in conversations
            ],
            "themes": [t.to_dict() for t in themes],
            "mood": [s.to_dict() for s in mood],
            "chartPath": chart_path(mood, self.config.chart_width, self.config.chart_height),
            "avatarUrl": avatar_url,
        }
