"""Record store — conversations, preferences and avatars kept by the backend.

The backend is Supabase. ``RecordStore`` is the seam the rest of the app
talks to, so tests and offline runs can swap in any object with the same
methods.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional
import logging
import os

from supabase import create_client

logger = logging.getLogger("rambl.store")


def parse_timestamp(value) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


@dataclass
class ConversationRecord:
    id: Optional[int]
    created_at: datetime
    title: Optional[str] = None
    summary: Optional[str] = None
    words: List[str] = field(default_factory=list)
    intensity_score: Optional[int] = None

    @classmethod
    def from_row(cls, row: Dict) -> "ConversationRecord":
        return cls(
            id=row.get("id"),
            created_at=parse_timestamp(row["created_at"]),
            title=row.get("title"),
            summary=row.get("summary"),
            words=list(row.get("words") or []),
            intensity_score=row.get("intensity_score"),
        )

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat(),
            "title": self.title,
            "summary": self.summary,
            "words": self.words,
            "intensity_score": self.intensity_score,
        }


@dataclass
class ThemeCount:
    id: Optional[int]
    label: str
    count: int

    def to_dict(self) -> Dict:
        return {"id": self.id, "label": self.label, "count": self.count}


class RecordStore:
    def recent_conversations(self, user_id: str, limit: int = 5) -> List[ConversationRecord]:
        raise NotImplementedError

    def top_themes(self, user_id: str, limit: int = 6) -> List[ThemeCount]:
        raise NotImplementedError

    def theme_preference(self, user_id: str) -> Optional[str]:
        raise NotImplementedError

    def avatar_url(self, user_id: str) -> Optional[str]:
        raise NotImplementedError

    def save_conversation(self, user_id: str, record: Dict) -> None:
        raise NotImplementedError


class SupabaseRecordStore(RecordStore):
    def __init__(self, client):
        self.client = client

    @classmethod
    def from_env(cls) -> Optional["SupabaseRecordStore"]:
        url = os.getenv("SUPABASE_URL")
        key = os.getenv("SUPABASE_KEY")
        if not url or not key:
            return None
        return cls(create_client(url, key))

    def recent_conversations(self, user_id, limit=5):
        rows = (
            self.client.table("conversations")
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
            .data
        )
        return [ConversationRecord.from_row(r) for r in rows or []]

    def top_themes(self, user_id, limit=6):
        rows = (
            self.client.table("themes")
            .select("*")
            .eq("user_id", user_id)
            .order("count", desc=True)
            .limit(limit)
            .execute()
            .data
        )
        return [
            ThemeCount(id=r.get("id"), label=r.get("label", ""), count=r.get("count", 0))
            for r in rows or []
        ]

    def _first(self, table: str, column: str, user_id: str):
        rows = (
            self.client.table(table)
            .select(column)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
            .data
        )
        if rows:
            return rows[0].get(column)
        return None

    def theme_preference(self, user_id):
        return self._first("preferences", "background_colour", user_id)

    def avatar_url(self, user_id):
        return self._first("avatar_photos", "avatar_url", user_id)

    def save_conversation(self, user_id, record):
        row = dict(record)
        row["user_id"] = user_id
        self.client.table("conversations").insert(row).execute()
        logger.info(f"Saved conversation for {user_id}")
