"""Conversation thread for a single journaling session.

The thread is append-only: turns keep their insertion order, which is
both the chat history sent to the completion service and the input to
session analytics. It is never trimmed or deduplicated.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Tuple
import time
import uuid

USER = "user"
ASSISTANT = "assistant"
ROLES = (USER, ASSISTANT)


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Turn:
    role: str
    content: str
    id: str = field(default_factory=_new_id)
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self):
        if self.role not in ROLES:
            raise ValueError(f"Unknown turn role: {self.role!r}")

    @classmethod
    def user(cls, content: str) -> "Turn":
        return cls(role=USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "Turn":
        return cls(role=ASSISTANT, content=content)

    def to_message(self) -> Dict:
        return {"role": self.role, "content": self.content}


class ConversationThread:
    def __init__(self, turns: Iterable[Turn] = ()):
        self._turns: List[Turn] = list(turns)

    def append(self, turn: Turn) -> Turn:
        self._turns.append(turn)
        return turn

    def add_user_message(self, text: str) -> Turn:
        return self.append(Turn.user(text))

    def add_assistant_message(self, text: str) -> Turn:
        return self.append(Turn.assistant(text))

    @property
    def turns(self) -> Tuple[Turn, ...]:
        return tuple(self._turns)

    def get_history(self) -> List[Dict]:
        return [t.to_message() for t in self._turns]

    def user_text(self) -> str:
        """All user turns joined with single spaces, in order."""
        return " ".join(t.content for t in self._turns if t.role == USER)

    def count(self, role: str) -> int:
        return sum(1 for t in self._turns if t.role == role)

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(tuple(self._turns))
