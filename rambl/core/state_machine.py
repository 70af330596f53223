from enum import Enum
from typing import Callable, Optional
from dataclasses import dataclass
import logging
import time

logger = logging.getLogger("rambl.state")


class ListeningState(Enum):
    IDLE = "idle"
    LISTENING = "listening"


@dataclass
class StateTransition:
    from_state: Enum
    to_state: Enum
    condition: str
    action: Optional[Callable] = None


class StateMachine:
    def __init__(self, initial_state: Enum):
        self._state = initial_state
        self._transitions = []
        self._state_enter_time = time.time()

    @property
    def current_state(self) -> Enum:
        return self._state

    def register_transition(self, from_state: Enum, to_state: Enum, condition: str, action: Callable = None) -> None:
        self._transitions.append(StateTransition(from_state, to_state, condition, action))

    def trigger(self, condition: str) -> bool:
        for t in self._transitions:
            if t.from_state == self._state and t.condition == condition:
                self._state = t.to_state
                self._state_enter_time = time.time()
                if t.action:
                    try:
                        t.action()
                    except Exception as e:
                        logger.warning(f"Transition action for '{condition}' failed: {e}")
                return True
        return False

    def get_time_in_state(self) -> float:
        return time.time() - self._state_enter_time


def listening_state_machine(on_idle: Callable = None) -> StateMachine:
    """Transcriber lifecycle: idle -> listening -> idle."""
    sm = StateMachine(initial_state=ListeningState.IDLE)
    sm.register_transition(ListeningState.IDLE, ListeningState.LISTENING, "start")
    for condition in ("stop", "error", "end"):
        sm.register_transition(ListeningState.LISTENING, ListeningState.IDLE, condition, on_idle)
    return sm
