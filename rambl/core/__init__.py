from .state_machine import StateMachine, StateTransition, ListeningState
from .conversation import ConversationThread, Turn

__all__ = ["StateMachine", "StateTransition", "ListeningState", "ConversationThread", "Turn"]
