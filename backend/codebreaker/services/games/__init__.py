from .feedback import Feedback, score
from .session import GameSession, GuessRecord, SessionState, new_session_id
from .store import SessionStore

__all__ = ['Feedback', 'score', 'GameSession', 'GuessRecord', 'SessionState', 'new_session_id', 'SessionStore']
