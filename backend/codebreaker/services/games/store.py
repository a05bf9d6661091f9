import logging
import threading
from typing import Dict, List, Optional

from codebreaker.errors import SessionNotFound
from codebreaker.services import ConnectionId
from .session import DEFAULT_CODE_LENGTH, DEFAULT_MAX_ATTEMPTS, GameSession

logger = logging.getLogger(__name__)


class SessionStore:
    """In-memory registry of live sessions keyed by session id.

    The store lock guards the mapping only. Session state is guarded by each
    session's own lock; removal abandons a session under that lock, so a
    guess racing a disconnect either lands first or sees SessionNotFound.
    """

    def __init__(self, code_length: int = DEFAULT_CODE_LENGTH, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        self.code_length = code_length
        self.max_attempts = max_attempts
        self._sessions: Dict[str, GameSession] = {}
        self._lock = threading.Lock()

    def __len__(self):
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id):
        with self._lock:
            return session_id in self._sessions

    def create(self, session_id: str, player_a: ConnectionId, player_b: ConnectionId) -> GameSession:
        session = GameSession(session_id, player_a, player_b,
                              code_length=self.code_length, max_attempts=self.max_attempts)
        with self._lock:
            if session_id in self._sessions:
                raise ValueError(f'Session {session_id} already exists')
            self._sessions[session_id] = session
        logger.info(f"[session-create] game={session_id} challenger={player_a} accepter={player_b}")
        return session

    def find(self, session_id: str) -> Optional[GameSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def get(self, session_id: str) -> GameSession:
        session = self.find(session_id)
        if session is None:
            raise SessionNotFound(game_id=session_id)
        return session

    def sessions_for(self, connection: ConnectionId) -> List[GameSession]:
        with self._lock:
            return [s for s in self._sessions.values() if s.has_player(connection)]

    def remove_all_for(self, connection: ConnectionId) -> List[GameSession]:
        """Drop every session ``connection`` plays in and abandon each one."""
        with self._lock:
            removed = [s for s in self._sessions.values() if s.has_player(connection)]
            for session in removed:
                del self._sessions[session.id]
                # Lock order is always store then session
                session.abandon()
        for session in removed:
            logger.info(f"[session-abandon] game={session.id} by={connection}")
        return removed
