import enum
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from codebreaker.errors import (
    AttemptsExhausted,
    InvalidCode,
    NotAParticipant,
    SecretLocked,
    SecretsNotReady,
    SessionNotFound,
)
from codebreaker.services import ConnectionId
from .feedback import Feedback, score

logger = logging.getLogger(__name__)

DEFAULT_CODE_LENGTH = 4
DEFAULT_MAX_ATTEMPTS = 10

Code = Tuple[Any, ...]


class SessionState(enum.Enum):
    AWAITING_SECRETS = 'awaiting_secrets'
    IN_PROGRESS = 'in_progress'
    FINISHED = 'finished'
    ABANDONED = 'abandoned'


@dataclass(frozen=True)
class GuessRecord:
    code: Code
    feedback: Feedback

    def to_dict(self) -> Dict[str, Any]:
        return {'guess': list(self.code), 'feedback': self.feedback.pegs()}


@dataclass(frozen=True)
class CommitOutcome:
    opponent: ConnectionId
    became_ready: bool


@dataclass(frozen=True)
class GuessOutcome:
    opponent: ConnectionId
    record: GuessRecord
    is_win: bool
    is_over: bool
    attempts: int
    attempts_left: int


_stamp_lock = threading.Lock()
_last_stamp = 0


def new_session_id(player_a: ConnectionId, player_b: ConnectionId) -> str:
    """Build a session id from both handles and a millisecond stamp.

    Stamps are strictly increasing within the process, so rematches between
    the same pair in the same millisecond still get distinct ids.
    """
    global _last_stamp
    with _stamp_lock:
        _last_stamp = max(int(time.time() * 1000), _last_stamp + 1)
        stamp = _last_stamp
    return f"{player_a}_{player_b}_{stamp}"


def normalize_code(code, length: int) -> Code:
    if isinstance(code, (str, bytes)) or not isinstance(code, (list, tuple)):
        raise InvalidCode(f'Code must be a list of {length} values')
    if len(code) != length:
        raise InvalidCode(f'Code must have exactly {length} values, got {len(code)}')
    for value in code:
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise InvalidCode(f'Unsupported code value: {value!r}')
    return tuple(code)


class GameSession:
    """One match between a challenger (``player_a``) and an accepter (``player_b``).

    Each player owns one row of guesses aimed at the opponent's secret. Rows
    end independently: a row is over once it holds a winning guess or
    ``max_attempts`` entries. The session reports FINISHED as soon as either
    row is over. Guessing in any row stays open until it reaches
    ``max_attempts``, a win included.

    All public methods hold the session lock, so operations on one session
    are totally ordered. Once abandoned, every operation raises
    ``SessionNotFound``.
    """

    def __init__(self, id: str, player_a: ConnectionId, player_b: ConnectionId,
                 code_length: int = DEFAULT_CODE_LENGTH, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        if player_a == player_b:
            raise ValueError('A session needs two distinct players')
        self.id = id
        self.player_a = player_a
        self.player_b = player_b
        self.code_length = code_length
        self.max_attempts = max_attempts
        self._secrets: Dict[ConnectionId, Optional[Code]] = {player_a: None, player_b: None}
        # Keyed by the guessing player: player_a's row targets player_b's secret
        self._guesses: Dict[ConnectionId, List[GuessRecord]] = {player_a: [], player_b: []}
        self._abandoned = False
        self._lock = threading.RLock()

    def __repr__(self):
        return f"<GameSession {self.id} {self.state.value}>"

    @property
    def players(self) -> Tuple[ConnectionId, ConnectionId]:
        return (self.player_a, self.player_b)

    @property
    def lock(self) -> threading.RLock:
        """Held for the whole of every operation; callers may hold it to extend one."""
        return self._lock

    def has_player(self, player: ConnectionId) -> bool:
        return player in self._secrets

    def opponent_of(self, player: ConnectionId) -> ConnectionId:
        if player == self.player_a:
            return self.player_b
        if player == self.player_b:
            return self.player_a
        raise NotAParticipant(game_id=self.id)

    @property
    def both_secrets_committed(self) -> bool:
        return all(secret is not None for secret in self._secrets.values())

    def has_secret(self, player: ConnectionId) -> bool:
        return self._secrets.get(player) is not None

    def guesses_for(self, player: ConnectionId) -> List[GuessRecord]:
        with self._lock:
            if not self.has_player(player):
                raise NotAParticipant(game_id=self.id)
            return list(self._guesses[player])

    def _row_won(self, player: ConnectionId) -> bool:
        return any(r.feedback.is_solved(self.code_length) for r in self._guesses[player])

    def row_over(self, player: ConnectionId) -> bool:
        with self._lock:
            return self._row_won(player) or len(self._guesses[player]) >= self.max_attempts

    @property
    def state(self) -> SessionState:
        with self._lock:
            if self._abandoned:
                return SessionState.ABANDONED
            if not self.both_secrets_committed:
                return SessionState.AWAITING_SECRETS
            if any(self.row_over(p) for p in self.players):
                return SessionState.FINISHED
            return SessionState.IN_PROGRESS

    def _ensure_live(self):
        if self._abandoned:
            raise SessionNotFound(game_id=self.id)

    def commit_secret(self, player: ConnectionId, code) -> CommitOutcome:
        with self._lock:
            self._ensure_live()
            opponent = self.opponent_of(player)
            secret = normalize_code(code, self.code_length)
            if self.both_secrets_committed:
                raise SecretLocked(game_id=self.id)
            # Re-committing before the opponent has committed overwrites
            self._secrets[player] = secret
            ready = self.both_secrets_committed
            if ready:
                logger.info(f"[secrets-ready] game={self.id}")
            return CommitOutcome(opponent=opponent, became_ready=ready)

    def submit_guess(self, player: ConnectionId, code) -> GuessOutcome:
        with self._lock:
            self._ensure_live()
            if not self.both_secrets_committed:
                raise SecretsNotReady(game_id=self.id)
            opponent = self.opponent_of(player)
            row = self._guesses[player]
            if len(row) >= self.max_attempts:
                raise AttemptsExhausted(game_id=self.id)
            guess = normalize_code(code, self.code_length)

            target = self._secrets[opponent]
            record = GuessRecord(code=guess, feedback=score(target, guess))
            row.append(record)
            is_win = guess == target
            is_over = is_win or len(row) >= self.max_attempts
            return GuessOutcome(
                opponent=opponent,
                record=record,
                is_win=is_win,
                is_over=is_over,
                attempts=len(row),
                attempts_left=self.max_attempts - len(row),
            )

    def abandon(self) -> bool:
        """Mark the session abandoned. Returns False if it already was."""
        with self._lock:
            if self._abandoned:
                return False
            self._abandoned = True
            return True

    def summary(self) -> Dict[str, Any]:
        with self._lock:
            return {
                'gameId': self.id,
                'state': self.state.value,
                'bothCodesSet': self.both_secrets_committed,
                'maxAttempts': self.max_attempts,
                'codeLength': self.code_length,
                'players': [
                    {
                        'connectionId': p,
                        'role': 'challenger' if p == self.player_a else 'accepter',
                        'secretSet': self.has_secret(p),
                        'guesses': [r.to_dict() for r in self._guesses[p]],
                        'finished': self.row_over(p),
                    }
                    for p in self.players
                ],
            }
