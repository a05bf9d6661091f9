"""Secret commits, guesses and teardown for live sessions.

Each function resolves the session, applies the move, and sends the
notifications that follow from it. Errors from the session propagate to
the caller, which decides whether they are surfaced or dropped.
"""

import logging
from typing import List

from codebreaker.services import ConnectionId
from codebreaker.services.presence import PresenceRegistry
from .session import CommitOutcome, GameSession, GuessOutcome
from .store import SessionStore

logger = logging.getLogger(__name__)


def commit_secret(store: SessionStore, notifier, player: ConnectionId, game_id: str, code) -> CommitOutcome:
    session = store.get(game_id)
    with session.lock:
        outcome = session.commit_secret(player, code)
        if outcome.became_ready:
            notifier.send(session.player_a, 'both_codes_set', {'gameId': game_id})
            notifier.send(session.player_b, 'both_codes_set', {'gameId': game_id})
        else:
            # The opponent learns that a secret exists, never the secret itself
            notifier.send(outcome.opponent, 'opponent_code_set', {'gameId': game_id})
    return outcome


def submit_guess(store: SessionStore, notifier, player: ConnectionId, game_id: str, code) -> GuessOutcome:
    session = store.get(game_id)
    # Sends happen under the session lock so delivery order matches row order
    with session.lock:
        outcome = session.submit_guess(player, code)
        guess_data = outcome.record.to_dict()
        logger.info(
            f"[guess] game={game_id} player={player} attempt={outcome.attempts} "
            f"win={outcome.is_win} over={outcome.is_over}"
        )

        notifier.send(player, 'guess_feedback', {
            'gameId': game_id,
            'guessData': guess_data,
            'isWin': outcome.is_win,
            'gameOver': outcome.is_over,
            'attempts': outcome.attempts,
            'attemptsLeft': outcome.attempts_left,
        })
        notifier.send(outcome.opponent, 'opponent_guess', {
            'gameId': game_id,
            'guessData': guess_data,
        })
        if outcome.is_over:
            notifier.send(outcome.opponent, 'opponent_game_status', {
                'gameId': game_id,
                'opponentWon': outcome.is_win,
                'opponentLost': not outcome.is_win,
            })
    return outcome


def abandon_sessions_for(store: SessionStore, presence: PresenceRegistry, notifier,
                         connection: ConnectionId) -> List[GameSession]:
    """Remove every session of ``connection`` and tell each remaining opponent."""
    removed = store.remove_all_for(connection)
    for session in removed:
        opponent = session.opponent_of(connection)
        if opponent in presence:
            notifier.send(opponent, 'opponent_disconnected', {'gameId': session.id})
    return removed
