import logging
from typing import Optional

from codebreaker.errors import TargetNotPresent
from codebreaker.services import ConnectionId
from codebreaker.services.presence import PresenceRegistry
from .session import GameSession, new_session_id
from .store import SessionStore

logger = logging.getLogger(__name__)

ROLE_CHALLENGER = 'challenger'
ROLE_ACCEPTER = 'accepter'


class ChallengeBroker:
    """Turns two present users into a new session.

    Challenges themselves are not stored: a challenge notice is forwarded and
    forgotten, and acceptance only checks that both parties are still online.
    Failures never reach the initiator; they are logged and dropped.
    """

    def __init__(self, presence: PresenceRegistry, store: SessionStore, notifier):
        self.presence = presence
        self.store = store
        self.notifier = notifier

    def _check_challenge(self, challenger: ConnectionId, target: ConnectionId):
        sender = self.presence.get(challenger)
        if sender is None or target == challenger or target not in self.presence:
            raise TargetNotPresent()
        return sender

    def send_challenge(self, challenger: ConnectionId, target: ConnectionId) -> bool:
        try:
            sender = self._check_challenge(challenger, target)
        except TargetNotPresent as exc:
            logger.info(f"[challenge-drop] from={challenger} to={target} reason={exc.code}")
            return False

        self.notifier.send(target, 'challenge_received', {
            'username': sender.username,
            'connectionId': challenger,
        })
        logger.info(f"[challenge-sent] from={challenger} to={target}")
        return True

    def accept_challenge(self, accepter: ConnectionId, challenger: ConnectionId) -> Optional[GameSession]:
        accepting = self.presence.get(accepter)
        challenging = self.presence.get(challenger)
        if accepting is None or challenging is None or accepter == challenger:
            logger.info(f"[accept-drop] accepter={accepter} challenger={challenger} reason=party_not_present")
            return None

        session = self.store.create(new_session_id(challenger, accepter), challenger, accepter)

        self.notifier.send(challenger, 'challenge_accepted', {
            'gameId': session.id,
            'role': ROLE_CHALLENGER,
            'opponent': accepting.username,
            'opponentConnectionId': accepter,
        })
        self.notifier.send(accepter, 'challenge_accepted', {
            'gameId': session.id,
            'role': ROLE_ACCEPTER,
            'opponent': challenging.username,
            'opponentConnectionId': challenger,
        })
        return session
