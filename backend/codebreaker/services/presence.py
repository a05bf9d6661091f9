import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from codebreaker.services import ConnectionId

logger = logging.getLogger(__name__)

PresenceListener = Callable[[List['Participant']], None]


@dataclass
class Participant:
    connection_id: ConnectionId
    username: str
    status: str = 'online'

    def to_dict(self):
        return {'connectionId': self.connection_id, 'username': self.username, 'status': self.status}


class PresenceRegistry:
    """Connected, registered users. Subscribers get a snapshot after every change."""

    def __init__(self):
        self._participants: Dict[ConnectionId, Participant] = {}
        self._listeners: List[PresenceListener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: PresenceListener) -> None:
        self._listeners.append(listener)

    def __contains__(self, connection):
        with self._lock:
            return connection in self._participants

    def get(self, connection: ConnectionId) -> Optional[Participant]:
        with self._lock:
            return self._participants.get(connection)

    def snapshot(self) -> List[Participant]:
        with self._lock:
            return list(self._participants.values())

    def register(self, connection: ConnectionId, username: str) -> Participant:
        participant = Participant(connection_id=connection, username=username)
        with self._lock:
            self._participants[connection] = participant
        logger.info(f"[presence-register] sid={connection} username={username}")
        self._publish()
        return participant

    def unregister(self, connection: ConnectionId) -> bool:
        with self._lock:
            removed = self._participants.pop(connection, None)
        if removed is None:
            return False
        logger.info(f"[presence-leave] sid={connection} username={removed.username}")
        self._publish()
        return True

    def _publish(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
