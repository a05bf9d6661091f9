from dataclasses import dataclass

from flask_socketio import SocketIO

from codebreaker.notifier import SocketIONotifier
from codebreaker.services.games.challenges import ChallengeBroker
from codebreaker.services.games.store import SessionStore
from codebreaker.services.presence import PresenceRegistry


@dataclass
class GameServerState:
    presence: PresenceRegistry
    store: SessionStore
    broker: ChallengeBroker
    notifier: SocketIONotifier


def build_state(socketio: SocketIO, namespace: str = '/', code_length: int = 4,
                max_attempts: int = 10) -> GameServerState:
    notifier = SocketIONotifier(socketio, namespace)
    presence = PresenceRegistry()
    store = SessionStore(code_length=code_length, max_attempts=max_attempts)

    def broadcast_presence(snapshot):
        users = [p.to_dict() for p in snapshot]
        for participant in snapshot:
            notifier.send(participant.connection_id, 'users_list_update', users)

    presence.subscribe(broadcast_presence)
    return GameServerState(
        presence=presence,
        store=store,
        broker=ChallengeBroker(presence, store, notifier),
        notifier=notifier,
    )
