from typing import Any

from flask_socketio import SocketIO

from codebreaker.services import ConnectionId


class SocketIONotifier:
    """Sends outbound notifications to single connections over Socket.IO.

    Every connection is in a room named after its own sid, so addressing a
    connection is an emit to that room. Sends are fire-and-forget.
    """

    def __init__(self, socketio: SocketIO, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def send(self, connection: ConnectionId, event: str, payload: Any) -> None:
        # Use socketio.emit since this may be called outside the sender's handler
        self.socketio.emit(event, payload, to=connection, namespace=self.namespace)
