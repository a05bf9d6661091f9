from flask import current_app, request
from flask_socketio import emit

from codebreaker import socketio
from codebreaker.errors import AttemptsExhausted, GameError, SecretsNotReady
from codebreaker.services.games import play
from codebreaker.state import GameServerState

# Errors the submitter is told about; every other GameError is logged and dropped
_SURFACED_GUESS_ERRORS = (SecretsNotReady, AttemptsExhausted)


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _state() -> GameServerState:
    return current_app.extensions['codebreaker']


def _field(data, *names):
    """Return the first present payload field among ``names`` (aliases)."""
    if not isinstance(data, dict):
        return None
    for name in names:
        if data.get(name) is not None:
            return data[name]
    return None


def _require_id(data, *names):
    """Return an id field as a string, or emit an error and return None."""
    value = _field(data, *names)
    if not isinstance(value, str) or not value:
        emit('error', {'message': f'{names[0]} is required and must be a string'})
        return None
    return value


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    sid = _get_sid()
    state = _state()
    state.presence.unregister(sid)
    removed = play.abandon_sessions_for(state.store, state.presence, state.notifier, sid)
    current_app.logger.info(f"[disconnect] sid={sid} sessions_removed={len(removed)}")


def handle_register_user(data=None):
    # Accept either a bare username or {'username': ...}
    username = data if isinstance(data, str) else _field(data, 'username')
    if not username:
        emit('error', {'message': 'username is required'})
        return
    _state().presence.register(_get_sid(), str(username))


def handle_get_users(data=None):
    emit('users_list_update', [p.to_dict() for p in _state().presence.snapshot()])


def handle_send_challenge(data=None):
    target = _require_id(data, 'targetConnectionId', 'targetSocketId')
    if target is None:
        return
    _state().broker.send_challenge(_get_sid(), target)


def handle_accept_challenge(data=None):
    challenger = _require_id(data, 'challengerConnectionId', 'challengerId')
    if challenger is None:
        return
    _state().broker.accept_challenge(_get_sid(), challenger)


def handle_set_secret_code(data=None):
    game_id = _require_id(data, 'gameId')
    if game_id is None:
        return
    state = _state()
    sid = _get_sid()
    try:
        play.commit_secret(state.store, state.notifier, sid, game_id, _field(data, 'secretCode'))
    except GameError as exc:
        current_app.logger.info(f"[secret-drop] game={game_id} sid={sid} reason={exc.code}")


def handle_submit_guess(data=None):
    game_id = _require_id(data, 'gameId')
    if game_id is None:
        return
    state = _state()
    sid = _get_sid()
    try:
        play.submit_guess(state.store, state.notifier, sid, game_id, _field(data, 'guess'))
    except _SURFACED_GUESS_ERRORS as exc:
        current_app.logger.info(f"[guess-reject] game={game_id} sid={sid} reason={exc.code}")
        emit('guess_error', exc.to_dict())
    except GameError as exc:
        current_app.logger.info(f"[guess-drop] game={game_id} sid={sid} reason={exc.code}")


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('register_user', handle_register_user, namespace=namespace)
    socketio.on_event('get_users', handle_get_users, namespace=namespace)
    socketio.on_event('send_challenge', handle_send_challenge, namespace=namespace)
    socketio.on_event('accept_challenge', handle_accept_challenge, namespace=namespace)
    socketio.on_event('set_secret_code', handle_set_secret_code, namespace=namespace)
    socketio.on_event('submit_guess', handle_submit_guess, namespace=namespace)
