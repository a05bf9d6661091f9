"""Errors raised by the game services.

Each error carries a short machine ``code`` that the event router puts on
the wire when an error is surfaced to a connection, and a human message.
"""


class GameError(Exception):
    code = 'game_error'
    message = 'Game error'

    def __init__(self, message: str = None, game_id: str = None):
        super().__init__(message or self.message)
        self.game_id = game_id

    def to_dict(self):
        return {'gameId': self.game_id, 'code': self.code, 'error': str(self)}


class SessionNotFound(GameError):
    code = 'session_not_found'
    message = 'Game not found'


class NotAParticipant(GameError):
    code = 'not_a_participant'
    message = 'Connection is not a player of this game'


class SecretsNotReady(GameError):
    code = 'secrets_not_ready'
    message = 'Both secret codes have not been set yet'


class AttemptsExhausted(GameError):
    code = 'attempts_exhausted'
    message = 'You have already used all your attempts'


class SecretLocked(GameError):
    code = 'secret_locked'
    message = 'Secret codes are locked once both players have set them'


class InvalidCode(GameError):
    code = 'invalid_code'
    message = 'Code is malformed'


class TargetNotPresent(GameError):
    code = 'target_not_present'
    message = 'Challenged user is not online'
