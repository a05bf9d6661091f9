from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = flask_app.config['CORS_ORIGINS']
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Per-app game state: presence, sessions and the challenge broker
    from codebreaker.state import build_state
    flask_app.extensions['codebreaker'] = build_state(
        socketio,
        namespace=namespace,
        code_length=flask_app.config.get('CODE_LENGTH', 4),
        max_attempts=flask_app.config.get('MAX_ATTEMPTS', 10),
    )

    from codebreaker.main import main
    flask_app.register_blueprint(main)

    # Importing here ensures the handlers bind to the initialized socketio instance
    from codebreaker.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    flask_app.logger.info(
        f"[startup] env={flask_app.config.get('APP_ENV')} origins={allowed_origins} namespace={namespace}"
    )
    return flask_app
