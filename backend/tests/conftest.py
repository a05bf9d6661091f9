import os
import sys
import pytest

# Ensure the backend root (containing the `codebreaker` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from config import Config
from codebreaker import create_app, socketio


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')


class RecordingNotifier:
    """Collects outbound notifications instead of sending them."""

    def __init__(self):
        self.sent = []

    def send(self, connection, event, payload):
        self.sent.append((connection, event, payload))

    def events_for(self, connection, event=None):
        return [p for c, e, p in self.sent if c == connection and (event is None or e == event)]

    def names_for(self, connection):
        return [e for c, e, _ in self.sent if c == connection]


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def sio_factory(flask_app):
    """Build connected Socket.IO test clients; all are disconnected on teardown."""
    clients = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
