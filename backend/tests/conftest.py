import os
import sys
import pytest

# Ensure the backend root (containing the `chessrelay` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from chessrelay import EXTENSION_KEY, create_app, socketio
from chessrelay.store import RoomStore


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    ROOM_TTL_SEC = 86400
    SWEEP_INTERVAL_SEC = 3600
    CORS_ORIGINS = '*'
    SOCKETIO_NAMESPACE = '/'
    LOG_LEVEL = 'DEBUG'


class FakeClock:
    def __init__(self, start=1_700_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class RecordingTransport:
    """Collects what the router would have delivered, per connection."""

    def __init__(self):
        self.members = {}
        self.sent = []

    def send(self, connection, event, payload):
        self.sent.append((connection, event, payload))

    def broadcast(self, room_id, event, payload, skip=None):
        for conn in sorted(self.members.get(room_id, set())):
            if conn != skip:
                self.sent.append((conn, event, payload))

    def subscribe(self, connection, room_id):
        self.members.setdefault(room_id, set()).add(connection)

    def unsubscribe(self, connection, room_id):
        self.members.get(room_id, set()).discard(connection)

    def received(self, connection, event=None):
        return [
            payload for conn, name, payload in self.sent
            if conn == connection and (event is None or name == event)
        ]

    def events_for(self, connection):
        return [name for conn, name, _ in self.sent if conn == connection]


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def store(clock):
    return RoomStore(clock=clock)


@pytest.fixture()
def transport():
    return RecordingTransport()


@pytest.fixture()
def flask_app(store):
    application = create_app(TestConfig, store=store)
    with application.app_context():
        yield application


@pytest.fixture()
def relay(flask_app):
    return flask_app.extensions[EXTENSION_KEY]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def _connect():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
        )
        test_client.get_received()  # flush the connected ack
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
