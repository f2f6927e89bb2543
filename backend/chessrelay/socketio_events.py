from flask import current_app, request
from flask_socketio import emit, join_room, leave_room

from chessrelay import EXTENSION_KEY
from chessrelay.services.rooms.router import GameRouter


def _room_name(room_id: str) -> str:
    return f"game:{room_id}"


class SocketIOTransport:
    """Delivers router output through Socket.IO rooms.

    Connection tokens are turned back into sids only here, at send time.
    """

    def __init__(self, server, connections, namespace: str = '/'):
        self.server = server
        self.connections = connections
        self.namespace = namespace

    def send(self, connection, event, payload):
        sid = self.connections.sid_for(connection)
        if sid is None:
            return
        self.server.emit(event, payload, to=sid, namespace=self.namespace)

    def broadcast(self, room_id, event, payload, skip=None):
        self.server.emit(
            event,
            payload,
            to=_room_name(room_id),
            skip_sid=self.connections.sid_for(skip),
            namespace=self.namespace,
        )

    def subscribe(self, connection, room_id):
        sid = self.connections.sid_for(connection)
        if sid is not None:
            join_room(_room_name(room_id), sid=sid, namespace=self.namespace)

    def unsubscribe(self, connection, room_id):
        sid = self.connections.sid_for(connection)
        if sid is not None:
            leave_room(_room_name(room_id), sid=sid, namespace=self.namespace)


def _relay():
    return current_app.extensions[EXTENSION_KEY]


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    _relay().connections.register(_get_sid())
    current_app.logger.info(f"[connect] a soul has connected: {_get_sid()}")
    emit('connected', {'message': 'Connected'})


def handle_disconnect(reason=None):
    relay = _relay()
    sid = _get_sid()
    current_app.logger.info(f"[disconnect] a soul has departed: {sid}")
    token = relay.connections.token_for(sid)
    # Notify first: skipping the departing sid needs the token still registered
    relay.router.disconnect(token)
    relay.connections.unregister(sid)


def handle_ping(data=None):
    emit('pong', data or {})


def _route(event):
    def handler(data=None):
        relay = _relay()
        relay.router.handle(event, relay.connections.token_for(_get_sid()), data)
    handler.__name__ = 'handle_' + event.replace('-', '_')
    return handler


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on `namespace`.

    Room events are all dispatched through the app's GameRouter.
    """
    from chessrelay import socketio

    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('ping', handle_ping, namespace=namespace)

    for event in GameRouter.EVENTS:
        socketio.on_event(event, _route(event), namespace=namespace)
