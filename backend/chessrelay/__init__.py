from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO(async_mode=None)

EXTENSION_KEY = 'chessrelay'


class Relay:
    """Per-app handles: the room store, the connection registry and the router."""

    def __init__(self, store, connections, router):
        self.store = store
        self.connections = connections
        self.router = router


def create_app(config_class=Config, store=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from chessrelay.store import RoomStore
    from chessrelay.connections import ConnectionRegistry
    from chessrelay.services.rooms import GameRouter, start_sweeper
    from chessrelay.socketio_events import SocketIOTransport, register_socketio_handlers

    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    store = store if store is not None else RoomStore()
    connections = ConnectionRegistry()
    transport = SocketIOTransport(socketio, connections, namespace=namespace)
    router = GameRouter(store, transport, logger=flask_app.logger)
    flask_app.extensions[EXTENSION_KEY] = Relay(store, connections, router)

    # Import and register blueprints here
    from chessrelay.main import main
    flask_app.register_blueprint(main)

    from chessrelay.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api')

    register_socketio_handlers(namespace=namespace)

    start_sweeper(flask_app, store)

    @click.command('quote')
    @click.argument('category', default='gameStart')
    def quote_command(category):
        """Prints a random quote from CATEGORY."""
        from chessrelay.services.rooms.quotes import QUOTES, random_quote
        if category not in QUOTES:
            raise click.BadParameter(f"choose one of: {', '.join(QUOTES)}", param_hint='CATEGORY')
        click.echo(random_quote(category))

    flask_app.cli.add_command(quote_command)

    return flask_app
