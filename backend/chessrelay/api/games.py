from flask import Blueprint, current_app, jsonify

from chessrelay import EXTENSION_KEY
from chessrelay.services.rooms.quotes import GAME_START, random_quote

games = Blueprint('games', __name__)


def _store():
    return current_app.extensions[EXTENSION_KEY].store


@games.route('/create-game', methods=['GET'])
def create_game():
    """
    Creates an empty room and hands back its code.
    """
    game_id = _store().create()
    current_app.logger.info(f"[create] game={game_id}")
    return jsonify({'gameId': game_id, 'quote': random_quote(GAME_START)})


@games.route('/game/<string:game_id>', methods=['GET'])
def get_game_state(game_id):
    store = _store()
    with store.locked(game_id) as room:
        if room is None:
            return jsonify({'error': 'Game not found'}), 404
        return jsonify(room.to_dict())
