from flask import Blueprint, current_app, jsonify

from chessrelay import EXTENSION_KEY

main = Blueprint('main', __name__)

@main.route('/')
def index():
    relay = current_app.extensions[EXTENSION_KEY]
    return jsonify({
        'message': 'The soul is healed by being with children... and chess.',
        'rooms': len(relay.store),
        'connections': len(relay.connections),
    })
