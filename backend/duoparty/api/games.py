from flask import Blueprint, jsonify

from duoparty.api import get_gateway
from duoparty.errors import GameNotFound

games = Blueprint('games', __name__)


@games.route('/<string:game_id>', methods=['GET'])
def get_game(game_id):
    try:
        game = get_gateway().games.get(game_id)
    except GameNotFound:
        return jsonify({'error': 'Game not found'}), 404
    return jsonify(game.to_dict())
