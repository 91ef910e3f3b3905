from flask import Blueprint, current_app, jsonify

games = Blueprint('games', __name__)


def _coordinator():
    return current_app.extensions['chessroom']


@games.route('', methods=['GET'])
def list_games():
    """
    Returns a snapshot of every game currently being played.
    """
    registry = _coordinator().registry
    with registry.lock:
        return jsonify([game.to_dict() for game in registry.games()]), 200


@games.route('/<string:game_id>', methods=['GET'])
def get_game_state(game_id):
    """
    Returns the public state of one game: position, side to move and clocks.
    """
    registry = _coordinator().registry
    with registry.lock:
        game = registry.get(game_id)
        if not game:
            return jsonify({'error': 'Game not found'}), 404
        return jsonify(game.to_dict()), 200
