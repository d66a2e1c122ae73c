from flask import Blueprint, jsonify, current_app
from maze_runner import game
from maze_runner.broadcast import broadcast

api = Blueprint('api', __name__)


@api.route('/maze', methods=['GET'])
def get_maze():
    # Rows of 0 (passage) / 1 (wall), height x width
    return jsonify(game.maze_rows())


@api.route('/info', methods=['GET'])
def get_info():
    return jsonify(game.maze_info())


@api.route('/reset', methods=['GET', 'POST'])
def reset_round():
    """Start a new round: fresh maze, everyone back at the start."""
    current_app.logger.info('Game reset requested via API')
    game.reset()
    broadcast()
    return jsonify({'ok': True})


@api.route('/health', methods=['GET'])
def health():
    return jsonify({'status': 'ok', 'phase': game.phase})
