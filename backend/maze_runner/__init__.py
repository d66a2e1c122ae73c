import logging
import os

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config
from maze_runner.state import GameState

NAMESPACE = '/ws'
LOG_FORMAT = '%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s'
LOG_DATE_FORMAT = '%Y/%m/%d %H:%M:%S'

game = GameState()
socketio = SocketIO(cors_allowed_origins='*', async_mode=None)


def _configure_logging(flask_app):
    flask_app.logger.setLevel(str(flask_app.config.get('LOG_LEVEL') or 'INFO').upper())
    log_file = flask_app.config.get('LOG_FILE')
    if not log_file:
        return
    # create_app may run more than once per process; attach each file once
    log_path = os.path.abspath(log_file)
    for handler in flask_app.logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == log_path:
            return
    file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    flask_app.logger.addHandler(file_handler)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    _configure_logging(flask_app)

    # The read-only maze queries are open to any origin
    CORS(flask_app, origins='*', send_wildcard=True)
    socketio.init_app(flask_app, cors_allowed_origins='*')

    game.init_app(flask_app)

    from maze_runner.api import api
    flask_app.register_blueprint(api)

    from maze_runner.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @click.command('new-maze')
    @click.option('--width', default=31, show_default=True, help='Maze width (odd, >= 11).')
    @click.option('--height', default=21, show_default=True, help='Maze height (odd, >= 11).')
    def new_maze_command(width, height):
        """Generates a maze and prints it as ASCII art."""
        from maze_runner.maze import generate_maze, normalize_dimensions
        maze = generate_maze(*normalize_dimensions(width, height))
        click.echo(maze.render())
        click.echo(f"Goal at {maze.goal}")

    flask_app.cli.add_command(new_maze_command)

    return flask_app
