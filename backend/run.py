import click
from config import Config
from maze_runner import create_app, game, socketio
from maze_runner.maze import SIZE_PRESETS


@click.command()
@click.option('--size', type=click.Choice(sorted(SIZE_PRESETS) + ['custom']), default=None,
              help='Maze size preset (default: MAZE_SIZE from the environment).')
@click.option('--width', type=int, default=None, help='Custom maze width, implies --size custom.')
@click.option('--height', type=int, default=None, help='Custom maze height, implies --size custom.')
@click.option('--host', default=None, help='Bind address.')
@click.option('--port', type=int, default=None, help='Port for HTTP and the /ws channel.')
@click.option('--debug', is_flag=True, help='Run the dev server in debug mode.')
def main(size, width, height, host, port, debug):
    """Starts the Maze Runner game server."""

    class RunConfig(Config):
        pass

    if width is not None or height is not None:
        size = 'custom'
        RunConfig.MAZE_WIDTH = width if width is not None else Config.MAZE_WIDTH
        RunConfig.MAZE_HEIGHT = height if height is not None else Config.MAZE_HEIGHT
    if size:
        RunConfig.MAZE_SIZE = size
    RunConfig.HOST = host or Config.HOST
    RunConfig.PORT = port or Config.PORT

    app = create_app(RunConfig)
    app.logger.info('=== Starting Maze Runner Server Session ===')
    info = game.maze_info()
    app.logger.info(f"Selected maze size: {info['width']}x{info['height']}")
    app.logger.info(f"Starting Game Server on {RunConfig.HOST}:{RunConfig.PORT}...")
    # Use SocketIO server to enable websockets
    socketio.run(app, host=RunConfig.HOST, port=RunConfig.PORT, debug=debug,
                 allow_unsafe_werkzeug=True)


if __name__ == '__main__':
    main()
