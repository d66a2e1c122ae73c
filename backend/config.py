import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Maze size: small, medium, large, huge or custom (uses MAZE_WIDTH/MAZE_HEIGHT).
    # Custom dimensions are coerced when the app starts, see normalize_dimensions.
    MAZE_SIZE = os.environ.get('MAZE_SIZE', 'medium')
    MAZE_WIDTH = os.environ.get('MAZE_WIDTH', 71)
    MAZE_HEIGHT = os.environ.get('MAZE_HEIGHT', 41)
    # Session log, appended to across restarts. Empty disables file logging.
    LOG_FILE = os.environ.get('LOG_FILE', 'server.log')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Dev server bind address
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '8080'))
