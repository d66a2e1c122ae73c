import os
import sys
import pytest

# Ensure the backend root (containing the `maze_runner` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from maze_runner import create_app, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    MAZE_SIZE = 'small'
    MAZE_WIDTH = 31
    MAZE_HEIGHT = 21
    LOG_FILE = None
    LOG_LEVEL = 'INFO'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


def _connect(flask_app):
    return socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )


def _close(test_client):
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


@pytest.fixture()
def sio_client(flask_app):
    test_client = _connect(flask_app)
    yield test_client
    _close(test_client)


@pytest.fixture()
def sio_factory(flask_app):
    """Open any number of extra /ws clients, all closed on teardown."""
    opened = []

    def _open():
        test_client = _connect(flask_app)
        opened.append(test_client)
        return test_client

    yield _open
    for test_client in opened:
        _close(test_client)
