from flask_socketio import disconnect
from flask import current_app, request
from maze_runner import NAMESPACE, game, socketio
from maze_runner.broadcast import broadcast
from maze_runner.models import PlayerUpdate
from maze_runner.state import PlayerNotRegistered
from typing import Dict, Any
import time

# Per-connection session context, keyed by Socket.IO sid
_sid_to_ctx: Dict[str, Dict[str, Any]] = {}

# python-socketio disconnect reasons that mean end-of-stream, not a failure
_CLEAN_CLOSE_REASONS = {'client disconnect', 'server disconnect', 'transport close'}


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    sid = _get_sid()
    remote_addr = request.remote_addr or 'unknown'
    _sid_to_ctx[sid] = {'remote_addr': remote_addr, 'connected_at': time.time()}
    current_app.logger.info(f"New connection from {remote_addr}")
    game.register(sid)
    broadcast()


def is_clean_close(reason) -> bool:
    """True for an orderly close, False for a transport failure."""
    return reason is None or reason in _CLEAN_CLOSE_REASONS


def handle_disconnect(reason=None):
    sid = _get_sid()
    ctx = _sid_to_ctx.pop(sid, None) or {}
    if not is_clean_close(reason):
        current_app.logger.info(f"Read error from {ctx.get('remote_addr', 'unknown')}: {reason}")
    player = game.unregister(sid)
    broadcast()
    duration = time.time() - ctx.get('connected_at', time.time())
    name = player.name if player else '?'
    current_app.logger.info(
        f"Connection closed (duration: {duration:.3f}s): {ctx.get('remote_addr', 'unknown')} [{name}]"
    )


def handle_update(data=None):
    sid = _get_sid()
    try:
        update = PlayerUpdate.from_message(data)
        game.update(sid, update)
    except (ValueError, PlayerNotRegistered) as exc:
        ctx = _sid_to_ctx.get(sid) or {}
        current_app.logger.info(f"Read error from {ctx.get('remote_addr', 'unknown')}: {exc}")
        # Closing triggers handle_disconnect, which unregisters and broadcasts
        disconnect()
        return
    broadcast()


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on namespace '/ws'.

    Clients normally emit 'update' with a JSON object. Plain ``send`` of the
    same object as JSON text arrives as 'message' and is handled identically.
    """
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('disconnect', handle_disconnect, namespace=NAMESPACE)
    socketio.on_event('update', handle_update, namespace=NAMESPACE)
    socketio.on_event('message', handle_update, namespace=NAMESPACE)
