import logging

from maze_runner import NAMESPACE, game, socketio
from maze_runner.models import RoundSnapshot

logger = logging.getLogger(__name__)

STATE_EVENT = 'state'


def broadcast() -> RoundSnapshot:
    """Push the current round state to every connected player.

    The snapshot is taken under the game lock; the sends happen after it is
    released. A failed send to one client never stops delivery to the rest,
    the dead connection is reaped by its own disconnect handler.
    """
    snapshot = game.snapshot()
    payload = snapshot.to_dict()
    for sid in snapshot.recipients:
        try:
            socketio.emit(STATE_EVENT, payload, to=sid, namespace=NAMESPACE)
        except Exception as exc:
            logger.debug(f"[broadcast] send to {sid} failed: {exc}")
    return snapshot
