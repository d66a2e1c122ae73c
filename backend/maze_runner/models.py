import json
from dataclasses import dataclass, field
from typing import Any, Tuple

from maze_runner.maze import START

DEFAULT_NAME = 'Anon'
DEFAULT_COLOR = '#ff0000'


@dataclass
class Player:
    x: int = START[0]
    y: int = START[1]
    name: str = DEFAULT_NAME
    color: str = DEFAULT_COLOR
    finished: bool = False
    finish_rank: int = 0
    finish_time: int = 0

    def to_dict(self):
        return {
            'x': self.x,
            'y': self.y,
            'name': self.name,
            'color': self.color,
            'finished': self.finished,
            'finishRank': self.finish_rank,
            'finishTime': self.finish_time,
        }


def _field(data: dict, key: str, kind, default):
    value = data.get(key, default)
    if value is None:
        return default
    # bool is an int subclass; a flag is never a coordinate
    if kind is int and isinstance(value, bool):
        raise ValueError(f"field {key!r} must be an integer")
    if not isinstance(value, kind):
        raise ValueError(f"field {key!r} must be {kind.__name__}, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class PlayerUpdate:
    """A decoded client message: ``{x, y, name, color, finished}``."""
    x: int = 0
    y: int = 0
    name: str = ''
    color: str = ''
    finished: bool = False

    @classmethod
    def from_message(cls, data: Any) -> 'PlayerUpdate':
        """Decode a client payload, either a dict or its JSON text.

        Missing fields take zero values. Raises ValueError on anything that is
        not a JSON object or carries a field of the wrong type.
        """
        if isinstance(data, (str, bytes)):
            try:
                data = json.loads(data)
            except (ValueError, RecursionError) as exc:
                raise ValueError(f"invalid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError('message must be a JSON object')
        return cls(
            x=_field(data, 'x', int, 0),
            y=_field(data, 'y', int, 0),
            name=_field(data, 'name', str, ''),
            color=_field(data, 'color', str, ''),
            finished=_field(data, 'finished', bool, False),
        )


@dataclass(frozen=True)
class RoundSnapshot:
    players: Tuple[Player, ...]
    all_finished: bool
    game_over: bool
    # connection ids to deliver the snapshot to
    recipients: Tuple[str, ...] = field(default=())

    def to_dict(self):
        return {
            'allFinished': self.all_finished,
            'players': [p.to_dict() for p in self.players],
            'gameOver': self.game_over,
        }
