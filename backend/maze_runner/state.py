"""Shared round state: maze, player registry and finish ranking.

Everything mutable lives behind a single lock. A finish flag, its rank and
the game-over latch are always written and read under the same acquisition.
"""

import logging
import random
import threading
import time
from dataclasses import replace
from typing import Callable, Dict, List, Optional

from maze_runner.maze import DEFAULT_SIZE, START, Maze, generate_maze, resolve_size
from maze_runner.models import Player, PlayerUpdate, RoundSnapshot

logger = logging.getLogger(__name__)

ROUND_ACTIVE = 'round_active'
ROUND_OVER = 'round_over'


class PlayerNotRegistered(LookupError):
    pass


class GameState:
    def __init__(self, width: int = DEFAULT_SIZE[0], height: int = DEFAULT_SIZE[1],
                 clock: Callable[[], float] = time.time, rng: Optional[random.Random] = None):
        self._lock = threading.Lock()
        self._clock = clock
        self._rng = rng
        self._width = width
        self._height = height
        self._players: Dict[str, Player] = {}
        self._finish_rank = 0
        self._game_over = False
        self._start_time = 0.0
        self._maze: Optional[Maze] = None

    def init_app(self, app) -> None:
        """Configure from ``app.config`` and start a fresh round."""
        width, height = resolve_size(
            app.config.get('MAZE_SIZE'),
            app.config.get('MAZE_WIDTH'),
            app.config.get('MAZE_HEIGHT'),
        )
        self.configure(width, height)

    def configure(self, width: int, height: int) -> None:
        """Resize the maze, drop all players and start a new round."""
        with self._lock:
            self._width, self._height = width, height
            self._players.clear()
            self._start_round()

    # ---- Player registry ----

    def register(self, sid: str) -> Player:
        with self._lock:
            player = Player()
            self._players[sid] = player
            return replace(player)

    def unregister(self, sid: str) -> Optional[Player]:
        with self._lock:
            player = self._players.pop(sid, None)
            self._check_round_over()
            return replace(player) if player else None

    def update(self, sid: str, update: PlayerUpdate) -> Player:
        """Apply a client update and handle the finish edge atomically."""
        with self._lock:
            player = self._players.get(sid)
            if player is None:
                raise PlayerNotRegistered(sid)
            player.x, player.y = update.x, update.y
            player.name, player.color = update.name, update.color

            if update.finished and not player.finished:
                player.finished = True
                self._finish_rank += 1
                player.finish_rank = self._finish_rank
                player.finish_time = int(self._clock()) - int(self._start_time)
                logger.info(
                    f"PLAYER FINISHED! Name: {player.name} | Rank: {player.finish_rank} | Time: {player.finish_time}s"
                )
                self._check_round_over()
            return replace(player)

    def snapshot(self) -> RoundSnapshot:
        with self._lock:
            all_finished = self._check_round_over()
            return RoundSnapshot(
                players=tuple(replace(p) for p in self._players.values()),
                all_finished=all_finished,
                game_over=self._game_over,
                recipients=tuple(self._players.keys()),
            )

    # ---- Round state ----

    @property
    def phase(self) -> str:
        with self._lock:
            return ROUND_OVER if self._game_over else ROUND_ACTIVE

    @property
    def finish_rank(self) -> int:
        with self._lock:
            return self._finish_rank

    def reset(self) -> None:
        """Start a new round for everyone currently connected.

        The maze is regenerated while the lock is held, so no update can land
        between the old round being cleared and the new one starting.
        """
        with self._lock:
            for player in self._players.values():
                player.x, player.y = START
                player.finished = False
                player.finish_rank = 0
                player.finish_time = 0
            self._start_round()

    def maze(self) -> Maze:
        with self._lock:
            return self._maze

    def maze_rows(self) -> List[List[int]]:
        with self._lock:
            return self._maze.to_rows()

    def maze_info(self) -> dict:
        with self._lock:
            return self._maze.info()

    # Callers hold self._lock for both helpers below.

    def _start_round(self) -> None:
        self._finish_rank = 0
        self._game_over = False
        self._maze = generate_maze(self._width, self._height, self._rng)
        self._start_time = self._clock()

    def _check_round_over(self) -> bool:
        all_finished = bool(self._players) and all(p.finished for p in self._players.values())
        if all_finished and not self._game_over:
            self._game_over = True
            logger.info('GAME OVER: All players have reached the goal!')
        return all_finished
