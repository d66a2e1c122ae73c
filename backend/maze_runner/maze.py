"""Perfect maze generation.

Mazes are carved with a randomized depth-first walk over the lattice of
odd-coordinate cells, two cells at a time, knocking down the wall cell in
between. The result is a spanning tree over the lattice: every passage cell
is reachable from (1, 1) and there are no loops.
"""

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

PASSAGE = 0
WALL = 1

MIN_DIMENSION = 11
DEFAULT_SIZE = (71, 41)
SIZE_PRESETS = {
    'small': (31, 21),
    'medium': (71, 41),
    'large': (101, 61),
    'huge': (151, 81),
}

START = (1, 1)
_DIRECTIONS = ((0, 2), (0, -2), (2, 0), (-2, 0))


@dataclass(frozen=True)
class Maze:
    width: int
    height: int
    grid: Tuple[Tuple[int, ...], ...]
    goal: Tuple[int, int]

    def is_passage(self, x: int, y: int) -> bool:
        if not (0 <= x < self.width and 0 <= y < self.height):
            return False
        return self.grid[y][x] == PASSAGE

    def to_rows(self) -> List[List[int]]:
        """Row-major copy of the grid, ``height`` rows of ``width`` cells."""
        return [list(row) for row in self.grid]

    def info(self) -> dict:
        return {
            'goalX': self.goal[0],
            'goalY': self.goal[1],
            'width': self.width,
            'height': self.height,
        }

    def render(self) -> str:
        lines = []
        for y, row in enumerate(self.grid):
            chars = []
            for x, cell in enumerate(row):
                if (x, y) == START:
                    chars.append('S')
                elif (x, y) == self.goal:
                    chars.append('G')
                else:
                    chars.append('#' if cell == WALL else ' ')
            lines.append(''.join(chars))
        return '\n'.join(lines)


def normalize_dimensions(width, height) -> Tuple[int, int]:
    """Coerce configured dimensions into something the generator accepts.

    Even values are bumped to the next odd number. Anything unparsable or
    below the minimum falls back to the default size.
    """
    try:
        w, h = int(width), int(height)
    except (TypeError, ValueError):
        logger.info(f"Invalid maze size {width!r}x{height!r}, using default {DEFAULT_SIZE[0]}x{DEFAULT_SIZE[1]}")
        return DEFAULT_SIZE
    if w < MIN_DIMENSION or h < MIN_DIMENSION:
        logger.info(f"Maze size {w}x{h} below minimum, using default {DEFAULT_SIZE[0]}x{DEFAULT_SIZE[1]}")
        return DEFAULT_SIZE
    if w % 2 == 0:
        w += 1
    if h % 2 == 0:
        h += 1
    return w, h


def resolve_size(preset: Optional[str], width=None, height=None) -> Tuple[int, int]:
    """Map a size preset name (or 'custom' plus dimensions) to maze dimensions."""
    name = (preset or '').strip().lower()
    if name == 'custom':
        return normalize_dimensions(width, height)
    return SIZE_PRESETS.get(name, DEFAULT_SIZE)


def _shuffled(rng: random.Random):
    dirs = list(_DIRECTIONS)
    rng.shuffle(dirs)
    return iter(dirs)


def generate_maze(width: int, height: int, rng: Optional[random.Random] = None) -> Maze:
    if width % 2 == 0 or height % 2 == 0:
        raise ValueError(f"maze dimensions must be odd, got {width}x{height}")
    if width < MIN_DIMENSION or height < MIN_DIMENSION:
        raise ValueError(f"maze dimensions must be at least {MIN_DIMENSION}, got {width}x{height}")
    rng = rng or random.Random()
    logger.info(f"Generating maze {width}x{height}...")

    grid = [[WALL] * width for _ in range(height)]
    sx, sy = START
    grid[sy][sx] = PASSAGE
    # Each frame keeps its own shuffled direction iterator so that returning
    # to it resumes where the walk left off.
    stack = [(sx, sy, _shuffled(rng))]
    while stack:
        x, y, dirs = stack[-1]
        for dx, dy in dirs:
            nx, ny = x + dx, y + dy
            if 0 < nx < width - 1 and 0 < ny < height - 1 and grid[ny][nx] == WALL:
                grid[y + dy // 2][x + dx // 2] = PASSAGE
                grid[ny][nx] = PASSAGE
                stack.append((nx, ny, _shuffled(rng)))
                break
        else:
            stack.pop()

    goal_x, goal_y = width - 2, height - 2
    if goal_x % 2 == 0:
        goal_x -= 1
    if goal_y % 2 == 0:
        goal_y -= 1
    grid[goal_y][goal_x] = PASSAGE
    logger.info(f"Maze generated. Goal at ({goal_x}, {goal_y})")

    return Maze(
        width=width,
        height=height,
        grid=tuple(tuple(row) for row in grid),
        goal=(goal_x, goal_y),
    )
