# algorithms/strategies.py
from __future__ import annotations
import random
from enum import Enum
from typing import Callable, Dict

from .grid import Grid, Vec, carve
import config as C

# All routes run from the bottom-left start towards the top-right end:
# x only grows, y only shrinks.


def carve_up_first(grid: Grid, start: Vec, end: Vec, rng: random.Random) -> None:
    """Go up part of the way, then right to the end column."""
    x, y = start
    ex, ey = end
    up_steps = round((y - ey) * rng.uniform(*C.UP_FIRST_RANGE))
    for _ in range(up_steps):
        if y <= ey:
            break
        y -= 1
        if rng.random() < C.UP_FIRST_CARVE_P:
            carve(grid, x, y)
    while x < ex:
        x += 1
        if rng.random() < C.UP_FIRST_CARVE_P:
            carve(grid, x, y)


def carve_diagonal(grid: Grid, start: Vec, end: Vec, rng: random.Random) -> None:
    x, y = start
    ex, ey = end
    while x < ex or y > ey:
        if x < ex and y > ey and rng.random() < C.DIAGONAL_MIX_P:
            if rng.random() < 0.5:
                x += 1
            else:
                y -= 1
        elif x < ex:
            x += 1
        else:
            y -= 1
        if rng.random() < C.DIAGONAL_CARVE_P:
            carve(grid, x, y)


def carve_zigzag(grid: Grid, start: Vec, end: Vec, rng: random.Random) -> None:
    """Climb with short left/right runs in between, then finish along the top row."""
    x, y = start
    ex, ey = end
    width = len(grid[0])
    direction = 1  # 1 right, -1 left

    while y > ey:
        if rng.random() < C.ZIGZAG_UP_P:
            y -= 1
            carve(grid, x, y)

        steps = 1 + rng.randint(0, C.ZIGZAG_RUN_EXTRA_MAX)
        for _ in range(steps):
            nx = x + direction
            if 0 <= nx < width:
                x = nx
                if rng.random() < C.ZIGZAG_SIDE_CARVE_P:
                    carve(grid, x, y)
        direction *= -1

    while x < ex:
        x += 1
        if rng.random() < C.ZIGZAG_FINISH_CARVE_P:
            carve(grid, x, y)


def carve_fallback_path(grid: Grid, start: Vec, end: Vec) -> None:
    """Deterministic staircase: alternate x/y while both need progress, carve every cell."""
    x, y = start
    ex, ey = end
    take_x = True
    while x < ex or y > ey:
        if x < ex and y > ey:
            if take_x:
                x += 1
            else:
                y -= 1
            take_x = not take_x
        elif x < ex:
            x += 1
        else:
            y -= 1
        carve(grid, x, y)


Carver = Callable[[Grid, Vec, Vec, random.Random], None]


class PathStrategy(Enum):
    UP_FIRST = "up-first"
    DIAGONAL = "diagonal"
    ZIGZAG = "zigzag"

    def carve(self, grid: Grid, start: Vec, end: Vec, rng: random.Random) -> None:
        _CARVERS[self](grid, start, end, rng)

    @classmethod
    def pick(cls, rng: random.Random) -> "PathStrategy":
        return rng.choice(list(cls))


_CARVERS: Dict[PathStrategy, Carver] = {
    PathStrategy.UP_FIRST: carve_up_first,
    PathStrategy.DIAGONAL: carve_diagonal,
    PathStrategy.ZIGZAG: carve_zigzag,
}
