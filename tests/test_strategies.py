import random

import pytest

from algorithms.grid import CellType
from algorithms.reachability import has_path
from algorithms.strategies import PathStrategy, carve_fallback_path
from maze import new_grid


class PassingRandom(random.Random):
    """Every probability check passes, every range draw takes its lower bound."""

    def random(self):
        return 0.0

    def randint(self, a, b):
        return a

    def uniform(self, a, b):
        return a

    def choice(self, seq):
        return seq[0]


def path_cells(grid):
    return {(x, y) for y, row in enumerate(grid) for x, t in enumerate(row) if t == CellType.PATH}


def ends(size):
    return (0, size - 1), (size - 1, 0)


def test_up_first_climbs_then_runs_right():
    grid = new_grid(5)
    start, end = ends(5)
    PathStrategy.UP_FIRST.carve(grid, start, end, PassingRandom())
    # round(4 * 0.5) = 2 steps up, then right along y=2
    assert path_cells(grid) == {(0, 3), (0, 2), (1, 2), (2, 2), (3, 2), (4, 2)}


def test_diagonal_with_every_roll_passing_goes_right_then_up():
    grid = new_grid(5)
    start, end = ends(5)
    PathStrategy.DIAGONAL.carve(grid, start, end, PassingRandom())
    assert path_cells(grid) == {(1, 4), (2, 4), (3, 4), (4, 4), (4, 3), (4, 2), (4, 1)}
    assert has_path(grid, start, end)


def test_zigzag_alternates_sides_on_the_way_up():
    grid = new_grid(5)
    start, end = ends(5)
    PathStrategy.ZIGZAG.carve(grid, start, end, PassingRandom())
    assert path_cells(grid) == {
        (0, 3), (1, 3),
        (1, 2), (0, 2),
        (0, 1), (1, 1),
        (1, 0), (0, 0), (2, 0), (3, 0),
    }
    assert has_path(grid, start, end)


@pytest.mark.parametrize("strategy", list(PathStrategy))
@pytest.mark.parametrize("size", [1, 2, 3, 8, 25])
def test_strategies_only_promote_walls(strategy, size):
    rng = random.Random(size * 31 + len(strategy.value))
    start, end = ends(size)
    for _ in range(20):
        grid = new_grid(size)
        for y in range(size):
            for x in range(size):
                if grid[y][x] == CellType.WALL and rng.random() < 0.3:
                    grid[y][x] = CellType.PATH
        before = [row[:] for row in grid]
        strategy.carve(grid, start, end, rng)
        for y in range(size):
            for x in range(size):
                if before[y][x] != CellType.WALL:
                    assert grid[y][x] == before[y][x]
                else:
                    assert grid[y][x] in (CellType.WALL, CellType.PATH)


@pytest.mark.parametrize("size", [1, 2, 3, 4, 9, 30])
def test_fallback_always_connects(size):
    grid = new_grid(size)
    start, end = ends(size)
    carve_fallback_path(grid, start, end)
    assert has_path(grid, start, end)
    assert grid[start[1]][start[0]] in (CellType.START, CellType.END)
    assert grid[end[1]][end[0]] == CellType.END
    # a monotone staircase touches exactly the Manhattan distance worth of cells
    assert len(path_cells(grid)) == max(0, 2 * (size - 1) - 1)


def test_fallback_staircase_shape():
    grid = new_grid(4)
    carve_fallback_path(grid, (0, 3), (3, 0))
    assert path_cells(grid) == {(1, 3), (1, 2), (2, 2), (2, 1), (3, 1)}


def test_pick_draws_from_all_strategies():
    rng = random.Random(7)
    picked = {PathStrategy.pick(rng) for _ in range(200)}
    assert picked == set(PathStrategy)


class RecordingRandom(random.Random):
    def __init__(self, seed):
        super().__init__(seed)
        self.ranges = []

    def randint(self, a, b):
        self.ranges.append((a, b))
        return super().randint(a, b)


def test_zigzag_side_runs_span_one_to_three_cells():
    rng = RecordingRandom(5)
    grid = new_grid(12)
    start, end = ends(12)
    PathStrategy.ZIGZAG.carve(grid, start, end, rng)
    assert rng.ranges
    assert set(rng.ranges) == {(0, 2)}
