# algorithms/grid.py
from __future__ import annotations
from enum import Enum
from typing import List, Tuple

Vec = Tuple[int, int]


class CellType(str, Enum):
    WALL = "wall"
    PATH = "path"
    START = "start"
    END = "end"


Grid = List[List[CellType]]

# up, right, down, left
DIRECTIONS: Tuple[Vec, ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))


def in_bounds(grid: Grid, x: int, y: int) -> bool:
    return 0 <= y < len(grid) and 0 <= x < len(grid[0])


def carve(grid: Grid, x: int, y: int) -> bool:
    """Promote a WALL to PATH. START/END/PATH and out-of-range cells are left alone."""
    if in_bounds(grid, x, y) and grid[y][x] == CellType.WALL:
        grid[y][x] = CellType.PATH
        return True
    return False
