# maze.py
from __future__ import annotations
import logging
import random
import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import config as C
from algorithms.grid import CellType, DIRECTIONS, Grid, Vec, carve, in_bounds
from algorithms.reachability import has_path
from algorithms.strategies import PathStrategy, carve_fallback_path

log = logging.getLogger(__name__)

__all__ = [
    "CellType",
    "Cell",
    "GenerationConfig",
    "Maze",
    "MazeConfigError",
    "MazeGenerator",
    "Position",
    "generate_maze",
]

_CHARS = {
    CellType.WALL: "#",
    CellType.PATH: ".",
    CellType.START: "S",
    CellType.END: "E",
}


class MazeConfigError(ValueError):
    """Raised for a grid size or path density the generator cannot work with."""


@dataclass(frozen=True)
class Position:
    x: int
    y: int

    def as_tuple(self) -> Vec:
        return (self.x, self.y)


@dataclass(frozen=True)
class Cell:
    type: CellType
    position: Position


@dataclass(frozen=True)
class GenerationConfig:
    grid_size: int = C.GRID_SIZE
    path_density: float = C.PATH_DENSITY

    def __post_init__(self) -> None:
        if isinstance(self.grid_size, bool) or not isinstance(self.grid_size, int):
            raise MazeConfigError(f"grid_size must be an integer, got {self.grid_size!r}")
        if self.grid_size < 1:
            raise MazeConfigError(f"grid_size must be >= 1, got {self.grid_size}")
        if isinstance(self.path_density, bool) or not isinstance(self.path_density, (int, float)):
            raise MazeConfigError(f"path_density must be a number, got {self.path_density!r}")
        if not 0.0 <= self.path_density <= 1.0:
            raise MazeConfigError(f"path_density must be within [0, 1], got {self.path_density}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GenerationConfig":
        """Build from loosely typed input (JSON message, query string). Missing keys use defaults."""
        raw_size = data.get("grid_size", C.GRID_SIZE)
        raw_density = data.get("path_density", C.PATH_DENSITY)
        if isinstance(raw_size, bool) or isinstance(raw_density, bool):
            raise MazeConfigError(f"invalid maze config: grid_size={raw_size!r}, path_density={raw_density!r}")
        try:
            size = int(raw_size)
            density = float(raw_density)
        except (TypeError, ValueError):
            raise MazeConfigError(f"invalid maze config: grid_size={raw_size!r}, path_density={raw_density!r}")
        if isinstance(raw_size, float) and size != raw_size:
            raise MazeConfigError(f"grid_size must be an integer, got {raw_size!r}")
        return cls(grid_size=size, path_density=density)

    @property
    def start(self) -> Vec:
        return (0, self.grid_size - 1)

    @property
    def end(self) -> Vec:
        return (self.grid_size - 1, 0)


class Maze:
    """Immutable snapshot of a generated grid. Index as maze[y][x]."""

    def __init__(self, cells: Sequence[Sequence[Cell]]):
        self._cells: Tuple[Tuple[Cell, ...], ...] = tuple(tuple(row) for row in cells)
        self.size = len(self._cells)

    @classmethod
    def from_grid(cls, grid: Grid) -> "Maze":
        return cls([
            [Cell(type=t, position=Position(x, y)) for x, t in enumerate(row)]
            for y, row in enumerate(grid)
        ])

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[str]]) -> "Maze":
        """Rebuild from the serialized form (rows of cell-type strings)."""
        return cls.from_grid([[CellType(v) for v in row] for row in rows])

    @property
    def start(self) -> Position:
        return Position(0, self.size - 1)

    @property
    def end(self) -> Position:
        return Position(self.size - 1, 0)

    def __getitem__(self, y: int) -> Tuple[Cell, ...]:
        return self._cells[y]

    def __iter__(self) -> Iterator[Tuple[Cell, ...]]:
        return iter(self._cells)

    def __len__(self) -> int:
        return self.size

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Maze):
            return NotImplemented
        return self._cells == other._cells

    def __hash__(self) -> int:
        return hash(self._cells)

    def type_at(self, x: int, y: int) -> CellType:
        return self._cells[y][x].type

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def is_passable(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and self._cells[y][x].type != CellType.WALL

    def count(self, cell_type: CellType) -> int:
        return sum(1 for row in self._cells for c in row if c.type == cell_type)

    def types(self) -> List[List[CellType]]:
        """Fresh mutable copy of the cell types, row-major."""
        return [[c.type for c in row] for row in self._cells]

    def is_solvable(self) -> bool:
        return has_path(self.types(), self.start.as_tuple(), self.end.as_tuple())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "size": self.size,
            "start": list(self.start.as_tuple()),
            "end": list(self.end.as_tuple()),
            "grid": [[c.type.value for c in row] for row in self._cells],
        }

    def render(self, player: Optional[Vec] = None) -> str:
        lines = []
        for y, row in enumerate(self._cells):
            chars = [_CHARS[c.type] for c in row]
            if player is not None and player[1] == y:
                chars[player[0]] = "@"
            lines.append("".join(chars))
        return "\n".join(lines)


# ----------------- Carving stages -----------------
# Each stage mutates the working grid in place and only ever promotes WALL -> PATH.


def new_grid(size: int) -> Grid:
    """All walls, START bottom-left, END top-right. With size 1 both share (0, 0) and END wins."""
    grid: Grid = [[CellType.WALL for _ in range(size)] for _ in range(size)]
    grid[size - 1][0] = CellType.START
    grid[0][size - 1] = CellType.END
    return grid


def carve_random_walks(grid: Grid, rng: random.Random, start: Vec) -> None:
    size = len(grid)
    num_walks = size // C.WALK_DIVISOR + rng.randint(0, C.WALK_EXTRA_MAX)

    for _ in range(num_walks):
        x, y = start
        steps = size // 3 + rng.randint(0, size // 2)
        for _ in range(steps):
            if rng.random() < C.WALK_CARVE_P:
                carve(grid, x, y)

            options = DIRECTIONS
            # bias towards the goal: right first, then up
            if rng.random() < C.WALK_GOAL_BIAS_P:
                if x < size - 1:
                    options = ((1, 0),)
                elif y > 0:
                    options = ((0, -1),)

            dx, dy = rng.choice(options)
            if in_bounds(grid, x + dx, y + dy):
                x, y = x + dx, y + dy


def scatter_paths(grid: Grid, rng: random.Random, density: float, start: Vec, end: Vec) -> None:
    p = density * C.NOISE_FACTOR
    for y, row in enumerate(grid):
        for x in range(len(row)):
            if (x, y) in (start, end):
                continue
            if rng.random() < p:
                carve(grid, x, y)


def apply_path_strategy(grid: Grid, rng: random.Random, start: Vec, end: Vec) -> Optional[PathStrategy]:
    """Maybe carve one directed route. Returns the strategy used, if any."""
    if rng.random() >= C.STRATEGY_P:
        return None
    strategy = PathStrategy.pick(rng)
    strategy.carve(grid, start, end, rng)
    return strategy


def ensure_connected(grid: Grid, rng: random.Random, start: Vec, end: Vec) -> bool:
    """Connect start and end if needed. Returns True when any repair was carved."""
    if has_path(grid, start, end):
        return False
    strategy = PathStrategy.pick(rng)
    strategy.carve(grid, start, end, rng)
    if not has_path(grid, start, end):
        log.debug("%s left the maze disconnected, carving staircase", strategy.value)
        carve_fallback_path(grid, start, end)
    return True


def add_dead_ends(grid: Grid, rng: random.Random) -> None:
    size = len(grid)
    count = size // C.DEAD_END_DIVISOR + rng.randint(0, C.DEAD_END_EXTRA_MAX)
    for _ in range(count):
        x = rng.randint(0, size - 1)
        y = rng.randint(0, size - 1)
        if grid[y][x] != CellType.PATH:
            continue
        dx, dy = rng.choice(DIRECTIONS)
        nx, ny = x + dx, y + dy
        if in_bounds(grid, nx, ny) and grid[ny][nx] == CellType.WALL and rng.random() < C.DEAD_END_CARVE_P:
            grid[ny][nx] = CellType.PATH


class MazeGenerator:
    """
    Sparse maze with a guaranteed START -> END route.

    Owns its random source; pass `seed` for reproducible output or `rng` to
    inject one. Calls on a shared instance are serialized.
    """

    def __init__(
        self,
        config: Optional[GenerationConfig] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config if config is not None else GenerationConfig()
        self.rng = rng if rng is not None else random.Random(seed)
        self._lock = threading.Lock()

    def generate(self, config: Optional[GenerationConfig] = None) -> Maze:
        cfg = config if config is not None else self.config
        with self._lock:
            grid = self.build_grid(cfg)
        return Maze.from_grid(grid)

    def build_grid(self, cfg: GenerationConfig) -> Grid:
        rng = self.rng
        start, end = cfg.start, cfg.end
        grid = new_grid(cfg.grid_size)

        carve_random_walks(grid, rng, start)
        scatter_paths(grid, rng, cfg.path_density, start, end)
        apply_path_strategy(grid, rng, start, end)
        if ensure_connected(grid, rng, start, end):
            log.debug("maze %dx%d needed a repair pass", cfg.grid_size, cfg.grid_size)
        add_dead_ends(grid, rng)
        return grid


def generate_maze(grid_size: int = C.GRID_SIZE, path_density: float = C.PATH_DENSITY, seed: Optional[int] = None) -> Maze:
    return MazeGenerator(GenerationConfig(grid_size, path_density), seed=seed).generate()
