# algorithms/reachability.py
from __future__ import annotations
from collections import deque

from .grid import CellType, DIRECTIONS, Grid, Vec


def has_path(grid: Grid, start: Vec, end: Vec) -> bool:
    """4-neighbour BFS over non-wall cells, stopping as soon as `end` is seen."""
    if start == end:
        return True
    H, W = len(grid), len(grid[0])
    seen = [[False]*W for _ in range(H)]
    seen[start[1]][start[0]] = True
    q = deque([start])
    while q:
        x, y = q.popleft()
        for dx, dy in DIRECTIONS:
            nx, ny = x+dx, y+dy
            if not (0 <= nx < W and 0 <= ny < H) or seen[ny][nx]:
                continue
            if grid[ny][nx] == CellType.WALL:
                continue
            if (nx, ny) == end:
                return True
            seen[ny][nx] = True
            q.append((nx, ny))
    return False
