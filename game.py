from __future__ import annotations

import asyncio
import logging
import time
import uuid
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

import config as C
from maze import CellType, Maze, MazeGenerator

log = logging.getLogger(__name__)

Vec = Tuple[int, int]
Send = Callable[[Dict[str, Any]], Awaitable[None]]

DIRS: Dict[str, Vec] = {
    "U": (0, -1),
    "D": (0, 1),
    "L": (-1, 0),
    "R": (1, 0),
}


def clamp_interval(seconds: float) -> float:
    return max(float(C.MIN_INTERVAL), min(float(C.MAX_INTERVAL), float(seconds)))


class MazeSession:
    """
    Single-player session. The maze is swapped for a fresh one every
    `interval_time` seconds while the player stays where they are, even if
    that cell has just become a wall.
    """

    def __init__(
        self,
        session_id: str,
        generator: MazeGenerator,
        interval_time: float = C.INTERVAL_TIME,
        tick_hz: int = C.TICK_HZ,
    ):
        self.session_id = session_id
        self.generator = generator
        self.interval_time = clamp_interval(interval_time)
        self.tick_hz = tick_hz

        self.maze: Maze = generator.generate()
        self.player: Vec = self.maze.start.as_tuple()
        self.won = False
        self.regenerations = 0

        self._next_change = time.monotonic() + self.interval_time
        self._task: Optional[asyncio.Task] = None
        self._ended = False

    # ----------------- Maze / player -----------------

    def regenerate(self) -> Maze:
        self.maze = self.generator.generate()
        self.regenerations += 1
        self._next_change = time.monotonic() + self.interval_time
        x, y = self.player
        log.debug(
            "session %s: maze #%d, player at %s on %s",
            self.session_id, self.regenerations, self.player, self.maze.type_at(x, y).value,
        )
        return self.maze

    def try_move(self, direction: str) -> bool:
        """Apply a U/D/L/R move. Returns True if the player moved."""
        if self.won:
            return False
        d = DIRS.get(str(direction or "").upper())
        if d is None:
            return False

        x, y = self.player
        nx, ny = x + d[0], y + d[1]
        if not self.maze.in_bounds(nx, ny):
            return False
        if self.maze.type_at(nx, ny) == CellType.WALL:
            return False

        self.player = (nx, ny)
        if self.player == self.maze.end.as_tuple():
            self.won = True
            log.info("session %s won after %d regenerations", self.session_id, self.regenerations)
        return True

    def restart(self) -> Maze:
        self.won = False
        self.regenerations = 0
        self.maze = self.generator.generate()
        self.player = self.maze.start.as_tuple()
        self._next_change = time.monotonic() + self.interval_time
        return self.maze

    def set_interval(self, seconds: float) -> float:
        self.interval_time = clamp_interval(seconds)
        self._next_change = min(self._next_change, time.monotonic() + self.interval_time)
        return self.interval_time

    # ----------------- Views -----------------

    def state_dict(self) -> dict:
        return {
            "player": list(self.player),
            "won": self.won,
            "interval": self.interval_time,
            "regenerations": self.regenerations,
        }

    def maze_frame(self) -> dict:
        return {"type": "maze", "maze": self.maze.to_dict(), "state": self.state_dict()}

    def start_frame(self) -> dict:
        return {
            "type": "start",
            "session_id": self.session_id,
            "maze": self.maze.to_dict(),
            "state": self.state_dict(),
        }

    # ----------------- Regeneration loop -----------------

    def start(self, send: Send) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self.run(send))

    async def run(self, send: Send) -> None:
        dt = 1.0 / float(self.tick_hz)
        try:
            while not self._ended:
                if not self.won and time.monotonic() >= self._next_change:
                    self.regenerate()
                    await send(self.maze_frame())
                await asyncio.sleep(dt)
        except asyncio.CancelledError:
            return
        except Exception as e:
            log.exception("session %s loop crashed", self.session_id)
            self._ended = True
            try:
                await send({"type": "error", "message": f"Session crashed: {type(e).__name__}"})
            except Exception:
                pass

    def stop(self) -> None:
        self._ended = True
        if self._task:
            self._task.cancel()
            self._task = None


class SessionManager:
    """One session per connected player."""

    def __init__(self):
        self.sessions: Dict[str, MazeSession] = {}

    def create(
        self,
        generator: MazeGenerator,
        interval_time: float = C.INTERVAL_TIME,
        player_id: Optional[str] = None,
    ) -> MazeSession:
        session_id = player_id or f"s-{uuid.uuid4().hex[:8]}"
        self.close(session_id)
        session = MazeSession(session_id, generator, interval_time=interval_time)
        self.sessions[session_id] = session
        return session

    def get(self, session_id: str) -> Optional[MazeSession]:
        return self.sessions.get(session_id)

    def close(self, session_id: str) -> None:
        session = self.sessions.pop(session_id, None)
        if session:
            session.stop()
