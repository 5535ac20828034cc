import asyncio
import json
import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

import config as C
from game import SessionManager
from maze import GenerationConfig, MazeConfigError, MazeGenerator

logging.basicConfig(level=logging.INFO)
log = logging.getLogger("maze-game")

app = FastAPI(title="Shifting Maze Server", version="0.1.0")
sessions = SessionManager()

# Dev-friendly CORS; restrict origins in production.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health():
    return {"ok": True}


@app.get("/maze")
def maze(grid_size: int = C.GRID_SIZE, path_density: float = C.PATH_DENSITY, seed: Optional[int] = None):
    """One freshly generated maze."""
    try:
        cfg = GenerationConfig(grid_size=grid_size, path_density=path_density)
    except MazeConfigError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return MazeGenerator(cfg, seed=seed).generate().to_dict()


def _safe_json_loads(raw: str) -> Dict[str, Any]:
    try:
        data = json.loads(raw)
        return data if isinstance(data, dict) else {}
    except ValueError:
        return {}


@app.websocket("/ws")
async def ws_endpoint(ws: WebSocket):
    await ws.accept()
    player_id = f"p-{uuid.uuid4().hex[:10]}"

    async def send(payload: dict) -> None:
        await ws.send_text(json.dumps(payload))

    try:
        # 1) Require JOIN first (with timeout)
        try:
            raw = await asyncio.wait_for(ws.receive_text(), timeout=10)
        except asyncio.TimeoutError:
            await send({"type": "error", "message": "JOIN timeout"})
            await ws.close(code=1000)
            return

        msg = _safe_json_loads(raw)
        if msg.get("type") != "join":
            await send({"type": "error", "message": "First message must be {type:'join'}"})
            await ws.close(code=1003)
            return

        try:
            cfg = GenerationConfig.from_dict(msg)
            interval = float(msg.get("interval", C.INTERVAL_TIME))
            seed = msg.get("seed")
            if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
                raise MazeConfigError(f"seed must be an integer, got {seed!r}")
        except (TypeError, ValueError) as e:
            await send({"type": "error", "message": str(e)})
            await ws.close(code=1003)
            return

        # 2) Create the session and start the regeneration loop
        session = sessions.create(
            MazeGenerator(cfg, seed=seed),
            interval_time=interval,
            player_id=player_id,
        )
        await send(session.start_frame())
        session.start(send)
        log.info("Player %s started session (size=%d, density=%.2f)", player_id, cfg.grid_size, cfg.path_density)

        # 3) Main loop: apply client messages to the session
        while True:
            raw = await ws.receive_text()
            msg = _safe_json_loads(raw)
            if not msg:
                await send({"type": "error", "message": "Invalid JSON"})
                continue

            t = msg.get("type")
            if t == "input":
                session.try_move(msg.get("dir"))
                await send({"type": "state", "state": session.state_dict()})
            elif t == "restart":
                session.restart()
                await send(session.maze_frame())
            elif t == "interval":
                try:
                    session.set_interval(float(msg.get("seconds")))
                except (TypeError, ValueError):
                    await send({"type": "error", "message": "interval needs numeric 'seconds'"})
                    continue
                await send({"type": "state", "state": session.state_dict()})
            else:
                await send({"type": "error", "message": f"Unknown type: {t}"})

    except WebSocketDisconnect:
        log.info("Player %s disconnected", player_id)
        sessions.close(player_id)

    except Exception as e:
        log.exception("Server error for player %s: %s", player_id, e)
        sessions.close(player_id)
        try:
            await send({"type": "error", "message": f"Server error: {type(e).__name__}"})
            await ws.close(code=1011)
        except (RuntimeError, WebSocketDisconnect):
            pass
