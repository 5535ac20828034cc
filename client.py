import asyncio, json, websockets, sys

from maze import Maze

URI = "ws://127.0.0.1:8080/ws"

KEYS = {"w": "U", "s": "D", "a": "L", "d": "R"}


def describe(data: dict, last_maze=None):
    """Text to print for one server frame, plus the maze to keep for the next frame."""
    t = data.get("type")
    if t in ("start", "maze"):
        maze = Maze.from_rows(data["maze"]["grid"])
        state = data.get("state", {})
        player = tuple(state.get("player", maze.start.as_tuple()))
        header = f"-- maze #{state.get('regenerations', 0)} (every {state.get('interval')}s)"
        return header + "\n" + maze.render(player=player), maze
    if t == "state":
        state = data.get("state", {})
        player = tuple(state.get("player", (0, 0)))
        if state.get("won"):
            return "You reached the exit! (r to restart)", last_maze
        if last_maze is not None:
            return last_maze.render(player=player), last_maze
        return f"player={list(player)}", last_maze
    return f"<< {data}", last_maze


async def main(name: str):
    async with websockets.connect(URI) as ws:
        await ws.send(json.dumps({"type": "join", "name": name}))

        async def reader():
            last_maze = None
            while True:
                msg = await ws.recv()
                text, last_maze = describe(json.loads(msg), last_maze)
                print(text)

        async def writer():
            while True:
                key = await asyncio.to_thread(input, f"[{name}] move (w/a/s/d, r restart): ")
                key = key.strip().lower()
                if key in KEYS:
                    await ws.send(json.dumps({"type": "input", "dir": KEYS[key]}))
                elif key == "r":
                    await ws.send(json.dumps({"type": "restart"}))

        await asyncio.gather(reader(), writer())

if __name__ == "__main__":
    name = sys.argv[1] if len(sys.argv) > 1 else "P"
    asyncio.run(main(name))
