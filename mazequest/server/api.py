"""FastAPI application definition"""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field

from .controller import GameController


class MoveRequest(BaseModel):
    dx: int = Field(..., ge=-1, le=1)
    dy: int = Field(..., ge=-1, le=1)


def create_app(
    controller: GameController,
    *,
    static_dir: Optional[Path] = None,
) -> FastAPI:
    """Build the FastAPI instance around a controller."""
    @asynccontextmanager
    async def lifespan(_: FastAPI):
        yield
        controller.close()

    app = FastAPI(
        title=f"{controller.settings.title} API",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.controller = controller

    # the renderer may be served from anywhere
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/ping")
    async def ping():
        return {"status": "ok"}

    @app.get("/api/state")
    async def get_state():
        return controller.get_state_payload()

    @app.get("/api/maze")
    async def get_maze():
        return controller.get_maze_payload()

    @app.post("/api/game/start")
    async def start_game():
        return controller.start_game()

    @app.post("/api/game/restart")
    async def restart_game():
        return controller.restart_game()

    @app.post("/api/game/continue")
    async def continue_game():
        try:
            return controller.continue_to_infinite()
        except ValueError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc

    @app.post("/api/level/skip")
    async def skip_level():
        return controller.skip_level()

    @app.post("/api/player/move")
    async def move_player(payload: MoveRequest):
        try:
            return controller.move_player(payload.dx, payload.dy)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    @app.post("/api/ui/mute")
    async def toggle_mute():
        return controller.toggle_mute()

    @app.post("/api/ui/minimap")
    async def toggle_minimap():
        return controller.toggle_minimap()

    if static_dir and static_dir.exists():
        app.mount(
            "/web",
            StaticFiles(directory=static_dir, html=True),
            name="frontend",
        )

        @app.get("/")
        async def root():
            index_file = static_dir / "index.html"
            if not index_file.exists():
                raise HTTPException(status_code=404, detail="index.html not found")
            return FileResponse(index_file)

    return app
