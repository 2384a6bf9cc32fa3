from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from playlist_player import __version__
from playlist_player.core.config import Config, load_config

from .player_service import PlayerService
from .routers import live, player


def create_app(config: Optional[Config] = None, service: Optional[PlayerService] = None) -> FastAPI:
    """Build the API app around one player service.

    Run with: uvicorn --factory web.backend.main:create_app
    """
    config = config or load_config()
    service = service or PlayerService.from_config(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await service.startup()
        try:
            yield
        finally:
            await service.shutdown()

    app = FastAPI(title="Playlist Player API", version=__version__, lifespan=lifespan)
    app.state.config = config
    app.state.player_service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.web.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(player.router, prefix="/api", tags=["player"])
    app.include_router(live.router, tags=["live"])

    # Audio files for player surfaces, addressed by relativePath
    app.mount(
        "/playlists",
        StaticFiles(directory=str(service.library_root), check_dir=False),
        name="playlists",
    )

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app
