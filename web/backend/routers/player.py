"""Player router for playback control and read endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from playlist_player.domain.exceptions import (
    InvalidCommandError,
    InvalidStateError,
    PlayerError,
    PlaylistNotFoundError,
)

from ..deps import get_player_service
from ..player_service import PlayerService, state_payload
from ..schemas import PlaybackStateResponse, PlayerStatus, SwitchPlaylistRequest

router = APIRouter()


def _status_for(error: PlayerError) -> int:
    if isinstance(error, PlaylistNotFoundError):
        return 404
    if isinstance(error, InvalidStateError):
        return 409
    if isinstance(error, InvalidCommandError):
        return 400
    return 500


async def _run(service: PlayerService, command: str, data: Optional[str] = None) -> dict:
    try:
        snapshot = await service.execute(command, data)
    except PlayerError as e:
        logger.warning(f"Command {command} rejected: {e}")
        raise HTTPException(_status_for(e), str(e))
    return state_payload(snapshot)


@router.get("/playlists", response_model=list[str])
async def get_playlists(service: PlayerService = Depends(get_player_service)):
    """Sorted playlist names."""
    return service.playlists()


@router.get("/current-state", response_model=PlaybackStateResponse, response_model_by_alias=True)
async def get_current_state(service: PlayerService = Depends(get_player_service)):
    """Current playback state. Reading it consumes the restart flag."""
    return await service.current_state()


@router.get("/player-status", response_model=PlayerStatus, response_model_by_alias=True)
async def get_player_status(service: PlayerService = Depends(get_player_service)):
    return service.player_status()


@router.post("/player/switch-playlist")
async def switch_playlist(request: SwitchPlaylistRequest, service: PlayerService = Depends(get_player_service)):
    return await _run(service, "switch-playlist", request.name)


@router.post("/player/next")
async def next_song(service: PlayerService = Depends(get_player_service)):
    return await _run(service, "next-song")


@router.post("/player/previous")
async def previous_song(service: PlayerService = Depends(get_player_service)):
    return await _run(service, "previous-song")


@router.post("/player/restart")
async def restart_song(service: PlayerService = Depends(get_player_service)):
    return await _run(service, "restart-song")


@router.post("/player/toggle-play-pause")
async def toggle_play_pause(service: PlayerService = Depends(get_player_service)):
    return await _run(service, "toggle-play-pause")
