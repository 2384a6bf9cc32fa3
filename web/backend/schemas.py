import base64
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from playlist_player.domain.library.models import Track
from playlist_player.domain.playback.session import PlaybackSnapshot


class PictureInfo(BaseModel):
    """Embedded cover art, base64 encoded for data URLs."""
    format: str
    data: str

    model_config = {"frozen": True}


class SongInfo(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    filename: str
    filepath: str
    relative_path: str
    title: str
    artist: str
    album: str
    duration: float = 0
    picture: Optional[PictureInfo] = None

    @classmethod
    def from_track(cls, track: Track) -> "SongInfo":
        picture = None
        if track.cover_art:
            picture = PictureInfo(
                format=track.cover_art.mime_type,
                data=base64.b64encode(track.cover_art.data).decode("ascii"),
            )
        return cls(
            filename=track.filename,
            filepath=track.file_path,
            relative_path=track.relative_path,
            title=track.title,
            artist=track.artist,
            album=track.album,
            duration=track.duration,
            picture=picture,
        )


class PlaybackStateResponse(BaseModel):
    """Current playback state as sent to every client."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    current_playlist: Optional[str] = None
    current_song: Optional[SongInfo] = None
    is_playing: bool = False
    is_paused: bool = False
    should_restart: bool = False
    playlists: list[str] = []
    played_songs: list[str] = []
    total_songs: int = 0

    @classmethod
    def from_snapshot(cls, snapshot: PlaybackSnapshot) -> "PlaybackStateResponse":
        return cls(
            current_playlist=snapshot.current_playlist,
            current_song=SongInfo.from_track(snapshot.current_track) if snapshot.current_track else None,
            is_playing=snapshot.is_playing,
            is_paused=snapshot.is_paused,
            should_restart=snapshot.should_restart,
            playlists=list(snapshot.playlists),
            played_songs=list(snapshot.played_tracks),
            total_songs=snapshot.total_tracks,
        )


class PlayerStatus(BaseModel):
    """Whether at least one player surface is connected."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    players_connected: bool


class SwitchPlaylistRequest(BaseModel):
    name: str


class ClientCommand(BaseModel):
    """Command message received over the sync socket."""
    type: str
    data: Optional[str] = None


class ErrorInfo(BaseModel):
    message: str
    code: str
