"""
Playback session state machine.

The single source of truth for what is playing: the active playlist, its
shuffle cycle, the current track, play/pause status and the one-shot restart
signal. Every command validates before mutating and runs under one lock, so
concurrent callers never observe or produce a partially applied command.
"""

import random
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from loguru import logger

from ..exceptions import InvalidStateError, PlaylistNotFoundError
from ..library.metadata import format_duration, get_display_name
from ..library.models import Catalog, Track
from ..library.scanner import diff_catalogs
from .shuffle import ShuffleCycle, advance, new_cycle, retreat


@dataclass(frozen=True)
class PlaybackSnapshot:
    """Immutable view of the session at one instant."""

    current_playlist: Optional[str]
    current_track: Optional[Track]
    is_playing: bool
    is_paused: bool
    should_restart: bool
    playlists: tuple[str, ...]
    played_tracks: tuple[str, ...]
    total_tracks: int


@dataclass(frozen=True)
class ReloadResult:
    """Outcome of reconciling a freshly loaded catalog."""

    added: tuple[str, ...]
    removed: tuple[str, ...]
    active_playlist_removed: bool = False
    switched_to: Optional[str] = None


class PlaybackSession:
    """Authoritative playback state for the whole process."""

    def __init__(
        self,
        catalog: Optional[Catalog] = None,
        rng: Optional[random.Random] = None,
        on_playlist_selected: Optional[Callable[[str], None]] = None,
    ):
        self._lock = threading.RLock()
        self._rng = rng
        self._on_playlist_selected = on_playlist_selected
        self._catalog: Catalog = dict(catalog or {})
        self._cycle = ShuffleCycle()
        self._current_playlist: Optional[str] = None
        self._current_track: Optional[Track] = None
        self._is_playing = False
        self._is_paused = False
        self._should_restart = False

    # Read-only accessors

    @property
    def current_playlist(self) -> Optional[str]:
        with self._lock:
            return self._current_playlist

    @property
    def current_track(self) -> Optional[Track]:
        with self._lock:
            return self._current_track

    def get_playlists(self) -> list[str]:
        """Sorted catalog keys."""
        with self._lock:
            return sorted(self._catalog)

    def get_catalog(self) -> Catalog:
        with self._lock:
            return dict(self._catalog)

    # Commands

    def start(self, preferred: Optional[str] = None) -> Optional[str]:
        """Select the initial playlist after the first load.

        Uses `preferred` when it is in the catalog, otherwise the
        alphabetically first playlist. Returns the selected name, or None
        when the catalog is empty. The selection hook is not called, so a
        fallback at boot never replaces the stored playlist.
        """
        with self._lock:
            if not self._catalog:
                logger.info("No playlists available, starting stopped")
                return None
            name = preferred if preferred in self._catalog else sorted(self._catalog)[0]
            self._activate(name)

        logger.info(f"Starting with playlist: {name}")
        return name

    def switch_playlist(self, name: str) -> Track:
        """Activate a playlist with a freshly shuffled cycle.

        Raises:
            PlaylistNotFoundError: If the playlist is not in the catalog
        """
        with self._lock:
            if name not in self._catalog:
                raise PlaylistNotFoundError(name)

            self._activate(name)
            track = self._current_track

        self._playlist_selected(name)
        return track

    def next_song(self) -> Track:
        """Advance to the next unplayed track, reshuffling on exhaustion.

        Raises:
            InvalidStateError: If no playlist is active or it is empty
        """
        with self._lock:
            self._require_active_playlist()
            track = advance(self._cycle, self._rng)
            self._set_playing(track)

        logger.info(f"Next song: {get_display_name(track)} [{format_duration(track.duration)}]")
        return track

    def previous_song(self) -> Track:
        """Step the cursor back one track.

        Raises:
            InvalidStateError: If no playlist is active or it is empty
        """
        with self._lock:
            self._require_active_playlist()
            track = retreat(self._cycle)
            self._set_playing(track)

        logger.info(f"Previous song: {get_display_name(track)}")
        return track

    def restart_current_song(self) -> Track:
        """Ask players to restart the current track from the beginning.

        Raises:
            InvalidStateError: If there is no current track
        """
        with self._lock:
            if self._current_track is None:
                raise InvalidStateError("No current song to restart")
            self._is_playing = True
            self._is_paused = False
            self._should_restart = True
            track = self._current_track

        logger.info(f"Restarting song: {get_display_name(track)}")
        return track

    def toggle_play_pause(self) -> bool:
        """Pause when playing, otherwise resume. Returns the new paused flag.

        Never stops playback; stopped is only reachable through a reload that
        empties the library.

        Raises:
            InvalidStateError: If there is no current track
        """
        with self._lock:
            if self._current_track is None:
                raise InvalidStateError("No current song to play/pause")
            if self._is_playing and not self._is_paused:
                self._is_paused = True
            else:
                self._is_playing = True
                self._is_paused = False
            paused = self._is_paused

        logger.info("Music paused" if paused else "Music resumed")
        return paused

    def get_snapshot(self) -> PlaybackSnapshot:
        """Return the current state and consume the restart flag."""
        with self._lock:
            snapshot = PlaybackSnapshot(
                current_playlist=self._current_playlist,
                current_track=self._current_track,
                is_playing=self._is_playing,
                is_paused=self._is_paused,
                should_restart=self._should_restart,
                playlists=tuple(sorted(self._catalog)),
                played_tracks=tuple(sorted(self._cycle.played)),
                total_tracks=len(self._cycle.order),
            )
            self._should_restart = False
            return snapshot

    def apply_catalog(self, catalog: Catalog) -> ReloadResult:
        """Install a reloaded catalog and reconcile the active session.

        If the active playlist survives, the cycle and session are left as
        they are even when its tracks changed. Otherwise the session fails
        over to the alphabetically first playlist, or stops when none remain.
        """
        switched_to = None
        with self._lock:
            added, removed = diff_catalogs(self._catalog, catalog)
            self._catalog = dict(catalog)

            active = self._current_playlist
            active_removed = active is not None and active not in self._catalog
            if active_removed:
                logger.info(f'Current playlist "{active}" was removed')
                if self._catalog:
                    switched_to = sorted(self._catalog)[0]
                    self._activate(switched_to)
                else:
                    self._stop()

        if switched_to:
            self._playlist_selected(switched_to)

        if added:
            logger.info(f"Added playlists: {', '.join(added)}")
        if removed:
            logger.info(f"Removed playlists: {', '.join(removed)}")
        logger.info(f"Playlists reloaded: {len(catalog)} total")

        return ReloadResult(
            added=tuple(added),
            removed=tuple(removed),
            active_playlist_removed=active_removed,
            switched_to=switched_to,
        )

    def _playlist_selected(self, name: str) -> None:
        logger.info(f"Switched to playlist: {name}")
        if self._on_playlist_selected:
            try:
                self._on_playlist_selected(name)
            except Exception:
                logger.exception(f"Failed to record selected playlist: {name}")

    # Internals (caller holds the lock)

    def _activate(self, name: str) -> None:
        self._current_playlist = name
        self._cycle = new_cycle(self._catalog[name], self._rng)
        self._set_playing(self._cycle.current)

    def _set_playing(self, track: Track) -> None:
        self._current_track = track
        self._is_playing = True
        self._is_paused = False

    def _stop(self) -> None:
        self._current_playlist = None
        self._current_track = None
        self._cycle = ShuffleCycle()
        self._is_playing = False
        self._is_paused = False

    def _require_active_playlist(self) -> None:
        if not self._current_playlist or not self._cycle.order:
            raise InvalidStateError("No playlist selected or playlist is empty")
