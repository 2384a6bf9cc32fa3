"""Serialized command path between clients, the library watcher and the session.

Every state change (client commands, player identification, disconnects and
library reloads) runs under one asyncio lock and is followed by its
broadcast before the lock is released, so all clients see mutations in the
order they were applied.
"""

import asyncio
import concurrent.futures
from pathlib import Path
from typing import Any, Callable, Optional

from fastapi import WebSocket
from loguru import logger

from playlist_player.core.config import Config
from playlist_player.core.session_store import SessionStore
from playlist_player.domain.exceptions import InvalidCommandError, LibraryUnreadableError
from playlist_player.domain.library.metadata import MetadataExtractor, extract_track_metadata
from playlist_player.domain.library.models import Catalog
from playlist_player.domain.library.scanner import load_catalog
from playlist_player.domain.library.watcher import LibraryWatcher
from playlist_player.domain.playback.session import PlaybackSession, PlaybackSnapshot, ReloadResult

from .schemas import PlaybackStateResponse
from .sync_manager import SyncManager


def state_payload(snapshot: PlaybackSnapshot) -> dict:
    """Wire form of a snapshot (camelCase keys)."""
    return PlaybackStateResponse.from_snapshot(snapshot).model_dump(by_alias=True)


def _log_reload_failure(future: concurrent.futures.Future) -> None:
    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        logger.opt(exception=error).error("Library reload failed")


class PlayerService:
    """Owns the playback session and funnels every mutation through one lock."""

    def __init__(
        self,
        library_root: str | Path,
        session: Optional[PlaybackSession] = None,
        sync: Optional[SyncManager] = None,
        store: Optional[SessionStore] = None,
        extractor: MetadataExtractor = extract_track_metadata,
        supported_formats: Optional[list[str]] = None,
        metadata_timeout: float = 10.0,
        max_workers: int = 4,
        debounce_seconds: float = 1.0,
        watch: bool = True,
    ):
        self.library_root = Path(library_root).expanduser()
        self.store = store
        self.session = session or PlaybackSession(
            on_playlist_selected=store.save_last_playlist if store else None
        )
        self.sync = sync or SyncManager()
        self.extractor = extractor
        self.supported_formats = supported_formats
        self.metadata_timeout = metadata_timeout
        self.max_workers = max_workers
        self.debounce_seconds = debounce_seconds
        self.watch = watch

        self._lock = asyncio.Lock()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        # Bumped per reload; a scan is applied only if no newer one started
        self._reload_generation = 0
        self.watcher: Optional[LibraryWatcher] = None

        self._commands: dict[str, Callable[[Optional[str]], Any]] = {
            "switch-playlist": self._switch_playlist,
            "next-song": lambda _: self.session.next_song(),
            "previous-song": lambda _: self.session.previous_song(),
            "restart-song": lambda _: self.session.restart_current_song(),
            "toggle-play-pause": lambda _: self.session.toggle_play_pause(),
        }

    @classmethod
    def from_config(cls, config: Config, store: Optional[SessionStore] = None) -> "PlayerService":
        return cls(
            library_root=config.library.root,
            store=store or SessionStore(),
            supported_formats=config.library.supported_formats,
            metadata_timeout=config.library.metadata_timeout_seconds,
            max_workers=config.library.max_scan_workers,
            debounce_seconds=config.library.debounce_seconds,
            watch=config.library.watch,
        )

    @property
    def commands(self) -> list[str]:
        return sorted(self._commands)

    # Lifecycle

    async def startup(self) -> None:
        """Load the library, pick the initial playlist and start watching."""
        self._loop = asyncio.get_running_loop()

        try:
            catalog = await self._load()
        except LibraryUnreadableError as e:
            logger.error(f"{e}. Starting with an empty library.")
            catalog = {}

        preferred = self.store.get_last_playlist() if self.store else None
        async with self._lock:
            self.session.apply_catalog(catalog)
            self.session.start(preferred)

        if self.watch:
            self.watcher = LibraryWatcher(
                self.library_root, self._on_library_changed, debounce_seconds=self.debounce_seconds
            )
            self.watcher.start()

        logger.info("Player service started")

    async def shutdown(self) -> None:
        if self.watcher:
            self.watcher.stop()
            self.watcher = None
        logger.info("Player service stopped")

    # Commands

    async def execute(self, command: str, data: Optional[str] = None) -> PlaybackSnapshot:
        """Run one state command and broadcast the resulting snapshot.

        Raises:
            InvalidCommandError: Unknown command or missing argument
            PlaylistNotFoundError / InvalidStateError: From the session
        """
        handler = self._commands.get(command)
        if handler is None:
            raise InvalidCommandError(f"Unknown command: {command}")

        async with self._lock:
            handler(data)
            snapshot = self.session.get_snapshot()
            await self.sync.broadcast("playback:state", state_payload(snapshot))
        return snapshot

    def _switch_playlist(self, name: Optional[str]) -> None:
        if not name:
            raise InvalidCommandError("switch-playlist requires a playlist name")
        self.session.switch_playlist(name)

    async def current_state(self) -> dict:
        """Snapshot for a direct read (consumes the restart flag)."""
        async with self._lock:
            return state_payload(self.session.get_snapshot())

    def playlists(self) -> list[str]:
        return self.session.get_playlists()

    def player_status(self) -> dict[str, bool]:
        return self.sync.get_player_status()

    # Clients

    async def connect_client(self, ws: WebSocket) -> str:
        """Register a client and send it the current state and player status."""
        async with self._lock:
            client_id = await self.sync.connect(ws)
            await self.sync.send(client_id, "sync:full", state_payload(self.session.get_snapshot()))
            await self.sync.send(client_id, "player:status", self.sync.get_player_status())
        return client_id

    async def disconnect_client(self, client_id: str) -> None:
        async with self._lock:
            if self.sync.disconnect(client_id):
                await self.sync.broadcast_player_status()

    async def identify_player(self, client_id: str) -> None:
        async with self._lock:
            if self.sync.mark_player(client_id):
                await self.sync.broadcast_player_status()

    async def send_error(self, client_id: str, message: str, code: str) -> None:
        await self.sync.send(client_id, "error", {"message": message, "code": code})

    # Library reloads

    async def reload_library(self) -> Optional[ReloadResult]:
        """Rescan the library and reconcile it into the live session.

        A failed scan is logged and leaves the catalog and session untouched.
        A scan overtaken by a newer reload is discarded (returns None), so the
        latest view of the disk always wins. Otherwise a snapshot is broadcast
        even when nothing visible changed.
        """
        self._reload_generation += 1
        generation = self._reload_generation
        logger.info("Reloading playlists...")
        try:
            catalog = await self._load()
        except LibraryUnreadableError as e:
            logger.error(f"Error reloading playlists: {e}")
            return None

        async with self._lock:
            if generation != self._reload_generation:
                logger.debug("Discarding library scan superseded by a newer reload")
                return None
            result = self.session.apply_catalog(catalog)
            await self.sync.broadcast("playback:state", state_payload(self.session.get_snapshot()))

        logger.info("Sent playlist update to clients")
        return result

    def _on_library_changed(self) -> None:
        """Debouncer callback, runs on a timer thread."""
        if self._loop is None or self._loop.is_closed():
            logger.warning("Library changed but no event loop is available for reload")
            return
        future = asyncio.run_coroutine_threadsafe(self.reload_library(), self._loop)
        future.add_done_callback(_log_reload_failure)

    async def _load(self) -> Catalog:
        return await asyncio.to_thread(
            load_catalog,
            self.library_root,
            self.supported_formats,
            self.extractor,
            self.metadata_timeout,
            self.max_workers,
        )
