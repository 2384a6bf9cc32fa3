"""
Library change watching.

Watches the playlist root for created, deleted, moved and modified entries,
coalesces bursts into one reload per quiet window, and hands the reload to a
callback. The callback decides how to load and reconcile.
"""

import threading
from pathlib import Path
from typing import Callable, Optional

from loguru import logger
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer


class ReloadDebouncer:
    """Runs a callback once after events stop arriving for `delay` seconds.

    Each trigger replaces the pending timer, so a burst produces exactly one
    reload.
    """

    def __init__(self, callback: Callable[[], None], delay: float = 1.0):
        self.callback = callback
        self.delay = delay
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    def trigger(self) -> None:
        """Schedule the callback, superseding any pending one."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        """Drop a pending reload, if any."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def _fire(self) -> None:
        with self._lock:
            # A newer trigger may have replaced this timer after it fired
            if self._timer is not threading.current_thread():
                return
            self._timer = None
        try:
            self.callback()
        except Exception:
            logger.exception("Library reload callback failed")


class LibraryEventHandler(FileSystemEventHandler):
    """Forwards library filesystem events to a debouncer."""

    def __init__(self, debouncer: ReloadDebouncer):
        self.debouncer = debouncer

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type not in ("created", "deleted", "moved", "modified"):
            return
        # Directory mtime bumps accompany every child create/delete
        if event.event_type == "modified" and event.is_directory:
            return
        logger.debug(f"Playlist directory change detected: {event.event_type} - {event.src_path}")
        self.debouncer.trigger()


class LibraryWatcher:
    """Observes the playlist root and requests debounced reloads."""

    def __init__(self, root: str | Path, on_reload: Callable[[], None], debounce_seconds: float = 1.0):
        self.root = Path(root).expanduser()
        self.debouncer = ReloadDebouncer(on_reload, delay=debounce_seconds)
        self.handler = LibraryEventHandler(self.debouncer)
        self.observer: Optional[Observer] = None

    @property
    def is_running(self) -> bool:
        return self.observer is not None and self.observer.is_alive()

    def start(self) -> bool:
        """Start watching. Returns False (and logs) if the watch could not be set up."""
        if self.observer is not None:
            return True

        try:
            observer = Observer()
            observer.schedule(self.handler, str(self.root), recursive=True)
            observer.start()
        except Exception as e:
            logger.error(f"Error starting playlist watcher on {self.root}: {e}")
            return False

        self.observer = observer
        logger.info(f"Playlist directory watcher started: {self.root}")
        return True

    def stop(self) -> None:
        """Stop watching and drop any pending reload."""
        self.debouncer.cancel()
        if self.observer is None:
            return
        try:
            self.observer.stop()
            self.observer.join(timeout=1.0)
        except RuntimeError as e:
            logger.warning(f"Error stopping playlist watcher: {e}")
        self.observer = None
        logger.info("Playlist directory watcher stopped")
