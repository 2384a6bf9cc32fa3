"""
Persistence of the last selected playlist.

A small JSON file in the data directory, read once at startup and written
after every successful playlist switch. Failures are logged, never raised.
"""

import json
from pathlib import Path
from typing import Optional

from loguru import logger

from .config import get_data_dir


def get_state_file_path() -> Path:
    """Get the path to the session state file."""
    return get_data_dir() / "state.json"


class SessionStore:
    """Key-value slot for the last selected playlist."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else get_state_file_path()

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        with open(self.path, encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, dict) else {}

    def get_last_playlist(self) -> Optional[str]:
        """Return the stored playlist name, or None if unset or unreadable."""
        try:
            return self._read().get("lastPlaylist") or None
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error reading playlist state from {self.path}: {e}")
            return None

    def save_last_playlist(self, name: str) -> bool:
        """Store the playlist name, keeping any other keys in the file."""
        try:
            try:
                state = self._read()
            except json.JSONDecodeError:
                state = {}
            state["lastPlaylist"] = name
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(state, f, indent=2)
        except OSError as e:
            logger.error(f"Error saving playlist state to {self.path}: {e}")
            return False

        logger.debug(f"Saved last playlist to state file: {name}")
        return True
