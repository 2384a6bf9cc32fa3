"""Player-specific exceptions for error handling."""

from typing import Optional


class PlayerError(Exception):
    """Base exception for playback and library operations."""

    code = "player_error"


class PlaylistNotFoundError(PlayerError):
    """Raised when a referenced playlist is not in the catalog."""

    code = "not_found"

    def __init__(self, name: str, message: Optional[str] = None):
        self.name = name
        super().__init__(message or f'Playlist "{name}" not found')


class InvalidStateError(PlayerError):
    """Raised when a command's preconditions are not met."""

    code = "invalid_state"


class LibraryUnreadableError(PlayerError, OSError):
    """Raised when the playlist library root cannot be listed."""

    code = "library_unreadable"

    def __init__(self, root: str, reason: str = ""):
        self.root = root
        message = f"Cannot read playlist library at {root}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class InvalidCommandError(PlayerError):
    """Raised when a client sends an unknown or malformed command."""

    code = "invalid_command"
