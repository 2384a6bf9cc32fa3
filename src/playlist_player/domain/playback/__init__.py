"""Playback domain - shuffle engine and session state machine.

This domain handles:
- No-repeat shuffled play order per playlist
- The global playback session (playing, paused, stopped)
- Reconciling reloaded catalogs into the live session
"""

# Shuffle engine
from .shuffle import ShuffleCycle, advance, new_cycle, retreat, shuffle

# Session state machine
from .session import PlaybackSession, PlaybackSnapshot, ReloadResult

__all__ = [
    # Shuffle
    "ShuffleCycle",
    "advance",
    "new_cycle",
    "retreat",
    "shuffle",
    # Session
    "PlaybackSession",
    "PlaybackSnapshot",
    "ReloadResult",
]
