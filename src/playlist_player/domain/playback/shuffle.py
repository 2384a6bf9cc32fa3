"""Shuffle engine for no-repeat playback.

A cycle is one random permutation of a playlist plus a cursor and the set of
filenames played since the last reshuffle. Advancing marks tracks as played
and reshuffles once every track has been played; retreating only moves the
cursor.
"""

import random
from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..exceptions import InvalidStateError
from ..library.models import Track


@dataclass
class ShuffleCycle:
    """Randomized play order for the active playlist."""

    order: list[Track] = field(default_factory=list)
    cursor: int = 0
    played: set[str] = field(default_factory=set)

    @property
    def current(self) -> Optional[Track]:
        if not self.order:
            return None
        return self.order[self.cursor]

    @property
    def is_exhausted(self) -> bool:
        return len(self.played) >= len(self.order)


def shuffle(tracks: Sequence[Track], rng: Optional[random.Random] = None) -> list[Track]:
    """Return a uniformly random permutation of tracks (Fisher-Yates)."""
    rng = rng or random
    order = list(tracks)
    for i in range(len(order) - 1, 0, -1):
        j = rng.randint(0, i)
        order[i], order[j] = order[j], order[i]
    return order


def new_cycle(tracks: Sequence[Track], rng: Optional[random.Random] = None) -> ShuffleCycle:
    """Start a fresh cycle: new permutation, cursor 0, nothing played."""
    return ShuffleCycle(order=shuffle(tracks, rng))


def advance(cycle: ShuffleCycle, rng: Optional[random.Random] = None) -> Track:
    """Move to the next track, reshuffling when every track has been played.

    The track under the cursor is marked played first. The fresh permutation
    after a reshuffle is independent of the previous one, so the track just
    played can come up again first.

    Raises:
        InvalidStateError: If the cycle has no tracks
    """
    if not cycle.order:
        raise InvalidStateError("No playlist selected or playlist is empty")

    cycle.played.add(cycle.order[cycle.cursor].filename)

    if cycle.is_exhausted:
        cycle.order = shuffle(cycle.order, rng)
        cycle.played.clear()
        cycle.cursor = 0
    else:
        cycle.cursor = (cycle.cursor + 1) % len(cycle.order)

    return cycle.order[cycle.cursor]


def retreat(cycle: ShuffleCycle) -> Track:
    """Move the cursor back one track, wrapping to the end.

    The played-set is neither read nor written.

    Raises:
        InvalidStateError: If the cycle has no tracks
    """
    if not cycle.order:
        raise InvalidStateError("No playlist selected or playlist is empty")

    cycle.cursor = (cycle.cursor - 1) % len(cycle.order)
    return cycle.order[cycle.cursor]
