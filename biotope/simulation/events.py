"""Transient per-tick events for presentation layers.

The world buffers notable occurrences during a tick and clears them at the
start of the next.  The simulation never reads them back.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class EventKind(Enum):
    """Kinds of notable occurrence."""

    KILL = auto()


@dataclass(frozen=True)
class SimulationEvent:
    """Something that happened at a grid position this tick.

    Attributes:
        kind: What happened.
        x: Column where it happened.
        y: Row where it happened.
    """

    kind: EventKind
    x: int
    y: int
