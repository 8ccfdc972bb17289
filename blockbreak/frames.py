"""Read-only per-tick output of the simulation.

Every call to :meth:`~blockbreak.session.Session.tick` returns a
:class:`FrameReport`: immutable snapshots of the ball, the platform and the
active blocks, the score and outcome, plus the :class:`GameEvent` list for
that tick.  Renderers draw from the snapshots and audio players react to
the events; neither can mutate the session through them.

All types are frozen dataclasses with ``to_dict`` for JSON export.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Self

from blockbreak.geometry import Rect

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Outcome
# ---------------------------------------------------------------------------

class Outcome(Enum):
    """Session state.  ``WON`` and ``LOST`` are terminal."""
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"

    @property
    def terminal(self) -> bool:
        return self is not Outcome.PLAYING


# ---------------------------------------------------------------------------
# GameEvent
# ---------------------------------------------------------------------------

class EventKind(Enum):
    """Discrete occurrences reported once per tick they happen in."""
    BLOCK_HIT = "block_hit"
    PLATFORM_HIT = "platform_hit"
    WALL_HIT = "wall_hit"
    GAME_WON = "game_won"
    GAME_LOST = "game_lost"


# Kinds that correspond to the ball striking something.
HIT_KINDS: frozenset[EventKind] = frozenset({
    EventKind.BLOCK_HIT,
    EventKind.PLATFORM_HIT,
    EventKind.WALL_HIT,
})


@dataclass(frozen=True)
class GameEvent:
    """A single event emitted during a tick.

    Attributes:
        kind: What happened.
        tick: Tick number the event was emitted in.
        block_index: Index into the block field for ``BLOCK_HIT``.
        detail: Free-form qualifier, e.g. the wall edge (``"left"``,
            ``"right"``, ``"top"``) for ``WALL_HIT``.
    """
    kind: EventKind
    tick: int
    block_index: int | None = None
    detail: str = ""

    def to_dict(self) -> dict[str, object]:
        """Serialize to a plain dict."""
        return {
            "kind": self.kind.value,
            "tick": self.tick,
            "block_index": self.block_index,
            "detail": self.detail,
        }


# ---------------------------------------------------------------------------
# Snapshots
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RectSnapshot:
    """Frozen copy of an entity's position and size."""
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def of(cls, rect: Rect) -> Self:
        return cls(x=rect.x, y=rect.y, width=rect.width, height=rect.height)

    def to_dict(self) -> dict[str, object]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class FrameReport:
    """Everything an external renderer or audio player needs for one frame.

    Attributes:
        tick: Number of ticks completed when this report was taken
            (``0`` for the initial snapshot).
        ball: Ball rectangle.
        platform: Platform rectangle.
        blocks: Active blocks only, in field order.
        score: Blocks cleared so far.
        block_count: Total blocks in the field.
        outcome: Session outcome after the tick.
        docked: Whether the ball still rides on the platform.
        events: Events emitted during the tick, in emission order.
    """
    tick: int
    ball: RectSnapshot
    platform: RectSnapshot
    blocks: tuple[RectSnapshot, ...]
    score: int
    block_count: int
    outcome: Outcome
    docked: bool
    events: tuple[GameEvent, ...] = ()

    def events_of(self, kind: EventKind) -> list[GameEvent]:
        """Events of a single kind, in emission order."""
        return [e for e in self.events if e.kind == kind]

    def to_dict(self) -> dict[str, object]:
        """Serialize to a plain dict."""
        return {
            "tick": self.tick,
            "ball": self.ball.to_dict(),
            "platform": self.platform.to_dict(),
            "blocks": [b.to_dict() for b in self.blocks],
            "score": self.score,
            "block_count": self.block_count,
            "outcome": self.outcome.value,
            "docked": self.docked,
            "events": [e.to_dict() for e in self.events],
        }
