"""Axis-aligned geometry shared by every entity in the arena.

All rectangles use a top-left origin with ``y`` growing downward, which
matches the screen coordinates of the renderers that consume snapshots.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Arena
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Arena:
    """Immutable bounds of the play area.

    The coordinate space is ``[0, width) x [0, height)``.
    """
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            msg = f"Arena size must be positive, got {self.width}x{self.height}"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, object]:
        """Serialize to a plain dict."""
        return {"width": self.width, "height": self.height}


# ---------------------------------------------------------------------------
# Rect
# ---------------------------------------------------------------------------

@dataclass
class Rect:
    """Mutable axis-aligned rectangle; ``(x, y)`` is the top-left corner."""
    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            msg = f"Rect size must be positive, got {self.width}x{self.height}"
            raise ValueError(msg)

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    def offset(self, dx: float, dy: float) -> Rect:
        """Return a copy shifted by ``(dx, dy)``."""
        return Rect(self.x + dx, self.y + dy, self.width, self.height)


# ---------------------------------------------------------------------------
# Collision detector
# ---------------------------------------------------------------------------

def overlaps(a: Rect, b: Rect) -> bool:
    """Strict AABB overlap test.

    Rectangles that merely share an edge do not overlap.  Callers pass the
    moving body's *projected* rectangle as ``a``.
    """
    return (
        a.right > b.left
        and a.left < b.right
        and a.bottom > b.top
        and a.top < b.bottom
    )
