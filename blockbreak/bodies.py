"""Entities that live in the arena: the ball, the platform and the blocks.

Moving bodies expose ``projected()`` for collision tests and ``move()`` for
integration.  The two are kept apart: resolvers look at the projection and
adjust velocity (or clamp position), and only then does the frame loop call
``move()`` once per body.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from blockbreak.config import GameConfig
from blockbreak.geometry import Rect

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Moving bodies
# ---------------------------------------------------------------------------

@dataclass
class Ball(Rect):
    """The ball: a rectangle with a per-axis velocity and a fixed speed.

    ``dx`` and ``dy`` are each bounded by ``speed`` in magnitude, but their
    combination is not normalised, so diagonal motion is faster than axial
    motion.
    """
    dx: float = 0.0
    dy: float = 0.0
    speed: float = 3.0

    def projected(self) -> Rect:
        """Rectangle the ball would occupy after one more tick."""
        return self.offset(self.dx, self.dy)

    def move(self) -> None:
        self.x += self.dx
        self.y += self.dy


@dataclass
class Platform(Rect):
    """The player's paddle.  Only moves horizontally."""
    dx: float = 0.0
    speed: float = 6.0

    def projected(self) -> Rect:
        return self.offset(self.dx, 0)

    def move(self) -> None:
        self.x += self.dx

    def touch_offset(self, x: float) -> float:
        """Normalised horizontal position of ``x`` along the platform.

        Returns ``-1`` at the left edge, ``0`` at the centre and ``+1`` at
        the right edge.  Points outside the platform are clamped.
        """
        t = 2 * (x - self.x) / self.width - 1
        return max(-1.0, min(1.0, t))


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------

@dataclass
class Block(Rect):
    """A destructible block.  Deactivated once, never revived."""
    active: bool = True


class BlockField:
    """Fixed, row-major grid of blocks.

    Membership never changes after construction; destroyed blocks stay in
    the field with ``active`` cleared so indices remain stable.
    """

    def __init__(self, blocks: list[Block]) -> None:
        if not blocks:
            msg = "BlockField needs at least one block"
            raise ValueError(msg)
        self._blocks: tuple[Block, ...] = tuple(blocks)

    @classmethod
    def create(cls, config: GameConfig) -> BlockField:
        """Lay out ``config.rows x config.cols`` blocks in row-major order."""
        if config.rows <= 0 or config.cols <= 0:
            msg = f"Block grid must have positive rows and cols, got {config.rows}x{config.cols}"
            raise ValueError(msg)
        blocks = [
            Block(
                x=config.block_offset_x + config.block_pitch_x * col,
                y=config.block_offset_y + config.block_pitch_y * row,
                width=config.block_width,
                height=config.block_height,
            )
            for row in range(config.rows)
            for col in range(config.cols)
        ]
        logger.debug("Created block field: %dx%d", config.rows, config.cols)
        return cls(blocks)

    def __iter__(self) -> Iterator[Block]:
        return iter(self._blocks)

    def __len__(self) -> int:
        return len(self._blocks)

    def __getitem__(self, index: int) -> Block:
        return self._blocks[index]

    def active(self) -> list[Block]:
        """Blocks that have not been hit yet, in field order."""
        return [b for b in self._blocks if b.active]

    @property
    def remaining(self) -> int:
        return sum(1 for b in self._blocks if b.active)
