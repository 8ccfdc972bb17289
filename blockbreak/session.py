"""Game session: entity state, the fixed-order frame loop and the input API.

A :class:`Session` owns the arena, the ball, the platform and the block
field, together with the score, the outcome and the docked flag.  There is
no module-level state; every component receives what it needs from the
session.

The frame loop is a plain method.  An external driver calls
:meth:`Session.tick` once per display refresh and stops calling it once the
outcome is terminal::

    session = new_session(rows=4, cols=8)
    session.launch_ball()
    while not session.outcome.terminal:
        report = session.tick()
        render(report)
"""

from __future__ import annotations

import logging
import random
from enum import Enum

from blockbreak.bodies import Ball, BlockField, Platform
from blockbreak.config import GameConfig
from blockbreak.frames import EventKind, FrameReport, GameEvent, Outcome, RectSnapshot
from blockbreak.geometry import Arena, overlaps
from blockbreak.physics import (
    Edge,
    bump_block,
    bump_platform,
    collide_ball_bounds,
    collide_platform_bounds,
)

logger = logging.getLogger(__name__)


class Direction(Enum):
    """Player steering intent for the platform."""
    LEFT = -1
    RIGHT = 1
    NONE = 0


class Session:
    """One game from the docked ball to a terminal outcome.

    Attributes:
        config: Layout the session was built from.
        arena: Immutable play-area bounds.
        ball: The ball.  Docked on the platform until :meth:`launch_ball`.
        platform: The player's paddle.
        blocks: The block field, in row-major order.
        score: Number of blocks cleared.
        outcome: ``PLAYING`` until the field is cleared or the ball is lost.
        tick_count: Ticks run so far.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config if config is not None else GameConfig()
        self._rng = rng if rng is not None else random.Random()

        cfg = self.config
        self.arena = Arena(cfg.arena_width, cfg.arena_height)
        self.blocks = BlockField.create(cfg)
        self.ball = Ball(
            x=cfg.ball_x,
            y=cfg.ball_y,
            width=cfg.ball_size,
            height=cfg.ball_size,
            speed=cfg.ball_speed,
        )
        self.platform = Platform(
            x=cfg.platform_x,
            y=cfg.platform_y,
            width=cfg.platform_width,
            height=cfg.platform_height,
            speed=cfg.platform_speed,
        )
        self.score = 0
        self.outcome = Outcome.PLAYING
        self.tick_count = 0
        self._docked = True
        self._events: list[GameEvent] = []

    # -- Input ---------------------------------------------------------------

    @property
    def docked(self) -> bool:
        """Whether the ball still rides on the platform."""
        return self._docked

    @property
    def last_events(self) -> tuple[GameEvent, ...]:
        """Events emitted by the most recent tick (empty before the first)."""
        return tuple(self._events)

    def set_platform_direction(self, direction: Direction) -> None:
        """Steer the platform.  Takes effect at the next tick."""
        self.platform.dx = direction.value * self.platform.speed

    def launch_ball(self) -> None:
        """Release the docked ball upward with a random horizontal component.

        Raises:
            RuntimeError: If the ball has already been launched.
        """
        if not self._docked:
            msg = "launch_ball() called but no ball is docked"
            raise RuntimeError(msg)
        speed = int(self.ball.speed)
        self.ball.dy = -self.ball.speed
        self.ball.dx = float(self._rng.randint(-speed, speed))
        self._docked = False
        logger.info("Ball launched: dx=%.1f dy=%.1f", self.ball.dx, self.ball.dy)

    # -- Frame loop ----------------------------------------------------------

    def tick(self) -> FrameReport:
        """Advance the simulation by one tick.

        Order is fixed: blocks, platform, ball against the arena, platform
        against the arena, then platform and ball integration.  A tick that
        ends the game still runs to completion.

        Raises:
            RuntimeError: If the outcome is already terminal.
        """
        if self.outcome.terminal:
            msg = f"tick() called after the session ended ({self.outcome.value})"
            raise RuntimeError(msg)

        self.tick_count += 1
        self._events = []

        self._collide_blocks()
        self._collide_platform()
        self._collide_ball_bounds()
        collide_platform_bounds(self.platform, self.arena)

        self._move_platform()
        self.ball.move()

        return self.snapshot()

    def snapshot(self) -> FrameReport:
        """Read-only view of the current state and the last tick's events."""
        return FrameReport(
            tick=self.tick_count,
            ball=RectSnapshot.of(self.ball),
            platform=RectSnapshot.of(self.platform),
            blocks=tuple(RectSnapshot.of(b) for b in self.blocks.active()),
            score=self.score,
            block_count=len(self.blocks),
            outcome=self.outcome,
            docked=self._docked,
            events=tuple(self._events),
        )

    # -- Tick stages ---------------------------------------------------------

    def _collide_blocks(self) -> None:
        for index, block in enumerate(self.blocks):
            if block.active and overlaps(self.ball.projected(), block):
                bump_block(self.ball, block)
                self._emit(EventKind.BLOCK_HIT, block_index=index)
                logger.debug("Block %d hit at tick %d", index, self.tick_count)
                self._add_score()

    def _collide_platform(self) -> None:
        if overlaps(self.ball.projected(), self.platform):
            if bump_platform(self.ball, self.platform):
                self._emit(EventKind.PLATFORM_HIT)

    def _collide_ball_bounds(self) -> None:
        edge = collide_ball_bounds(self.ball, self.arena)
        if edge is None:
            return
        if edge is Edge.BOTTOM:
            self._finish(Outcome.LOST)
        else:
            self._emit(EventKind.WALL_HIT, detail=edge.value)
            logger.debug("Wall hit (%s) at tick %d", edge.value, self.tick_count)

    def _move_platform(self) -> None:
        self.platform.move()
        if self._docked:
            self.ball.x += self.platform.dx

    # -- Score / outcome -----------------------------------------------------

    def _add_score(self) -> None:
        self.score += 1
        if self.score >= len(self.blocks):
            self._finish(Outcome.WON)

    def _finish(self, outcome: Outcome) -> None:
        if self.outcome.terminal:
            return
        self.outcome = outcome
        kind = EventKind.GAME_WON if outcome is Outcome.WON else EventKind.GAME_LOST
        self._emit(kind)
        logger.info(
            "Session ended: %s at tick %d with score %d/%d",
            outcome.value, self.tick_count, self.score, len(self.blocks),
        )

    def _emit(
        self,
        kind: EventKind,
        *,
        block_index: int | None = None,
        detail: str = "",
    ) -> None:
        self._events.append(GameEvent(
            kind=kind,
            tick=self.tick_count,
            block_index=block_index,
            detail=detail,
        ))


def new_session(
    rows: int | None = None,
    cols: int | None = None,
    arena_width: float | None = None,
    arena_height: float | None = None,
    *,
    config: GameConfig | None = None,
    rng: random.Random | None = None,
) -> Session:
    """Build a fresh session with a full block field and a docked ball.

    Explicit arguments override the matching fields of ``config`` (or of
    the default :class:`GameConfig`).  When they change the arena size or
    the grid dimensions, the platform, the docked ball and the block grid
    are laid out again for the new arena with :meth:`GameConfig.fit_arena`.

    Raises:
        ValueError: If ``rows`` or ``cols`` is not positive, or the
            resulting layout does not fit the arena.
    """
    base = config if config is not None else GameConfig()
    requested = (
        base.arena_width if arena_width is None else arena_width,
        base.arena_height if arena_height is None else arena_height,
        base.rows if rows is None else rows,
        base.cols if cols is None else cols,
    )
    if requested == (base.arena_width, base.arena_height, base.rows, base.cols):
        cfg = base
    else:
        cfg = base.fit_arena(*requested)

    session = Session(cfg, rng=rng)
    logger.info(
        "New session: %dx%d blocks in %gx%g arena",
        cfg.rows, cfg.cols, cfg.arena_width, cfg.arena_height,
    )
    return session
