"""Collision responses for the ball and platform.

Each resolver is called by the frame loop only after the collision
detector reported an overlap (or, for arena bounds, performs the ordered
edge check itself).  Resolvers mutate velocity and, where noted, position
of the bodies in place; they never call ``move()``.
"""

from __future__ import annotations

import logging
from enum import Enum

from blockbreak.bodies import Ball, Block, Platform
from blockbreak.geometry import Arena

logger = logging.getLogger(__name__)


class Edge(Enum):
    """Arena edges, in the priority order they are checked."""
    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"


def bump_block(ball: Ball, block: Block) -> None:
    """Reflect the ball vertically and deactivate the block."""
    ball.dy = -ball.dy
    block.active = False


def bump_platform(ball: Ball, platform: Platform) -> bool:
    """Bounce the ball off the platform.

    A moving platform first drags the ball by its own ``dx``.  The bounce
    itself only applies while the ball is travelling downward, so a ball
    that is still inside the platform after bouncing is not reflected
    again.  The outgoing angle depends on where the ball's centre touched:
    ``dx = speed * t`` with ``t`` in ``[-1, 1]`` from left to right edge.

    Returns:
        ``True`` if the ball was reflected.
    """
    if platform.dx:
        ball.x += platform.dx
    if ball.dy <= 0:
        return False

    ball.dy = -ball.speed
    t = platform.touch_offset(ball.center_x)
    ball.dx = ball.speed * t
    logger.debug("Platform bounce at offset %.2f -> dx=%.2f", t, ball.dx)
    return True


def collide_ball_bounds(ball: Ball, arena: Arena) -> Edge | None:
    """Resolve the first arena edge the ball's projection crosses.

    Edges are checked left, right, top, bottom; only the first match is
    handled.  Side and top walls clamp the ball onto the wall and send it
    back at full speed.  The bottom edge is reported but left untouched:
    crossing it ends the game.

    Returns:
        The edge that was crossed, or ``None``.
    """
    projected = ball.projected()

    if projected.left < 0:
        ball.x = 0
        ball.dx = ball.speed
        return Edge.LEFT
    if projected.right > arena.width:
        ball.x = arena.width - ball.width
        ball.dx = -ball.speed
        return Edge.RIGHT
    if projected.top < 0:
        ball.y = 0
        ball.dy = ball.speed
        return Edge.TOP
    if projected.bottom > arena.height:
        return Edge.BOTTOM
    return None


def collide_platform_bounds(platform: Platform, arena: Arena) -> bool:
    """Stop the platform if its next step would leave the arena.

    Returns:
        ``True`` if the platform was stopped.
    """
    projected = platform.projected()
    if projected.left < 0 or projected.right > arena.width:
        platform.dx = 0
        return True
    return False
