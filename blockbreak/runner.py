"""Headless driver loop and a simple autopilot controller.

The session core never schedules itself; this module plays the part of
the external frame scheduler when no window is involved (tests, demos,
batch runs).

Usage::

    from blockbreak.runner import Autopilot, run
    from blockbreak.session import new_session

    session = new_session()
    frames = run(session, controller=Autopilot(), max_ticks=5_000)
    print(frames[-1].outcome, frames[-1].score)
"""

from __future__ import annotations

import logging
from typing import Callable

from blockbreak.frames import EventKind, FrameReport
from blockbreak.session import Direction, Session

logger = logging.getLogger(__name__)

Controller = Callable[[Session], None]


def run(
    session: Session,
    controller: Controller | None = None,
    max_ticks: int = 10_000,
    on_frame: Callable[[FrameReport], None] | None = None,
) -> list[FrameReport]:
    """Tick ``session`` until its outcome is terminal or ``max_ticks`` is hit.

    Args:
        session: The session to drive.
        controller: Called before every tick to apply player intent.
        max_ticks: Upper bound on ticks run by this call.
        on_frame: Called with each tick's report, e.g. to render it.

    Returns:
        The frame reports, one per tick run.
    """
    frames: list[FrameReport] = []
    for _ in range(max_ticks):
        if session.outcome.terminal:
            break
        if controller is not None:
            controller(session)
        report = session.tick()
        frames.append(report)
        if on_frame is not None:
            on_frame(report)

    if session.outcome.terminal:
        logger.info(
            "Run finished after %d tick(s): %s, score %d",
            len(frames), session.outcome.value, session.score,
        )
    else:
        logger.warning(
            "Run stopped at max_ticks=%d with the game still playing (score %d)",
            max_ticks, session.score,
        )
    return frames


class Autopilot:
    """Controller that launches the ball and chases it with the platform.

    The platform steers so that its aim point sits under the ball's centre.
    The aim point cycles through ``offsets`` (fractions of the half-width,
    ``-1`` to ``1``) after every platform hit, which varies the return angle
    instead of bouncing the ball straight up and down forever.
    """

    def __init__(self, offsets: tuple[float, ...] = (0.0, 0.5, -0.35, 0.8, -0.7, 0.2)) -> None:
        if not offsets:
            msg = "Autopilot needs at least one aim offset"
            raise ValueError(msg)
        self.offsets = offsets
        self._aim = 0
        self._last_tick_seen = -1

    def __call__(self, session: Session) -> None:
        if session.docked:
            session.launch_ball()
            return

        self._advance_aim(session)

        platform = session.platform
        half = platform.width / 2
        aim_x = platform.center_x + self.offsets[self._aim] * half
        gap = session.ball.center_x - aim_x
        if abs(gap) <= platform.speed / 2:
            session.set_platform_direction(Direction.NONE)
        elif gap < 0:
            session.set_platform_direction(Direction.LEFT)
        else:
            session.set_platform_direction(Direction.RIGHT)

    def _advance_aim(self, session: Session) -> None:
        if session.tick_count == self._last_tick_seen:
            return
        self._last_tick_seen = session.tick_count
        if any(e.kind is EventKind.PLATFORM_HIT for e in session.last_events):
            self._aim = (self._aim + 1) % len(self.offsets)
