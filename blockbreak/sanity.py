"""Invariant checks over recorded frame reports.

The :class:`InvariantChecker` scans a sequence of
:class:`~blockbreak.frames.FrameReport` objects (for example the list
returned by :func:`blockbreak.runner.run`) and reports frames that break
the game's spatial and scoring invariants.

Usage::

    checker = InvariantChecker(session.config)
    failures = checker.check_all(frames)
    for f in failures:
        print(f.name, f.tick, f.failure_reason)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from blockbreak.config import GameConfig
from blockbreak.frames import FrameReport, Outcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckResult:
    """Result of a single invariant check on one frame.

    Attributes:
        name: Name of the invariant, e.g. ``"platform_in_bounds"``.
        passed: Whether the frame satisfied it.
        tick: Tick of the offending frame.
        failure_reason: Human-readable explanation for failures.
    """
    name: str
    passed: bool
    tick: int
    failure_reason: str = ""

    def to_dict(self) -> dict[str, object]:
        """Serialize to a plain dict."""
        return {
            "name": self.name,
            "passed": self.passed,
            "tick": self.tick,
            "failure_reason": self.failure_reason,
        }


class InvariantChecker:
    """Audits frame reports against the layout they were produced with.

    Every ``check_*`` method returns only failures (no news is good news).
    """

    def __init__(self, config: GameConfig) -> None:
        self.config = config

    def check_platform_in_bounds(self, frames: list[FrameReport]) -> list[CheckResult]:
        """Platform x must stay within ``[0, arena_width - platform_width]``."""
        max_x = self.config.arena_width - self.config.platform_width
        results: list[CheckResult] = []
        for frame in frames:
            x = frame.platform.x
            if not 0 <= x <= max_x:
                results.append(CheckResult(
                    name="platform_in_bounds",
                    passed=False,
                    tick=frame.tick,
                    failure_reason=f"platform x={x:g} outside [0, {max_x:g}]",
                ))
        return results

    def check_ball_in_bounds(self, frames: list[FrameReport]) -> list[CheckResult]:
        """Ball y must stay within ``[0, arena_height - ball_size]`` while playing."""
        max_y = self.config.arena_height - self.config.ball_size
        results: list[CheckResult] = []
        for frame in frames:
            if frame.outcome is not Outcome.PLAYING:
                continue
            y = frame.ball.y
            if not 0 <= y <= max_y:
                results.append(CheckResult(
                    name="ball_in_bounds",
                    passed=False,
                    tick=frame.tick,
                    failure_reason=f"ball y={y:g} outside [0, {max_y:g}] while playing",
                ))
        return results

    def check_score_monotonic(self, frames: list[FrameReport]) -> list[CheckResult]:
        """Score never decreases and never exceeds the block count."""
        results: list[CheckResult] = []
        previous = 0
        for frame in frames:
            if frame.score < previous:
                results.append(CheckResult(
                    name="score_monotonic",
                    passed=False,
                    tick=frame.tick,
                    failure_reason=f"score dropped from {previous} to {frame.score}",
                ))
            if frame.score > frame.block_count:
                results.append(CheckResult(
                    name="score_monotonic",
                    passed=False,
                    tick=frame.tick,
                    failure_reason=(
                        f"score {frame.score} exceeds block count {frame.block_count}"
                    ),
                ))
            previous = max(previous, frame.score)
        return results

    def check_single_terminal(self, frames: list[FrameReport]) -> list[CheckResult]:
        """The outcome leaves PLAYING at most once and no frame follows it."""
        results: list[CheckResult] = []
        terminal_tick: int | None = None
        for frame in frames:
            if terminal_tick is not None:
                results.append(CheckResult(
                    name="single_terminal",
                    passed=False,
                    tick=frame.tick,
                    failure_reason=(
                        f"frame recorded after the session ended at tick {terminal_tick}"
                    ),
                ))
                continue
            if frame.outcome.terminal:
                terminal_tick = frame.tick
        return results

    def check_all(self, frames: list[FrameReport]) -> list[CheckResult]:
        """Run every check and return the combined failures."""
        results = (
            self.check_platform_in_bounds(frames)
            + self.check_ball_in_bounds(frames)
            + self.check_score_monotonic(frames)
            + self.check_single_terminal(frames)
        )
        if results:
            logger.warning("%d invariant violation(s) in %d frame(s)", len(results), len(frames))
        return results
