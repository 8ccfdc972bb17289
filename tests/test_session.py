"""Tests for blockbreak.session -- input API, frame loop order and outcomes.

Scenario tests place the ball by hand right before a tick so that exactly
one interaction happens, then inspect the resulting state and events.
"""

from __future__ import annotations

import random

import pytest

from blockbreak.config import GameConfig
from blockbreak.frames import EventKind, Outcome
from blockbreak.geometry import overlaps
from blockbreak.session import Direction, Session, new_session


def _launched(session: Session | None = None) -> Session:
    """Return a session whose ball has been launched."""
    s = session if session is not None else new_session(rng=random.Random(1))
    s.launch_ball()
    return s


def _place_ball(session: Session, x: float, y: float, dx: float, dy: float) -> None:
    session.ball.x, session.ball.y = x, y
    session.ball.dx, session.ball.dy = dx, dy


class TestNewSession:
    """Tests for new_session()."""

    def test_initial_state(self) -> None:
        """A new session has a docked ball, full field and zero score."""
        s = new_session()
        assert s.docked is True
        assert s.score == 0
        assert s.outcome is Outcome.PLAYING
        assert s.tick_count == 0
        assert len(s.blocks) == 32
        assert (s.ball.x, s.ball.y) == (320, 280)
        assert (s.ball.dx, s.ball.dy) == (0, 0)
        assert (s.platform.x, s.platform.y) == (280, 300)

    def test_explicit_arguments_override_config(self) -> None:
        """rows, cols and arena size override the base config."""
        s = new_session(2, 3, 800, 600)
        assert len(s.blocks) == 6
        assert (s.arena.width, s.arena.height) == (800, 600)

    @pytest.mark.parametrize(
        "rows,cols,width,height",
        [(2, 3, 300, 360), (4, 8, 1024, 768), (2, 3, 800, 600)],
    )
    def test_arena_override_lays_out_inside(
        self, rows: int, cols: int, width: float, height: float,
    ) -> None:
        """A resized arena gets a platform, docked ball and grid inside it."""
        s = new_session(rows, cols, width, height)
        assert 0 <= s.platform.x <= width - s.platform.width
        assert s.platform.bottom <= height
        for block in s.blocks:
            assert block.left >= 0 and block.right <= width
            assert block.top >= 0 and block.bottom <= height
        assert s.ball.bottom == s.platform.top
        assert s.ball.center_x == s.platform.center_x

    def test_arena_too_small_for_grid_raises(self) -> None:
        """A grid that cannot fit the requested arena is rejected."""
        with pytest.raises(ValueError, match="block grid"):
            new_session(4, 8, 300, 360)

    def test_default_sized_arguments_keep_layout(self) -> None:
        """Arguments equal to the config leave its layout untouched."""
        s = new_session(4, 8, 640, 360)
        assert (s.platform.x, s.platform.y) == (280, 300)
        assert (s.ball.x, s.ball.y) == (320, 280)

    def test_config_is_used(self) -> None:
        """A supplied config drives the layout."""
        s = new_session(config=GameConfig(rows=1, cols=5, ball_speed=4))
        assert len(s.blocks) == 5
        assert s.ball.speed == 4

    @pytest.mark.parametrize("rows,cols", [(0, 8), (4, 0), (-1, 3)])
    def test_non_positive_grid_raises(self, rows: int, cols: int) -> None:
        """A block field with non-positive rows or cols is rejected."""
        with pytest.raises(ValueError, match="positive rows and cols"):
            new_session(rows, cols)

    def test_sessions_are_independent(self) -> None:
        """Two sessions share no entity state."""
        a = new_session()
        b = new_session()
        a.blocks[0].active = False
        a.platform.x = 0
        assert b.blocks[0].active is True
        assert b.platform.x == 280


class TestInput:
    """Tests for platform steering and ball launch."""

    def test_set_platform_direction(self) -> None:
        """Direction maps to -speed, +speed and 0."""
        s = new_session()
        s.set_platform_direction(Direction.LEFT)
        assert s.platform.dx == -6
        s.set_platform_direction(Direction.RIGHT)
        assert s.platform.dx == 6
        s.set_platform_direction(Direction.NONE)
        assert s.platform.dx == 0

    def test_set_direction_is_idempotent(self) -> None:
        """Applying the same intent twice changes nothing."""
        s = new_session()
        s.set_platform_direction(Direction.RIGHT)
        s.set_platform_direction(Direction.RIGHT)
        assert s.platform.dx == 6

    def test_direction_applies_at_next_tick(self) -> None:
        """Steering only moves the platform when a tick runs."""
        s = new_session()
        s.set_platform_direction(Direction.RIGHT)
        assert s.platform.x == 280
        s.tick()
        assert s.platform.x == 286

    def test_launch(self) -> None:
        """Launching sends the ball up with a whole-number dx in [-speed, speed]."""
        s = new_session(rng=random.Random(42))
        s.launch_ball()
        expected_dx = random.Random(42).randint(-3, 3)
        assert s.docked is False
        assert s.ball.dy == -3
        assert s.ball.dx == expected_dx

    def test_launch_twice_raises(self) -> None:
        """Only a docked ball can be launched."""
        s = _launched()
        with pytest.raises(RuntimeError, match="no ball is docked"):
            s.launch_ball()

    def test_docked_ball_rides_platform(self) -> None:
        """While docked, the ball moves with the platform."""
        s = new_session()
        s.set_platform_direction(Direction.RIGHT)
        s.tick()
        s.tick()
        assert s.platform.x == 292
        assert (s.ball.x, s.ball.y) == (332, 280)

    def test_platform_halts_at_wall(self) -> None:
        """Steering into a wall stops the platform inside the arena."""
        s = new_session()
        s.set_platform_direction(Direction.LEFT)
        for _ in range(100):
            s.tick()
        assert s.platform.x == 4
        assert s.platform.dx == 0
        assert s.ball.x == 44

    def test_launched_ball_leaves_platform(self) -> None:
        """After launch the ball no longer follows the platform."""
        s = new_session(rng=random.Random(3))
        s.launch_ball()
        s.ball.dx = 0
        s.set_platform_direction(Direction.RIGHT)
        s.tick()
        assert s.platform.x == 286
        assert (s.ball.x, s.ball.y) == (320, 277)


class TestBlockCollisions:
    """Tests for block hits during a tick."""

    def test_single_block_hit(self) -> None:
        """A block hit flips dy, clears the block and scores."""
        s = _launched()
        block = s.blocks[24]
        _place_ball(s, block.x + 20, block.bottom + 1, 0, -3)
        pre_tick = s.ball.offset(0, 0)

        report = s.tick()

        assert block.active is False
        assert s.score == 1
        assert s.ball.dy == 3
        assert s.ball.y == block.bottom + 4
        hits = report.events_of(EventKind.BLOCK_HIT)
        assert [e.block_index for e in hits] == [24]
        assert len(report.blocks) == 31
        assert not any(overlaps(pre_tick, b) for b in s.blocks.active())

    def test_simultaneous_hits_processed_independently(self) -> None:
        """Two blocks hit in one tick each flip dy and each score."""
        s = _launched()
        left, right = s.blocks[24], s.blocks[25]
        # deep enough in the row that the projection overlaps after each flip
        _place_ball(s, left.right - 15, left.y + 3, 0, -3)

        report = s.tick()

        assert left.active is False
        assert right.active is False
        assert s.score == 2
        # two flips cancel out
        assert s.ball.dy == -3
        hits = report.events_of(EventKind.BLOCK_HIT)
        assert [e.block_index for e in hits] == [24, 25]

    def test_inactive_block_is_ignored(self) -> None:
        """A cleared block no longer deflects the ball."""
        s = _launched()
        block = s.blocks[24]
        block.active = False
        _place_ball(s, block.x + 20, block.bottom + 1, 0, -3)
        report = s.tick()
        assert s.score == 0
        assert s.ball.dy == -3
        assert report.events_of(EventKind.BLOCK_HIT) == []


class TestPlatformCollision:
    """Tests for the platform bounce inside the frame loop."""

    def test_center_hit(self) -> None:
        """A hit at the platform centre bounces straight up."""
        s = _launched()
        _place_ball(s, s.platform.center_x - 10, s.platform.y - 21, 2, 3)
        report = s.tick()
        assert s.ball.dx == 0
        assert s.ball.dy == -3
        assert len(report.events_of(EventKind.PLATFORM_HIT)) == 1

    def test_left_edge_hit(self) -> None:
        """A hit at the platform's left edge bounces left at full speed."""
        s = _launched()
        _place_ball(s, s.platform.x - 10, s.platform.y - 21, 0, 3)
        s.tick()
        assert s.ball.dx == -3
        assert s.ball.dy == -3

    def test_upward_ball_overlapping_platform_emits_nothing(self) -> None:
        """No bounce and no event while the ball is already rising."""
        s = _launched()
        _place_ball(s, s.platform.center_x - 10, s.platform.y - 10, 0, -3)
        report = s.tick()
        assert s.ball.dy == -3
        assert report.events_of(EventKind.PLATFORM_HIT) == []


class TestWallsAndOutcome:
    """Tests for wall events, loss, win and termination."""

    def test_wall_hit_event(self) -> None:
        """Bouncing off a side wall emits WALL_HIT with the edge name."""
        s = _launched()
        _place_ball(s, 1, 200, -3, -3)
        report = s.tick()
        walls = report.events_of(EventKind.WALL_HIT)
        assert [e.detail for e in walls] == ["left"]
        assert s.ball.x == 3

    def test_bottom_breach_loses(self) -> None:
        """A projected bottom breach with no platform below is a loss."""
        s = _launched()
        _place_ball(s, 100, 339, 0, 3)
        report = s.tick()
        assert s.outcome is Outcome.LOST
        assert report.outcome is Outcome.LOST
        assert s.score == 0
        assert len(report.events_of(EventKind.GAME_LOST)) == 1

    def test_no_tick_after_loss(self) -> None:
        """Ticking a finished session fails fast."""
        s = _launched()
        _place_ball(s, 100, 339, 0, 3)
        s.tick()
        with pytest.raises(RuntimeError, match="after the session ended"):
            s.tick()

    def test_clearing_grid_one_block_per_tick_wins(self) -> None:
        """Hitting all 32 blocks, one per tick, wins on the 32nd hit."""
        s = _launched(new_session(rows=4, cols=8, rng=random.Random(5)))
        blocks = list(s.blocks)
        scores: list[int] = []

        # bottom row first so the ball never touches a block below its target
        for n, block in enumerate(reversed(blocks), start=1):
            assert s.outcome is Outcome.PLAYING
            _place_ball(s, block.x + 20, block.bottom + 1, 0, -3)
            report = s.tick()
            scores.append(s.score)
            assert s.score == n
            assert block.active is False

        assert scores == list(range(1, 33))
        assert s.outcome is Outcome.WON
        assert s.tick_count == 32
        assert len(report.events_of(EventKind.GAME_WON)) == 1
        assert report.blocks == ()
        with pytest.raises(RuntimeError):
            s.tick()

    def test_win_is_not_overwritten_by_breach(self) -> None:
        """A bottom breach in the winning tick keeps the outcome WON."""
        config = GameConfig(
            rows=1, cols=2,
            block_offset_x=100, block_offset_y=330,
        )
        s = _launched(new_session(config=config, rng=random.Random(0)))
        # straddles both blocks; the two flips leave dy pointing down
        _place_ball(s, 150, 338, 0, 3)
        report = s.tick()
        assert s.score == 2
        assert s.outcome is Outcome.WON
        assert report.events_of(EventKind.GAME_LOST) == []
        assert len(report.events_of(EventKind.GAME_WON)) == 1


class TestSnapshot:
    """Tests for the read-only frame report."""

    def test_initial_snapshot(self) -> None:
        """The initial snapshot shows tick 0 and no events."""
        report = new_session().snapshot()
        assert report.tick == 0
        assert report.events == ()
        assert report.docked is True
        assert report.block_count == 32
        assert len(report.blocks) == 32

    def test_snapshot_is_detached(self) -> None:
        """Mutating the session does not change an earlier snapshot."""
        s = new_session()
        report = s.snapshot()
        s.ball.x = 0
        assert report.ball.x == 320

    def test_to_dict(self) -> None:
        """Frame reports serialize to plain data."""
        data = new_session().snapshot().to_dict()
        assert data["outcome"] == "playing"
        assert data["ball"] == {"x": 320, "y": 280, "width": 20, "height": 20}
        assert len(data["blocks"]) == 32  # type: ignore[arg-type]


class TestLastEvents:
    """Tests for Session.last_events."""

    def test_empty_before_first_tick(self) -> None:
        """No events exist before the first tick."""
        assert new_session().last_events == ()

    def test_holds_only_latest_tick(self) -> None:
        """A platform hit shows up for its tick and is gone after a quiet one."""
        s = _launched()
        _place_ball(s, s.platform.center_x - 10, s.platform.y - 21, 2, 3)
        report = s.tick()
        assert [e.kind for e in s.last_events] == [EventKind.PLATFORM_HIT]
        assert s.last_events == report.events
        s.tick()
        assert s.last_events == ()
