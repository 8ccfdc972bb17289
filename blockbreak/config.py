"""Session configuration: arena size, block grid layout, body sizes and speeds.

``GameConfig`` is a frozen dataclass with ``to_dict`` / ``from_dict`` /
``to_json`` / ``from_json`` for round-trip serialization.  The defaults
reproduce the classic 640x360 layout with a 4x8 block grid.

Usage::

    from blockbreak.config import GameConfig, load_config

    config = load_config("layouts/wide.json")
    session = new_session(config=config)
"""

from __future__ import annotations

import dataclasses
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Self

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameConfig:
    """Every constant a session needs to lay out its entities.

    Attributes:
        arena_width, arena_height: Size of the play area.
        rows, cols: Block grid dimensions.
        block_width, block_height: Size of a single block.
        block_pitch_x, block_pitch_y: Distance between the top-left corners
            of neighbouring blocks (size plus gap).
        block_offset_x, block_offset_y: Top-left corner of block ``(0, 0)``.
        ball_x, ball_y: Docked start position of the ball.
        ball_size: Ball width and height.
        ball_speed: Per-axis speed magnitude of the ball.
        platform_x, platform_y: Start position of the platform.
        platform_width, platform_height: Platform size.
        platform_speed: Horizontal speed of the platform while steered.
    """
    arena_width: float = 640.0
    arena_height: float = 360.0
    rows: int = 4
    cols: int = 8
    block_width: float = 60.0
    block_height: float = 20.0
    block_pitch_x: float = 64.0
    block_pitch_y: float = 24.0
    block_offset_x: float = 65.0
    block_offset_y: float = 35.0
    ball_x: float = 320.0
    ball_y: float = 280.0
    ball_size: float = 20.0
    ball_speed: float = 3.0
    platform_x: float = 280.0
    platform_y: float = 300.0
    platform_width: float = 100.0
    platform_height: float = 14.0
    platform_speed: float = 6.0

    def __post_init__(self) -> None:
        if self.rows <= 0 or self.cols <= 0:
            msg = f"Block grid must have positive rows and cols, got {self.rows}x{self.cols}"
            raise ValueError(msg)
        positive = (
            "arena_width", "arena_height",
            "block_width", "block_height",
            "ball_size", "ball_speed",
            "platform_width", "platform_height", "platform_speed",
        )
        for name in positive:
            value = getattr(self, name)
            if not value > 0:
                msg = f"GameConfig.{name} must be positive, got {value}"
                raise ValueError(msg)
        if self.platform_width > self.arena_width:
            msg = (
                f"Platform width {self.platform_width} does not fit in "
                f"arena width {self.arena_width}"
            )
            raise ValueError(msg)
        self._check_inside("platform", self.platform_x, self.platform_y,
                           self.platform_width, self.platform_height)
        self._check_inside("ball", self.ball_x, self.ball_y,
                           self.ball_size, self.ball_size)
        grid_width, grid_height = self.grid_size
        self._check_inside("block grid", self.block_offset_x, self.block_offset_y,
                           grid_width, grid_height)

    def _check_inside(self, what: str, x: float, y: float, width: float, height: float) -> None:
        inside = (
            x >= 0 and y >= 0
            and x + width <= self.arena_width
            and y + height <= self.arena_height
        )
        if not inside:
            msg = (
                f"The {what} at ({x:g}, {y:g}) size {width:g}x{height:g} does not fit "
                f"in the {self.arena_width:g}x{self.arena_height:g} arena"
            )
            raise ValueError(msg)

    @property
    def block_count(self) -> int:
        return self.rows * self.cols

    @property
    def grid_size(self) -> tuple[float, float]:
        """Width and height of the area covered by the block grid."""
        return (
            (self.cols - 1) * self.block_pitch_x + self.block_width,
            (self.rows - 1) * self.block_pitch_y + self.block_height,
        )

    def replace(self, **changes: object) -> Self:
        """Return a copy with the given fields replaced (re-validated)."""
        return dataclasses.replace(self, **changes)  # type: ignore[arg-type]

    def fit_arena(
        self,
        arena_width: float,
        arena_height: float,
        rows: int | None = None,
        cols: int | None = None,
    ) -> Self:
        """Return a copy laid out for another arena size or block grid.

        The platform keeps its distance from the bottom edge and is centred
        horizontally, the ball is docked on top of it, and the block grid is
        centred horizontally at the same top offset.  Body sizes and speeds
        are unchanged.

        Raises:
            ValueError: If the platform or the grid cannot fit the new arena.
        """
        rows = self.rows if rows is None else rows
        cols = self.cols if cols is None else cols
        bottom_margin = self.arena_height - self.platform_y
        platform_x = (arena_width - self.platform_width) / 2
        platform_y = arena_height - bottom_margin
        grid_width = (cols - 1) * self.block_pitch_x + self.block_width
        return self.replace(
            arena_width=arena_width,
            arena_height=arena_height,
            rows=rows,
            cols=cols,
            platform_x=platform_x,
            platform_y=platform_y,
            ball_x=platform_x + (self.platform_width - self.ball_size) / 2,
            ball_y=platform_y - self.ball_size,
            block_offset_x=(arena_width - grid_width) / 2,
        )

    def to_dict(self) -> dict[str, object]:
        """Serialize to a plain dict for JSON storage."""
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> Self:
        """Deserialize from a plain dict.

        Missing keys fall back to the defaults; unknown keys are rejected so
        that typos in hand-written layout files surface early.
        """
        known = {f.name: f for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            msg = f"Unknown GameConfig field(s): {', '.join(unknown)}"
            raise ValueError(msg)
        kwargs = {name: _field_value(name, raw) for name, raw in data.items()}
        return cls(**kwargs)  # type: ignore[arg-type]

    def to_json(self, indent: int | None = 2) -> str:
        """Serialize to a JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, json_str: str) -> Self:
        """Deserialize from a JSON string.

        Raises:
            ValueError: If the string is not valid JSON or not an object.
        """
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as exc:
            msg = f"invalid config JSON: {exc}"
            raise ValueError(msg) from exc
        if not isinstance(data, dict):
            msg = f"config JSON must be an object, got {type(data).__name__}"
            raise ValueError(msg)
        return cls.from_dict(data)


_WHOLE_NUMBER_FIELDS = frozenset({"rows", "cols"})


def _field_value(name: str, raw: object) -> int | float:
    """Convert one decoded JSON value to the type of its config field."""
    if isinstance(raw, bool):
        msg = f"GameConfig.{name} must be a number, got {raw!r}"
        raise ValueError(msg)
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        msg = f"GameConfig.{name} must be a number, got {raw!r}"
        raise ValueError(msg) from exc
    if name in _WHOLE_NUMBER_FIELDS:
        if not value.is_integer():
            msg = f"GameConfig.{name} must be a whole number, got {raw!r}"
            raise ValueError(msg)
        return int(value)
    return value


def load_config(path: str | Path) -> GameConfig:
    """Load a GameConfig from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file holds malformed or invalid config data.
    """
    p = Path(path)
    if not p.exists():
        msg = f"Config file not found: {p}"
        raise FileNotFoundError(msg)
    config = GameConfig.from_json(p.read_text(encoding="utf-8"))
    logger.info("Loaded config from %s (%dx%d grid)", p, config.rows, config.cols)
    return config


def save_config(config: GameConfig, path: str | Path) -> Path:
    """Save a GameConfig to a JSON file, creating parent dirs."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(config.to_json(), encoding="utf-8")
    return p.resolve()
