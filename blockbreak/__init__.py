"""Blockbreak -- simulation core for a block-breaking arcade game.

Provides the session and frame loop, entity and collision types, frame
reports for renderers, a headless driver and an optional pygame front end.
"""

__version__ = "0.1.0"

# Re-export key types for convenience.
from blockbreak.config import GameConfig, load_config
from blockbreak.frames import EventKind, FrameReport, GameEvent, Outcome, RectSnapshot
from blockbreak.session import Direction, Session, new_session

__all__ = [
    "Direction",
    "EventKind",
    "FrameReport",
    "GameConfig",
    "GameEvent",
    "Outcome",
    "PygameFrontend",
    "RectSnapshot",
    "Session",
    "load_config",
    "new_session",
]


def __getattr__(name: str) -> object:
    """Lazy import for PygameFrontend so the core does not initialise pygame."""
    if name == "PygameFrontend":
        from blockbreak.pygame_frontend import PygameFrontend

        return PygameFrontend
    msg = f"module 'blockbreak' has no attribute {name!r}"
    raise AttributeError(msg)
