"""pygame window, keyboard input, drawing and bump sound for a session.

This module is the external collaborator of the simulation core: it turns
key presses into :class:`~blockbreak.session.Session` intent, calls
``tick()`` once per display refresh, draws each
:class:`~blockbreak.frames.FrameReport` and plays a sound for hit events.
The core never imports it.

Controls: left/right arrows steer, space launches, any key release stops
the platform, Escape or closing the window quits.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pygame

from blockbreak.frames import HIT_KINDS, FrameReport, Outcome, RectSnapshot
from blockbreak.session import Direction, Session

logger = logging.getLogger(__name__)

# Colour palette
BG = (15, 15, 24)
WHITE = (235, 235, 235)
BLOCK_COLOR = (200, 140, 70)
PLATFORM_COLOR = (70, 140, 200)

END_MESSAGES = {
    Outcome.WON: "You Win!",
    Outcome.LOST: "Game Over",
}


def handle_event(session: Session, event: pygame.event.Event) -> bool:
    """Apply one pygame event to the session as player intent.

    Returns:
        ``False`` if the event asks to close the game, ``True`` otherwise.
    """
    if event.type == pygame.QUIT:
        return False
    if event.type == pygame.KEYDOWN:
        if event.key == pygame.K_ESCAPE:
            return False
        if event.key == pygame.K_SPACE:
            if session.docked:
                session.launch_ball()
        elif event.key == pygame.K_LEFT:
            session.set_platform_direction(Direction.LEFT)
        elif event.key == pygame.K_RIGHT:
            session.set_platform_direction(Direction.RIGHT)
    elif event.type == pygame.KEYUP:
        session.set_platform_direction(Direction.NONE)
    return True


def _to_rect(snap: RectSnapshot) -> pygame.Rect:
    return pygame.Rect(round(snap.x), round(snap.y), round(snap.width), round(snap.height))


def draw(
    surface: pygame.Surface,
    report: FrameReport,
    font: pygame.font.Font | None = None,
) -> None:
    """Paint one frame: background, active blocks, platform, ball and HUD.

    The HUD (score, and the end message once the game is over) is only
    drawn when a ``font`` is supplied.
    """
    surface.fill(BG)
    for block in report.blocks:
        pygame.draw.rect(surface, BLOCK_COLOR, _to_rect(block), border_radius=3)
    pygame.draw.rect(surface, PLATFORM_COLOR, _to_rect(report.platform), border_radius=6)
    ball = _to_rect(report.ball)
    pygame.draw.ellipse(surface, WHITE, ball)

    if font is None:
        return
    hud = font.render(f"Score: {report.score}/{report.block_count}", True, WHITE)
    surface.blit(hud, (10, 8))
    message = END_MESSAGES.get(report.outcome)
    if message:
        text = font.render(message, True, WHITE)
        rect = text.get_rect(center=surface.get_rect().center)
        surface.blit(text, rect)


class PygameFrontend:
    """Windowed driver for a session.

    Usage::

        session = new_session()
        outcome = PygameFrontend(session).run()
    """

    def __init__(
        self,
        session: Session,
        *,
        fps: int = 60,
        title: str = "Blockbreak",
        sound_path: str | Path | None = None,
        end_delay_ms: int = 1500,
    ) -> None:
        self.session = session
        self.fps = fps
        self.title = title
        self.sound_path = Path(sound_path) if sound_path is not None else None
        self.end_delay_ms = end_delay_ms
        self._bump: pygame.mixer.Sound | None = None

    def run(self) -> Outcome:
        """Open the window and play until the game ends or the window closes.

        Returns:
            The session outcome; ``PLAYING`` if the player quit early.
        """
        pygame.init()
        try:
            arena = self.session.arena
            surface = pygame.display.set_mode((int(arena.width), int(arena.height)))
            pygame.display.set_caption(self.title)
            clock = pygame.time.Clock()
            font = pygame.font.SysFont(None, 28)
            self._load_sound()

            while not self.session.outcome.terminal:
                clock.tick(self.fps)
                events = pygame.event.get()
                if not all([handle_event(self.session, e) for e in events]):
                    break
                report = self.session.tick()
                self._play(report)
                draw(surface, report, font)
                pygame.display.flip()

            if self.session.outcome.terminal:
                logger.info("Game over: %s", END_MESSAGES[self.session.outcome])
                pygame.time.wait(self.end_delay_ms)
            return self.session.outcome
        finally:
            pygame.quit()

    def _load_sound(self) -> None:
        if self.sound_path is None:
            return
        if not self.sound_path.exists():
            msg = f"Sound file not found: {self.sound_path}"
            raise FileNotFoundError(msg)
        try:
            pygame.mixer.init()
            self._bump = pygame.mixer.Sound(str(self.sound_path))
        except pygame.error as exc:
            logger.warning("Audio unavailable, playing without sound: %s", exc)
            self._bump = None

    def _play(self, report: FrameReport) -> None:
        if self._bump is None:
            return
        for event in report.events:
            if event.kind in HIT_KINDS:
                self._bump.play()
