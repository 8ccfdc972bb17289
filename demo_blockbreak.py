#!/usr/bin/env python3
"""Blockbreak demo -- play in a window or watch the autopilot headless.

Modes:
  windowed  (default) -- opens a pygame window; arrows steer, space launches.
  headless  (--headless) -- the autopilot plays, then the recorded frames
                            are audited by the invariant checker and a
                            summary report is printed.

Design notes:
  - Uses print() for the headless report (not logging) because this is a
    user-facing CLI with formatted output; library modules log instead.
"""

from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from pathlib import Path

from blockbreak.config import GameConfig, load_config
from blockbreak.frames import EventKind, FrameReport
from blockbreak.runner import Autopilot, run
from blockbreak.sanity import InvariantChecker
from blockbreak.session import new_session

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
)
logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Blockbreak arcade demo")
    parser.add_argument("--headless", action="store_true",
                        help="run the autopilot without a window")
    parser.add_argument("--config", type=Path, default=None,
                        help="JSON layout file (see blockbreak.config.GameConfig)")
    parser.add_argument("--seed", type=int, default=None,
                        help="seed for the launch angle")
    parser.add_argument("--max-ticks", type=int, default=20_000,
                        help="tick cap for headless runs")
    parser.add_argument("--sound", type=Path, default=None,
                        help="bump sound played on every hit (windowed mode)")
    parser.add_argument("--report", type=Path, default=None,
                        help="write the headless summary as JSON to this path")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="log session events at INFO level")
    return parser.parse_args(argv)


def run_headless(config: GameConfig, seed: int | None, max_ticks: int,
                 report_path: Path | None) -> int:
    """Let the autopilot play and print an audited summary."""
    print("=" * 60)
    print("  BLOCKBREAK -- headless autopilot run")
    print("=" * 60)

    session = new_session(config=config, rng=random.Random(seed))
    frames = run(session, controller=Autopilot(), max_ticks=max_ticks)

    counts = _count_events(frames)
    print(f"  Ticks run:      {len(frames)}")
    print(f"  Outcome:        {session.outcome.value}")
    print(f"  Score:          {session.score}/{len(session.blocks)}")
    for kind in (EventKind.BLOCK_HIT, EventKind.PLATFORM_HIT, EventKind.WALL_HIT):
        print(f"  {kind.value + ':':<15} {counts.get(kind.value, 0)}")

    checker = InvariantChecker(config)
    failures = checker.check_all(frames)
    print(f"\n  --- Invariant audit ---")
    if not failures:
        print("  All invariants held.")
    for f in failures[:20]:
        print(f"  [{f.name}] tick {f.tick}: {f.failure_reason}")
    if len(failures) > 20:
        print(f"  ... and {len(failures) - 20} more")

    if report_path is not None:
        data = {
            "ticks": len(frames),
            "outcome": session.outcome.value,
            "score": session.score,
            "block_count": len(session.blocks),
            "events": counts,
            "violations": [f.to_dict() for f in failures],
            "final_frame": frames[-1].to_dict() if frames else None,
        }
        report_path.parent.mkdir(parents=True, exist_ok=True)
        report_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        print(f"\n  JSON report: {report_path}")

    return 0


def run_windowed(config: GameConfig, seed: int | None, sound: Path | None) -> int:
    """Play interactively in a pygame window."""
    from blockbreak.pygame_frontend import PygameFrontend

    session = new_session(config=config, rng=random.Random(seed))
    outcome = PygameFrontend(session, sound_path=sound).run()
    print(f"Outcome: {outcome.value}, score {session.score}/{len(session.blocks)}")
    return 0


def _count_events(frames: list[FrameReport]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for frame in frames:
        for event in frame.events:
            counts[event.kind.value] = counts.get(event.kind.value, 0) + 1
    return counts


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        logging.getLogger("blockbreak").setLevel(logging.INFO)

    try:
        config = load_config(args.config) if args.config else GameConfig()
    except (FileNotFoundError, ValueError) as exc:
        print(f"ERROR: {exc}")
        return 1

    if args.headless:
        return run_headless(config, args.seed, args.max_ticks, args.report)
    return run_windowed(config, args.seed, args.sound)


if __name__ == "__main__":
    sys.exit(main())
