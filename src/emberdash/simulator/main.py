"""
Headless session simulator for EMBERDASH.

Runs the director against a scripted jumper and logs how the session
escalated. Useful for tuning settings without a renderer.

Usage:
    emberdash-sim --seconds 180 --seed 42
    EMBERDASH_RANDOMNESS=uniform emberdash-sim --log-file run.json
"""

import argparse
import json
import logging
import sys
from collections import Counter
from pathlib import Path

from emberdash.config.settings import Settings
from emberdash.core.events import EventBus, EventType
from emberdash.director import Director, normalize_seed
from emberdash.simulator.track import HeadlessTrack, ScriptedJumper, TrackResult

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulate one EMBERDASH session headlessly")
    parser.add_argument("--seconds", type=float, default=120.0, help="Maximum session length")
    parser.add_argument("--seed", type=int, default=None, help="Director seed (default: from clock)")
    parser.add_argument("--skill", type=float, default=0.97, help="Jumper skill, 0..1")
    parser.add_argument("--fps", type=float, default=60.0, help="Simulated frame rate")
    parser.add_argument(
        "--randomness", choices=["smooth", "uniform"], default=None,
        help="Override the spacing randomness source",
    )
    parser.add_argument("--log-file", type=Path, default=None, help="Write the decision log as JSON")
    parser.add_argument("--debug", action="store_true", help="Log every spawn")
    return parser.parse_args(argv)


def summarize(result: TrackResult) -> None:
    """Log a short summary of a run."""
    kinds = Counter(d.kind.value for d in result.decisions)
    categories = Counter(d.category.value for d in result.decisions)
    outcome = "crashed" if result.collided else "survived"

    logger.info(f"Run {outcome} after {result.duration_ms / 1000:.1f}s (seed={result.seed})")
    logger.info(f"Score {result.score}, passed {result.passed}/{result.spawned}, near misses {result.near_misses}")
    logger.info(f"Final speed {result.final_speed:.2f}, phase {result.final_phase}")
    logger.info(f"Spawn kinds: {dict(kinds)}")
    logger.info(f"Categories: {dict(categories)}")


def run(args: argparse.Namespace) -> TrackResult:
    settings = Settings()
    if args.randomness:
        settings = settings.model_copy(update={"randomness": args.randomness})

    event_bus = EventBus()
    event_bus.subscribe(
        EventType.PHASE_CHANGED,
        lambda e: logger.info(f"[{e.timestamp / 1000:.1f}s] phase -> {e.data['new'].value}"),
    )

    director = Director(settings=settings, event_bus=event_bus)
    seed = normalize_seed(args.seed) if args.seed is not None else None
    jumper = ScriptedJumper(skill=args.skill, seed=seed)
    track = HeadlessTrack(director, jumper, frame_ms=1000.0 / args.fps)

    return track.run(args.seconds * 1000.0, seed=seed)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    from dotenv import load_dotenv

    # Load environment variables
    load_dotenv()

    args = parse_args(argv)
    setup_logging(args.debug)

    try:
        result = run(args)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return
    except Exception as e:
        logger.exception(f"Simulation failed: {e}")
        sys.exit(1)

    summarize(result)

    if args.log_file:
        with open(args.log_file, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, ensure_ascii=False, indent=2)
        logger.info(f"Decision log written to {args.log_file}")


if __name__ == "__main__":
    main()
