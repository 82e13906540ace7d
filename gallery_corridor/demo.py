"""Headless walk through the gallery, printing a summary per simulated second."""
from __future__ import annotations

import argparse
import logging
import math
from typing import Optional, Sequence

from .events import EventHub, RESIZE, WHEEL, ResizeEvent, WheelEvent
from .preload import PreloadReport
from .session import GallerySession
from .settings import SessionSeeds, load_gallery_settings

LOGGER = logging.getLogger(__name__)


def positive_float(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"'{value}' is not a valid number") from exc
    if not math.isfinite(parsed) or parsed <= 0:
        raise argparse.ArgumentTypeError("Value must be a positive finite number")
    return parsed


def viewport_value(value: str) -> tuple[int, int]:
    width, _, height = value.lower().partition("x")
    try:
        parsed = (int(width), int(height))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"'{value}' is not WIDTHxHEIGHT") from exc
    if parsed[0] <= 0 or parsed[1] <= 0:
        raise argparse.ArgumentTypeError("Viewport dimensions must be positive")
    return parsed


def parse_args(argv: Optional[Sequence[str]] = None):
    parser = argparse.ArgumentParser(description="Simulate the gallery corridor walk without a renderer.")
    parser.add_argument("--seconds", type=positive_float, default=5.0, help="Simulated duration (default: 5).")
    parser.add_argument("--fps", type=positive_float, default=60.0, help="Simulated frame rate (default: 60).")
    parser.add_argument(
        "--viewport",
        type=viewport_value,
        default=(1280, 800),
        metavar="WxH",
        help="Viewport size used for tier selection (default: 1280x800).",
    )
    parser.add_argument(
        "--boost-every",
        type=positive_float,
        default=None,
        metavar="SECONDS",
        help="Send a scroll-forward signal at this interval.",
    )
    parser.add_argument("--config-dir", help="Directory holding alternative JSON settings.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for layout and starting row.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def simulate(
    session: GallerySession,
    hub: EventHub,
    *,
    seconds: float,
    fps: float,
    boost_every: Optional[float] = None,
) -> list[str]:
    lines = []
    frame_ms = 1000.0 / fps
    frames = int(seconds * fps)
    # //1.- Intervals shorter than a frame boost on every frame.
    boost_frames = max(1, round(boost_every * fps)) if boost_every else 0
    summary_frames = max(1, round(fps))
    for index in range(frames + 1):
        if boost_frames and index and index % boost_frames == 0:
            hub.dispatch(WHEEL, WheelEvent(delta_y=-1.0))
        snapshot = session.frame(index * frame_ms)
        if index % summary_frames == 0:
            lines.append(
                f"t={snapshot.elapsed_ms / 1000.0:5.2f}s position={snapshot.camera.position:8.1f} "
                f"distance={snapshot.camera.total_distance:8.1f} speed=x{snapshot.camera.speed_multiplier:.2f} "
                f"perspective={snapshot.perspective:.0f}px drawables={len(session.draw(snapshot))}"
            )
    return lines


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(asctime)s] %(levelname)s %(message)s",
    )
    settings = load_gallery_settings(args.config_dir)
    seeds = SessionSeeds(args.seed, args.seed) if args.seed is not None else SessionSeeds.from_environment()
    session = GallerySession(settings, seeds=seeds)
    hub = EventHub()
    session.attach(hub)
    try:
        hub.dispatch(RESIZE, ResizeEvent(*args.viewport))
        session.apply_preload(PreloadReport(loaded=set(session.asset_refs())))
        presentation = session.scene()["presentation"] or {}
        print(f"Tier: {session.tier.value if session.tier else 'none'} mode={presentation.get('mode')}")
        print(f"Loop length: {session.layout.loop_length:.0f} over {session.layout.row_count} rows")
        for line in simulate(session, hub, seconds=args.seconds, fps=args.fps, boost_every=args.boost_every):
            print(line)
    finally:
        session.detach()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
