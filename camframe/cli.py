"""Command-line runner: frame a scene file and print the visibility report.

    python -m camframe scene.json
    python -m camframe scene.json --orthographic --json
    python -m camframe scene.json --toggle       # check both projections

Exit status is 0 when no visibility check failed during the run (both
projections with --toggle), 1 when any did, and 2 on invalid input.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from camframe.messages import ReportMessage, SceneFile
from camframe.session import FramingSession
from camframe.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="camframe",
        description="Frame a set of bounding volumes and check their visibility",
    )
    parser.add_argument("scene", type=Path, help="Scene JSON file")
    parser.add_argument("--config", type=Path, default=None,
                        help="Config overlay JSON (default: $CAMFRAME_CONFIG)")
    parser.add_argument("--orthographic", action="store_true", help="Start in orthographic mode")
    parser.add_argument("--toggle", action="store_true",
                        help="After settling, toggle the projection and check again")
    parser.add_argument("--fps", type=float, default=60.0, help="Simulated frame rate (default 60)")
    parser.add_argument("--max-frames", type=int, default=10_000)
    parser.add_argument("--legacy-depth-scan", action="store_true",
                        help="Reproduce the historical front/back extremal scan")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument("--debug", action="store_true")
    parser.add_argument("--log-file", default=None)
    return parser


def load_scene(path: Path) -> SceneFile:
    return SceneFile.model_validate_json(path.read_text())


def _overlay(scene: SceneFile, args: argparse.Namespace) -> dict:
    overlay: dict = {"camera": dict(scene.camera)}
    if scene.viewport is not None:
        overlay["viewport"] = scene.viewport.model_dump()
    if args.orthographic:
        overlay["camera"]["orthographic"] = True
    if args.legacy_depth_scan:
        overlay["framing"] = {"legacy_depth_scan": True}
    return overlay


def run(scene: SceneFile, args: argparse.Namespace) -> FramingSession:
    session = FramingSession.from_config(_overlay(scene, args), config_path=args.config)
    session.add_bounds_many(v.to_volume() for v in scene.volumes)

    dt = 1.0 / args.fps
    frames = session.run_until_settled(dt, max_frames=args.max_frames)
    logger.info("Camera settled after %d frames at %s", frames, session.camera.position.tolist())

    if args.toggle:
        session.toggle_projection()
    return session


def main(argv: Optional[list[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    setup_logging(log_file=args.log_file, debug=args.debug)

    try:
        scene = load_scene(args.scene)
    except FileNotFoundError:
        logger.error("Scene file not found: %s", args.scene)
        return 2
    except ValidationError as e:
        logger.error("Invalid scene file %s: %s", args.scene, e)
        return 2

    if not scene.volumes:
        logger.warning("Scene %s has no volumes; nothing to frame", args.scene)

    try:
        session = run(scene, args)
    except (ValueError, RuntimeError) as e:
        logger.error("Framing failed: %s", e)
        return 2

    report = session.report
    if args.json:
        print(ReportMessage.from_report(report).model_dump_json(indent=2))
    else:
        print(session.report_text(), end="")
    return 0 if session.fail_count == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
