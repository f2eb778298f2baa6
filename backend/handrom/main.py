"""
HandROM Command Line

Re-scores stored frame logs offline.

Run with:
    python -m handrom.main rescore recording.json
    python -m handrom.main rescore recording.json --hand-type RIGHT --settings settings.json
    python -m handrom.main frame recording.json 45 --hand-type RIGHT

The frame log is a JSON object with a "frames" array of tracker frames
(see handrom.schemas.TrackingFrameSchema) and an optional "handType".
Output is JSON on stdout with camelCase keys.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from .config import EngineSettings
from .domain.landmarks import HandType
from .errors import HandROMError
from .schemas import FrameLogSchema, convert_frame_result, convert_report
from .services import SessionAggregator

logger = logging.getLogger(__name__)


# =============================================================================
# Argument Parsing
# =============================================================================

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(prog="handrom", description="Hand/wrist range-of-motion engine")
    ap.add_argument("--settings", type=str, default=None, help="JSON engine settings file")
    ap.add_argument("--verbose", action="store_true", help="Log temporal rejections")

    sub = ap.add_subparsers(dest="command", required=True)

    rescore = sub.add_parser("rescore", help="Score a whole frame log into a session report")
    rescore.add_argument("frame_log", type=str)
    rescore.add_argument("--hand-type", type=str, choices=["LEFT", "RIGHT"], default=None,
                         help="Recorded hand (overrides the log's handType)")

    frame = sub.add_parser("frame", help="Measure one frame of a log without smoothing")
    frame.add_argument("frame_log", type=str)
    frame.add_argument("frame_number", type=int)
    frame.add_argument("--hand-type", type=str, choices=["LEFT", "RIGHT"], default=None,
                       help="Hand to measure the wrist against")

    return ap.parse_args(argv)


def load_frame_log(path: str) -> FrameLogSchema:
    return FrameLogSchema.model_validate_json(Path(path).read_text(encoding="utf-8"))


# =============================================================================
# Commands
# =============================================================================

def run_rescore(aggregator: SessionAggregator, log: FrameLogSchema, hand_type: HandType) -> str:
    report = aggregator.rescore(log.to_domain(), hand_type)
    return convert_report(report).model_dump_json(by_alias=True, indent=2)


def run_frame(aggregator: SessionAggregator, log: FrameLogSchema, frame_number: int,
              hand_type: HandType) -> str:
    for frame in log.frames:
        if frame.frame_number == frame_number:
            result = aggregator.calculate_frame_stateless(frame.to_domain(), hand_type)
            return convert_frame_result(result).model_dump_json(by_alias=True, indent=2)
    raise LookupError(f"Frame {frame_number} not in log")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        settings = EngineSettings.from_file(args.settings) if args.settings else EngineSettings()
        log = load_frame_log(args.frame_log)
    except (OSError, ValidationError, HandROMError) as e:
        logger.error(f"Could not load input: {e}")
        return 1

    hand_type = HandType(args.hand_type) if args.hand_type else log.hand_type.to_domain()
    aggregator = SessionAggregator(settings)

    try:
        if args.command == "rescore":
            output = run_rescore(aggregator, log, hand_type)
        else:
            output = run_frame(aggregator, log, args.frame_number, hand_type)
    except (HandROMError, LookupError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
