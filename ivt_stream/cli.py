"""Command line interface for offline replay of recorded gaze streams."""
from __future__ import annotations

import argparse
import json
import logging

from .config import ComputationalConstants, SessionConfig, VelocityMode
from .display import DisplayMapper
from .io import read_raw_samples, read_tsv, write_events
from .metrics import summarize_movements
from .processor import GazeSampleProcessor


def _add_display_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--screen-width", type=float, required=True, help="Screen width in px")
    parser.add_argument("--screen-height", type=float, required=True, help="Screen height in px")
    parser.add_argument("--display-width-mm", type=float, required=True, help="Display width in mm")
    parser.add_argument("--display-height-mm", type=float, required=True, help="Display height in mm")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Streaming I-VT gaze classification")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    classify = sub.add_parser("classify", help="Replay a raw gaze TSV through the classifier")
    classify.add_argument("input", help="TSV with raw binocular gaze samples")
    classify.add_argument("output", help="Path to write the classified event TSV")
    _add_display_arguments(classify)
    classify.add_argument(
        "--mode",
        choices=[mode.value for mode in VelocityMode],
        default=VelocityMode.GAZE_VECTOR_ANGLE.value,
        help="Velocity calculation method",
    )
    classify.add_argument(
        "--threshold",
        type=float,
        default=ComputationalConstants.DEFAULT_VELOCITY_THRESHOLD,
        help="Velocity threshold deg/s (<= 0 disables classification)",
    )
    classify.add_argument(
        "--duration-ms",
        type=float,
        default=ComputationalConstants.DEFAULT_NOT_A_SACCADE_DURATION_MS,
        help="Sub-threshold duration in ms before a sample counts as fixation",
    )

    pitch = sub.add_parser("pitch", help="Print the pixel pitch of a display configuration")
    _add_display_arguments(pitch)

    summary = sub.add_parser("summary", help="Summarize a classified event TSV per eye")
    summary.add_argument("input", help="TSV written by the classify command")

    return parser


def build_session_config(args: argparse.Namespace) -> SessionConfig:
    return SessionConfig.create(
        screen_width_px=args.screen_width,
        screen_height_px=args.screen_height,
        display_width_mm=args.display_width_mm,
        display_height_mm=args.display_height_mm,
        velocity_mode=getattr(args, "mode", VelocityMode.GAZE_VECTOR_ANGLE),
        velocity_threshold_deg_per_sec=getattr(
            args, "threshold", ComputationalConstants.DEFAULT_VELOCITY_THRESHOLD
        ),
        not_a_saccade_duration_threshold_ms=getattr(
            args, "duration_ms", ComputationalConstants.DEFAULT_NOT_A_SACCADE_DURATION_MS
        ),
    )


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "classify":
        processor = GazeSampleProcessor(build_session_config(args))
        samples = read_raw_samples(args.input)
        df = write_events(processor.process_many(samples), args.output)
        print(f"Classified {len(df)} of {len(samples)} samples -> {args.output}")
        return

    if args.command == "pitch":
        mapper = DisplayMapper(build_session_config(args).display)
        print(f"Horizontal pixel pitch: {mapper.pixel_pitch_h:.4f} mm/px")
        print(f"Vertical pixel pitch:   {mapper.pixel_pitch_v:.4f} mm/px")
        return

    if args.command == "summary":
        print(json.dumps(summarize_movements(read_tsv(args.input)), indent=2))
        return


if __name__ == "__main__":
    main()
