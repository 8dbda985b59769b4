"""
Command-Line Interface (CLI) setup for AV Merger.

This module uses Python's `argparse` to define and parse the command-line
arguments. There are two commands: `merge` (the default) pairs audio and video
files in a directory, and `concat` joins a list of videos into one file.
"""
import argparse
from pathlib import Path
from typing import Optional, Sequence

from .config.media import PAIR_MODES


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="av-merger",
        description="Merge audio and video files sharing a name, or concatenate videos.",
    )
    parser.add_argument(
        "--log-level", type=str, default=None,
        choices=["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level.",
    )
    parser.add_argument(
        "--ffmpeg", type=str, default=None,
        help="FFmpeg executable to use (default: config.user.yaml, then PATH).",
    )
    # Values used when no command is given.
    parser.set_defaults(
        target_dir=None, processes=None, pair_mode=None, strict=None
    )

    subparsers = parser.add_subparsers(dest="command")

    merge_parser = subparsers.add_parser(
        "merge", help="Merge every <name>.mp3 into <name>.mp4 / <name>.webm in a directory."
    )
    merge_parser.add_argument(
        "--target-dir", type=str, default=None,
        help="Directory to scan (default: current working directory).",
    )
    merge_parser.add_argument(
        "--processes", type=int, default=None,
        help="Number of merges to run at the same time (default: half the CPU cores).",
    )
    merge_parser.add_argument(
        "--pair-mode", choices=PAIR_MODES, default=None,
        help="'generalized' pairs the audio with any known video; 'legacy' requires exactly .mp4 and .mp3.",
    )
    merge_parser.add_argument(
        "--strict", action="store_true", default=None,
        help="Exit with a non-zero status if any pair fails to merge.",
    )

    concat_parser = subparsers.add_parser(
        "concat", help="Concatenate two or more videos, in the order given."
    )
    concat_parser.add_argument(
        "videos", nargs="*", type=Path, help="Videos to concatenate, in order."
    )
    concat_parser.add_argument(
        "-o", "--output", type=Path, required=True, help="Output file."
    )

    return parser


def get_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parses command-line arguments for AV Merger.

    Returns:
        argparse.Namespace: The parsed arguments. `command` is always set.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        args.command = "merge"

    if args.command == "merge" and args.processes is not None and args.processes < 1:
        parser.error("--processes must be at least 1")

    return args
