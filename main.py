"""
Main entry point for AV Merger.

This script configures logging, parses command-line arguments and runs either
the merge pipeline (pair audio and video files in a directory) or a single
concatenation. It maps the outcome to the process exit code.
"""

import sys
import threading
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger

from avmerger.cli import get_args
from avmerger.config.common import (
    EXIT_FATAL,
    EXIT_INTERRUPTED,
    EXIT_OK,
    EXIT_USAGE,
    LOGGER_FORMAT,
)
from avmerger.domain.exceptions import AVMergerException, UsageError
from avmerger.pipeline.merge_pipeline import MergePipeline
from avmerger.services.concat_service import ConcatTask
from avmerger.utils.modules import Modules


def configure_logger(level: str):
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOGGER_FORMAT)


def run_concat(args, cancel_event: threading.Event) -> int:
    ffmpeg_cmd = Modules.get_ffmpeg_path(args.ffmpeg)
    ConcatTask(ffmpeg_cmd=ffmpeg_cmd, cancel_event=cancel_event).run(args.videos, args.output)
    return EXIT_OK


def run_merge(args, cancel_event: threading.Event) -> int:
    if args.target_dir:
        project_dir = Path(args.target_dir).resolve()
        logger.info(f"Target directory specified: {project_dir}")
    else:
        project_dir = Path.cwd().resolve()
        logger.info(f"No target directory specified, using current working directory: {project_dir}")
    return MergePipeline(project_dir, args=args, cancel_event=cancel_event).run()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Runs AV Merger and returns the process exit code.

    Exit codes: 0 on success, 1 on a fatal error (or a failed pair with
    --strict), 2 on a usage error, 130 when interrupted.
    """
    args = get_args(argv)

    # DEBUG unless running optimized (-O), or unless a level was given.
    effective_log_level = args.log_level or ("DEBUG" if __debug__ else "INFO")
    configure_logger(effective_log_level)
    logger.debug(f"Parsed arguments: {args}")

    cancel_event = threading.Event()
    try:
        if args.command == "concat":
            return run_concat(args, cancel_event)
        return run_merge(args, cancel_event)
    except UsageError as e:
        logger.critical(str(e))
        return EXIT_USAGE
    except AVMergerException as e:
        logger.critical(str(e))
        return EXIT_FATAL
    except KeyboardInterrupt:
        cancel_event.set()
        logger.warning("Interrupted by user.")
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
