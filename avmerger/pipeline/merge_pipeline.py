"""
The merge pipeline: find audio/video pairs in a directory and merge each of
them on a bounded pool of workers.
"""
import argparse
import threading
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from loguru import logger

from ..config.common import (
    DEFAULT_MAX_WORKERS,
    EXIT_FATAL,
    EXIT_OK,
    FAIL_ON_TASK_ERROR,
)
from ..config.media import PAIR_MODE_GENERALIZED
from ..domain.exceptions import ExternalToolError, TaskError
from ..domain.media import ResolvedPair
from ..services.discovery_service import discover, resolve_pairs
from ..services.merge_service import MergeTask
from ..utils.format_utils import format_timedelta
from ..utils.modules import Modules
from .scheduler import TaskScheduler


class MergePipeline:
    """
    Runs the merge mode for one directory.

    Options are read from the parsed command-line arguments, falling back to
    the configured defaults when an attribute is missing or None:
    `processes`, `pair_mode`, `strict` and `ffmpeg`.
    """

    def __init__(
        self,
        project_dir: Path,
        args: Optional[argparse.Namespace] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.project_dir: Path = project_dir.resolve()
        self.args = args if args is not None else argparse.Namespace()
        self.cancel_event = cancel_event or threading.Event()

        self.max_workers = max(1, getattr(self.args, "processes", None) or DEFAULT_MAX_WORKERS)
        self.pair_mode = getattr(self.args, "pair_mode", None) or PAIR_MODE_GENERALIZED
        strict = getattr(self.args, "strict", None)
        self.strict = FAIL_ON_TASK_ERROR if strict is None else strict
        self.ffmpeg_cmd = Modules.get_ffmpeg_path(getattr(self.args, "ffmpeg", None))

        self.errors: List[TaskError] = []

    def find_pairs(self) -> List[ResolvedPair]:
        """Scans the directory; a read failure raises FilesystemError."""
        groups = discover(self.project_dir)
        pairs = resolve_pairs(groups, self.pair_mode)
        logger.info(
            f"Found {len(pairs)} pair(s) to merge among {len(groups)} stem(s) in {self.project_dir}"
        )
        return pairs

    def run(self) -> int:
        """
        Merges every pair in the directory and returns the exit code.

        Raises:
            FilesystemError: The directory could not be read.
            ExternalToolError: FFmpeg cannot be launched at all.
        """
        pairs = self.find_pairs()
        if not pairs:
            logger.info("Nothing to merge.")
            return EXIT_OK

        if not Modules.verify_ffmpeg(self.ffmpeg_cmd):
            raise ExternalToolError(f"cannot launch '{self.ffmpeg_cmd}'")

        merge_task = MergeTask(ffmpeg_cmd=self.ffmpeg_cmd, cancel_event=self.cancel_event)
        scheduler = TaskScheduler(self.max_workers, cancel_event=self.cancel_event)
        logger.info(f"Using {self.max_workers} worker(s).")

        start = datetime.now()
        self.errors = scheduler.run(
            pairs,
            merge_task.run,
            paths_of=lambda pair: (pair.video, pair.audio),
        )
        elapsed = format_timedelta(datetime.now() - start)

        merged = scheduler.completed - len(self.errors)
        if self.errors:
            logger.warning(
                f"Finished in {elapsed}: {merged} merged, {len(self.errors)} failed."
            )
            if self.strict:
                return EXIT_FATAL
        else:
            logger.success(f"Finished in {elapsed}: {merged} merged.")
        return EXIT_OK
