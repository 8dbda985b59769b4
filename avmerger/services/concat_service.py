"""
Provides the concat task: joining an ordered list of videos into one file with
FFmpeg's concat demuxer.
"""
import threading
from pathlib import Path
from typing import List, Optional, Sequence

from loguru import logger

from ..config.media import MIN_CONCAT_INPUTS
from ..domain.exceptions import ExternalToolError, UsageError
from ..domain.temp_models import ConcatManifest
from ..utils.ffmpeg_utils import run_cmd


class ConcatTask:
    """
    Concatenates videos in the order given.

    FFmpeg's own output is not captured; it is shown directly on this
    process's stdout and stderr. The temporary manifest is removed on every
    exit path.
    """

    def __init__(
        self,
        ffmpeg_cmd: str = "ffmpeg",
        cancel_event: Optional[threading.Event] = None,
        temp_base_dir: Optional[Path] = None,
    ):
        self.ffmpeg_cmd = ffmpeg_cmd
        self.cancel_event = cancel_event
        self.temp_base_dir = temp_base_dir

    @staticmethod
    def validate(inputs: Sequence[Path]):
        if not inputs:
            raise UsageError("no video files to concat provided")
        if len(inputs) < MIN_CONCAT_INPUTS:
            raise UsageError("provide more than one video to concat")

    def build_cmd(self, manifest_path: Path, output: Path) -> List[str]:
        return [
            self.ffmpeg_cmd, "-f", "concat", "-safe", "0",
            "-i", str(manifest_path), str(output),
        ]

    def run(self, inputs: Sequence[Path], output: Path) -> Path:
        """
        Runs the concatenation.

        Raises:
            UsageError: Fewer than two inputs were given. Nothing is created.
            FilesystemError: The manifest could not be written.
            ExternalToolError: FFmpeg could not start or exited non-zero.
        """
        self.validate(inputs)

        with ConcatManifest(inputs, base_dir=self.temp_base_dir) as manifest:
            cmd = self.build_cmd(manifest.path, output)
            logger.info(f'Concatenating {len(manifest.inputs)} videos into "{output}"')
            result = run_cmd(cmd, cancel_event=self.cancel_event, capture_output=False)
            if result is None:
                raise ExternalToolError(f"failed to start '{self.ffmpeg_cmd}'")
            if result.returncode != 0:
                raise ExternalToolError(
                    f"failed to run ffmpeg concat command: exit status {result.returncode}",
                    returncode=result.returncode,
                )

        logger.success(f'Concatenated videos into "{output}"')
        return output
