"""
Provides the merge task: muxing one audio file into one video file with FFmpeg
and removing both sources once the merged file exists.
"""
import threading
from pathlib import Path
from typing import List, Optional

from loguru import logger

from ..config.common import WEBM_AUDIO_CODEC
from ..config.media import merged_file_name
from ..domain.exceptions import ExternalToolError, FilesystemError, UnsupportedFormatError
from ..domain.media import ResolvedPair
from ..utils.ffmpeg_utils import run_cmd


class MergeTask:
    """
    Merges a `ResolvedPair` into `"[MERGED] <video name>"` next to the video.

    The FFmpeg invocation depends on the video container:
    - `.mp4`: both streams are copied (`-c copy`).
    - `.webm`: the video stream is copied and the audio is re-encoded with
      `audio_codec`, since MP3 cannot be stored in WebM.
    Any other extension raises `UnsupportedFormatError` without running FFmpeg.

    On success the video file is removed, then the audio file. The task stops
    at the first failure, so a video that cannot be removed leaves the audio
    file in place.
    """

    def __init__(
        self,
        ffmpeg_cmd: str = "ffmpeg",
        cancel_event: Optional[threading.Event] = None,
        audio_codec: str = WEBM_AUDIO_CODEC,
    ):
        self.ffmpeg_cmd = ffmpeg_cmd
        self.cancel_event = cancel_event
        self.audio_codec = audio_codec

    def build_cmd(self, video: Path, audio: Path) -> List[str]:
        output = video.with_name(merged_file_name(video.name))
        ext = video.suffix.lower()
        if ext == ".mp4":
            codec_args = ["-c", "copy"]
        elif ext == ".webm":
            codec_args = ["-c:v", "copy", "-c:a", self.audio_codec]
        else:
            raise UnsupportedFormatError(
                f'unrecognized file extension "{video.suffix}" of file "{video}"'
            )
        return [self.ffmpeg_cmd, "-i", str(video), "-i", str(audio), *codec_args, str(output)]

    def run(self, pair: ResolvedPair) -> Path:
        """
        Runs the merge and removes the sources.

        Returns:
            The path of the merged file.

        Raises:
            UnsupportedFormatError: The video extension has no known invocation.
            ExternalToolError: FFmpeg could not start or exited non-zero.
            FilesystemError: A source file could not be removed.
        """
        cmd = self.build_cmd(pair.video, pair.audio)
        output = Path(cmd[-1])

        logger.info(f'Merging "{pair.video.name}" and "{pair.audio.name}"')
        result = run_cmd(cmd, cancel_event=self.cancel_event)
        if result is None:
            raise ExternalToolError(f"failed to start '{self.ffmpeg_cmd}'")
        if result.returncode != 0:
            raise ExternalToolError(
                f"ffmpeg exited with status {result.returncode}",
                returncode=result.returncode,
                stderr=result.stderr or "",
            )
        logger.success(f'Merged "{pair.video.name}" and "{pair.audio.name}" to "{output.name}"')

        for source in (pair.video, pair.audio):
            try:
                source.unlink()
            except OSError as e:
                raise FilesystemError(f'failed to remove file "{source}": {e}') from e
            logger.info(f'Removed "{source.name}"')

        return output
