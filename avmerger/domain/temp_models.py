"""
Defines data models for temporary state, namely the manifest that drives an
FFmpeg concatenation.
"""
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence

from loguru import logger

from ..config.media import CONCAT_MANIFEST_PREFIX, CONCAT_TEMP_DIR_PREFIX
from .exceptions import CleanupError, FilesystemError


class ConcatManifest:
    """
    A temporary list file naming the videos to concatenate, in order.

    The manifest is written into its own temporary directory. It is meant to be
    used as a context manager: the file and its directory are removed when the
    `with` block exits, whatever the outcome.

    Lifecycle:
    1. `__enter__` creates the directory and writes one `file` directive per input.
    2. The caller points FFmpeg's concat demuxer at `path`.
    3. `__exit__` removes the directory. A removal failure is logged as a
       `CleanupError` and never raised.

    Attributes:
        inputs (List[Path]): The videos to concatenate, in order.
        temp_dir (Optional[Path]): The directory holding the manifest, once created.
        path (Optional[Path]): The manifest file, once written.
    """

    def __init__(self, inputs: Sequence[Path], base_dir: Optional[Path] = None):
        self.inputs: List[Path] = list(inputs)
        self.base_dir = base_dir
        self.temp_dir: Optional[Path] = None
        self.path: Optional[Path] = None

    @staticmethod
    def directive(path: Path) -> str:
        """Formats one input as a concat demuxer `file` line."""
        escaped = str(path).replace("'", "'\\''")
        return f"file 'file:{escaped}'"

    def render(self) -> str:
        return "\n".join(self.directive(p) for p in self.inputs)

    def create(self) -> Path:
        """
        Creates the temporary directory and writes the manifest into it.

        Raises:
            FilesystemError: If the directory or the file cannot be created. Any
                directory created so far is removed before raising.
        """
        try:
            self.temp_dir = Path(
                tempfile.mkdtemp(prefix=CONCAT_TEMP_DIR_PREFIX, dir=self.base_dir)
            )
        except OSError as e:
            raise FilesystemError(
                f"error creating temporary directory for list of videos: {e}"
            ) from e

        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                prefix=CONCAT_MANIFEST_PREFIX,
                suffix=".txt",
                dir=self.temp_dir,
                delete=False,
            ) as f:
                self.path = Path(f.name)
                f.write(self.render())
        except OSError as e:
            self.cleanup()
            raise FilesystemError(
                f"error creating temp file for the list of videos: {e}"
            ) from e

        logger.debug(f"Wrote concat manifest with {len(self.inputs)} entries to {self.path}")
        return self.path

    def cleanup(self):
        """Removes the manifest and its directory, logging any failure."""
        if self.temp_dir is None:
            return
        try:
            shutil.rmtree(self.temp_dir)
            logger.debug(f"Removed temporary directory {self.temp_dir}")
        except OSError as e:
            logger.error(str(CleanupError(f"failed to clean up '{self.temp_dir}': {e}")))
        finally:
            self.temp_dir = None
            self.path = None

    def __enter__(self) -> "ConcatManifest":
        self.create()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.cleanup()
        return False
