"""
Value objects for the files AV Merger works on.

A directory scan yields `MediaEntry` objects, which are grouped by stem into a
`CandidateGroups` mapping. The pair resolver turns qualifying groups into
`ResolvedPair` objects, each consumed by exactly one merge task.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

from ..config.media import AUDIO_EXTENSION


@dataclass(frozen=True)
class MediaEntry:
    """
    A recognized media file found in the scanned directory.

    Attributes:
        path: Full path to the file.
        stem: The filename without its extension, used as the pairing key.
        extension: The lowercase extension including the leading dot.
    """

    path: Path
    stem: str
    extension: str

    @classmethod
    def from_path(cls, path: Path) -> "MediaEntry":
        return cls(path=path, stem=path.stem, extension=path.suffix.lower())

    @property
    def is_audio(self) -> bool:
        return self.extension == AUDIO_EXTENSION


# stem -> {extension -> path}. One path per extension; a later entry with the
# same extension replaces the earlier one.
CandidateGroups = Dict[str, Dict[str, Path]]


@dataclass(frozen=True)
class ResolvedPair:
    """A stem with exactly one audio file and one video file, ready to merge."""

    stem: str
    video: Path
    audio: Path

    @property
    def video_extension(self) -> str:
        return self.video.suffix.lower()
