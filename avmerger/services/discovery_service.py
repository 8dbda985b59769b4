"""
Provides the directory scan and the pairing of audio and video files.

The scan (`discover`) groups recognized media files by stem. The resolver
(`resolve_pairs`) keeps only the stems that can be merged and picks the audio
and video file for each. The resolver never changes the mapping it is given;
it builds a new list of pairs.
"""

from pathlib import Path
from typing import Iterable, List

from loguru import logger

from ..config.media import (
    AUDIO_EXTENSION,
    LEGACY_PAIR_EXTENSIONS,
    MEDIA_EXTENSIONS,
    MERGED_FILE_PREFIX,
    PAIR_MODE_GENERALIZED,
    PAIR_MODE_LEGACY,
    VIDEO_EXTENSIONS,
)
from ..domain.exceptions import FilesystemError
from ..domain.media import CandidateGroups, MediaEntry, ResolvedPair
from ..utils.format_utils import contains_any_extensions


def scan_entries(directory: Path) -> List[MediaEntry]:
    """
    Lists the recognized media files directly inside `directory`.

    Subdirectories, files carrying the merged-file marker prefix and files with
    an extension outside `MEDIA_EXTENSIONS` are skipped.

    Raises:
        FilesystemError: If the directory cannot be read.
    """
    try:
        children = list(directory.iterdir())
    except OSError as e:
        raise FilesystemError(f'failed to read directory "{directory}": {e}') from e

    entries: List[MediaEntry] = []
    for child in children:
        if child.is_dir():
            continue
        if child.name.startswith(MERGED_FILE_PREFIX):
            logger.trace(f"Skipping already merged file: {child.name}")
            continue
        if not contains_any_extensions(child, MEDIA_EXTENSIONS):
            continue
        entries.append(MediaEntry.from_path(child))
    return entries


def group_entries(entries: Iterable[MediaEntry]) -> CandidateGroups:
    """Groups entries by stem into {stem: {extension: path}}."""
    groups: CandidateGroups = {}
    for entry in entries:
        groups.setdefault(entry.stem, {})[entry.extension] = entry.path
    return groups


def discover(directory: Path) -> CandidateGroups:
    """
    Scans `directory` and returns the recognized media files grouped by stem.

    Raises:
        FilesystemError: If the directory cannot be read.
    """
    groups = group_entries(scan_entries(directory))
    logger.debug(f"Discovered {len(groups)} stem(s) with media files in {directory}")
    return groups


def _resolve_generalized(stem: str, extensions: dict) -> ResolvedPair | None:
    if AUDIO_EXTENSION not in extensions or len(extensions) < 2:
        return None
    # More than one video for the stem: the first in VIDEO_EXTENSIONS order wins.
    for video_ext in VIDEO_EXTENSIONS:
        if video_ext in extensions:
            return ResolvedPair(
                stem=stem,
                video=extensions[video_ext],
                audio=extensions[AUDIO_EXTENSION],
            )
    return None


def _resolve_legacy(stem: str, extensions: dict) -> ResolvedPair | None:
    if set(extensions) != set(LEGACY_PAIR_EXTENSIONS):
        return None
    video_ext, audio_ext = LEGACY_PAIR_EXTENSIONS
    return ResolvedPair(stem=stem, video=extensions[video_ext], audio=extensions[audio_ext])


def resolve_pairs(
    groups: CandidateGroups, mode: str = PAIR_MODE_GENERALIZED
) -> List[ResolvedPair]:
    """
    Selects the stems that form a complete audio/video pair.

    Modes:
        generalized: the stem needs the audio extension and at least one video
                     extension. Extra video files for the same stem are left alone.
        legacy: the stem's extensions must be exactly `LEGACY_PAIR_EXTENSIONS`.

    Args:
        groups: The result of `discover`. It is not modified.
        mode: One of `PAIR_MODES`.

    Returns:
        The resolved pairs, sorted by stem.
    """
    if mode == PAIR_MODE_GENERALIZED:
        resolver = _resolve_generalized
    elif mode == PAIR_MODE_LEGACY:
        resolver = _resolve_legacy
    else:
        raise ValueError(f"Unknown pair mode: {mode!r}")

    pairs: List[ResolvedPair] = []
    for stem, extensions in sorted(groups.items()):
        pair = resolver(stem, extensions)
        if pair is None:
            logger.trace(f"Stem '{stem}' has no complete pair: {sorted(extensions)}")
            continue
        pairs.append(pair)
    return pairs
