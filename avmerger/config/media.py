"""
Configuration settings related to media files.

This module defines the extensions the application recognizes, how audio and
video files are paired, and how merged output files are named.
"""

# ======================================================================================
# File Identification
# ======================================================================================

# The only audio extension that is paired with a video file.
AUDIO_EXTENSION = ".mp3"

# Video extensions that can receive the audio track. The order matters: when a
# stem has more than one video file, the first extension in this tuple wins.
VIDEO_EXTENSIONS = (".mp4", ".webm")

# Every extension the directory scan keeps. Anything else is ignored.
MEDIA_EXTENSIONS = (AUDIO_EXTENSION,) + VIDEO_EXTENSIONS

# The two extensions a stem must have, and nothing else, in legacy pair mode.
# The first one is the video, the second one the audio.
LEGACY_PAIR_EXTENSIONS = (".mp4", ".mp3")

PAIR_MODE_GENERALIZED = "generalized"
PAIR_MODE_LEGACY = "legacy"
PAIR_MODES = (PAIR_MODE_GENERALIZED, PAIR_MODE_LEGACY)


# ======================================================================================
# Output Naming
# ======================================================================================

# Prefix marking files produced by a merge. Files starting with it are skipped by
# the directory scan so a rerun never picks up its own output.
MERGED_FILE_PREFIX = "[MERGED]"


def merged_file_name(video_name: str) -> str:
    """Returns the output filename for a merge of the given video file."""
    return f"{MERGED_FILE_PREFIX} {video_name}"


# ======================================================================================
# Concatenation
# ======================================================================================

# Prefixes of the temporary directory and manifest file built for a concat run.
CONCAT_TEMP_DIR_PREFIX = "concat-files"
CONCAT_MANIFEST_PREFIX = "video-file-list"

# The minimum number of inputs a concatenation needs.
MIN_CONCAT_INPUTS = 2
