"""
Utilities Package for AV Merger.

Modules:
    - ffmpeg_utils.py: Runs external commands with captured or streamed output
      and cooperative cancellation.
    - format_utils.py: Helpers for formatting durations and matching extensions.
    - modules.py: Locates and verifies the FFmpeg executable.
"""
