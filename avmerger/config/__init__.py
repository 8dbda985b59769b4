"""
Configuration Package for AV Merger.

This package centralizes the static configuration settings for the application.
It includes settings for:
- Recognized media file extensions and the merged-file marker prefix.
- Common application settings like the logging format and concurrency defaults.
- User-overridable values (FFmpeg location, worker count, failure policy) loaded
  from an optional `config.user.yaml` file.
"""
