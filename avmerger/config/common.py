"""
Common configuration settings used throughout the application.

This module contains globally shared configuration settings and constants. It
centralizes parameters for logging, concurrency and the external FFmpeg tool.
It also handles the loading of user-specific configurations from an external
YAML file, allowing for easy customization without modifying the source code.
"""
import os
from pathlib import Path

import yaml
from loguru import logger

# --- User-Defined Configuration ---
# This block loads user-specific settings from a 'config.user.yaml' file located
# at the project root. Every key is optional.
#
#   paths:
#     ffmpeg_dir: /opt/ffmpeg/bin
#   merge:
#     max_workers: 4
#     fail_on_task_error: false
#     webm_audio_codec: libvorbis

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
USER_CONFIG_PATH = PROJECT_ROOT / "config.user.yaml"

# The directory containing the FFmpeg executable. If None, the application
# assumes the executable is available in the system's PATH.
MODULE_PATH: Path | None = None

# Number of merges allowed to run at the same time. Half the logical cores,
# never less than one, since each FFmpeg process is itself multi-threaded.
DEFAULT_MAX_WORKERS = max(1, (os.cpu_count() or 1) // 2)

# Whether a failed pair makes the whole run exit non-zero. Failed pairs are
# always logged; by default they do not fail the batch.
FAIL_ON_TASK_ERROR = False

# The audio codec used when the video container cannot hold a copied MP3 stream.
WEBM_AUDIO_CODEC = "libvorbis"


def _load_user_config(config_path: Path) -> dict:
    """
    Reads the optional user configuration file.

    Returns an empty dict when the file does not exist or cannot be parsed.
    """
    if not config_path.is_file():
        logger.debug(f"User config '{config_path}' not found. Using built-in defaults.")
        return {}
    try:
        with config_path.open("r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Could not load or parse '{config_path}': {e}")
        return {}
    if user_config is None:
        return {}
    if not isinstance(user_config, dict):
        logger.warning(f"Ignoring '{config_path}': top level must be a mapping.")
        return {}
    return user_config


def _section(user_config: dict, name: str) -> dict:
    section = user_config.get(name) or {}
    if not isinstance(section, dict):
        logger.warning(f"Ignoring '{name}' in user config: expected a mapping, got {section!r}.")
        return {}
    return section


def _user_settings(user_config: dict) -> dict:
    """
    Validates the overrides found in the user configuration.

    Only valid values end up in the returned dict, under the keys
    `ffmpeg_dir`, `max_workers`, `fail_on_task_error` and `webm_audio_codec`.
    Invalid values are logged and left out, so the built-in default applies.
    """
    settings = {}
    paths_config = _section(user_config, "paths")
    merge_config = _section(user_config, "merge")

    ffmpeg_dir = paths_config.get("ffmpeg_dir")
    if ffmpeg_dir:
        if isinstance(ffmpeg_dir, str):
            settings["ffmpeg_dir"] = Path(ffmpeg_dir)
        else:
            logger.warning(f"Ignoring paths.ffmpeg_dir={ffmpeg_dir!r}: expected a path string.")

    max_workers = merge_config.get("max_workers")
    if max_workers is not None:
        try:
            if isinstance(max_workers, bool):
                raise TypeError("booleans are not worker counts")
            settings["max_workers"] = max(1, int(max_workers))
        except (TypeError, ValueError) as e:
            logger.warning(f"Ignoring merge.max_workers={max_workers!r}: {e}")

    fail_on_task_error = merge_config.get("fail_on_task_error")
    if fail_on_task_error is not None:
        if isinstance(fail_on_task_error, bool):
            settings["fail_on_task_error"] = fail_on_task_error
        else:
            logger.warning(
                f"Ignoring merge.fail_on_task_error={fail_on_task_error!r}: expected true or false."
            )

    webm_audio_codec = merge_config.get("webm_audio_codec")
    if webm_audio_codec:
        if isinstance(webm_audio_codec, str):
            settings["webm_audio_codec"] = webm_audio_codec
        else:
            logger.warning(f"Ignoring merge.webm_audio_codec={webm_audio_codec!r}: expected a codec name.")

    return settings


_settings = _user_settings(_load_user_config(USER_CONFIG_PATH))
MODULE_PATH = _settings.get("ffmpeg_dir", MODULE_PATH)
DEFAULT_MAX_WORKERS = _settings.get("max_workers", DEFAULT_MAX_WORKERS)
FAIL_ON_TASK_ERROR = _settings.get("fail_on_task_error", FAIL_ON_TASK_ERROR)
WEBM_AUDIO_CODEC = _settings.get("webm_audio_codec", WEBM_AUDIO_CODEC)


# --- Logging Configuration ---

# The format string for the Loguru logger. Merges run on worker threads, so the
# thread name is shown to tell concurrent tasks apart.
LOGGER_FORMAT = (
    "<green>{time:MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "{thread.name} - <level>{message}</level>"
)


# --- External Process Settings ---

# How often (in seconds) a running FFmpeg process checks the cancellation token.
CANCEL_POLL_INTERVAL = 0.2


# --- Exit Codes ---

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130
