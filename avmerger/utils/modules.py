"""
This module provides the Modules class to locate and verify the FFmpeg
executable the application depends on.
"""
import subprocess
import sys
from typing import Optional

from loguru import logger

from ..config.common import MODULE_PATH


class Modules:
    """
    A utility class for the external FFmpeg tool.

    The executable is looked up in this order: an explicit path (from the
    command line), the `ffmpeg_dir` from `config.user.yaml`, and finally plain
    `ffmpeg`, which relies on the system PATH.
    """

    @staticmethod
    def get_ffmpeg_path(override: Optional[str] = None) -> str:
        """
        Determines the FFmpeg executable to use.

        Args:
            override: A path given on the command line. Used as-is when set.

        Returns:
            A string containing the command or absolute path to the FFmpeg executable.
        """
        if override:
            return override

        ffmpeg_exe_name = "ffmpeg.exe" if sys.platform == "win32" else "ffmpeg"

        if MODULE_PATH and MODULE_PATH.is_dir():
            configured_ffmpeg_path = MODULE_PATH / ffmpeg_exe_name
            if configured_ffmpeg_path.is_file():
                logger.debug(f"Using FFmpeg from configured path: '{configured_ffmpeg_path}'")
                return str(configured_ffmpeg_path)
            logger.warning(
                f"`ffmpeg_dir` is configured, but '{ffmpeg_exe_name}' was not found there. Falling back to system PATH."
            )

        return "ffmpeg"

    @staticmethod
    def verify_ffmpeg(ffmpeg_cmd: str) -> bool:
        """
        Verifies that FFmpeg can be launched by running `ffmpeg -version`.

        Returns:
            True if the command ran and exited with status 0, False otherwise.
        """
        try:
            result = subprocess.run(
                [ffmpeg_cmd, "-version"],
                check=True,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except subprocess.CalledProcessError as e:
            logger.error(f"FFmpeg version command failed (return code {e.returncode}):\n{e.stderr}")
            return False
        except FileNotFoundError:
            logger.error(
                f"FFmpeg command '{ffmpeg_cmd}' not found. Please ensure FFmpeg is installed and accessible.\n"
                "You can either add it to your system's PATH, pass --ffmpeg, or set 'paths.ffmpeg_dir' in 'config.user.yaml'."
            )
            return False
        except OSError as e:
            logger.error(f"Could not run '{ffmpeg_cmd} -version': {e}")
            return False

        version_output_lines = result.stdout.splitlines()
        first_line = version_output_lines[0] if version_output_lines else ""
        logger.debug(f"FFmpeg version check successful: {first_line}")
        return True
