"""
This module provides a function for running external tools such as FFmpeg.
"""

import os
import shlex
import subprocess
import threading
from typing import List, Optional

from loguru import logger

from ..config.common import CANCEL_POLL_INTERVAL


def display_cmd(cmd_list: List[str]) -> str:
    """Quotes and joins a command list for logging."""
    if os.name == "nt":
        return subprocess.list2cmdline(cmd_list)
    return shlex.join(cmd_list)


def run_cmd(
    cmd_list: List[str],
    cancel_event: Optional[threading.Event] = None,
    capture_output: bool = True,
) -> Optional[subprocess.CompletedProcess]:
    """
    Executes an external command and waits for it to finish.

    This is a wrapper around `subprocess.Popen` that adds logging and
    cooperative cancellation. While the command runs, `cancel_event` is checked
    every `CANCEL_POLL_INTERVAL` seconds; once it is set the process is
    terminated and its (negative) return code is reported as usual.

    Args:
        cmd_list: The command to execute as a list of arguments.
        cancel_event: Shared cancellation token. If None, the command can only
                      end on its own.
        capture_output: If True, stdout and stderr are captured and returned.
                        If False, they go straight to this process's streams.

    Returns:
        A `subprocess.CompletedProcess` with the return code and any captured
        output. Returns `None` if the command could not be started (e.g.
        `FileNotFoundError`).
    """
    if not cmd_list:
        logger.error("run_cmd received an empty command list.")
        return None

    display_cmd_str = display_cmd(cmd_list)
    logger.debug(f"Executing: {display_cmd_str}")

    pipe = subprocess.PIPE if capture_output else None
    try:
        proc = subprocess.Popen(
            cmd_list,
            stdin=subprocess.DEVNULL,  # FFmpeg must never wait for an overwrite prompt.
            stdout=pipe,
            stderr=pipe,
            text=True,
            encoding="utf-8",
            errors="replace",
            shell=False,
        )
    except FileNotFoundError:
        logger.error(
            f"Error: Command not found (e.g., '{cmd_list[0]}'). Ensure it's in your system's PATH or configured correctly."
        )
        return None
    except OSError as e:
        logger.error(f"Could not start command '{display_cmd_str}': {e}")
        return None

    with proc:
        if cancel_event is None:
            stdout, stderr = proc.communicate()
        else:
            while True:
                if cancel_event.is_set():
                    logger.warning(f"Cancellation requested, terminating: {display_cmd_str}")
                    proc.terminate()
                    stdout, stderr = proc.communicate()
                    break
                try:
                    stdout, stderr = proc.communicate(timeout=CANCEL_POLL_INTERVAL)
                    break
                except subprocess.TimeoutExpired:
                    continue

    if stderr and proc.returncode != 0:
        logger.debug(f"Command stderr (error, rc={proc.returncode}): {stderr}")
    elif stderr:
        logger.trace(f"Command stderr (non-error, rc={proc.returncode}): {stderr}")

    return subprocess.CompletedProcess(cmd_list, proc.returncode, stdout, stderr)
