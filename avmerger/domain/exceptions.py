"""
Defines custom exception types for AV Merger.

The application distinguishes failures that end the whole run (usage errors,
startup filesystem errors, a failed concatenation) from failures that only end
one merge task. The exception classes below map to those categories; whether an
error is fatal depends on where it is raised, not on its class alone.

All custom exceptions inherit from the base `AVMergerException`.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple


class AVMergerException(Exception):
    """Base class for all custom exceptions in AV Merger."""

    pass


class UsageError(AVMergerException):
    """
    Raised for a malformed invocation, such as fewer than two concat inputs.

    Always fatal: the program stops before doing any work.
    """

    pass


class FilesystemError(AVMergerException):
    """
    Raised when listing a directory, creating a file, or deleting a file fails.

    Fatal during startup (scanning the directory, building the concat manifest).
    Inside a merge task it only aborts that task.
    """

    pass


class UnsupportedFormatError(AVMergerException):
    """
    Raised when a merge task gets a video whose extension it has no FFmpeg
    invocation for. The tool is never started in that case.
    """

    pass


class ExternalToolError(AVMergerException):
    """
    Raised when FFmpeg cannot be launched or exits with a non-zero status.

    Attributes:
        returncode: The exit status, or None when the process never started.
        stderr: The diagnostic output captured from the process, if any.
    """

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr

    def __str__(self) -> str:
        message = super().__str__()
        if self.stderr:
            return f"{message}: command error: '{self.stderr.strip()}'"
        return message


class CleanupError(AVMergerException):
    """
    Raised when a temporary manifest or its directory cannot be removed.

    Only ever logged; it never changes the exit status of the run.
    """

    pass


@dataclass(frozen=True)
class TaskError:
    """
    A failed merge task, as delivered to the error collector.

    Attributes:
        paths: The file(s) the task was working on when it failed.
        cause: The exception that ended the task.
    """

    paths: Tuple[Path, ...]
    cause: BaseException = field(compare=False)

    def __str__(self) -> str:
        names = ", ".join(f'"{p.name}"' for p in self.paths)
        return f"[{names}] {type(self.cause).__name__}: {self.cause}"
