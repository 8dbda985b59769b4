"""Shared fixtures for the AV Merger tests."""

import subprocess
from pathlib import Path

import pytest
from loguru import logger


@pytest.fixture
def log_messages():
    """Collects the text of every loguru message emitted during a test."""
    messages = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="TRACE")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def media_dir(tmp_path: Path):
    """Returns a helper that creates empty files in a scratch directory."""

    def make(*names: str) -> Path:
        for name in names:
            (tmp_path / name).write_bytes(b"")
        return tmp_path

    return make


class FakeRunCmd:
    """Stand-in for `run_cmd`; records each command and returns a fixed result."""

    def __init__(self, returncode: int = 0, stderr: str = "", create_output: bool = True):
        self.returncode = returncode
        self.stderr = stderr
        self.create_output = create_output
        self.calls = []

    def __call__(self, cmd_list, cancel_event=None, capture_output=True):
        self.calls.append(list(cmd_list))
        if self.create_output and self.returncode == 0:
            Path(cmd_list[-1]).write_bytes(b"merged")
        return subprocess.CompletedProcess(cmd_list, self.returncode, "", self.stderr)


@pytest.fixture
def fake_run_cmd():
    return FakeRunCmd
