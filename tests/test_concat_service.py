"""Tests for the concat task and its temporary manifest."""

import subprocess
from pathlib import Path

import pytest

from avmerger.domain.exceptions import ExternalToolError, UsageError
from avmerger.domain.temp_models import ConcatManifest
from avmerger.services import concat_service
from avmerger.services.concat_service import ConcatTask


@pytest.fixture
def temp_base(tmp_path: Path) -> Path:
    base = tmp_path / "tmp"
    base.mkdir()
    return base


class ManifestSpy:
    """Fake `run_cmd` that records the manifest FFmpeg would have read."""

    def __init__(self, returncode=0, launch=True):
        self.returncode = returncode
        self.launch = launch
        self.cmd = None
        self.manifest_path = None
        self.manifest_text = None
        self.capture_output = None

    def __call__(self, cmd_list, cancel_event=None, capture_output=True):
        self.cmd = list(cmd_list)
        self.capture_output = capture_output
        self.manifest_path = Path(cmd_list[cmd_list.index("-i") + 1])
        self.manifest_text = self.manifest_path.read_text(encoding="utf-8")
        if not self.launch:
            return None
        return subprocess.CompletedProcess(cmd_list, self.returncode, None, None)


def test_concat_builds_manifest_in_order(temp_base, monkeypatch):
    spy = ManifestSpy()
    monkeypatch.setattr(concat_service, "run_cmd", spy)
    inputs = [Path("/videos/b.mp4"), Path("/videos/a.mp4"), Path("/videos/c.mp4")]

    ConcatTask(ffmpeg_cmd="ffmpeg", temp_base_dir=temp_base).run(inputs, Path("out.mp4"))

    assert spy.cmd == ["ffmpeg", "-f", "concat", "-safe", "0", "-i", str(spy.manifest_path), "out.mp4"]
    assert spy.manifest_text.splitlines() == [
        "file 'file:/videos/b.mp4'",
        "file 'file:/videos/a.mp4'",
        "file 'file:/videos/c.mp4'",
    ]
    assert spy.capture_output is False
    assert not spy.manifest_path.exists()
    assert list(temp_base.iterdir()) == []


def test_manifest_removed_after_tool_failure(temp_base, monkeypatch):
    spy = ManifestSpy(returncode=1)
    monkeypatch.setattr(concat_service, "run_cmd", spy)

    with pytest.raises(ExternalToolError):
        ConcatTask(temp_base_dir=temp_base).run([Path("a.mp4"), Path("b.mp4")], Path("out.mp4"))

    assert not spy.manifest_path.exists()
    assert not spy.manifest_path.parent.exists()
    assert list(temp_base.iterdir()) == []


def test_manifest_removed_after_launch_failure(temp_base, monkeypatch):
    spy = ManifestSpy(launch=False)
    monkeypatch.setattr(concat_service, "run_cmd", spy)

    with pytest.raises(ExternalToolError):
        ConcatTask(temp_base_dir=temp_base).run([Path("a.mp4"), Path("b.mp4")], Path("out.mp4"))

    assert list(temp_base.iterdir()) == []


@pytest.mark.parametrize("inputs", [[], [Path("only.mp4")]])
def test_too_few_inputs(inputs, temp_base, monkeypatch):
    spy = ManifestSpy()
    monkeypatch.setattr(concat_service, "run_cmd", spy)

    with pytest.raises(UsageError):
        ConcatTask(temp_base_dir=temp_base).run(inputs, Path("out.mp4"))

    assert spy.cmd is None
    assert list(temp_base.iterdir()) == []


def test_directive_escapes_single_quotes():
    assert ConcatManifest.directive(Path("/v/it's.mp4")) == "file 'file:/v/it'\\''s.mp4'"


def test_manifest_cleanup_failure_is_logged_not_raised(temp_base, monkeypatch, log_messages):
    from avmerger.domain import temp_models

    def broken_rmtree(path):
        raise PermissionError("busy")

    with ConcatManifest([Path("a.mp4"), Path("b.mp4")], base_dir=temp_base) as manifest:
        assert manifest.path.exists()
        monkeypatch.setattr(temp_models.shutil, "rmtree", broken_rmtree)

    assert any("failed to clean up" in m for m in log_messages)
