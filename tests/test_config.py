"""Tests for loading and validating config.user.yaml."""

from pathlib import Path

import pytest

from avmerger.config import common
from avmerger.config.common import _load_user_config, _user_settings


def write_config(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.user.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_missing_file_gives_empty_config(tmp_path):
    assert _load_user_config(tmp_path / "config.user.yaml") == {}


def test_empty_file_gives_empty_config(tmp_path):
    assert _load_user_config(write_config(tmp_path, "")) == {}


def test_unparsable_file_is_ignored(tmp_path, log_messages):
    path = write_config(tmp_path, "merge: [unclosed\n")
    assert _load_user_config(path) == {}
    assert any("Could not load or parse" in m for m in log_messages)


def test_non_mapping_top_level_is_ignored(tmp_path, log_messages):
    path = write_config(tmp_path, "- just\n- a list\n")
    assert _load_user_config(path) == {}
    assert any("top level must be a mapping" in m for m in log_messages)


def test_all_keys_applied(tmp_path):
    path = write_config(
        tmp_path,
        "paths:\n"
        "  ffmpeg_dir: /opt/ffmpeg/bin\n"
        "merge:\n"
        "  max_workers: 3\n"
        "  fail_on_task_error: true\n"
        "  webm_audio_codec: libopus\n",
    )
    settings = _user_settings(_load_user_config(path))
    assert settings == {
        "ffmpeg_dir": Path("/opt/ffmpeg/bin"),
        "max_workers": 3,
        "fail_on_task_error": True,
        "webm_audio_codec": "libopus",
    }


def test_max_workers_accepts_numeric_string_and_floors_at_one():
    assert _user_settings({"merge": {"max_workers": "4"}}) == {"max_workers": 4}
    assert _user_settings({"merge": {"max_workers": 0}}) == {"max_workers": 1}


@pytest.mark.parametrize("value", ["four", [2], True, {"n": 2}])
def test_invalid_max_workers_keeps_default(value, log_messages):
    assert _user_settings({"merge": {"max_workers": value}}) == {}
    assert any("merge.max_workers" in m for m in log_messages)


@pytest.mark.parametrize("value", ["false", "no", 0, 1])
def test_fail_on_task_error_requires_boolean(value, log_messages):
    assert _user_settings({"merge": {"fail_on_task_error": value}}) == {}
    assert any("merge.fail_on_task_error" in m for m in log_messages)


def test_fail_on_task_error_false_is_kept():
    assert _user_settings({"merge": {"fail_on_task_error": False}}) == {"fail_on_task_error": False}


def test_invalid_sections_and_strings_are_ignored(log_messages):
    settings = _user_settings({
        "paths": {"ffmpeg_dir": 42},
        "merge": ["not", "a", "mapping"],
    })
    assert settings == {}
    assert any("paths.ffmpeg_dir" in m for m in log_messages)
    assert any("'merge'" in m for m in log_messages)


def test_webm_audio_codec_must_be_string():
    assert _user_settings({"merge": {"webm_audio_codec": 5}}) == {}


def test_module_defaults_are_sane():
    assert common.DEFAULT_MAX_WORKERS >= 1
    assert isinstance(common.FAIL_ON_TASK_ERROR, bool)
    assert isinstance(common.WEBM_AUDIO_CODEC, str)
