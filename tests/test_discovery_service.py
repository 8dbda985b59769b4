"""Tests for directory discovery and pair resolution."""

from pathlib import Path

import pytest

from avmerger.config.media import PAIR_MODE_LEGACY
from avmerger.domain.exceptions import FilesystemError
from avmerger.services.discovery_service import discover, group_entries, resolve_pairs
from avmerger.domain.media import MediaEntry


def test_discover_groups_by_stem(media_dir):
    directory = media_dir("song.mp3", "song.mp4", "other.mp4", "notes.txt")
    groups = discover(directory)
    assert set(groups) == {"song", "other"}
    assert set(groups["song"]) == {".mp3", ".mp4"}
    assert groups["other"] == {".mp4": directory / "other.mp4"}


def test_discover_skips_directories_and_merged_files(media_dir):
    directory = media_dir("clip.mp3", "clip.mp4", "[MERGED] clip.mp4")
    (directory / "folder.mp4").mkdir()
    groups = discover(directory)
    assert set(groups) == {"clip"}
    assert groups["clip"][".mp4"] == directory / "clip.mp4"


def test_discover_extension_match_is_case_insensitive(media_dir):
    directory = media_dir("Loud.MP3", "Loud.Mp4")
    groups = discover(directory)
    assert set(groups["Loud"]) == {".mp3", ".mp4"}
    assert groups["Loud"][".mp3"].name == "Loud.MP3"


def test_discover_missing_directory_raises(tmp_path):
    with pytest.raises(FilesystemError):
        discover(tmp_path / "does-not-exist")


def test_end_to_end_one_pair(media_dir):
    directory = media_dir("song.mp3", "song.mp4", "other.mp4")
    pairs = resolve_pairs(discover(directory))
    assert len(pairs) == 1
    assert pairs[0].stem == "song"
    assert pairs[0].video == directory / "song.mp4"
    assert pairs[0].audio == directory / "song.mp3"


@pytest.mark.parametrize("order", [("a.mp3", "a.webm"), ("a.webm", "a.mp3")])
def test_pair_assignment_ignores_listing_order(order):
    entries = [MediaEntry.from_path(Path("/media") / name) for name in order]
    (pair,) = resolve_pairs(group_entries(entries))
    assert pair.video == Path("/media/a.webm")
    assert pair.audio == Path("/media/a.mp3")


def test_incomplete_groups_are_dropped():
    groups = {
        "audio_only": {".mp3": Path("audio_only.mp3")},
        "video_only": {".mp4": Path("video_only.mp4")},
        "two_videos": {".mp4": Path("two_videos.mp4"), ".webm": Path("two_videos.webm")},
    }
    assert resolve_pairs(groups) == []


def test_resolver_does_not_modify_groups():
    groups = {
        "keep": {".mp3": Path("keep.mp3"), ".mp4": Path("keep.mp4")},
        "drop": {".mp4": Path("drop.mp4")},
    }
    snapshot = {stem: dict(exts) for stem, exts in groups.items()}
    resolve_pairs(groups)
    assert groups == snapshot


def test_generalized_mode_prefers_first_video_extension():
    groups = {
        "x": {".webm": Path("x.webm"), ".mp3": Path("x.mp3"), ".mp4": Path("x.mp4")},
    }
    (pair,) = resolve_pairs(groups)
    assert pair.video == Path("x.mp4")


def test_legacy_mode_requires_exact_extension_set():
    groups = {
        "ok": {".mp3": Path("ok.mp3"), ".mp4": Path("ok.mp4")},
        "webm": {".mp3": Path("webm.mp3"), ".webm": Path("webm.webm")},
        "extra": {".mp3": Path("extra.mp3"), ".mp4": Path("extra.mp4"), ".webm": Path("extra.webm")},
    }
    pairs = resolve_pairs(groups, PAIR_MODE_LEGACY)
    assert [p.stem for p in pairs] == ["ok"]
    assert pairs[0].video == Path("ok.mp4")
    assert pairs[0].audio == Path("ok.mp3")


def test_unknown_pair_mode():
    with pytest.raises(ValueError):
        resolve_pairs({}, "nope")
