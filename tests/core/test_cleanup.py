"""Tests for extension matching and the recursive tree cleaner."""

import errno
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from landfall.download.fs import delete_file as real_delete_file
from landfall.download.postprocess.pipeline import (
    CleanupResult,
    cleanup_tree,
    make_ext_matcher,
    match_file_ext,
    split_ext_list,
)


# =============================================================================
# Extension matching
# =============================================================================

class TestMatchFileExt:

    def test_suffix_match(self):
        assert match_file_ext("info.nfo", ".nfo")

    def test_case_insensitive(self):
        assert match_file_ext("INFO.NFO", ".nfo")
        assert match_file_ext("info.nfo", ".NFO")

    def test_comma_and_semicolon_separators(self):
        ext_list = ".par2, .sfv;.nfo"
        assert match_file_ext("repair.vol01+02.par2", ext_list)
        assert match_file_ext("check.sfv", ext_list)
        assert match_file_ext("info.nfo", ext_list)
        assert not match_file_ext("movie.mkv", ext_list)

    def test_wildcard_mask_matches_whole_name(self):
        ext_list = "*sample*"
        assert match_file_ext("movie-sample.mkv", ext_list)
        assert match_file_ext("SAMPLE.mkv", ext_list)
        assert not match_file_ext("movie.mkv", ext_list)

    def test_question_mark_mask(self):
        assert match_file_ext("movie.r01", "*.r??")
        assert not match_file_ext("movie.rar5x", "*.r??")

    def test_empty_list_matches_nothing(self):
        assert not match_file_ext("info.nfo", "")
        assert not match_file_ext("info.nfo", " , ; ")

    def test_split_ext_list_strips_blanks(self):
        assert split_ext_list(" .par2 ,, .sfv ; ") == [".par2", ".sfv"]

    def test_matcher_is_bound_to_list(self):
        matches = make_ext_matcher(".nfo")
        assert matches("info.nfo")
        assert not matches("movie.mkv")


# =============================================================================
# cleanup_tree
# =============================================================================

@pytest.fixture
def nfo_matcher():
    return make_ext_matcher(".nfo")


def test_deletes_nested_match_and_keeps_directories(tmp_path, recorder, nfo_matcher):
    (tmp_path / "sample").mkdir()
    (tmp_path / "sample" / "info.nfo").write_text("nfo")
    (tmp_path / "movie.mkv").write_text("video")

    result = cleanup_tree(tmp_path, nfo_matcher, recorder.reporter)

    assert result == CleanupResult(ok=True, deleted=True)
    assert not (tmp_path / "sample" / "info.nfo").exists()
    assert (tmp_path / "sample").is_dir()
    assert (tmp_path / "movie.mkv").exists()
    assert "Deleting file info.nfo" in recorder.infos


def test_deep_match_sets_deleted(tmp_path, recorder, nfo_matcher):
    deep = tmp_path / "a" / "b" / "c"
    deep.mkdir(parents=True)
    (deep / "deep.NFO").touch()

    result = cleanup_tree(tmp_path, nfo_matcher, recorder.reporter)

    assert result.deleted is True
    assert result.ok is True
    assert deep.is_dir()
    assert list(deep.iterdir()) == []


def test_directory_with_matching_name_is_not_deleted(tmp_path, recorder, nfo_matcher):
    folder = tmp_path / "extras.nfo"
    folder.mkdir()
    (folder / "inner.nfo").touch()
    (folder / "keep.txt").touch()

    result = cleanup_tree(tmp_path, nfo_matcher, recorder.reporter)

    assert folder.is_dir()
    assert not (folder / "inner.nfo").exists()
    assert (folder / "keep.txt").exists()
    assert result == CleanupResult(ok=True, deleted=True)


def test_nothing_matched(tmp_path, recorder, nfo_matcher):
    (tmp_path / "movie.mkv").touch()
    (tmp_path / "Subs").mkdir()
    (tmp_path / "Subs" / "english.srt").touch()

    result = cleanup_tree(tmp_path, nfo_matcher, recorder.reporter)

    assert result == CleanupResult(ok=True, deleted=False)
    assert recorder.messages == []


def test_missing_root_is_empty(tmp_path, recorder, nfo_matcher):
    result = cleanup_tree(tmp_path / "missing", nfo_matcher, recorder.reporter)

    assert result == CleanupResult(ok=True, deleted=False)


def test_delete_failure_continues_with_siblings(tmp_path, recorder):
    (tmp_path / "locked.nfo").touch()
    (tmp_path / "other.nfo").touch()
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "nested.nfo").touch()

    def fake_delete(path: Path) -> None:
        if path.name == "locked.nfo":
            raise PermissionError(errno.EACCES, "Permission denied", str(path))
        real_delete_file(path)

    with patch("landfall.download.postprocess.cleanup.delete_file", side_effect=fake_delete):
        result = cleanup_tree(tmp_path, make_ext_matcher(".nfo"), recorder.reporter)

    assert result == CleanupResult(ok=False, deleted=True)
    assert (tmp_path / "locked.nfo").exists()
    assert not (tmp_path / "other.nfo").exists()
    assert not (tmp_path / "sub" / "nested.nfo").exists()
    assert len(recorder.errors) == 1
    assert "Could not delete file" in recorder.errors[0]
    assert "Permission denied" in recorder.errors[0]


def test_failure_in_subdirectory_propagates(tmp_path, recorder):
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "locked.sfv").touch()
    (tmp_path / "top.mkv").touch()

    with patch(
        "landfall.download.postprocess.cleanup.delete_file",
        side_effect=PermissionError(errno.EACCES, "Permission denied"),
    ):
        result = cleanup_tree(tmp_path, make_ext_matcher(".sfv"), recorder.reporter)

    assert result == CleanupResult(ok=False, deleted=True)


def test_symlinked_directory_is_not_followed(tmp_path, recorder, nfo_matcher):
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "keep.nfo").touch()
    root = tmp_path / "root"
    root.mkdir()
    os.symlink(outside, root / "link.nfo", target_is_directory=True)

    result = cleanup_tree(root, nfo_matcher, recorder.reporter)

    assert result == CleanupResult(ok=True, deleted=False)
    assert (outside / "keep.nfo").exists()
    assert (root / "link.nfo").is_symlink()


def test_merge_combines_results():
    assert CleanupResult(True, False).merge(CleanupResult(True, True)) == CleanupResult(True, True)
    assert CleanupResult(True, True).merge(CleanupResult(False, False)) == CleanupResult(False, True)
