"""Test input file enumeration."""

import pytest

from ffbatch.domain.exceptions import ConfigurationError
from ffbatch.infrastructure.storage.scanner import find_input_files


@pytest.fixture
def media_tree(tmp_path):
    (tmp_path / "b.mov").write_bytes(b"")
    (tmp_path / "a.mov").write_bytes(b"")
    (tmp_path / "notes.txt").write_bytes(b"")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "c.mov").write_bytes(b"")
    return tmp_path


def test_single_file(media_tree):
    files, root = find_input_files(media_tree / "a.mov")

    assert files == [media_tree / "a.mov"]
    assert root == media_tree


def test_directory_is_sorted_and_flat(media_tree):
    files, root = find_input_files(media_tree)

    assert files == [media_tree / "a.mov", media_tree / "b.mov", media_tree / "notes.txt"]
    assert root == media_tree


def test_recursive(media_tree):
    files, _ = find_input_files(media_tree, recursive=True)

    assert media_tree / "sub" / "c.mov" in files
    assert len(files) == 4


def test_pattern_filters_full_path(media_tree):
    files, _ = find_input_files(media_tree, pattern=r"\.mov$", recursive=True)

    assert [f.name for f in files] == ["a.mov", "b.mov", "c.mov"]


def test_pattern_can_match_directory_part(media_tree):
    files, _ = find_input_files(media_tree, pattern="sub", recursive=True)

    assert files == [media_tree / "sub" / "c.mov"]


def test_missing_input(tmp_path):
    with pytest.raises(ConfigurationError):
        find_input_files(tmp_path / "nope")


def test_invalid_pattern(media_tree):
    with pytest.raises(ConfigurationError):
        find_input_files(media_tree, pattern="(")


def test_nothing_matches(media_tree):
    with pytest.raises(ConfigurationError, match="No input files"):
        find_input_files(media_tree, pattern=r"\.mkv$")
