import pytest

from supadrive.utils.paths import full_path, normalize_root


@pytest.mark.parametrize(
    "root,relative,expected",
    [
        ("assets", "x.png", "assets/x.png"),
        ("assets", "/x.png", "assets/x.png"),
        ("/assets/", "a//b/./c.txt", "assets/a/b/c.txt"),
        ("assets", "a/../b.txt", "assets/b.txt"),
        ("assets\\img", "sub\\x.png", "assets/img/sub/x.png"),
        ("", "a/b.txt", "a/b.txt"),
        ("", "", ""),
    ],
)
def test_full_path(root, relative, expected):
    assert full_path(root, relative) == expected


def test_full_path_empty_relative_is_root():
    """Test an empty location resolves to the root prefix itself."""
    assert full_path("r", "") == normalize_root("r") == "r"
    assert full_path("/media/./r/", "") == "media/r"


@pytest.mark.parametrize("path", ["a/b", "/a/./b//c", "a/../../b", "x\\y", ".", ""])
def test_full_path_is_idempotent(path):
    once = full_path("", path)
    assert full_path("", once) == once


def test_parent_segments_stay_inside_root():
    assert full_path("assets", "../../x") == "assets/x"
    assert full_path("assets", "../other/secret.txt") == "assets/other/secret.txt"
    assert full_path("assets", "..") == "assets"
    assert full_path("", "..") == ""


@pytest.mark.parametrize("path", ["a/b", "../a", "a/../../b", ""])
def test_full_path_is_idempotent_under_root(path):
    once = full_path("", path)
    assert full_path("r", once) == full_path("r", path)


def test_normalize_root():
    assert normalize_root(None) == ""
    assert normalize_root("") == ""
    assert normalize_root("/") == ""
    assert normalize_root("//uploads/2026/") == "uploads/2026"
