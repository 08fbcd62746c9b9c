"""Tests for include path resolution."""

from __future__ import annotations

import os

import pytest

from pinclude.exceptions import InvalidPathError
from pinclude.include import resolve_include_path


@pytest.mark.parametrize(
    "include_path",
    [
        pytest.param("/etc/puppet/inc/metavars.pp", id="plain"),
        pytest.param("/site/../inc/./x.pp", id="dot-segments-kept"),
        pytest.param("/", id="root"),
    ],
)
def test_absolute_paths_pass_through(include_path: str) -> None:
    assert resolve_include_path(include_path, "/site/some/resource.pp") == include_path


def test_relative_path_is_joined_to_caller_directory() -> None:
    assert resolve_include_path("inc/metavars.pp", "/site/manifests/site.pp") == "/site/manifests/inc/metavars.pp"


def test_relative_path_keeps_parent_segments() -> None:
    resolved = resolve_include_path("../inc/metavars", "/site/some/resource")

    assert resolved == "/site/some/../inc/metavars"
    assert os.path.normpath(resolved) == "/site/inc/metavars"


def test_relative_path_keeps_current_dir_segments() -> None:
    assert resolve_include_path("./a/./b.pp", "/m/site.pp") == "/m/./a/./b.pp"


@pytest.mark.parametrize(
    ("include_path", "expected"),
    [
        pytest.param("inc.pp", "./inc.pp", id="file"),
        pytest.param("../inc/metavars", "./../inc/metavars", id="parent"),
    ],
)
def test_caller_without_directory_resolves_against_current_directory(include_path: str, expected: str) -> None:
    assert resolve_include_path(include_path, "site.pp") == expected


def test_relative_path_is_not_checked_for_existence(tmp_path) -> None:
    caller = tmp_path / "site.pp"
    assert resolve_include_path("missing.pp", str(caller)) == f"{tmp_path}/missing.pp"


@pytest.mark.parametrize(
    "include_path",
    [
        pytest.param("", id="empty"),
        pytest.param(None, id="undef"),
        pytest.param(42, id="number"),
        pytest.param("inc\x00.pp", id="nul-byte"),
    ],
)
def test_invalid_include_paths_are_rejected(include_path: object) -> None:
    with pytest.raises(InvalidPathError):
        resolve_include_path(include_path, "/site/site.pp")  # type: ignore[arg-type]
