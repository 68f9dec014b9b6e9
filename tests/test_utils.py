"""Tests for name checks and display helpers."""

import os

import pytest

import utils


@pytest.mark.parametrize("name", ["before-heist", "dated-2024-05-17_213045", "Chop The Dog", "v1.2"])
def test_valid_names(name):
    assert utils.get_name_problem(name) is None


@pytest.mark.parametrize("name, problem", [
    ("", "empty"),
    ("..", "not a folder name"),
    ("a/b", "path separators"),
    ("slot:1", "not allowed"),
    ("slot.", "ends with"),
    ("nul.txt", "reserved"),
    (None, "empty"),
])
def test_invalid_names(name, problem):
    assert problem in utils.get_name_problem(name)


@pytest.mark.parametrize("raw, expected", [
    ("auto 09:05", "auto 09_05"),
    ("a//b", "a_b"),
    (" .hidden. ", "hidden"),
    ("???", "_"),
    ("...", "sanitized_empty_name"),
])
def test_sanitize_filename(raw, expected):
    assert utils.sanitize_filename(raw) == expected


def test_shorten_path_inside_home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    path = os.path.join(str(tmp_path), "Documents", "Rockstar Games")

    assert utils.shorten_save_path(path) == "~" + os.sep + os.path.join("Documents", "Rockstar Games")
    assert utils.shorten_save_path(str(tmp_path)) == "~"


def test_shorten_path_outside_home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("USERPROFILE", str(tmp_path / "home"))
    path = str(tmp_path / "elsewhere")

    assert utils.shorten_save_path(path) == path
    assert utils.shorten_save_path("") == ""


@pytest.mark.parametrize("relative_path, escapes", [
    ("live", False),
    (os.path.join("live", "..", "other"), False),
    ("..", True),
    (os.path.join("..", "elsewhere"), True),
    (os.path.join("live", "..", ".."), True),
    (os.path.abspath("somewhere"), True),
])
def test_escapes_folder(relative_path, escapes):
    assert utils.escapes_folder(relative_path) is escapes
