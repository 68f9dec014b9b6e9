"""Shared fixtures: a fake Documents tree with one GTA V profile."""

import os

import pytest

import config
from profile_locator import ProfileLayout

PROFILE_ID = "1A2B3C4D"


def write_file(path, content):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(content)


def read_tree(root):
    """Maps every file below `root` (relative, '/'-separated) to its bytes."""
    tree = {}
    for dirpath, _dirnames, filenames in os.walk(root):
        for filename in filenames:
            full_path = os.path.join(dirpath, filename)
            rel_path = os.path.relpath(full_path, root).replace(os.sep, "/")
            with open(full_path, "rb") as f:
                tree[rel_path] = f.read()
    return tree


def read_save_files(layout):
    """Like read_tree, limited to the save files directly in the current save folder."""
    tree = {}
    for name in sorted(os.listdir(layout.current_save_dir)):
        if not name.startswith("SGTA"):
            continue
        full_path = os.path.join(layout.current_save_dir, name)
        if os.path.isdir(full_path):
            for rel_path, content in read_tree(full_path).items():
                tree[f"{name}/{rel_path}"] = content
        else:
            with open(full_path, "rb") as f:
                tree[name] = f.read()
    return tree


@pytest.fixture(autouse=True)
def app_data_dir(tmp_path, monkeypatch):
    """Keeps settings and log files out of the real user folders."""
    app_dir = tmp_path / "appdata"
    app_dir.mkdir()
    monkeypatch.setattr(config, "get_app_data_folder", lambda: str(app_dir))
    return app_dir


@pytest.fixture
def documents_dir(tmp_path):
    return tmp_path / "Documents"


@pytest.fixture
def profile_dir(documents_dir):
    """A profile with two save files, a non-save file and a Save Files library."""
    profile = documents_dir / "Rockstar Games" / "GTA V" / "Profiles" / PROFILE_ID
    write_file(str(profile / "SGTA50000"), b"story mode save 0")
    write_file(str(profile / "SGTA50001"), b"story mode save 1")
    write_file(str(profile / "cfg.dat"), b"settings, not a save")

    library = profile / "Save Files"
    write_file(str(library / "Albert" / "SGTA50000"), b"albert save")
    write_file(str(library / "Chop The Dog" / "SGTA50000"), b"chop save")
    write_file(str(library / "Chop The Dog" / "readme.txt"), b"not a save")
    write_file(str(library / "Zebra" / "SGTA50000"), b"zebra save")
    return profile


@pytest.fixture
def layout(profile_dir):
    return ProfileLayout.from_profile_dir(str(profile_dir))
