"""Pytest configuration for rand-playlist."""

from __future__ import annotations

import os
from pathlib import Path

import pytest


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    del config
    if os.environ.get("RAND_PLAYLIST_CI") != "1":
        return
    skip_subprocess = pytest.mark.skip(reason="Skipping subprocess tests in CI.")
    for item in items:
        if "subprocess" in item.keywords:
            item.add_marker(skip_subprocess)


@pytest.fixture(autouse=True)
def isolated_user_dirs(monkeypatch, tmp_path: Path) -> None:
    """Keep user config and logs out of the real home directory."""
    monkeypatch.setenv("RAND_PLAYLIST_CONFIG", str(tmp_path / "no-config.json"))
    monkeypatch.setenv("LOCALAPPDATA", str(tmp_path / "appdata"))


@pytest.fixture
def music_root(tmp_path: Path) -> Path:
    """A small library: two band folders, a loose track and a non-match."""
    root = tmp_path / "music"
    album = root / "My Band" / "Album"
    album.mkdir(parents=True)
    (album / "track1.mp3").write_text("x", encoding="utf-8")
    (album / "track2.mp3").write_text("x", encoding="utf-8")
    other = root / "Other"
    other.mkdir()
    (other / "song.mp3").write_text("x", encoding="utf-8")
    (other / "cover.jpg").write_text("x", encoding="utf-8")
    (root / "loose.mp3").write_text("x", encoding="utf-8")
    return root
