"""Helpers for reading playlists written by the generator."""

from __future__ import annotations

from pathlib import Path


def read_m3u_entries(path: Path) -> list[str] | None:
    """Return track lines of an M3U file, or None when it cannot be read."""
    try:
        lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError:
        return None
    entries: list[str] = []
    for line in lines:
        entry = line.strip()
        if not entry or entry.startswith("#"):
            continue
        entries.append(entry)
    return entries


def count_m3u_entries(path: Path) -> int | None:
    entries = read_m3u_entries(path)
    if entries is None:
        return None
    return len(entries)
