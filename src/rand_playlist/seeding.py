"""Seed selection and playlist naming."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import random
from typing import Optional, Sequence

from rand_playlist.config import PlaylistConfig

PLAYLIST_EXTENSION = ".m3u"


@dataclass(frozen=True)
class PlaylistRequest:
    """One seed track and the playlist path it will produce."""

    seed: Path
    destination: Path


def choose_seed(files: Sequence[Path], rng: Optional[random.Random] = None) -> Path:
    """Pick one path uniformly at random (with replacement between calls)."""
    if not files:
        raise ValueError("cannot choose a seed from an empty file set")
    if rng is None:
        return random.choice(files)
    return rng.choice(files)


def playlist_name(root: Path, seed: Path, suffix: str, extension: str) -> str:
    """Derive ``<base>-<suffix>.m3u`` from the seed's location under root.

    The base is the top-level directory under ``root`` that holds the seed.
    A seed sitting directly in ``root`` uses its own file name with
    ``extension`` removed. Spaces in the base become underscores.
    """
    try:
        relative = seed.relative_to(root)
    except ValueError:
        raise ValueError(f"{seed} is not inside {root}") from None
    parts = relative.parts
    if not parts:
        raise ValueError(f"{seed} is the root directory itself")
    base = parts[0]
    if len(parts) == 1 and extension and base.endswith(extension):
        base = base[: -len(extension)] or base
    base = base.replace(" ", "_")
    return f"{base}-{suffix}{PLAYLIST_EXTENSION}"


def playlist_path(root: Path, seed: Path, suffix: str, extension: str) -> Path:
    return root / playlist_name(root, seed, suffix, extension)


def next_request(
    files: Sequence[Path],
    config: PlaylistConfig,
    rng: Optional[random.Random] = None,
) -> PlaylistRequest:
    """Pick a fresh seed and compute where its playlist goes."""
    seed = choose_seed(files, rng)
    destination = playlist_path(
        config.root_directory,
        seed,
        config.playlist_suffix,
        config.file_extension,
    )
    return PlaylistRequest(seed=seed, destination=destination)
