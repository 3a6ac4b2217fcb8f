"""Run configuration for rand-playlist."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
import os
from pathlib import Path
import re
import sys
from typing import Any, Optional

logger = logging.getLogger(__name__)

PROGRAM_NAME = "rand-playlist"
DEFAULT_FILE_EXTENSION = ".mp3"
DEFAULT_PLAYLIST_COUNT = 1
DEFAULT_PLAYLIST_LENGTH = 40
DEFAULT_LOOKBACK = 3
DEFAULT_NOISE = 0
DEFAULT_PICKLES = "Pickles"
DEFAULT_MP3TOVEC = "mp3tovec"
GENERATOR_SCRIPT = "Deej-A.I.py"

_DIGITS = re.compile(r"[0-9]+")


class ConfigError(ValueError):
    """Raised when a command-line value fails validation."""


def default_generator_command() -> tuple[str, ...]:
    return (sys.executable or "python", GENERATOR_SCRIPT)


@dataclass(frozen=True)
class Defaults:
    """User-level defaults that sit underneath the command-line flags."""

    file_extension: str = DEFAULT_FILE_EXTENSION
    playlist_length: int = DEFAULT_PLAYLIST_LENGTH
    lookback: int = DEFAULT_LOOKBACK
    noise: int = DEFAULT_NOISE
    pickles: str = DEFAULT_PICKLES
    mp3tovec: str = DEFAULT_MP3TOVEC
    generator_command: tuple[str, ...] = field(
        default_factory=default_generator_command
    )


@dataclass(frozen=True)
class PlaylistConfig:
    """Immutable settings for one run, built once after argument parsing."""

    root_directory: Path
    file_extension: str = DEFAULT_FILE_EXTENSION
    playlist_count: int = DEFAULT_PLAYLIST_COUNT
    playlist_length: int = DEFAULT_PLAYLIST_LENGTH
    lookback: int = DEFAULT_LOOKBACK
    noise: int = DEFAULT_NOISE
    pickles: str = DEFAULT_PICKLES
    mp3tovec: str = DEFAULT_MP3TOVEC
    playlist_suffix: str = PROGRAM_NAME
    generator_command: tuple[str, ...] = field(
        default_factory=default_generator_command
    )
    debug: bool = False

    def describe(self) -> str:
        """Return a multi-line dump of the settings for --debug output."""
        lines = [
            ">> Variables set:",
            f"     root_directory={self.root_directory}",
            f"     file_extension={self.file_extension}",
            f"     playlist_count={self.playlist_count}",
            f"     playlist_length={self.playlist_length}",
            f"     lookback={self.lookback}",
            f"     noise={self.noise}",
            f"     pickles={self.pickles}",
            f"     mp3tovec={self.mp3tovec}",
            f"     playlist_suffix={self.playlist_suffix}",
            f"     generator_command={' '.join(self.generator_command)}",
        ]
        return "\n".join(lines)


def program_suffix(argv0: Optional[str] = None) -> str:
    """Derive the playlist suffix from the name the program was invoked as."""
    if argv0 is None:
        argv0 = sys.argv[0] if sys.argv else ""
    path = Path(argv0)
    stem = path.stem
    # `python -m rand_playlist[.cli]` puts a module file in argv[0].
    if not stem or stem.startswith("__") or path.parent.name == "rand_playlist":
        return PROGRAM_NAME
    return stem


def parse_count(name: str, raw: object, *, minimum: int = 0) -> int:
    """Parse a non-negative integer option, rejecting anything but digits."""
    if isinstance(raw, int) and not isinstance(raw, bool):
        value = raw
    else:
        text = str(raw)
        if not _DIGITS.fullmatch(text):
            raise ConfigError(f"<{name}> must be an integer. Try --debug if you must")
        value = int(text)
    if value < minimum:
        raise ConfigError(f"<{name}> must be at least {minimum}.")
    return value


def validate_root_directory(raw: Optional[str]) -> Path:
    """Expand, check and resolve the search root."""
    if not raw:
        raise ConfigError(
            "Mandatory option not provided: -r|--root-directory.\n"
            f'Try "{PROGRAM_NAME} --help" for instructions on how to use this tool.'
        )
    path = Path(raw).expanduser()
    logger.debug("Expanded root directory %r to %s", raw, path)
    if not path.is_dir():
        raise ConfigError(
            "The --root-directory does not appear to exist. Try --debug if you must"
        )
    resolved = path.resolve()
    logger.debug("Resolved root directory to %s", resolved)
    return resolved


def build_config(
    *,
    root_directory: Optional[str],
    playlist_count: object = DEFAULT_PLAYLIST_COUNT,
    playlist_length: object = None,
    lookback: object = None,
    noise: object = None,
    file_extension: Optional[str] = None,
    pickles: Optional[str] = None,
    mp3tovec: Optional[str] = None,
    generator_command: Optional[tuple[str, ...]] = None,
    playlist_suffix: Optional[str] = None,
    debug: bool = False,
    defaults: Optional[Defaults] = None,
) -> PlaylistConfig:
    """Validate raw option values and return a frozen PlaylistConfig.

    Values left as ``None`` fall back to ``defaults``. Checks run in a fixed
    order and the first failure raises :class:`ConfigError`.
    """
    base = defaults or Defaults()
    length = parse_count(
        "playlist-length",
        base.playlist_length if playlist_length is None else playlist_length,
        minimum=1,
    )
    count = parse_count("playlist-count", playlist_count, minimum=1)
    noise_value = parse_count("noise", base.noise if noise is None else noise)
    lookback_value = parse_count(
        "lookback", base.lookback if lookback is None else lookback
    )
    extension = base.file_extension if file_extension is None else file_extension
    if not extension:
        raise ConfigError("--file-extension requires a valid argument.")
    for flag, value in (("--pickles", pickles), ("--mp3tovec", mp3tovec)):
        if value is not None and not value:
            raise ConfigError(f"{flag} requires a valid argument.")
    command = generator_command or base.generator_command
    if not command:
        raise ConfigError("--generator requires a valid argument.")
    root = validate_root_directory(root_directory)
    return PlaylistConfig(
        root_directory=root,
        file_extension=extension,
        playlist_count=count,
        playlist_length=length,
        lookback=lookback_value,
        noise=noise_value,
        pickles=base.pickles if pickles is None else pickles,
        mp3tovec=base.mp3tovec if mp3tovec is None else mp3tovec,
        playlist_suffix=playlist_suffix or program_suffix(),
        generator_command=tuple(command),
        debug=debug,
    )


def get_config_dir(app_name: str = PROGRAM_NAME) -> Path:
    """Return the per-user config directory for the current platform."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        root = Path(base) if base else Path.home() / "AppData" / "Roaming"
        return root / app_name
    if _is_macos():
        return Path.home() / "Library" / "Application Support" / app_name
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / app_name


def get_config_path() -> Path:
    """Return the defaults file path, honouring RAND_PLAYLIST_CONFIG."""
    override = os.environ.get("RAND_PLAYLIST_CONFIG")
    if override:
        return Path(override).expanduser()
    return get_config_dir() / "config.json"


def load_defaults() -> Defaults:
    """Load user defaults from disk, falling back to built-ins on error."""
    path = get_config_path()
    if not path.is_file():
        return Defaults()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.warning("Ignoring unreadable defaults file %s", path, exc_info=True)
        return Defaults()
    if not isinstance(raw, dict):
        logger.warning("Ignoring defaults file %s: expected a JSON object", path)
        return Defaults()
    logger.debug("Loaded defaults from %s", path)
    return _defaults_from_mapping(raw)


def _is_macos() -> bool:
    """Return True when running on macOS."""
    return sys.platform == "darwin"


def _get_int(raw: dict[str, Any], key: str, default: int) -> int:
    """Fetch a non-negative integer value, ignoring invalid types."""
    value = raw.get(key, default)
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        return default
    return value


def _get_str(raw: dict[str, Any], key: str, default: str) -> str:
    """Fetch a non-empty string value."""
    value = raw.get(key, default)
    if not isinstance(value, str) or not value:
        return default
    return value


def _get_command(
    raw: dict[str, Any], key: str, default: tuple[str, ...]
) -> tuple[str, ...]:
    value = raw.get(key)
    if not isinstance(value, list) or not value:
        return default
    if not all(isinstance(part, str) and part for part in value):
        return default
    return tuple(value)


def _defaults_from_mapping(raw: dict[str, Any]) -> Defaults:
    """Normalize raw JSON data into Defaults."""
    builtin = Defaults()
    return Defaults(
        file_extension=_get_str(raw, "file_extension", builtin.file_extension),
        playlist_length=_get_int(raw, "playlist_length", builtin.playlist_length)
        or builtin.playlist_length,
        lookback=_get_int(raw, "lookback", builtin.lookback),
        noise=_get_int(raw, "noise", builtin.noise),
        pickles=_get_str(raw, "pickles", builtin.pickles),
        mp3tovec=_get_str(raw, "mp3tovec", builtin.mp3tovec),
        generator_command=_get_command(
            raw, "generator_command", builtin.generator_command
        ),
    )
