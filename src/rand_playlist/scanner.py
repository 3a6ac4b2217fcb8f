"""Directory scanning for candidate seed tracks."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)


class NoMatchesError(RuntimeError):
    """Raised when no file under the root matches the extension filter."""

    def __init__(self, root: Path, extension: str) -> None:
        self.root = root
        self.extension = extension
        super().__init__(
            "No files with the provided extension found in the root directory\n"
            f'    --file-extension="{extension}"\n'
            f'    --root-directory="{root}"'
        )


def collect_matching_files(root: Path, extension: str) -> tuple[Path, ...]:
    """Collect regular files under ``root`` whose name ends with ``extension``.

    The match is a case-sensitive literal suffix test. Returned paths are
    absolute and unique; their order carries no meaning.
    """
    base = root.absolute()
    found = tuple(_walk_matching_files(base, extension))
    logger.debug("Found %d file(s) matching %r under %s", len(found), extension, base)
    return found


def require_matches(root: Path, extension: str) -> tuple[Path, ...]:
    """Like :func:`collect_matching_files` but raise when nothing matches."""
    files = collect_matching_files(root, extension)
    if not files:
        raise NoMatchesError(root, extension)
    return files


def _walk_matching_files(root: Path, extension: str) -> Iterator[Path]:
    for current, dirs, files in os.walk(root, onerror=_log_walk_error):
        dirs.sort(key=str.casefold)
        files.sort(key=str.casefold)
        for name in files:
            if not name.endswith(extension):
                continue
            item = Path(current) / name
            if _is_regular_file(item):
                yield item


def _log_walk_error(exc: OSError) -> None:
    logger.warning("Skipping unreadable directory %s: %s", exc.filename, exc.strerror)


def _is_regular_file(path: Path) -> bool:
    try:
        return path.is_file() and not path.is_symlink()
    except OSError:
        return False
