"""Command-line interface for rand-playlist."""

from __future__ import annotations

import argparse
import logging
import shlex
import sys
from typing import Iterable, NoReturn, Optional

from rich.console import Console
from rich.text import Text

from rand_playlist.config import (
    ConfigError,
    PROGRAM_NAME,
    PlaylistConfig,
    build_config,
    load_defaults,
)
from rand_playlist.generator import (
    GeneratorError,
    PlaylistOutcome,
    Runner,
    generate_playlists,
    run_generator,
)
from rand_playlist.logging_setup import init_logging, set_console_level
from rand_playlist.playlist_io import count_m3u_entries
from rand_playlist.scanner import NoMatchesError, require_matches

logger = logging.getLogger(__name__)

EPILOG = """\
Example:
  %(prog)s -r "./some path/to music" -p 10 --file-extension ".flac"

Output:
  One .m3u file per playlist is written to the root directory by Deej-A.I.
  For the root "./some path/to music", a random track found at
  "./some path/to music/my band/my album/track1.mp3" produces a playlist
  named "my_band-%(prog)s.m3u". A track directly in the root, such as
  "./some path/to music/track1.mp3", produces "track1-%(prog)s.m3u".
"""


class _Parser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors with exit status 1."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        _print_error(f"{message}\nTry \"{self.prog} --help\" for more information.")
        self.exit(1)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = _Parser(
        prog=PROGRAM_NAME,
        description=(
            "Create one or more Deej-A.I. playlists by randomly selecting a "
            "track from a root directory and its subdirectories."
        ),
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-r",
        "--root-directory",
        default=None,
        help="Directory to search for tracks. [Required]",
    )
    parser.add_argument(
        "-p",
        "--playlist-count",
        default="1",
        help="Number of playlists to create. [Default = 1]",
    )
    parser.add_argument(
        "-e",
        "--file-extension",
        default=None,
        help='File extension to match for. [Default = ".mp3"]',
    )
    parser.add_argument(
        "-s",
        "--playlist-length",
        default=None,
        help="Number of tracks in playlist. [Default = 40]",
    )
    parser.add_argument(
        "-l",
        "--lookback",
        default=None,
        help="Deej-A.I. lookback option. [Default = 3]",
    )
    parser.add_argument(
        "-n",
        "--noise",
        default=None,
        help="Deej-A.I. noise option. [Default = 0]",
    )
    parser.add_argument(
        "-k",
        "--pickles",
        default=None,
        help='Deej-A.I. pickles option. [Default = "Pickles"]',
    )
    parser.add_argument(
        "-m",
        "--mp3tovec",
        default=None,
        help='Deej-A.I. mp3tovec option. [Default = "mp3tovec"]',
    )
    parser.add_argument(
        "-g",
        "--generator",
        default=None,
        help='Command that runs Deej-A.I. [Default = "python Deej-A.I.py"]',
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print diagnostic output to standard error.",
    )
    return parser


def _print_error(message: str) -> None:
    console = Console(stderr=True, highlight=False, soft_wrap=True)
    console.print(Text.assemble(("!", "bold red"), " [ ERROR ] ", message))


def _report_success(console: Console, outcome: PlaylistOutcome) -> None:
    request = outcome.request
    line = Text.assemble(("Created ", "green"), str(request.destination))
    entries = count_m3u_entries(request.destination)
    if entries is not None:
        line.append(f" ({entries} tracks)")
    line.append(f" from seed {request.seed.name}", style="dim")
    console.print(line)


def _config_from_args(args: argparse.Namespace) -> PlaylistConfig:
    generator = shlex.split(args.generator) if args.generator is not None else None
    if generator is not None and not generator:
        raise ConfigError("--generator requires a valid argument.")
    return build_config(
        root_directory=args.root_directory,
        playlist_count=args.playlist_count,
        playlist_length=args.playlist_length,
        lookback=args.lookback,
        noise=args.noise,
        file_extension=args.file_extension,
        pickles=args.pickles,
        mp3tovec=args.mp3tovec,
        generator_command=tuple(generator) if generator else None,
        debug=args.debug,
        defaults=load_defaults(),
    )


def run(
    config: PlaylistConfig,
    console: Optional[Console] = None,
    runner: Runner = run_generator,
) -> int:
    """Scan, pick seeds and drive the generator. Returns an exit code."""
    output = console or Console(highlight=False, soft_wrap=True)
    try:
        files = require_matches(config.root_directory, config.file_extension)
    except NoMatchesError as exc:
        logger.info("Aborting: %s", exc)
        _print_error(str(exc))
        return 1
    logger.debug(">> #files=%d", len(files))
    try:
        generate_playlists(
            config,
            files,
            runner=runner,
            on_success=lambda outcome: _report_success(output, outcome),
        )
    except GeneratorError as exc:
        logger.info("Aborting: %s", exc)
        _print_error(str(exc))
        return 1
    return 0


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Entry point for the CLI."""
    init_logging()
    logger.info("App start")

    def excepthook(exc_type, exc, tb) -> None:
        logger.exception("Uncaught exception", exc_info=(exc_type, exc, tb))
        sys.__excepthook__(exc_type, exc, tb)

    sys.excepthook = excepthook

    parser = build_parser()
    try:
        args = parser.parse_args(list(argv) if argv is not None else None)
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 1

    if args.debug:
        set_console_level(logging.DEBUG)

    try:
        config = _config_from_args(args)
    except ConfigError as exc:
        logger.info("Invalid configuration: %s", exc)
        _print_error(str(exc))
        return 1
    logger.debug("%s", config.describe())

    exit_code = run(config)
    logger.info("App exit code=%s", exit_code)
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
