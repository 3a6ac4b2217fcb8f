"""Invocation of the external Deej-A.I. playlist generator."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import random
import subprocess
from pathlib import Path
from typing import Callable, Optional, Sequence

from rand_playlist.config import PlaylistConfig
from rand_playlist.seeding import PlaylistRequest, next_request

logger = logging.getLogger(__name__)

COMMAND_NOT_FOUND = 127


@dataclass(frozen=True)
class GeneratorResult:
    """Outcome of one generator process."""

    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass(frozen=True)
class PlaylistOutcome:
    request: PlaylistRequest
    result: GeneratorResult


class GeneratorError(RuntimeError):
    """Raised when the generator exits with a non-zero status."""

    def __init__(self, result: GeneratorResult, request: PlaylistRequest) -> None:
        self.result = result
        self.request = request
        detail = result.stderr.strip()
        message = (
            f"Playlist generator failed with exit code {result.returncode} "
            f"while creating {request.destination}"
        )
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(message)


Runner = Callable[[Sequence[str]], GeneratorResult]


def build_generator_command(
    config: PlaylistConfig, request: PlaylistRequest
) -> list[str]:
    """Return the argument list for one generator run."""
    return [
        *config.generator_command,
        config.pickles,
        config.mp3tovec,
        "--lookback",
        str(config.lookback),
        "--nsongs",
        str(config.playlist_length),
        "--noise",
        str(config.noise),
        "--playlist",
        str(request.destination),
        "--inputsong",
        str(request.seed),
    ]


def run_generator(args: Sequence[str]) -> GeneratorResult:
    """Run the generator to completion and capture its output."""
    argv = tuple(args)
    logger.debug("Running generator: %s", " ".join(argv))
    try:
        completed = subprocess.run(
            list(argv),
            capture_output=True,
            text=True,
            errors="replace",
            check=False,
        )
    except OSError as exc:
        logger.debug("Could not start generator %s: %s", argv[0], exc)
        return GeneratorResult(
            args=argv, returncode=COMMAND_NOT_FOUND, stderr=str(exc)
        )
    return GeneratorResult(
        args=argv,
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )


def generate_playlists(
    config: PlaylistConfig,
    files: Sequence[Path],
    *,
    runner: Runner = run_generator,
    rng: Optional[random.Random] = None,
    on_success: Optional[Callable[[PlaylistOutcome], None]] = None,
) -> list[PlaylistOutcome]:
    """Create ``config.playlist_count`` playlists one after another.

    Stops at the first failing generator run by raising GeneratorError.
    """
    outcomes: list[PlaylistOutcome] = []
    for index in range(config.playlist_count):
        request = next_request(files, config, rng)
        logger.debug(
            "Playlist %d/%d: seed=%s destination=%s",
            index + 1,
            config.playlist_count,
            request.seed,
            request.destination,
        )
        result = runner(build_generator_command(config, request))
        if result.stdout:
            logger.debug("Generator output:\n%s", result.stdout.rstrip())
        if not result.ok:
            raise GeneratorError(result, request)
        outcome = PlaylistOutcome(request=request, result=result)
        outcomes.append(outcome)
        logger.info("Created playlist %s", request.destination)
        if on_success is not None:
            on_success(outcome)
    return outcomes
