"""Allow ``python -m rand_playlist``."""

from rand_playlist.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
