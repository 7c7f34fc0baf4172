"""Allow running the CLI with ``python -m movie_watchlist.cli``."""

from .main import main

main()
