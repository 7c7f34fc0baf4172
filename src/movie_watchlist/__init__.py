"""Movie Watchlist.

Keeps a personal movie watchlist whose entries are enriched with metadata
from OMDb and TMDb, including locally downloaded poster and backdrop images.
"""

__version__ = "0.1.0"
