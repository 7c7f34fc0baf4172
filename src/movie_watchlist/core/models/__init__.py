"""Core data models."""

from .omdb import PrimaryMatch
from .tmdb import ImageReference, ImageSet, SecondaryCandidate, SimilarTitle
from .watchlist import WatchlistEntry, WatchlistPage

__all__ = [
    "PrimaryMatch",
    "SecondaryCandidate",
    "ImageReference",
    "ImageSet",
    "SimilarTitle",
    "WatchlistEntry",
    "WatchlistPage",
]
