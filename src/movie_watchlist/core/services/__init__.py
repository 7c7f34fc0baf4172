"""Core service implementations."""

from .enrichment_pipeline import EnrichmentPipeline, EnrichmentStage
from .image_download_service import ImageDownloadService
from .omdb_service import OMDbService
from .tmdb_service import TMDbService
from .watchlist_service import WatchlistService
from .watchlist_store import SqlWatchlistStore

__all__ = [
    "OMDbService",
    "TMDbService",
    "ImageDownloadService",
    "SqlWatchlistStore",
    "EnrichmentPipeline",
    "EnrichmentStage",
    "WatchlistService",
]
