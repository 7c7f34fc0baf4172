"""Core interfaces for dependency injection."""

from .enrichment_pipeline import IEnrichmentPipeline
from .image_download_service import IImageDownloadService
from .omdb_service import IOMDbService
from .tmdb_service import ITMDbService
from .watchlist_service import IWatchlistService
from .watchlist_store import IWatchlistStore

__all__ = [
    "IOMDbService",
    "ITMDbService",
    "IImageDownloadService",
    "IWatchlistStore",
    "IEnrichmentPipeline",
    "IWatchlistService",
]
