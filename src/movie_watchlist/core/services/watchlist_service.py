"""Watchlist service implementation."""

import asyncio
from typing import List, Optional

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import InvalidInputError, UpstreamUnavailableError, normalize_query
from ..interfaces import IEnrichmentPipeline, ITMDbService, IWatchlistService, IWatchlistStore
from ..models import SecondaryCandidate, WatchlistEntry, WatchlistPage
from ..models.watchlist import MAX_RATING, MIN_RATING

MIN_SEARCH_QUERY_LENGTH = 2
MAX_SEARCH_RESULTS = 10


class WatchlistService(IWatchlistService, LoggerMixin):
    """User-facing watchlist operations."""

    def __init__(
        self,
        config: Config,
        enrichment_pipeline: IEnrichmentPipeline,
        watchlist_store: IWatchlistStore,
        tmdb_service: ITMDbService,
    ):
        """Initialize watchlist service.

        Args:
            config: Application configuration.
            enrichment_pipeline: Pipeline used to add movies.
            watchlist_store: Watchlist persistence.
            tmdb_service: TMDb service used for title search.
        """
        self._config = config
        self._pipeline = enrichment_pipeline
        self._store = watchlist_store
        self._tmdb_service = tmdb_service

    async def add_movie(self, title: str) -> WatchlistEntry:
        """Add a movie by title.

        Applies ``app.enrichment_timeout`` when configured; the pipeline is
        cancelled on expiry and nothing is saved.

        Raises:
            UpstreamUnavailableError: If the timeout expires.
        """
        timeout = self._config.app.enrichment_timeout
        if timeout is None:
            return await self._pipeline.enrich(title)

        try:
            return await asyncio.wait_for(self._pipeline.enrich(title), timeout=timeout)
        except asyncio.TimeoutError as e:
            error_msg = f"Adding '{title}' timed out after {timeout} seconds"
            self.logger.error(error_msg)
            raise UpstreamUnavailableError(error_msg) from e

    def get_movie(self, entry_id: int) -> Optional[WatchlistEntry]:
        return self._store.find_by_id(entry_id)

    def list_movies(self, page: int, size: Optional[int] = None) -> WatchlistPage:
        """Get one page of the watchlist.

        Negative pages become page 0; sizes outside ``1..app.max_page_size``
        fall back to ``app.default_page_size``.
        """
        app_config = self._config.app
        page = max(page, 0)
        if size is None or size < 1 or size > app_config.max_page_size:
            size = app_config.default_page_size

        items, total = self._store.find_page(page, size)
        return WatchlistPage(items=items, page_number=page, page_size=size, total_elements=total)

    def update_watched(self, entry_id: int, watched: bool) -> Optional[WatchlistEntry]:
        entry = self._store.find_by_id(entry_id)
        if entry is None:
            return None

        entry.watched = watched
        self.logger.info(f"Marked entry {entry_id} as {'watched' if watched else 'unwatched'}")
        return self._store.save(entry)

    def update_rating(self, entry_id: int, rating: Optional[int]) -> Optional[WatchlistEntry]:
        """Set or clear the user rating.

        Args:
            entry_id: Entry ID.
            rating: Integer from 1 to 5, or None to clear the rating.

        Returns:
            Updated entry, or None if the entry does not exist.

        Raises:
            InvalidInputError: If the rating is outside 1..5.
        """
        # bool is an int subclass; True must not count as a rating of 1
        valid = isinstance(rating, int) and not isinstance(rating, bool)
        if rating is not None and not (valid and MIN_RATING <= rating <= MAX_RATING):
            raise InvalidInputError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")

        entry = self._store.find_by_id(entry_id)
        if entry is None:
            return None

        entry.rating = rating
        self.logger.info(f"Set rating of entry {entry_id} to {rating}")
        return self._store.save(entry)

    def delete_movie(self, entry_id: int) -> bool:
        if not self._store.exists_by_id(entry_id):
            return False

        self._store.delete_by_id(entry_id)
        self.logger.info(f"Deleted entry {entry_id}")
        return True

    async def search_movies(self, query: str) -> List[SecondaryCandidate]:
        """Search TMDb for titles to add.

        Raises:
            InvalidInputError: If the query is shorter than two characters.
        """
        query = normalize_query(query)
        if len(query) < MIN_SEARCH_QUERY_LENGTH:
            raise InvalidInputError(
                f"Search query must be at least {MIN_SEARCH_QUERY_LENGTH} characters"
            )

        candidates = await self._tmdb_service.search_movies(query)
        return candidates[:MAX_SEARCH_RESULTS]
