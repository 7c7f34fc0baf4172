"""Enrichment pipeline interface."""

from abc import ABC, abstractmethod

from ..models import WatchlistEntry


class IEnrichmentPipeline(ABC):
    """Interface for turning a title into a saved, enriched watchlist entry."""

    @abstractmethod
    async def enrich(self, title: str) -> WatchlistEntry:
        """Resolve, enrich and save a movie.

        Args:
            title: Free-text movie title.

        Returns:
            The saved entry.

        Raises:
            InvalidInputError: If the title is blank.
            NotFoundError: If OMDb has no match.
            AlreadyExistsError: If the movie is already on the watchlist.
            UpstreamUnavailableError: If a remote call fails.
            DecodeError: If a remote response is malformed.
        """
        pass
