"""Watchlist service interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import SecondaryCandidate, WatchlistEntry, WatchlistPage


class IWatchlistService(ABC):
    """Interface for user-facing watchlist operations."""

    @abstractmethod
    async def add_movie(self, title: str) -> WatchlistEntry:
        """Add a movie by title through the enrichment pipeline."""
        pass

    @abstractmethod
    def get_movie(self, entry_id: int) -> Optional[WatchlistEntry]:
        """Get a watchlist entry by ID."""
        pass

    @abstractmethod
    def list_movies(self, page: int, size: Optional[int] = None) -> WatchlistPage:
        """Get one page of the watchlist."""
        pass

    @abstractmethod
    def update_watched(self, entry_id: int, watched: bool) -> Optional[WatchlistEntry]:
        """Mark an entry watched or unwatched; None if it does not exist."""
        pass

    @abstractmethod
    def update_rating(self, entry_id: int, rating: Optional[int]) -> Optional[WatchlistEntry]:
        """Set or clear the user rating; None if the entry does not exist.

        Raises:
            InvalidInputError: If the rating is outside 1..5.
        """
        pass

    @abstractmethod
    def delete_movie(self, entry_id: int) -> bool:
        """Delete an entry; False if it did not exist."""
        pass

    @abstractmethod
    async def search_movies(self, query: str) -> List[SecondaryCandidate]:
        """Search TMDb for titles to add."""
        pass
