"""Watchlist store interface."""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from ..models import WatchlistEntry


class IWatchlistStore(ABC):
    """Keyed persistence for watchlist entries.

    Each method is atomic on its own; callers get no transactions across calls.
    """

    @abstractmethod
    def exists_by_title_and_year(self, title: str, year: Optional[str]) -> bool:
        """Check for an entry with exactly this title and year."""
        pass

    @abstractmethod
    def save(self, entry: WatchlistEntry) -> WatchlistEntry:
        """Insert or update an entry.

        Args:
            entry: Entry to save. Entries without an ID are inserted.

        Returns:
            Saved copy of the entry with its ID assigned.

        Raises:
            AlreadyExistsError: If an insert duplicates an existing title and year.
        """
        pass

    @abstractmethod
    def find_by_id(self, entry_id: int) -> Optional[WatchlistEntry]:
        """Get an entry by ID."""
        pass

    @abstractmethod
    def exists_by_id(self, entry_id: int) -> bool:
        """Check whether an entry exists."""
        pass

    @abstractmethod
    def delete_by_id(self, entry_id: int) -> None:
        """Delete an entry; unknown IDs are ignored."""
        pass

    @abstractmethod
    def find_page(self, page_number: int, page_size: int) -> Tuple[List[WatchlistEntry], int]:
        """Get one page of entries ordered by ID.

        Args:
            page_number: Zero-based page number.
            page_size: Entries per page.

        Returns:
            Entries on the page and the total number of entries.
        """
        pass
