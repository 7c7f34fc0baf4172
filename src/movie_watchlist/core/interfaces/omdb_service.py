"""OMDb service interface."""

from abc import ABC, abstractmethod

from ..models import PrimaryMatch


class IOMDbService(ABC):
    """Interface for the primary metadata provider."""

    @abstractmethod
    async def lookup(self, title: str) -> PrimaryMatch:
        """Look up a movie by its exact title.

        Args:
            title: Movie title, already trimmed.

        Returns:
            OMDb match; ``found`` is False when OMDb has no such movie.

        Raises:
            UpstreamUnavailableError: If the request fails.
            DecodeError: If the response cannot be parsed.
        """
        pass
