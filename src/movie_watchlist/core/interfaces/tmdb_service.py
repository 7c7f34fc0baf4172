"""TMDb service interface."""

from abc import ABC, abstractmethod
from typing import List

from ..models import ImageSet, SecondaryCandidate, SimilarTitle


class ITMDbService(ABC):
    """Interface for the secondary metadata provider."""

    @abstractmethod
    async def search_movies(self, title: str) -> List[SecondaryCandidate]:
        """Search movies by title.

        Args:
            title: Movie title to search for.

        Returns:
            Candidates in TMDb's own ranking order (possibly empty).

        Raises:
            UpstreamUnavailableError: If the request fails.
            DecodeError: If the response cannot be parsed.
        """
        pass

    @abstractmethod
    async def get_movie_images(self, tmdb_id: int) -> ImageSet:
        """Get poster and backdrop references for a movie.

        Args:
            tmdb_id: TMDb movie ID.

        Returns:
            Image references by kind.
        """
        pass

    @abstractmethod
    async def get_similar_movies(self, tmdb_id: int) -> List[SimilarTitle]:
        """Get movies similar to the given one.

        Args:
            tmdb_id: TMDb movie ID.

        Returns:
            Similar titles in provider order.
        """
        pass
