"""TMDb service implementation."""

import asyncio
from typing import Any, Dict, List, Optional

import aiohttp
from pydantic import ValidationError

from ...config.models import Config
from ...infrastructure.http import HttpSessionMixin
from ...infrastructure.logging import LoggerMixin
from ...infrastructure.task_pool import TaskPool
from ...utils import DecodeError, UpstreamUnavailableError, WatchlistError
from ..interfaces import ITMDbService
from ..models import ImageSet, SecondaryCandidate, SimilarTitle


class TMDbService(ITMDbService, HttpSessionMixin, LoggerMixin):
    """TMDb service implementation."""

    def __init__(self, config: Config, task_pool: TaskPool) -> None:
        """Initialize TMDb service.

        Args:
            config: Application configuration.
            task_pool: Pool bounding concurrent outbound calls.
        """
        self._config = config
        self._tmdb_config = config.tmdb
        self._task_pool = task_pool
        self._timeout = config.tmdb.timeout
        self._session: Optional[aiohttp.ClientSession] = None

    async def search_movies(self, title: str) -> List[SecondaryCandidate]:
        """Search movies by title.

        Args:
            title: Movie title to search for.

        Returns:
            Candidates in TMDb's ranking order.

        Raises:
            UpstreamUnavailableError: If the request fails.
            DecodeError: If the response cannot be parsed.
        """
        data = await self._get_json("/search/movie", {"query": title}, f"search for '{title}'")
        results = self._results(data, f"search for '{title}'")

        try:
            candidates = [SecondaryCandidate.model_validate(result) for result in results]
        except ValidationError as e:
            raise self._decode_error(f"search for '{title}'", e) from e

        self.logger.info(f"TMDb search for '{title}' returned {len(candidates)} candidates")
        return candidates

    async def get_movie_images(self, tmdb_id: int) -> ImageSet:
        """Get poster and backdrop references for a movie.

        Args:
            tmdb_id: TMDb movie ID.

        Returns:
            Image references by kind; missing kinds are empty.

        Raises:
            UpstreamUnavailableError: If the request fails.
            DecodeError: If the response cannot be parsed.
        """
        operation = f"images for TMDb ID {tmdb_id}"
        data = await self._get_json(f"/movie/{tmdb_id}/images", {}, operation)
        if not isinstance(data, dict):
            raise self._decode_error(operation, "expected a JSON object")

        try:
            images = ImageSet.model_validate(data)
        except ValidationError as e:
            raise self._decode_error(operation, e) from e

        self.logger.debug(
            f"TMDb has {len(images.posters)} posters and "
            f"{len(images.backdrops)} backdrops for {tmdb_id}"
        )
        return images

    async def get_similar_movies(self, tmdb_id: int) -> List[SimilarTitle]:
        """Get movies similar to the given one.

        Args:
            tmdb_id: TMDb movie ID.

        Returns:
            Similar titles in TMDb's order; empty when TMDb sends no results.

        Raises:
            UpstreamUnavailableError: If the request fails.
            DecodeError: If the response cannot be parsed.
        """
        operation = f"similar movies for TMDb ID {tmdb_id}"
        data = await self._get_json(f"/movie/{tmdb_id}/similar", {}, operation)
        results = self._results(data, operation)

        try:
            similar = [SimilarTitle.model_validate(result) for result in results]
        except ValidationError as e:
            raise self._decode_error(operation, e) from e

        self.logger.debug(f"TMDb has {len(similar)} similar movies for {tmdb_id}")
        return similar

    async def _get_json(self, endpoint: str, params: Dict[str, str], operation: str) -> Any:
        """Run a GET request through the task pool.

        Args:
            endpoint: Path below the API base URL.
            params: Endpoint specific query parameters.
            operation: Description used in log and error messages.

        Returns:
            Decoded JSON body.
        """
        url = f"{self._tmdb_config.base_url}{endpoint}"
        query = {"api_key": self._tmdb_config.api_key, **params}
        if self._tmdb_config.language:
            query["language"] = self._tmdb_config.language

        try:
            return await self._task_pool.submit(self._request, url, query)
        except WatchlistError as e:
            self.logger.error(f"TMDb {operation} failed: {e}")
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            error_msg = f"TMDb {operation} failed: {e}"
            self.logger.error(error_msg)
            raise UpstreamUnavailableError(error_msg) from e

    async def _request(self, url: str, params: Dict[str, str]) -> Any:
        """Perform the HTTP request and decode the JSON body."""
        async with self._get_session().get(url, params=params) as response:
            if response.status >= 400:
                raise UpstreamUnavailableError(f"TMDb returned HTTP {response.status}")
            try:
                return await response.json(content_type=None)
            except ValueError as e:
                raise DecodeError(f"TMDb response is not valid JSON: {e}") from e

    def _results(self, data: Any, operation: str) -> List[Any]:
        """Extract the ``results`` list of a paged response; absent means empty."""
        if not isinstance(data, dict):
            raise self._decode_error(operation, "expected a JSON object")

        results = data.get("results")
        if results is None:
            return []
        if not isinstance(results, list):
            raise self._decode_error(operation, "'results' is not a list")
        return results

    def _decode_error(self, operation: str, reason: Any) -> DecodeError:
        error_msg = f"Unexpected TMDb response for {operation}: {reason}"
        self.logger.error(error_msg)
        return DecodeError(error_msg)
