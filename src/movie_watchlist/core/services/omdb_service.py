"""OMDb service implementation."""

import asyncio
from typing import Any, Dict, Optional

import aiohttp
from pydantic import ValidationError

from ...config.models import Config
from ...infrastructure.http import HttpSessionMixin
from ...infrastructure.logging import LoggerMixin
from ...infrastructure.task_pool import TaskPool
from ...utils import DecodeError, UpstreamUnavailableError, WatchlistError
from ..interfaces import IOMDbService
from ..models import PrimaryMatch


class OMDbService(IOMDbService, HttpSessionMixin, LoggerMixin):
    """OMDb service implementation."""

    def __init__(self, config: Config, task_pool: TaskPool) -> None:
        """Initialize OMDb service.

        Args:
            config: Application configuration.
            task_pool: Pool bounding concurrent outbound calls.
        """
        self._config = config
        self._omdb_config = config.omdb
        self._task_pool = task_pool
        self._timeout = config.omdb.timeout
        self._session: Optional[aiohttp.ClientSession] = None

    async def lookup(self, title: str) -> PrimaryMatch:
        """Look up a movie by its exact title.

        Args:
            title: Movie title, already trimmed.

        Returns:
            OMDb match, with ``found`` False when OMDb reports no such movie.

        Raises:
            UpstreamUnavailableError: If the request fails.
            DecodeError: If the response cannot be parsed.
        """
        try:
            data = await self._task_pool.submit(self._request, self._build_params(title))
        except WatchlistError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            error_msg = f"OMDb lookup failed for '{title}': {e}"
            self.logger.error(error_msg)
            raise UpstreamUnavailableError(error_msg) from e

        try:
            match = PrimaryMatch.model_validate(data)
        except ValidationError as e:
            error_msg = f"Unexpected OMDb response for '{title}': {e}"
            self.logger.error(error_msg)
            raise DecodeError(error_msg) from e

        if match.found:
            self.logger.info(f"OMDb matched '{title}' to '{match.title}' ({match.year})")
        else:
            self.logger.info(f"OMDb has no match for '{title}': {match.error}")
        return match

    def _build_params(self, title: str) -> Dict[str, str]:
        """Build query parameters for a title lookup.

        The title is passed through unchanged; aiohttp encodes spaces as ``+``.
        """
        return {"t": title, "apikey": self._omdb_config.api_key}

    async def _request(self, params: Dict[str, str]) -> Any:
        """Perform the HTTP request and decode the JSON body."""
        async with self._get_session().get(self._omdb_config.base_url, params=params) as response:
            if response.status >= 400:
                raise UpstreamUnavailableError(f"OMDb returned HTTP {response.status}")
            try:
                return await response.json(content_type=None)
            except ValueError as e:
                raise DecodeError(f"OMDb response is not valid JSON: {e}") from e
