"""Shared aiohttp session handling for remote services."""

import logging
from typing import Any, Optional

import aiohttp


class HttpSessionMixin:
    """Lazily created aiohttp session with async context manager support.

    Subclasses set ``_session`` to None and ``_timeout`` (seconds) in their
    constructor.
    """

    _session: Optional[aiohttp.ClientSession]
    _timeout: int

    def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session.

        Returns:
            HTTP session.
        """
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> Any:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    def __del__(self) -> None:
        """Cleanup on deletion."""
        # Just log that cleanup is needed, don't try to clean up here
        session = getattr(self, "_session", None)
        if session is not None and not session.closed:
            logging.getLogger(__name__).debug(
                f"{self.__class__.__name__} session not properly closed"
            )
