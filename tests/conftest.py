"""Pytest configuration and fixtures."""

import json
from typing import Any, Dict, List, Optional, Tuple

import pytest

from movie_watchlist.config import ConfigManager
from movie_watchlist.infrastructure import Container, TaskPool


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: fast tests without I/O beyond tmp_path")
    config.addinivalue_line("markers", "integration: tests wiring several components")


class FakeResponse:
    """Minimal stand-in for ``aiohttp.ClientResponse`` used as a context manager."""

    def __init__(self, status: int = 200, payload: Any = None, body: Optional[bytes] = None):
        self.status = status
        self._payload = payload
        self._body = body

    async def json(self, content_type: Optional[str] = None) -> Any:
        if isinstance(self._payload, (bytes, str)):
            return json.loads(self._payload)
        return self._payload

    async def read(self) -> bytes:
        return self._body if self._body is not None else b""

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        return None


class FakeSession:
    """Stand-in for ``aiohttp.ClientSession`` routing GET requests by URL.

    Routes map a URL (without query string) to a ``FakeResponse`` or an
    exception instance to raise. Unknown URLs answer HTTP 404.
    """

    def __init__(self, routes: Optional[Dict[str, Any]] = None):
        self.routes: Dict[str, Any] = dict(routes or {})
        self.calls: List[Tuple[str, Optional[Dict[str, str]]]] = []
        self.closed = False

    def get(self, url: str, params: Optional[Dict[str, str]] = None) -> FakeResponse:
        self.calls.append((url, params))
        route = self.routes.get(url, FakeResponse(status=404))
        if isinstance(route, BaseException):
            raise route
        return route

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def temp_config_file(tmp_path):
    """Create a temporary configuration file."""
    config_content = f"""
omdb:
  api_key: "test-omdb-key"
  base_url: "http://omdb.test/"

tmdb:
  api_key: "test-tmdb-key"
  base_url: "http://tmdb.test/3"
  image_base_url: "http://images.test/t/p/w780"

storage:
  database_url: "sqlite://"
  images_path: "{(tmp_path / 'images').as_posix()}"

logging:
  level: "DEBUG"

app:
  max_workers: 4
  queue_capacity: 16
"""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(config_content)
    return config_file


@pytest.fixture
def config_manager(temp_config_file):
    """Create a configuration manager with test config."""
    return ConfigManager(temp_config_file)


@pytest.fixture
def config(config_manager):
    """Load test configuration."""
    return config_manager.load_config()


@pytest.fixture
def container(config_manager):
    """Create a test container."""
    container = Container(config_manager)
    return container


@pytest.fixture
def task_pool():
    """Create a small task pool."""
    return TaskPool(max_workers=4, queue_capacity=16)


def omdb_payload(title: str = "Inception", year: str = "2010", **extra: str) -> Dict[str, str]:
    """Build an OMDb success body."""
    payload = {
        "Title": title,
        "Year": year,
        "Director": "Christopher Nolan",
        "Genre": "Action, Adventure, Sci-Fi",
        "Plot": "A thief who steals corporate secrets through dream-sharing technology.",
        "Runtime": "148 min",
        "imdbRating": "8.8",
        "Response": "True",
    }
    payload.update(extra)
    return payload


OMDB_NOT_FOUND = {"Response": "False", "Error": "Movie not found!"}


@pytest.fixture
def make_response():
    """Factory for fake HTTP responses."""
    return FakeResponse


@pytest.fixture
def make_session():
    """Factory for fake HTTP sessions."""
    return FakeSession


@pytest.fixture
def make_omdb_payload():
    """Factory for OMDb success bodies."""
    return omdb_payload
