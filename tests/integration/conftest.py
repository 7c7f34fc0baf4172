"""Integration test fixtures and configuration."""

import logging

import pytest
import yaml

from movie_watchlist.config import ConfigManager
from movie_watchlist.core.interfaces import (
    IImageDownloadService,
    IOMDbService,
    ITMDbService,
    IWatchlistService,
)
from movie_watchlist.infrastructure import Container

OMDB_URL = "http://omdb.test/"
TMDB_URL = "http://tmdb.test/3"
IMAGE_URL = "http://images.test/t/p/w780"

INCEPTION_TMDB_ID = 27205


@pytest.fixture
def integration_config(tmp_path):
    """Create integration test configuration with a watchlist database file."""
    config_content = {
        "omdb": {"api_key": "omdb-key", "base_url": OMDB_URL, "timeout": 5},
        "tmdb": {
            "api_key": "tmdb-key",
            "base_url": TMDB_URL,
            "image_base_url": IMAGE_URL,
            "timeout": 5,
        },
        "storage": {
            "database_url": f"sqlite:///{(tmp_path / 'data' / 'watchlist.db').as_posix()}",
            "images_path": str(tmp_path / "data" / "images"),
        },
        "logging": {
            "level": "DEBUG",
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        },
        "app": {"max_workers": 3, "queue_capacity": 20, "enrichment_timeout": 30},
    }

    config_file = tmp_path / "integration_config.yaml"
    with open(config_file, "w") as f:
        yaml.dump(config_content, f, default_flow_style=False, indent=2)

    return config_file


@pytest.fixture
def inception_routes(make_response, make_omdb_payload):
    """Remote responses for adding Inception."""
    return {
        OMDB_URL: make_response(payload=make_omdb_payload()),
        f"{TMDB_URL}/search/movie": make_response(
            payload={
                "results": [
                    {
                        "id": INCEPTION_TMDB_ID,
                        "title": "Inception",
                        "overview": "Cobb, a skilled thief, steals secrets from dreams.",
                        "release_date": "2010-07-15",
                        "vote_average": 8.4,
                    }
                ]
            }
        ),
        f"{TMDB_URL}/movie/{INCEPTION_TMDB_ID}/images": make_response(
            payload={
                "posters": [
                    {"file_path": "/poster_a.jpg"},
                    {"file_path": "/poster_b.png"},
                    {"file_path": "/poster_c.jpg"},
                ],
                "backdrops": [{"file_path": "/backdrop_a.jpg"}, {"file_path": "/backdrop_b"}],
            }
        ),
        f"{TMDB_URL}/movie/{INCEPTION_TMDB_ID}/similar": make_response(
            payload={"results": [{"id": 100 + i, "title": f"Similar {i}"} for i in range(12)]}
        ),
        f"{IMAGE_URL}/poster_a.jpg": make_response(body=b"poster a"),
        f"{IMAGE_URL}/poster_b.png": make_response(body=b"poster b"),
        f"{IMAGE_URL}/backdrop_a.jpg": make_response(body=b"backdrop a"),
    }


@pytest.fixture
def http_session(inception_routes, make_session):
    """Fake HTTP session shared by all remote services."""
    return make_session(inception_routes)


@pytest.fixture
def integration_container(integration_config, http_session):
    """Create container with default services talking to a fake HTTP session."""
    config_manager = ConfigManager(integration_config)
    container = Container(config_manager)
    container.configure_default_services()

    for interface in (IOMDbService, ITMDbService, IImageDownloadService):
        container.get(interface)._session = http_session  # type: ignore[attr-defined]

    return container


@pytest.fixture
def watchlist_service(integration_container):
    """Watchlist service from the integration container."""
    return integration_container.get(IWatchlistService)


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo handler changes made by CLI invocations."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
