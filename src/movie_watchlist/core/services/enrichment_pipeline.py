"""Enrichment pipeline implementation."""

import asyncio
import weakref
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple, TypeVar

from ...infrastructure.logging import LoggerMixin
from ...utils import (
    AlreadyExistsError,
    DecodeError,
    InvalidInputError,
    NotFoundError,
    UpstreamUnavailableError,
    WatchlistError,
    normalize_query,
)
from ..interfaces import (
    IEnrichmentPipeline,
    IImageDownloadService,
    IOMDbService,
    ITMDbService,
    IWatchlistStore,
)
from ..models import (
    ImageReference,
    ImageSet,
    PrimaryMatch,
    SecondaryCandidate,
    SimilarTitle,
    WatchlistEntry,
)
from ..models.watchlist import MAX_SIMILAR_TITLES

T = TypeVar("T")

MAX_POSTERS = 2
MAX_BACKDROPS = 1


class EnrichmentStage(str, Enum):
    """Stages of one enrichment run, in execution order."""

    PRIMARY_LOOKUP = "primary_lookup"
    EXISTENCE_CHECK = "existence_check"
    SECONDARY_LOOKUP = "secondary_lookup"
    JOINED_DETAIL = "joined_detail"
    ASSET_FETCH = "asset_fetch"
    SAVE = "save"


def select_similar_titles(similar: Optional[Sequence[SimilarTitle]]) -> List[str]:
    """Take the first similar titles in provider order, skipping untitled ones."""
    if not similar:
        return []
    titles = [item.title for item in similar if item.title and item.title.strip()]
    return titles[:MAX_SIMILAR_TITLES]


def select_image_references(images: Optional[ImageSet]) -> List[ImageReference]:
    """Pick up to two posters followed by up to one backdrop."""
    if images is None:
        return []
    return list(images.posters[:MAX_POSTERS]) + list(images.backdrops[:MAX_BACKDROPS])


class EnrichmentPipeline(IEnrichmentPipeline, LoggerMixin):
    """Turns a free-text title into a saved, enriched watchlist entry.

    Stages run strictly in order:
        PRIMARY_LOOKUP    OMDb must report a match
        EXISTENCE_CHECK   (title, year) must not be on the watchlist yet
        SECONDARY_LOOKUP  TMDb search; no candidates saves OMDb data only
        JOINED_DETAIL     TMDb images and similar titles, fetched concurrently
        ASSET_FETCH       up to three images downloaded concurrently
        SAVE              the single write to the store

    Runs for the same (title, year) are serialized, so two concurrent
    requests for one movie produce one entry and one ``AlreadyExistsError``.
    """

    def __init__(
        self,
        omdb_service: IOMDbService,
        tmdb_service: ITMDbService,
        image_download_service: IImageDownloadService,
        watchlist_store: IWatchlistStore,
    ):
        """Initialize enrichment pipeline.

        Args:
            omdb_service: Primary metadata provider.
            tmdb_service: Secondary metadata provider.
            image_download_service: Image downloader.
            watchlist_store: Watchlist persistence.
        """
        self._omdb_service = omdb_service
        self._tmdb_service = tmdb_service
        self._image_download_service = image_download_service
        self._store = watchlist_store
        self._locks: "weakref.WeakValueDictionary[Tuple[str, Optional[str]], asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

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
        query = normalize_query(title)
        if not query:
            raise InvalidInputError("Movie title is required")

        self.logger.info(f"Enriching '{query}'")
        match = await self._lookup_primary(query)

        async with self._lock_for(match.title, match.year):
            self._check_not_exists(match)
            entry = self._build_entry(match)

            candidate = await self._lookup_secondary(query)
            if candidate is None:
                self.logger.warning(f"No TMDb match for '{query}', saving OMDb data only")
                return self._save(entry)

            self._apply_candidate(entry, candidate)
            images, similar = await self._fetch_details(candidate.id)

            entry.similar_titles = select_similar_titles(similar)
            references = select_image_references(images)
            if not references:
                self.logger.info(f"No images available for '{entry.title}'")
                return self._save(entry)

            entry.image_paths = await self._fetch_assets(references, entry.title)
            return self._save(entry)

    async def _lookup_primary(self, query: str) -> PrimaryMatch:
        match = await self._call(EnrichmentStage.PRIMARY_LOOKUP, self._omdb_service.lookup, query)

        if not match.found:
            raise NotFoundError(f"Movie not found: {match.error}")
        if not match.title or not match.title.strip():
            raise DecodeError(f"OMDb reported a match for '{query}' without a title")
        return match

    def _check_not_exists(self, match: PrimaryMatch) -> None:
        self.logger.debug(f"[{EnrichmentStage.EXISTENCE_CHECK.value}] {match.title} ({match.year})")
        if self._store.exists_by_title_and_year(match.title, match.year):  # type: ignore[arg-type]
            raise AlreadyExistsError(f"'{match.title}' ({match.year}) is already on the watchlist")

    @staticmethod
    def _build_entry(match: PrimaryMatch) -> WatchlistEntry:
        """Create an unsaved entry from OMDb fields, copied verbatim."""
        return WatchlistEntry(
            title=match.title,  # type: ignore[arg-type]
            year=match.year,
            director=match.director,
            genre=match.genre,
            plot=match.plot,
            runtime=match.runtime,
            imdb_rating=match.imdb_rating,
        )

    async def _lookup_secondary(self, query: str) -> Optional[SecondaryCandidate]:
        """Search TMDb; the first candidate wins, without re-ranking."""
        candidates = await self._call(
            EnrichmentStage.SECONDARY_LOOKUP, self._tmdb_service.search_movies, query
        )
        return candidates[0] if candidates else None

    @staticmethod
    def _apply_candidate(entry: WatchlistEntry, candidate: SecondaryCandidate) -> None:
        entry.tmdb_id = candidate.id
        entry.overview = candidate.overview
        entry.release_date = candidate.release_date
        entry.vote_average = candidate.vote_average

    async def _fetch_details(self, tmdb_id: int) -> Tuple[ImageSet, List[SimilarTitle]]:
        """Fetch images and similar titles concurrently.

        Both requests always run to completion before any failure is raised.
        """
        self.logger.debug(f"[{EnrichmentStage.JOINED_DETAIL.value}] TMDb ID {tmdb_id}")
        results = await asyncio.gather(
            self._tmdb_service.get_movie_images(tmdb_id),
            self._tmdb_service.get_similar_movies(tmdb_id),
            return_exceptions=True,
        )

        for result in results:
            if isinstance(result, WatchlistError) or (
                isinstance(result, BaseException) and not isinstance(result, Exception)
            ):
                self.logger.error(f"Stage {EnrichmentStage.JOINED_DETAIL.value} failed: {result}")
                raise result
            if isinstance(result, Exception):
                raise self._upstream_error(EnrichmentStage.JOINED_DETAIL, result) from result

        images, similar = results
        return images, similar  # type: ignore[return-value]

    async def _fetch_assets(self, references: List[ImageReference], name_seed: str) -> List[str]:
        self.logger.debug(
            f"[{EnrichmentStage.ASSET_FETCH.value}] {len(references)} images for '{name_seed}'"
        )
        return await self._image_download_service.download_images(references, name_seed)

    def _save(self, entry: WatchlistEntry) -> WatchlistEntry:
        saved = self._store.save(entry)
        self.logger.info(
            f"[{EnrichmentStage.SAVE.value}] Added '{saved.title}' ({saved.year}) as entry "
            f"{saved.id} with {len(saved.image_paths)} images and "
            f"{len(saved.similar_titles)} similar titles"
        )
        return saved

    async def _call(
        self, stage: EnrichmentStage, func: Callable[..., Awaitable[T]], *args: Any
    ) -> T:
        """Await a remote call, mapping unexpected failures to UpstreamUnavailableError."""
        self.logger.debug(f"[{stage.value}] {args}")
        try:
            return await func(*args)
        except WatchlistError as e:
            self.logger.error(f"Stage {stage.value} failed: {e}")
            raise
        except Exception as e:
            raise self._upstream_error(stage, e) from e

    def _upstream_error(self, stage: EnrichmentStage, error: Exception) -> UpstreamUnavailableError:
        error_msg = f"Stage {stage.value} failed: {error}"
        self.logger.error(error_msg)
        return UpstreamUnavailableError(error_msg)

    def _lock_for(self, title: Optional[str], year: Optional[str]) -> asyncio.Lock:
        key = (title or "", year)
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock
