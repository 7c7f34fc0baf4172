"""Test the enrichment pipeline."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from movie_watchlist.core.interfaces import (
    IImageDownloadService,
    IOMDbService,
    ITMDbService,
    IWatchlistStore,
)
from movie_watchlist.core.models import (
    ImageReference,
    ImageSet,
    PrimaryMatch,
    SecondaryCandidate,
    SimilarTitle,
)
from movie_watchlist.core.services import (
    EnrichmentPipeline,
    SqlWatchlistStore,
)
from movie_watchlist.core.services.enrichment_pipeline import (
    select_image_references,
    select_similar_titles,
)
from movie_watchlist.utils import (
    AlreadyExistsError,
    DecodeError,
    ErrorKind,
    InvalidInputError,
    NotFoundError,
    StorageError,
    UpstreamUnavailableError,
)


def primary_match(title="Inception", year="2010"):
    return PrimaryMatch(
        title=title,
        year=year,
        director="Christopher Nolan",
        genre="Action, Adventure, Sci-Fi",
        plot="Dream heist.",
        runtime="148 min",
        imdb_rating="8.8",
        found=True,
    )


def image_set(posters=3, backdrops=2):
    return ImageSet(
        posters=[ImageReference(file_path=f"/poster{i}.jpg") for i in range(posters)],
        backdrops=[ImageReference(file_path=f"/backdrop{i}.jpg") for i in range(backdrops)],
    )


def similar(count=12):
    return [SimilarTitle(title=f"Similar {i}") for i in range(count)]


@pytest.fixture
def omdb():
    service = MagicMock(spec=IOMDbService)
    service.lookup = AsyncMock(return_value=primary_match())
    return service


@pytest.fixture
def tmdb():
    service = MagicMock(spec=ITMDbService)
    service.search_movies = AsyncMock(
        return_value=[
            SecondaryCandidate(
                id=27205,
                title="Inception",
                overview="Cobb steals secrets.",
                release_date="2010-07-15",
                vote_average=8.4,
            ),
            SecondaryCandidate(id=64956, title="Inception: The Cobol Job"),
        ]
    )
    service.get_movie_images = AsyncMock(return_value=image_set())
    service.get_similar_movies = AsyncMock(return_value=similar())
    return service


@pytest.fixture
def downloader():
    service = MagicMock(spec=IImageDownloadService)

    async def download(references, name_seed):
        return [f"images/{name_seed}_{i}.jpg" for i, _ in enumerate(references)]

    service.download_images = AsyncMock(side_effect=download)
    return service


@pytest.fixture
def store(config):
    return SqlWatchlistStore(config)


@pytest.fixture
def pipeline(omdb, tmdb, downloader, store):
    return EnrichmentPipeline(omdb, tmdb, downloader, store)


@pytest.mark.unit
class TestSelection:
    """Test the selection helpers."""

    def test_two_posters_then_one_backdrop(self):
        selected = select_image_references(image_set(posters=3, backdrops=2))
        assert [r.file_path for r in selected] == ["/poster0.jpg", "/poster1.jpg", "/backdrop0.jpg"]

    def test_fewer_images_available(self):
        selected = select_image_references(image_set(posters=1, backdrops=0))
        assert [r.file_path for r in selected] == ["/poster0.jpg"]

    def test_only_backdrops(self):
        selected = select_image_references(image_set(posters=0, backdrops=4))
        assert [r.file_path for r in selected] == ["/backdrop0.jpg"]

    def test_no_image_set(self):
        assert select_image_references(None) == []

    def test_similar_titles_capped_in_order(self):
        assert select_similar_titles(similar(12)) == [f"Similar {i}" for i in range(10)]

    def test_similar_titles_absent(self):
        assert select_similar_titles(None) == []
        assert select_similar_titles([]) == []

    def test_untitled_similar_entries_skipped(self):
        items = [SimilarTitle(title=None), SimilarTitle(title="Tenet"), SimilarTitle(title="  ")]
        items += similar(12)

        assert select_similar_titles(items) == ["Tenet"] + [f"Similar {i}" for i in range(9)]


@pytest.mark.unit
class TestEnrich:
    """Test successful enrichment runs."""

    @pytest.mark.asyncio
    async def test_full_enrichment(self, pipeline, omdb, tmdb, downloader, store):
        """Test that all provider data ends up on the saved entry."""
        saved = await pipeline.enrich("  Inception ")

        omdb.lookup.assert_awaited_once_with("Inception")
        tmdb.search_movies.assert_awaited_once_with("Inception")
        tmdb.get_movie_images.assert_awaited_once_with(27205)
        tmdb.get_similar_movies.assert_awaited_once_with(27205)

        assert saved.id is not None
        assert saved.title == "Inception"
        assert saved.year == "2010"
        assert saved.director == "Christopher Nolan"
        assert saved.runtime == "148 min"
        assert saved.imdb_rating == "8.8"
        assert saved.tmdb_id == 27205
        assert saved.overview == "Cobb steals secrets."
        assert saved.release_date == "2010-07-15"
        assert saved.vote_average == 8.4
        assert saved.similar_titles == [f"Similar {i}" for i in range(10)]
        assert len(saved.image_paths) == 3
        assert saved.watched is False
        assert saved.rating is None
        assert store.find_by_id(saved.id) == saved

    @pytest.mark.asyncio
    async def test_selected_images_passed_to_downloader(self, pipeline, downloader):
        """Test that two posters and one backdrop are downloaded under the title."""
        await pipeline.enrich("Inception")

        references, seed = downloader.download_images.await_args.args
        assert [r.file_path for r in references] == [
            "/poster0.jpg",
            "/poster1.jpg",
            "/backdrop0.jpg",
        ]
        assert seed == "Inception"

    @pytest.mark.asyncio
    async def test_no_secondary_match_saves_primary_only(self, pipeline, tmdb, downloader):
        """Test graceful degradation when TMDb has no candidates."""
        tmdb.search_movies.return_value = []

        saved = await pipeline.enrich("Inception")

        assert saved.id is not None
        assert saved.director == "Christopher Nolan"
        assert saved.tmdb_id is None
        assert saved.overview is None
        assert saved.image_paths == []
        assert saved.similar_titles == []
        tmdb.get_movie_images.assert_not_awaited()
        tmdb.get_similar_movies.assert_not_awaited()
        downloader.download_images.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_images_skips_download(self, pipeline, tmdb, downloader):
        """Test that an empty image set saves without downloading."""
        tmdb.get_movie_images.return_value = ImageSet()

        saved = await pipeline.enrich("Inception")

        assert saved.image_paths == []
        assert len(saved.similar_titles) == 10
        downloader.download_images.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_partial_image_download(self, pipeline, downloader):
        """Test that failed downloads only shrink the image list."""
        downloader.download_images.side_effect = None
        downloader.download_images.return_value = ["images/Inception_0.jpg"]

        saved = await pipeline.enrich("Inception")

        assert saved.image_paths == ["images/Inception_0.jpg"]

    @pytest.mark.asyncio
    async def test_empty_similar_list(self, pipeline, tmdb):
        """Test that no similar titles is not an error."""
        tmdb.get_similar_movies.return_value = []

        saved = await pipeline.enrich("Inception")

        assert saved.similar_titles == []
        assert len(saved.image_paths) == 3


@pytest.mark.unit
class TestEnrichFailures:
    """Test failure kinds and that nothing is saved on failure."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("title", ["", "   ", "\t\n", None])
    async def test_blank_title(self, pipeline, omdb, title):
        with pytest.raises(InvalidInputError) as exc_info:
            await pipeline.enrich(title)  # type: ignore[arg-type]

        assert exc_info.value.kind is ErrorKind.INVALID_INPUT
        omdb.lookup.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_primary_not_found(self, pipeline, omdb, tmdb, store):
        omdb.lookup.return_value = PrimaryMatch(found=False, error="Movie not found!")

        with pytest.raises(NotFoundError) as exc_info:
            await pipeline.enrich("Nonexistent Movie 12345")

        assert "Movie not found!" in str(exc_info.value)
        tmdb.search_movies.assert_not_awaited()
        assert store.find_page(0, 10)[1] == 0

    @pytest.mark.asyncio
    async def test_primary_match_without_title(self, pipeline, omdb, store):
        omdb.lookup.return_value = PrimaryMatch(found=True, title="  ")

        with pytest.raises(DecodeError):
            await pipeline.enrich("Inception")

        assert store.find_page(0, 10)[1] == 0

    @pytest.mark.asyncio
    async def test_already_on_watchlist(self, pipeline, tmdb, store):
        await pipeline.enrich("Inception")
        tmdb.search_movies.reset_mock()

        with pytest.raises(AlreadyExistsError):
            await pipeline.enrich("inception")

        tmdb.search_movies.assert_not_awaited()
        assert store.find_page(0, 10)[1] == 1

    @pytest.mark.asyncio
    async def test_primary_unavailable(self, pipeline, omdb, store):
        omdb.lookup.side_effect = UpstreamUnavailableError("OMDb down")

        with pytest.raises(UpstreamUnavailableError):
            await pipeline.enrich("Inception")

        assert store.find_page(0, 10)[1] == 0

    @pytest.mark.asyncio
    async def test_unexpected_provider_exception(self, pipeline, omdb):
        """Test that untyped failures surface as upstream failures."""
        omdb.lookup.side_effect = RuntimeError("socket closed")

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await pipeline.enrich("Inception")

        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_secondary_search_failure_discards_primary(self, pipeline, tmdb, store):
        """Test that a failing TMDb search saves nothing, unlike an empty result."""
        tmdb.search_movies.side_effect = UpstreamUnavailableError("TMDb down")

        with pytest.raises(UpstreamUnavailableError):
            await pipeline.enrich("Inception")

        assert store.find_page(0, 10)[1] == 0

    @pytest.mark.asyncio
    async def test_images_failure_waits_for_similar(self, pipeline, tmdb, downloader, store):
        """Test that a detail failure fails the run after both calls finish."""
        finished = []

        async def slow_similar(tmdb_id):
            await asyncio.sleep(0.01)
            finished.append(tmdb_id)
            return similar()

        tmdb.get_movie_images.side_effect = DecodeError("bad images")
        tmdb.get_similar_movies.side_effect = slow_similar

        with pytest.raises(DecodeError):
            await pipeline.enrich("Inception")

        assert finished == [27205]
        downloader.download_images.assert_not_awaited()
        assert store.find_page(0, 10)[1] == 0

    @pytest.mark.asyncio
    async def test_similar_failure(self, pipeline, tmdb, store):
        tmdb.get_similar_movies.side_effect = ConnectionResetError("reset")

        with pytest.raises(UpstreamUnavailableError):
            await pipeline.enrich("Inception")

        assert store.find_page(0, 10)[1] == 0


@pytest.mark.unit
class TestConcurrency:
    """Test concurrent runs for the same movie."""

    @pytest.mark.asyncio
    async def test_same_title_added_once(self, pipeline, tmdb, store):
        """Test that two concurrent adds produce one entry and one conflict."""

        async def slow_search(title):
            await asyncio.sleep(0.01)
            return [SecondaryCandidate(id=27205, title="Inception")]

        tmdb.search_movies.side_effect = slow_search

        results = await asyncio.gather(
            pipeline.enrich("Inception"),
            pipeline.enrich("Inception"),
            return_exceptions=True,
        )

        errors = [r for r in results if isinstance(r, Exception)]
        assert len(errors) == 1
        assert isinstance(errors[0], AlreadyExistsError)
        assert store.find_page(0, 10)[1] == 1

    @pytest.mark.asyncio
    async def test_different_titles_run_concurrently(self, pipeline, omdb, tmdb, store):
        """Test that unrelated movies are both saved."""
        async def lookup(title):
            await asyncio.sleep(0)
            return primary_match(title, "2000")

        omdb.lookup.side_effect = lookup

        results = await asyncio.gather(pipeline.enrich("Memento"), pipeline.enrich("Tenet"))

        assert {r.title for r in results} == {"Memento", "Tenet"}
        assert store.find_page(0, 10)[1] == 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_store_conflict_at_save(omdb, tmdb, downloader):
    """Test that a uniqueness violation at save time surfaces as a conflict."""
    store = MagicMock(spec=IWatchlistStore)
    store.exists_by_title_and_year.return_value = False
    store.save.side_effect = AlreadyExistsError("duplicate")
    pipeline = EnrichmentPipeline(omdb, tmdb, downloader, store)

    with pytest.raises(AlreadyExistsError):
        await pipeline.enrich("Inception")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_store_failure_at_save(omdb, tmdb, downloader):
    """Test that a failed write surfaces as a storage error."""
    store = MagicMock(spec=IWatchlistStore)
    store.exists_by_title_and_year.return_value = False
    store.save.side_effect = StorageError("disk I/O error")
    pipeline = EnrichmentPipeline(omdb, tmdb, downloader, store)

    with pytest.raises(StorageError) as exc_info:
        await pipeline.enrich("Inception")

    assert exc_info.value.client_error is False
    store.save.assert_called_once()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_untitled_similar_movie_does_not_fail_add(pipeline, tmdb):
    """Test that TMDb similar results without a title are dropped."""
    tmdb.get_similar_movies.return_value = [SimilarTitle(title=None), SimilarTitle(title="Tenet")]

    saved = await pipeline.enrich("Inception")

    assert saved.similar_titles == ["Tenet"]
