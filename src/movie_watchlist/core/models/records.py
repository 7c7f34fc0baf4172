"""Database records."""

from typing import List, Optional

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field, SQLModel

from .watchlist import WatchlistEntry


class WatchlistRecord(SQLModel, table=True):
    """Persisted watchlist entry.

    ``year_key`` mirrors ``year`` with ``""`` for a missing year, so the
    unique constraint also covers movies without a year (SQL treats NULLs
    as distinct).
    """

    __tablename__ = "watchlist_entries"
    __table_args__ = (
        UniqueConstraint("title", "year_key", name="uq_watchlist_title_year"),
        {"sqlite_autoincrement": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(index=True)
    year: Optional[str] = Field(default=None)
    year_key: str = Field(default="", nullable=False)
    director: Optional[str] = Field(default=None)
    genre: Optional[str] = Field(default=None)
    plot: Optional[str] = Field(default=None)
    runtime: Optional[str] = Field(default=None)
    imdb_rating: Optional[str] = Field(default=None)
    tmdb_id: Optional[int] = Field(default=None, index=True)
    overview: Optional[str] = Field(default=None)
    release_date: Optional[str] = Field(default=None)
    vote_average: Optional[float] = Field(default=None)
    image_paths: List[str] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    similar_titles: List[str] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    watched: bool = Field(default=False)
    rating: Optional[int] = Field(default=None)

    def apply(self, entry: WatchlistEntry) -> None:
        """Copy every field except the ID from an entry."""
        self.title = entry.title
        self.year = entry.year
        self.year_key = normalize_year(entry.year)
        self.director = entry.director
        self.genre = entry.genre
        self.plot = entry.plot
        self.runtime = entry.runtime
        self.imdb_rating = entry.imdb_rating
        self.tmdb_id = entry.tmdb_id
        self.overview = entry.overview
        self.release_date = entry.release_date
        self.vote_average = entry.vote_average
        self.image_paths = list(entry.image_paths)
        self.similar_titles = list(entry.similar_titles)
        self.watched = entry.watched
        self.rating = entry.rating

    def to_entry(self) -> WatchlistEntry:
        return WatchlistEntry(
            id=self.id,
            title=self.title,
            year=self.year,
            director=self.director,
            genre=self.genre,
            plot=self.plot,
            runtime=self.runtime,
            imdb_rating=self.imdb_rating,
            tmdb_id=self.tmdb_id,
            overview=self.overview,
            release_date=self.release_date,
            vote_average=self.vote_average,
            image_paths=list(self.image_paths or []),
            similar_titles=list(self.similar_titles or []),
            watched=self.watched,
            rating=self.rating,
        )


def normalize_year(year: Optional[str]) -> str:
    return year or ""
