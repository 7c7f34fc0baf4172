"""Watchlist data models."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_IMAGES = 3
MAX_SIMILAR_TITLES = 10
MIN_RATING = 1
MAX_RATING = 5


class WatchlistEntry(BaseModel):
    """A movie on the watchlist."""

    id: Optional[int] = Field(None, description="Store-assigned identifier")
    title: str = Field(..., description="Movie title")
    year: Optional[str] = Field(None, description="Release year (OMDb)")
    director: Optional[str] = Field(None, description="Director (OMDb)")
    genre: Optional[str] = Field(None, description="Genre (OMDb)")
    plot: Optional[str] = Field(None, description="Plot (OMDb)")
    runtime: Optional[str] = Field(None, description="Runtime (OMDb)")
    imdb_rating: Optional[str] = Field(None, description="IMDb rating (OMDb)")
    tmdb_id: Optional[int] = Field(None, description="TMDb ID")
    overview: Optional[str] = Field(None, description="Synopsis (TMDb)")
    release_date: Optional[str] = Field(None, description="Release date (TMDb)")
    vote_average: Optional[float] = Field(None, description="Average vote (TMDb)")
    image_paths: List[str] = Field(
        default_factory=list, max_length=MAX_IMAGES, description="Local image paths"
    )
    similar_titles: List[str] = Field(
        default_factory=list, max_length=MAX_SIMILAR_TITLES, description="Similar movie titles"
    )
    watched: bool = Field(default=False, description="Whether the user has watched it")
    rating: Optional[int] = Field(
        None, ge=MIN_RATING, le=MAX_RATING, description="User rating from 1 to 5"
    )

    model_config = ConfigDict(validate_assignment=True)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Title must not be blank."""
        if not v.strip():
            raise ValueError("Title must not be blank")
        return v


class WatchlistPage(BaseModel):
    """One page of watchlist entries."""

    items: List[WatchlistEntry] = Field(default_factory=list, description="Entries on this page")
    page_number: int = Field(..., ge=0, description="Zero-based page number")
    page_size: int = Field(..., gt=0, description="Entries per page")
    total_elements: int = Field(..., ge=0, description="Entries across all pages")

    @property
    def total_pages(self) -> int:
        """Number of pages available."""
        return -(-self.total_elements // self.page_size)

    @property
    def first(self) -> bool:
        """Whether this is the first page."""
        return self.page_number == 0

    @property
    def last(self) -> bool:
        """Whether this is the last page."""
        return self.page_number >= self.total_pages - 1
