"""TMDb (secondary provider) data models."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class SecondaryCandidate(BaseModel):
    """A movie from a TMDb title search."""

    id: int = Field(..., description="TMDb ID")
    title: Optional[str] = Field(None, description="Movie title")
    overview: Optional[str] = Field(None, description="Synopsis")
    release_date: Optional[str] = Field(None, description="Release date as sent by TMDb")
    vote_average: Optional[float] = Field(None, description="Average vote")
    poster_path: Optional[str] = Field(None, description="Poster image path")


class ImageReference(BaseModel):
    """Remote image path fragment."""

    file_path: str = Field(..., description="Path fragment below the image base URL")
    vote_average: Optional[float] = Field(None, description="Image quality score")


class ImageSet(BaseModel):
    """Images of one movie partitioned by kind."""

    posters: List[ImageReference] = Field(default_factory=list, description="Poster images")
    backdrops: List[ImageReference] = Field(default_factory=list, description="Backdrop images")

    @field_validator("posters", "backdrops", mode="before")
    @classmethod
    def none_as_empty(cls, v: Optional[list]) -> list:
        """An absent list is an empty list."""
        return [] if v is None else v


class SimilarTitle(BaseModel):
    """Title of a movie TMDb considers similar."""

    title: Optional[str] = Field(None, description="Movie title")
