"""OMDb (primary provider) data models."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PrimaryMatch(BaseModel):
    """Result of an OMDb title lookup.

    OMDb reports "not found" inside a successful response through its
    ``Response``/``Error`` fields; ``found`` carries that signal.
    """

    title: Optional[str] = Field(None, alias="Title", description="Movie title")
    year: Optional[str] = Field(None, alias="Year", description="Release year")
    director: Optional[str] = Field(None, alias="Director", description="Director")
    genre: Optional[str] = Field(None, alias="Genre", description="Genre list")
    plot: Optional[str] = Field(None, alias="Plot", description="Plot summary")
    runtime: Optional[str] = Field(None, alias="Runtime", description="Runtime, e.g. '148 min'")
    imdb_rating: Optional[str] = Field(None, alias="imdbRating", description="IMDb rating")
    found: bool = Field(..., alias="Response", description="Whether OMDb found a match")
    error: Optional[str] = Field(None, alias="Error", description="OMDb error message")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("found", mode="before")
    @classmethod
    def parse_response_flag(cls, v: Any) -> Any:
        """OMDb sends the flag as the strings "True"/"False"."""
        if isinstance(v, str):
            return v == "True"
        return v
