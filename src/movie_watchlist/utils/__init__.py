"""Utility functions and classes."""

from .exceptions import (
    AlreadyExistsError,
    ConfigurationError,
    DecodeError,
    ErrorKind,
    InvalidInputError,
    NotFoundError,
    PoolSaturatedError,
    StorageError,
    UpstreamUnavailableError,
    WatchlistError,
)
from .text_utils import file_extension, normalize_query, sanitize_filename

__all__ = [
    "WatchlistError",
    "ErrorKind",
    "ConfigurationError",
    "InvalidInputError",
    "NotFoundError",
    "AlreadyExistsError",
    "UpstreamUnavailableError",
    "PoolSaturatedError",
    "DecodeError",
    "StorageError",
    "sanitize_filename",
    "file_extension",
    "normalize_query",
]
