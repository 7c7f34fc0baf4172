"""Custom exceptions for the application."""

from enum import Enum


class ErrorKind(str, Enum):
    """Failure kinds surfaced to callers."""

    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    DECODE_ERROR = "decode_error"
    CONFIGURATION = "configuration"
    STORAGE = "storage"


class WatchlistError(Exception):
    """Base exception for all application errors."""

    kind: ErrorKind = ErrorKind.UPSTREAM_UNAVAILABLE
    client_error: bool = False


class ConfigurationError(WatchlistError):
    """Configuration-related errors."""

    kind = ErrorKind.CONFIGURATION


class InvalidInputError(WatchlistError):
    """Caller supplied an invalid title, rating or query."""

    kind = ErrorKind.INVALID_INPUT
    client_error = True


class NotFoundError(WatchlistError):
    """The primary provider has no match for the title."""

    kind = ErrorKind.NOT_FOUND
    client_error = True


class AlreadyExistsError(WatchlistError):
    """An entry with the same title and year is already on the watchlist."""

    kind = ErrorKind.ALREADY_EXISTS
    client_error = True


class UpstreamUnavailableError(WatchlistError):
    """A remote call failed to complete."""

    kind = ErrorKind.UPSTREAM_UNAVAILABLE


class PoolSaturatedError(UpstreamUnavailableError):
    """The task pool queue is full and the call was rejected."""


class DecodeError(WatchlistError):
    """A remote response could not be parsed into the expected shape."""

    kind = ErrorKind.DECODE_ERROR


class StorageError(WatchlistError):
    """The watchlist database could not be opened, read or written."""

    kind = ErrorKind.STORAGE
