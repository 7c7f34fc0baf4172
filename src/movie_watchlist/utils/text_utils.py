"""Text processing utilities."""

import re
from pathlib import PurePosixPath

DEFAULT_IMAGE_EXTENSION = ".jpg"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def sanitize_filename(filename: str) -> str:
    """Make a filename safe for any local filesystem.

    Path-hostile characters and anything outside ``[A-Za-z0-9._-]`` become
    ``_``. Every dot except the last one is also replaced so the extension
    stays unambiguous.

    Args:
        filename: Raw filename, usually ``{seed}_{index}{extension}``.

    Returns:
        Sanitized filename.
    """
    cleaned = _UNSAFE_CHARS.sub("_", filename)

    last_dot = cleaned.rfind(".")
    if last_dot < 0:
        return cleaned

    return cleaned[:last_dot].replace(".", "_") + cleaned[last_dot:]


def file_extension(remote_path: str) -> str:
    """Get the extension of a remote image path.

    Args:
        remote_path: Remote path fragment such as ``/abc123.png``.

    Returns:
        Extension including the dot, ``.jpg`` when the path has none.
    """
    suffix = PurePosixPath(remote_path).suffix
    return suffix or DEFAULT_IMAGE_EXTENSION


def normalize_query(value: str) -> str:
    """Trim a user supplied title or query, treating None as empty."""
    return (value or "").strip()
