"""Core utilities -- re-exports all public symbols for convenience."""

from .records import AssetSnapshot, BuildContext
from .paths import (
    COMPILE_TARGETS,
    get_extension,
    get_usable_extension,
    get_usable_path,
    get_fingerprinted_path,
    content_digest,
)
from .filesystem import Filesystem, RemoteFetchError
from .logging import setup_logging

__all__ = [
    "AssetSnapshot", "BuildContext",
    "COMPILE_TARGETS", "get_extension", "get_usable_extension",
    "get_usable_path", "get_fingerprinted_path", "content_digest",
    "Filesystem", "RemoteFetchError",
    "setup_logging",
]
