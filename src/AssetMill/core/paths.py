"""Usable and fingerprinted output path helpers."""

import hashlib
from typing import Mapping, Optional, Tuple

# Source extension -> extension of the compiled output.
COMPILE_TARGETS = {
    "sass": "css",
    "scss": "css",
    "less": "css",
    "styl": "css",
    "stylus": "css",
    "gss": "css",
    "coffee": "js",
    "ts": "js",
    "tsx": "js",
    "jsx": "js",
    "dart": "js",
    "roy": "js",
}


def _split_path(path: str) -> Tuple[str, str, str]:
    """Split into (directory, stem, extension) without normalizing the path.

    Plain string handling keeps URL prefixes such as ``http://`` and ``//``
    intact, which ``pathlib`` would collapse.
    """
    raw = str(path)
    head, sep, name = raw.rpartition("/")
    directory = head + sep
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem:
        return directory, name, ""
    return directory, stem, ext


def get_extension(path: str) -> str:
    """Return the lower-cased final extension of ``path`` without the dot."""
    return _split_path(path)[2].lower()


def get_usable_extension(path: str,
                         compile_targets: Optional[Mapping[str, str]] = None) -> str:
    """Return the output-facing extension; unmapped extensions pass through."""
    targets = COMPILE_TARGETS if compile_targets is None else compile_targets
    ext = _split_path(path)[2]
    return targets.get(ext.lower(), ext)


def get_usable_path(path: str,
                    compile_targets: Optional[Mapping[str, str]] = None) -> str:
    """Return ``path`` with its final extension replaced by the usable one."""
    directory, stem, ext = _split_path(path)
    if not ext:
        return str(path)
    return f"{directory}{stem}.{get_usable_extension(path, compile_targets)}"


def content_digest(content: Optional[str]) -> str:
    """32-hex MD5 digest of built content; ``None`` hashes like ``""``."""
    data = (content or "").encode("utf-8")
    return hashlib.md5(data).hexdigest()


def get_fingerprinted_path(usable_path: str, content: Optional[str]) -> str:
    """Insert ``-<digest>`` before the extension of ``usable_path``."""
    directory, stem, ext = _split_path(usable_path)
    digest = content_digest(content)
    if not ext:
        return f"{directory}{stem}-{digest}"
    return f"{directory}{stem}-{digest}.{ext}"
