"""Filesystem collaborator: timestamps, local reads, remote fetches, writes."""

import logging
import os
from typing import Optional

import requests

logger = logging.getLogger("asset_mill.filesystem")

DEFAULT_USER_AGENT = "AssetMill"


class RemoteFetchError(OSError):
    """Raised when a remote asset cannot be downloaded."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to fetch remote asset {url}: {reason}")
        self.url = url
        self.reason = reason


class Filesystem:
    """Blocking byte-level I/O used by assets while they are built."""

    def __init__(self, timeout: float = 30.0, user_agent: str = DEFAULT_USER_AGENT,
                 verify_ssl: bool = True,
                 session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.user_agent = user_agent
        self.verify_ssl = verify_ssl
        self._session = session

    @classmethod
    def from_config(cls, config) -> "Filesystem":
        """Build a filesystem from an ``AssetMillConfig``."""
        return cls(
            timeout=config.remote.timeout_seconds,
            user_agent=config.remote.user_agent,
            verify_ssl=config.remote.verify_ssl,
        )

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            self._session.headers["User-Agent"] = self.user_agent
        return self._session

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def last_modified(self, path: str) -> int:
        """Return the unix mtime of ``path``; missing files raise."""
        return int(os.path.getmtime(path))

    def get_contents(self, path: str) -> bytes:
        with open(path, "rb") as f:
            return f.read()

    def get_remote(self, url: str) -> bytes:
        """Download ``url``; protocol-relative urls are fetched over https."""
        if url.startswith("//"):
            url = "https:" + url
        logger.debug("Fetching remote asset %s (timeout=%ss)", url, self.timeout)
        try:
            response = self.session.get(url, timeout=self.timeout, verify=self.verify_ssl)
            response.raise_for_status()
        except requests.Timeout as exc:
            raise RemoteFetchError(url, f"timed out after {self.timeout}s") from exc
        except requests.RequestException as exc:
            raise RemoteFetchError(url, str(exc)) from exc
        return response.content

    def put(self, path: str, data: bytes) -> int:
        """Write ``data`` to ``path``, creating parent directories."""
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "wb") as f:
            written = f.write(data)
        logger.debug("Wrote %d bytes to %s", written, path)
        return written
