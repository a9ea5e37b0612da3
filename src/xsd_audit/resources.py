"""Access to schema content: project files and remote locations.

The validator never touches the filesystem or the network itself; it goes
through one of these capabilities, supplied when the validator is built:

- ProjectResources: real files under a project root, remote schemas
  fetched with requests.
- InMemoryResources: a fixed set of files and URLs, for tests.
- CachingResources: wraps another capability and remembers what it read.
"""

from __future__ import annotations

import logging
import posixpath
import threading
from pathlib import Path
from typing import Protocol

import requests

from xsd_audit.errors import ResolutionError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class ResourceAccess(Protocol):
    """Capability used by the resolver to load schema content."""

    def local_path(self, path: str) -> str | None:
        """Return the absolute location of a local file, or None if missing."""

    def read(self, location: str) -> bytes:
        """Read a local file returned by ``local_path`` or given as absolute."""

    def fetch(self, url: str) -> bytes:
        """Fetch a remote URL."""


class ProjectResources:
    """Files relative to a project root, plus HTTP(S) fetches."""

    def __init__(
        self,
        root: str | Path | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        allow_network: bool = True,
    ):
        self._root = Path(root) if root is not None else Path.cwd()
        self._timeout = timeout
        self._allow_network = allow_network

    @property
    def root(self) -> Path:
        return self._root

    def local_path(self, path: str) -> str | None:
        candidate = self._root / path
        if candidate.is_file():
            return candidate.resolve().as_posix()
        return None

    def read(self, location: str) -> bytes:
        try:
            return (self._root / location).read_bytes()
        except OSError as exc:
            raise ResolutionError(location, exc.strerror or str(exc)) from exc

    def fetch(self, url: str) -> bytes:
        if not self._allow_network:
            raise ResolutionError(url, "network access is disabled")
        logger.debug("Fetching %s", url)
        try:
            response = requests.get(url, timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise ResolutionError(url, str(exc)) from exc
        return response.content


def _normalize(path: str) -> str:
    return posixpath.normpath("/" + path.lstrip("/"))


class InMemoryResources:
    """Fixed files and URLs held in memory.

    Example:
        resources = (
            InMemoryResources()
            .with_file("src/main/resources/test.xsd", "<xs:schema .../>")
            .with_url("http://example.com/a.xsd", "<xs:schema .../>")
        )
    """

    def __init__(self) -> None:
        self._files: dict[str, bytes] = {}
        self._urls: dict[str, bytes] = {}
        self._lock = threading.Lock()
        self.fetched: list[str] = []

    def with_file(self, path: str, content: str | bytes) -> InMemoryResources:
        """Add a project file; returns self for chaining."""
        self._files[_normalize(path)] = _as_bytes(content)
        return self

    def with_url(self, url: str, content: str | bytes) -> InMemoryResources:
        """Make a URL reachable; every other URL is unreachable."""
        self._urls[url] = _as_bytes(content)
        return self

    def local_path(self, path: str) -> str | None:
        key = _normalize(path)
        return key if key in self._files else None

    def read(self, location: str) -> bytes:
        try:
            return self._files[_normalize(location)]
        except KeyError:
            raise ResolutionError(location, "no such file") from None

    def fetch(self, url: str) -> bytes:
        with self._lock:
            self.fetched.append(url)
        try:
            return self._urls[url]
        except KeyError:
            raise ResolutionError(url, "host unreachable") from None


def _as_bytes(content: str | bytes) -> bytes:
    if isinstance(content, str):
        return content.encode("utf-8")
    return content


class CachingResources:
    """Remembers content loaded through another capability.

    Safe to share between threads. Each location gets its own lock, so
    concurrent validations needing the same remote schema wait for a single
    fetch instead of issuing their own. Failures are not cached.
    """

    def __init__(self, inner: ResourceAccess):
        self._inner = inner
        self._cache: dict[str, bytes] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def local_path(self, path: str) -> str | None:
        return self._inner.local_path(path)

    def read(self, location: str) -> bytes:
        return self._load(f"file:{location}", lambda: self._inner.read(location))

    def fetch(self, url: str) -> bytes:
        return self._load(url, lambda: self._inner.fetch(url))

    def clear(self) -> None:
        with self._guard:
            self._cache.clear()
            self._locks.clear()

    def _lock_for(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def _load(self, key: str, loader) -> bytes:
        with self._guard:
            if key in self._cache:
                return self._cache[key]
        with self._lock_for(key):
            with self._guard:
                content = self._cache.get(key)
            if content is None:
                content = loader()
            with self._guard:
                self._cache[key] = content
                # Only keys still being loaded (or that failed) keep a lock.
                self._locks.pop(key, None)
            return content
