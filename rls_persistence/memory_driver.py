"""
In-memory implementation of the release driver.

Releases live in a nested dict keyed by release name and revision. Useful for
tests and short-lived processes; nothing survives the process.
"""

from __future__ import annotations

import copy
import logging
import threading

from rls_common.driver import Driver, Predicate
from rls_common.errors import ReleaseExistsError, ReleaseNotFoundError
from rls_common.models import Release, parse_key

logger = logging.getLogger(__name__)


class MemoryDriver(Driver):
    """
    Dict-backed release storage.

    A single lock guards the release map. Critical sections never await, so
    the driver is safe for concurrent coroutines and for threads running
    their own event loops. Releases are deep-copied in and out, so callers
    never share objects with the store.
    """

    def __init__(self) -> None:
        self._cache: dict[str, dict[int, Release]] = {}
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return "Memory"

    async def create(self, key: str, release: Release) -> None:
        name, version = parse_key(key)
        stored = copy.deepcopy(release)

        with self._lock:
            versions = self._cache.get(name, {})
            if version in versions:
                logger.debug(f"Create refused, release {key} already exists")
                raise ReleaseExistsError(key)
            self._cache.setdefault(name, versions)[version] = stored

        logger.debug(f"Created release {key}")

    async def update(self, key: str, release: Release) -> None:
        name, version = parse_key(key)
        stored = copy.deepcopy(release)

        with self._lock:
            versions = self._cache.get(name)
            if not versions or version not in versions:
                logger.debug(f"Update refused, release {key} not found")
                raise ReleaseNotFoundError(key)
            versions[version] = stored

        logger.debug(f"Updated release {key}")

    async def delete(self, key: str) -> Release:
        name, version = parse_key(key)

        with self._lock:
            versions = self._cache.get(name)
            if not versions or version not in versions:
                raise ReleaseNotFoundError(key)
            release = versions.pop(version)
            if not versions:
                del self._cache[name]

        logger.debug(f"Deleted release {key}")
        return release

    async def get(self, key: str) -> Release:
        name, version = parse_key(key)

        with self._lock:
            release = self._cache.get(name, {}).get(version)
            if release is None:
                raise ReleaseNotFoundError(key)
            return copy.deepcopy(release)

    async def list(self, predicate: Predicate) -> list[Release]:
        return [release for release in self._snapshot() if predicate(release)]

    async def query(self, labels: dict[str, str]) -> list[Release]:
        return [release for release in self._snapshot() if release.matches(labels)]

    def _snapshot(self) -> list[Release]:
        """Copy every stored release while holding the lock."""
        with self._lock:
            return copy.deepcopy(
                [
                    release
                    for versions in self._cache.values()
                    for release in versions.values()
                ]
            )
