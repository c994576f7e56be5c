"""
Abstract driver interface for release persistence.

This module defines the contract that any storage backend must follow,
allowing callers to swap between in-memory, SQLite, or other stores without
changing release-management code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from .models import Release

Predicate = Callable[[Release], bool]


class Creator(ABC):
    """Wraps the create operation."""

    @abstractmethod
    async def create(self, key: str, release: Release) -> None:
        """
        Store a release under a key that is not yet in use.

        The existence check and the store happen atomically, so of several
        concurrent creates for the same key exactly one succeeds.

        Args:
            key: Release key ("<name>.v<version>")
            release: Release to persist

        Raises:
            ReleaseExistsError: If a release is already stored under key
            InvalidKeyError: If key is malformed
        """
        pass


class Updator(ABC):
    """Wraps the update operation."""

    @abstractmethod
    async def update(self, key: str, release: Release) -> None:
        """
        Replace the release stored under key.

        Never creates a new entry.

        Args:
            key: Release key
            release: Replacement release

        Raises:
            ReleaseNotFoundError: If nothing is stored under key
            InvalidKeyError: If key is malformed
        """
        pass


class Deletor(ABC):
    """Wraps the delete operation."""

    @abstractmethod
    async def delete(self, key: str) -> Release:
        """
        Remove the release stored under key.

        Args:
            key: Release key

        Returns:
            The release that was stored

        Raises:
            ReleaseNotFoundError: If nothing is stored under key
            InvalidKeyError: If key is malformed
        """
        pass


class Queryor(ABC):
    """Wraps the read-only get, list and query operations."""

    @abstractmethod
    async def get(self, key: str) -> Release:
        """
        Retrieve the release stored under key.

        Raises:
            ReleaseNotFoundError: If nothing is stored under key
            InvalidKeyError: If key is malformed
        """
        pass

    @abstractmethod
    async def list(self, predicate: Predicate) -> list[Release]:
        """
        Return every stored release for which predicate holds.

        Order is unspecified. The predicate must not have side effects.
        """
        pass

    @abstractmethod
    async def query(self, labels: dict[str, str]) -> list[Release]:
        """
        Return every release whose label set contains all pairs in labels.

        An empty selector matches every release. Order is unspecified.
        """
        pass


class Driver(Creator, Updator, Deletor, Queryor):
    """
    Storage backend for releases, composed of the four capability roles.

    Implementations own all mutable state; failing calls must leave the
    backend untouched.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Stable identifier of the backend."""
        pass

    async def initialize(self) -> None:
        """Prepare the backend (create tables, etc.). No-op by default."""

    async def close(self) -> None:
        """Release backend resources. No-op by default."""
