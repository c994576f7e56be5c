"""
Error taxonomy shared by every storage driver.

Each error carries the offending key and a `kind`, so callers can branch on
the kind (retry an update, fall back to create, ...) without caring which
backend raised it.
"""

from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "not found"
    ALREADY_EXISTS = "already exists"
    INVALID_KEY = "invalid key"


class DriverError(Exception):
    """Base class for the errors a driver raises as part of normal operation."""

    kind: ErrorKind

    def __init__(self, key: str):
        self.key = key
        super().__init__(f'release: "{key}" {self.kind.value}')


class ReleaseNotFoundError(DriverError):
    """Raised when no release is stored under the key."""

    kind = ErrorKind.NOT_FOUND


class ReleaseExistsError(DriverError):
    """Raised by create when a release is already stored under the key."""

    kind = ErrorKind.ALREADY_EXISTS


class InvalidKeyError(DriverError):
    """Raised when a key cannot be parsed into a release name and revision."""

    kind = ErrorKind.INVALID_KEY
