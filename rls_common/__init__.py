"""
RLS Common module.

This module contains the release model, the error taxonomy and the driver
interfaces shared by every storage backend and by the admin CLI.

The common module has no dependencies on other rls_* modules, making it
a pure domain layer that can be imported by any component.
"""

from .driver import Creator, Deletor, Driver, Predicate, Queryor, Updator
from .errors import (
    DriverError,
    ErrorKind,
    InvalidKeyError,
    ReleaseExistsError,
    ReleaseNotFoundError,
)
from .models import RELEASE_STATUSES, Release, make_key, parse_key

__all__ = [
    "Creator",
    "Deletor",
    "Driver",
    "DriverError",
    "ErrorKind",
    "InvalidKeyError",
    "Predicate",
    "Queryor",
    "RELEASE_STATUSES",
    "Release",
    "ReleaseExistsError",
    "ReleaseNotFoundError",
    "Updator",
    "make_key",
    "parse_key",
]
