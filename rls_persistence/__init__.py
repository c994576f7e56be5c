"""
RLS Persistence module.

This module contains the storage backends for releases. Currently supports
an in-memory map and SQLite, but can be extended to other stores by
implementing rls_common.driver.Driver.

The persistence layer depends on rls_common for the release model and the
driver interfaces.
"""

from .factory import new_driver
from .memory_driver import MemoryDriver
from .sqlite_driver import SQLiteDriver

__all__ = ["MemoryDriver", "SQLiteDriver", "new_driver"]
