"""
Driver selection from configuration.

Environment Variables:
    RLS_DRIVER: Storage backend, "memory" or "sql" (default: sql)
    RLS_DB_PATH: SQLite database path (default: ~/.rls/releases.db)

Explicit arguments override environment variables.
"""

import logging
import os
from pathlib import Path

from rls_common.driver import Driver

from .memory_driver import MemoryDriver
from .sqlite_driver import SQLiteDriver

logger = logging.getLogger(__name__)

DEFAULT_DRIVER = "sql"


def get_driver_name(driver_name: str | None = None) -> str:
    """Get the backend name from the argument, RLS_DRIVER, or default."""
    if driver_name:
        return driver_name.lower()
    return os.environ.get("RLS_DRIVER", DEFAULT_DRIVER).lower()


def get_db_path(db_path: str | None = None) -> str:
    """Get the database path from the argument, RLS_DB_PATH, or default."""
    if db_path:
        return db_path
    return os.environ.get("RLS_DB_PATH", str(Path.home() / ".rls" / "releases.db"))


def new_driver(driver_name: str | None = None, db_path: str | None = None) -> Driver:
    """
    Build the configured driver.

    Args:
        driver_name: "memory", "sql" or "sqlite"; falls back to RLS_DRIVER
        db_path: SQLite file for the sql driver; falls back to RLS_DB_PATH

    Returns:
        An uninitialized driver; call `initialize()` before use

    Raises:
        ValueError: If the driver name is unknown
    """
    name = get_driver_name(driver_name)

    if name == "memory":
        logger.debug("Using in-memory release driver")
        return MemoryDriver()

    if name in ("sql", "sqlite"):
        path = get_db_path(db_path)
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Using SQLite release driver at {path}")
        return SQLiteDriver(path)

    raise ValueError(f"Unknown release driver {name!r} (expected 'memory' or 'sql')")
