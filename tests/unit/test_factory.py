"""
Unit tests for driver selection from configuration.
"""

from pathlib import Path

import pytest

from rls_persistence.factory import get_db_path, get_driver_name, new_driver
from rls_persistence.memory_driver import MemoryDriver
from rls_persistence.sqlite_driver import SQLiteDriver


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test without driver environment variables."""
    monkeypatch.delenv("RLS_DRIVER", raising=False)
    monkeypatch.delenv("RLS_DB_PATH", raising=False)


def test_default_driver_is_sql():
    assert get_driver_name() == "sql"


def test_driver_name_from_env(monkeypatch):
    monkeypatch.setenv("RLS_DRIVER", "Memory")
    assert get_driver_name() == "memory"


def test_argument_overrides_env(monkeypatch):
    monkeypatch.setenv("RLS_DRIVER", "memory")
    assert get_driver_name("sql") == "sql"


def test_default_db_path():
    assert get_db_path() == str(Path.home() / ".rls" / "releases.db")


def test_db_path_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("RLS_DB_PATH", str(tmp_path / "env.db"))
    assert get_db_path() == str(tmp_path / "env.db")


def test_new_memory_driver():
    assert isinstance(new_driver("memory"), MemoryDriver)


@pytest.mark.parametrize("name", ["sql", "sqlite", "SQL"])
def test_new_sqlite_driver(name, tmp_path):
    """Test that SQL aliases build a SQLite driver and create its directory."""
    path = tmp_path / "nested" / "releases.db"

    driver = new_driver(name, str(path))

    assert isinstance(driver, SQLiteDriver)
    assert driver.db_path == str(path)
    assert path.parent.is_dir()


def test_new_driver_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("RLS_DRIVER", "sql")
    monkeypatch.setenv("RLS_DB_PATH", str(tmp_path / "env.db"))

    driver = new_driver()

    assert isinstance(driver, SQLiteDriver)
    assert driver.db_path == str(tmp_path / "env.db")


def test_unknown_driver():
    with pytest.raises(ValueError, match="Unknown release driver 'configmap'"):
        new_driver("configmap")
