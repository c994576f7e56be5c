"""
Unit tests for the in-memory release driver.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor

import pytest

from rls_common.driver import Driver
from rls_common.errors import ReleaseExistsError
from rls_common.models import Release
from rls_persistence.memory_driver import MemoryDriver


def test_is_a_driver():
    """Test that the memory driver implements the full driver interface."""
    driver = MemoryDriver()

    assert isinstance(driver, Driver)
    assert driver.name == "Memory"


@pytest.mark.asyncio
async def test_revisions_grouped_by_name():
    """Test that revisions of one release share a name bucket."""
    driver = MemoryDriver()
    for version in (1, 2, 3):
        release = Release(name="web", version=version)
        await driver.create(release.key, release)

    assert list(driver._cache) == ["web"]
    assert sorted(driver._cache["web"]) == [1, 2, 3]


@pytest.mark.asyncio
async def test_delete_drops_empty_name_bucket():
    """Test that deleting the last revision removes the name entry."""
    driver = MemoryDriver()
    release = Release(name="web", version=1)
    await driver.create(release.key, release)

    await driver.delete(release.key)

    assert driver._cache == {}


@pytest.mark.asyncio
async def test_refused_create_keeps_stored_release():
    """Test that a refused create keeps the original revision."""
    driver = MemoryDriver()
    release = Release(name="web", version=1)
    await driver.create(release.key, release)

    with pytest.raises(ReleaseExistsError):
        await driver.create(release.key, Release(name="web", version=1, status="failed"))

    assert driver._cache["web"][1].status == "unknown"


@pytest.mark.asyncio
async def test_list_predicate_sees_copies():
    """Test that a predicate mutating its argument cannot alter the store."""
    driver = MemoryDriver()
    release = Release(name="web", version=1, labels={"env": "prod"})
    await driver.create(release.key, release)

    def mutating(r: Release) -> bool:
        r.labels.clear()
        return True

    await driver.list(mutating)

    assert (await driver.get("web.v1")).labels == {"env": "prod"}


def test_concurrent_create_across_threads():
    """Test that creates racing from separate threads produce one winner."""
    driver = MemoryDriver()

    def attempt(i: int) -> bool:
        release = Release(name="web", version=1, payload={"attempt": i})
        try:
            asyncio.run(driver.create(release.key, release))
        except ReleaseExistsError:
            return False
        return True

    with ThreadPoolExecutor(max_workers=8) as pool:
        outcomes = list(pool.map(attempt, range(50)))

    assert outcomes.count(True) == 1
    assert len(driver._cache["web"]) == 1
