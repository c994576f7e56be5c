"""
SQLite implementation of the release driver.

Uses aiosqlite for async operations. Release bodies are stored as JSON and
their label sets are mirrored into a separate table so label queries run in
SQL.
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import UTC, datetime

import aiosqlite

from rls_common.driver import Driver, Predicate
from rls_common.errors import ReleaseExistsError, ReleaseNotFoundError
from rls_common.models import Release, parse_key

logger = logging.getLogger(__name__)


class SQLiteDriver(Driver):
    """
    SQLite-based release storage.

    Uses a single database file with two tables:
    - releases: One row per release key with the JSON-encoded release
    - labels: The label set of each release, one row per label

    All statements go through one connection guarded by an asyncio lock, so
    a coroutine never observes or rolls back another coroutine's open
    transaction. Key uniqueness is enforced by the primary key, which also
    holds across processes sharing the database file.
    """

    def __init__(self, db_path: str = "releases.db"):
        """
        Initialize the SQLite driver.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = db_path
        self._connection: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()
        self._connect_lock = asyncio.Lock()

    @property
    def name(self) -> str:
        return "SQL"

    async def _get_connection(self) -> aiosqlite.Connection:
        """Get or create database connection."""
        async with self._connect_lock:
            if self._connection is None:
                conn = await aiosqlite.connect(self.db_path)
                # Labels are removed together with their release
                await conn.execute("PRAGMA foreign_keys = ON")
                self._connection = conn
        return self._connection

    async def initialize(self) -> None:
        """
        Create database tables if they don't exist.

        Schema:
        - releases table: key, name, namespace, version, status, JSON body,
          created_at, modified_at
        - labels table: (release_key, name, value) with foreign key to releases
        """
        conn = await self._get_connection()

        await conn.execute("""
            CREATE TABLE IF NOT EXISTS releases (
                key TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                namespace TEXT NOT NULL,
                version INTEGER NOT NULL,
                status TEXT NOT NULL,
                body TEXT NOT NULL,
                created_at TEXT NOT NULL,
                modified_at TEXT NOT NULL
            )
        """)

        await conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_releases_name
            ON releases(name)
        """)

        await conn.execute("""
            CREATE TABLE IF NOT EXISTS labels (
                release_key TEXT NOT NULL,
                name TEXT NOT NULL,
                value TEXT NOT NULL,
                PRIMARY KEY (release_key, name),
                FOREIGN KEY (release_key) REFERENCES releases(key) ON DELETE CASCADE
            )
        """)

        await conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_labels_name_value
            ON labels(name, value)
        """)

        await conn.commit()
        logger.info(f"Release tables ready in {self.db_path}")

    async def close(self) -> None:
        """Close the database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    async def create(self, key: str, release: Release) -> None:
        """
        Insert a release row and its labels in one transaction.

        Raises:
            ReleaseExistsError: If the key is already in the releases table
        """
        parse_key(key)
        conn = await self._get_connection()
        now = datetime.now(UTC).isoformat()

        async with self._lock:
            try:
                await conn.execute(
                    """
                    INSERT INTO releases (key, name, namespace, version, status, body, created_at, modified_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        key,
                        release.name,
                        release.namespace,
                        release.version,
                        release.status,
                        json.dumps(release.to_dict()),
                        now,
                        now,
                    ),
                )
                await self._insert_labels(conn, key, release)
                await conn.commit()
            except aiosqlite.IntegrityError as e:
                await conn.rollback()
                if "releases.key" not in str(e):
                    raise
                logger.debug(f"Create refused, release {key} already exists")
                raise ReleaseExistsError(key) from None
            except Exception:
                await conn.rollback()
                raise

        logger.debug(f"Created release {key}")

    async def update(self, key: str, release: Release) -> None:
        """
        Replace the row and labels of an existing release.

        Raises:
            ReleaseNotFoundError: If no row matches the key
        """
        parse_key(key)
        conn = await self._get_connection()

        async with self._lock:
            try:
                cursor = await conn.execute(
                    """
                    UPDATE releases
                    SET name = ?, namespace = ?, version = ?, status = ?, body = ?, modified_at = ?
                    WHERE key = ?
                    """,
                    (
                        release.name,
                        release.namespace,
                        release.version,
                        release.status,
                        json.dumps(release.to_dict()),
                        datetime.now(UTC).isoformat(),
                        key,
                    ),
                )
                if cursor.rowcount == 0:
                    logger.debug(f"Update refused, release {key} not found")
                    raise ReleaseNotFoundError(key)

                await conn.execute("DELETE FROM labels WHERE release_key = ?", (key,))
                await self._insert_labels(conn, key, release)
                await conn.commit()
            except Exception:
                await conn.rollback()
                raise

        logger.debug(f"Updated release {key}")

    async def delete(self, key: str) -> Release:
        """
        Read and remove a release inside one write transaction.

        BEGIN IMMEDIATE takes the database write lock before the read, so
        drivers in other processes cannot delete or update the row between
        the SELECT and the DELETE.

        Raises:
            ReleaseNotFoundError: If no row matches the key
        """
        parse_key(key)
        conn = await self._get_connection()

        async with self._lock:
            try:
                await conn.execute("BEGIN IMMEDIATE")
                cursor = await conn.execute(
                    "SELECT body FROM releases WHERE key = ?", (key,)
                )
                row = await cursor.fetchone()
                if row is None:
                    raise ReleaseNotFoundError(key)

                cursor = await conn.execute("DELETE FROM releases WHERE key = ?", (key,))
                if cursor.rowcount == 0:
                    raise ReleaseNotFoundError(key)
                await conn.commit()
            except Exception:
                await conn.rollback()
                raise

        logger.debug(f"Deleted release {key}")
        return Release.from_dict(json.loads(row[0]))

    async def get(self, key: str) -> Release:
        parse_key(key)
        conn = await self._get_connection()

        async with self._lock:
            cursor = await conn.execute(
                "SELECT body FROM releases WHERE key = ?", (key,)
            )
            row = await cursor.fetchone()

        if row is None:
            raise ReleaseNotFoundError(key)
        return Release.from_dict(json.loads(row[0]))

    async def list(self, predicate: Predicate) -> list[Release]:
        """
        Decode every stored release and keep those matching predicate.
        """
        releases = await self._select_bodies("SELECT body FROM releases", ())
        return [release for release in releases if predicate(release)]

    async def query(self, labels: dict[str, str]) -> list[Release]:
        """
        Select releases carrying every label pair, one EXISTS clause per pair.
        """
        sql = "SELECT body FROM releases"
        clauses = []
        params: list[str] = []

        for name, value in labels.items():
            clauses.append(
                "EXISTS (SELECT 1 FROM labels WHERE labels.release_key = releases.key "
                "AND labels.name = ? AND labels.value = ?)"
            )
            params.extend([name, value])

        if clauses:
            sql += " WHERE " + " AND ".join(clauses)

        return await self._select_bodies(sql, params)

    async def _select_bodies(self, sql: str, params) -> list[Release]:
        """Run a single SELECT returning body columns and decode the rows."""
        conn = await self._get_connection()

        async with self._lock:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()

        return [Release.from_dict(json.loads(body)) for (body,) in rows]

    async def _insert_labels(
        self, conn: aiosqlite.Connection, key: str, release: Release
    ) -> None:
        await conn.executemany(
            "INSERT INTO labels (release_key, name, value) VALUES (?, ?, ?)",
            [(key, name, value) for name, value in release.label_set().items()],
        )
