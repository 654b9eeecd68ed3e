"""SQLite-backed durable cache for TMDB responses.

Two tables, one per resource family, each holding at most one row per key:

    cached_movie_pages(page_number INTEGER PRIMARY KEY, saved_at TEXT, payload BLOB)
    cached_movie_details(movie_id INTEGER PRIMARY KEY, saved_at TEXT, payload BLOB)

The cache is an optimization, never the source of truth: read failures are
reported as misses and write failures are logged and dropped. A database that
cannot be opened leaves the store in "always miss" mode instead of raising.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import threading
from datetime import datetime
from pathlib import Path
from typing import Callable

from .cache_policy import utcnow
from .models.cache import CachedDetailBundle, CachedPage

logger = logging.getLogger(__name__)

_PAGES = ("cached_movie_pages", "page_number")
_DETAILS = ("cached_movie_details", "movie_id")

_SCHEMA = """
CREATE TABLE IF NOT EXISTS cached_movie_pages (
    page_number INTEGER PRIMARY KEY,
    saved_at TEXT NOT NULL,
    payload BLOB NOT NULL
);
CREATE TABLE IF NOT EXISTS cached_movie_details (
    movie_id INTEGER PRIMARY KEY,
    saved_at TEXT NOT NULL,
    payload BLOB NOT NULL
);
"""


class CacheStore:
    """Key-value cache of serialized list pages and detail bundles.

    Every public operation is a coroutine that runs one transaction on a
    worker thread. A single lock serializes access to the connection, so a
    delete-then-insert never interleaves with another operation.

    Example:
        >>> store = CacheStore("data/moviedb.sqlite3")
        >>> await store.put_page(1, b'{"page": 1, "results": []}')
        >>> row = await store.get_page(1)
        >>> store.close()
    """

    def __init__(
        self,
        db_path: Path | str,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.db_path = str(db_path)
        self._clock = clock
        self._lock = threading.Lock()
        self.conn: sqlite3.Connection | None = None
        self._open()

    def _open(self) -> None:
        try:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path, check_same_thread=False)
            conn.executescript(_SCHEMA)
        except (sqlite3.Error, OSError):
            logger.exception(
                "Failed to open cache database %s; caching disabled", self.db_path
            )
            self.conn = None
            return
        self.conn = conn
        logger.info("Opened response cache at %s", self.db_path)

    @property
    def available(self) -> bool:
        return self.conn is not None

    def close(self) -> None:
        with self._lock:
            if self.conn is not None:
                self.conn.close()
                self.conn = None

    async def get_page(self, page_number: int) -> CachedPage | None:
        row = await asyncio.to_thread(self._read, _PAGES, page_number)
        if row is None:
            return None
        payload, saved_at = row
        return CachedPage(page_number=page_number, payload=payload, saved_at=saved_at)

    async def put_page(
        self, page_number: int, payload: bytes, now: datetime | None = None
    ) -> None:
        await asyncio.to_thread(self._write, _PAGES, page_number, payload, now)

    async def get_detail(self, movie_id: int) -> CachedDetailBundle | None:
        row = await asyncio.to_thread(self._read, _DETAILS, movie_id)
        if row is None:
            return None
        payload, saved_at = row
        return CachedDetailBundle(movie_id=movie_id, payload=payload, saved_at=saved_at)

    async def put_detail(
        self, movie_id: int, payload: bytes, now: datetime | None = None
    ) -> None:
        await asyncio.to_thread(self._write, _DETAILS, movie_id, payload, now)

    async def row_counts(self) -> dict[str, int] | None:
        """Rows per table, or None when the cache is unavailable."""
        return await asyncio.to_thread(self._row_counts)

    def _row_counts(self) -> dict[str, int] | None:
        with self._lock:
            if self.conn is None:
                return None
            counts: dict[str, int] = {}
            try:
                for name, _ in (_PAGES, _DETAILS):
                    row = self.conn.execute(f"SELECT COUNT(*) FROM {name}").fetchone()
                    counts[name] = row[0]
            except sqlite3.Error:
                logger.warning("Cache row count failed", exc_info=True)
                return None
        return counts

    def _read(self, table: tuple[str, str], key: int) -> tuple[bytes, datetime] | None:
        name, key_column = table
        with self._lock:
            if self.conn is None:
                return None
            try:
                row = self.conn.execute(
                    f"SELECT payload, saved_at FROM {name} WHERE {key_column} = ?",
                    (key,),
                ).fetchone()
            except sqlite3.Error:
                logger.warning(
                    "Cache read failed for %s=%s", key_column, key, exc_info=True
                )
                return None
        if row is None:
            return None
        payload, saved_raw = row
        try:
            saved_at = datetime.fromisoformat(saved_raw)
        except (TypeError, ValueError):
            logger.warning("Corrupt saved_at %r for %s=%s", saved_raw, key_column, key)
            return None
        if not isinstance(payload, (bytes, bytearray, memoryview)):
            logger.warning("Corrupt payload for %s=%s", key_column, key)
            return None
        return bytes(payload), saved_at

    def _write(
        self,
        table: tuple[str, str],
        key: int,
        payload: bytes,
        now: datetime | None,
    ) -> None:
        name, key_column = table
        saved_at = now or self._clock()
        with self._lock:
            if self.conn is None:
                return
            try:
                with self.conn:
                    self.conn.execute(
                        f"DELETE FROM {name} WHERE {key_column} = ?", (key,)
                    )
                    self.conn.execute(
                        f"INSERT INTO {name} ({key_column}, saved_at, payload) "
                        "VALUES (?, ?, ?)",
                        (key, saved_at.isoformat(), sqlite3.Binary(payload)),
                    )
            except sqlite3.Error:
                logger.warning(
                    "Cache write failed for %s=%s", key_column, key, exc_info=True
                )
