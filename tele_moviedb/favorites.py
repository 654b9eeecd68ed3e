"""Favorite movies persisted in the local SQLite database."""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import threading
from datetime import datetime
from pathlib import Path
from typing import Callable

from .cache_policy import utcnow
from .models.favorite import FavoriteMovie
from .models.movie import MovieDetail, MovieSummary

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS favorite_movies (
    movie_id INTEGER PRIMARY KEY,
    title TEXT NOT NULL,
    poster_path TEXT,
    release_date TEXT,
    vote_average REAL NOT NULL DEFAULT 0,
    added_at TEXT NOT NULL
);
"""


class FavoritesStore:
    """Add, remove and list favorite movies.

    Unlike the response cache, favorites are user data: storage errors are
    raised to the caller.
    """

    def __init__(
        self,
        db_path: Path | str,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.db_path = str(db_path)
        self._clock = clock
        self._lock = threading.Lock()
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self.conn.executescript(_SCHEMA)

    def close(self) -> None:
        with self._lock:
            self.conn.close()

    async def is_favorite(self, movie_id: int) -> bool:
        return await asyncio.to_thread(self._is_favorite, movie_id)

    async def add(self, movie: MovieSummary | MovieDetail) -> bool:
        """Store a movie. Returns False when it was already a favorite."""
        return await asyncio.to_thread(self._add, movie)

    async def remove(self, movie_id: int) -> bool:
        return await asyncio.to_thread(self._remove, movie_id)

    async def toggle(self, movie: MovieSummary | MovieDetail) -> bool:
        """Flip the favorite flag. Returns True if the movie is now a favorite."""
        if await self.is_favorite(movie.id):
            await self.remove(movie.id)
            return False
        await self.add(movie)
        return True

    async def list_all(self) -> list[FavoriteMovie]:
        return await asyncio.to_thread(self._list_all)

    def _is_favorite(self, movie_id: int) -> bool:
        with self._lock:
            row = self.conn.execute(
                "SELECT 1 FROM favorite_movies WHERE movie_id = ?", (movie_id,)
            ).fetchone()
        return row is not None

    def _add(self, movie: MovieSummary | MovieDetail) -> bool:
        with self._lock, self.conn:
            cur = self.conn.execute(
                "INSERT OR IGNORE INTO favorite_movies "
                "(movie_id, title, poster_path, release_date, vote_average, added_at) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (
                    movie.id,
                    movie.title,
                    movie.poster_path,
                    movie.release_date,
                    movie.vote_average or 0.0,
                    self._clock().isoformat(),
                ),
            )
        added = cur.rowcount == 1
        if added:
            logger.info("Added favorite %s (%s)", movie.id, movie.title)
        return added

    def _remove(self, movie_id: int) -> bool:
        with self._lock, self.conn:
            cur = self.conn.execute(
                "DELETE FROM favorite_movies WHERE movie_id = ?", (movie_id,)
            )
        return cur.rowcount > 0

    def _list_all(self) -> list[FavoriteMovie]:
        with self._lock:
            rows = self.conn.execute(
                "SELECT movie_id, title, poster_path, release_date, vote_average, "
                "added_at FROM favorite_movies ORDER BY added_at DESC, movie_id DESC"
            ).fetchall()
        return [
            FavoriteMovie(
                movie_id=movie_id,
                title=title,
                poster_path=poster_path,
                release_date=release_date,
                vote_average=float(vote_average or 0.0),
                added_at=datetime.fromisoformat(added_at),
            )
            for (
                movie_id,
                title,
                poster_path,
                release_date,
                vote_average,
                added_at,
            ) in rows
        ]
