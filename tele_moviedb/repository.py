"""Cache-first access to TMDB movie data.

`MovieRepository` reads the durable cache before going to the network and
writes fresh responses back. Only the discover listing and the detail bundle
are cached; popular and search listings depend on ranking or a query and are
always fetched live.

Concurrent requests for the same key are not coalesced: two callers that both
miss will both fetch and both write, and the last write wins.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Callable

from . import codec
from .cache_policy import MOVIE_DETAIL_EXPIRY, MOVIE_LIST_EXPIRY, is_expired, utcnow
from .cache_store import CacheStore
from .models.movie import MovieDetail, MovieDetailBundle, MovieListPage, Review, Video
from .tmdb import TmdbClient

logger = logging.getLogger(__name__)

_DECODE_ERRORS = (ValueError, KeyError, TypeError)


class MovieRepository:
    def __init__(
        self,
        client: TmdbClient,
        cache: CacheStore,
        list_expiry: timedelta = MOVIE_LIST_EXPIRY,
        detail_expiry: timedelta = MOVIE_DETAIL_EXPIRY,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.client = client
        self.cache = cache
        self.list_expiry = list_expiry
        self.detail_expiry = detail_expiry
        self._clock = clock

    async def fetch_list_page(self, page_number: int) -> MovieListPage:
        """Discover listing page, served from cache while fresh."""
        cached = await self._load_cached_page(page_number)
        if cached is not None:
            logger.debug("List page %s served from cache", page_number)
            return cached
        logger.debug("List page %s cache miss; fetching", page_number)
        page = await self.client.discover_movies(page_number)
        await self.cache.put_page(page_number, codec.encode_page(page), self._clock())
        return page

    async def fetch_popular(self, page_number: int) -> MovieListPage:
        return await self.client.popular_movies(page_number)

    async def search_movies(self, query: str, page_number: int) -> MovieListPage:
        return await self.client.search_movies(query, page_number)

    async def fetch_detail_bundle(self, movie_id: int) -> MovieDetailBundle:
        """Detail, reviews and videos of a movie as one cached unit.

        On a miss the three parts are fetched concurrently. If any of them
        fails the others are cancelled, the error is raised unchanged and
        nothing is written to the cache.
        """
        cached = await self._load_cached_bundle(movie_id)
        if cached is not None:
            logger.debug("Detail bundle %s served from cache", movie_id)
            return cached
        logger.debug("Detail bundle %s cache miss; fetching", movie_id)
        tasks = [
            asyncio.ensure_future(self.client.movie_details(movie_id)),
            asyncio.ensure_future(self.client.movie_reviews(movie_id)),
            asyncio.ensure_future(self.client.movie_videos(movie_id)),
        ]
        try:
            detail, reviews, videos = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise
        bundle = MovieDetailBundle(detail=detail, reviews=reviews, videos=videos)
        await self.cache.put_detail(
            movie_id, codec.encode_bundle(bundle), self._clock()
        )
        return bundle

    async def fetch_movie_detail(self, movie_id: int) -> MovieDetail:
        return (await self.fetch_detail_bundle(movie_id)).detail

    async def fetch_movie_reviews(self, movie_id: int) -> list[Review]:
        return (await self.fetch_detail_bundle(movie_id)).reviews

    async def fetch_movie_videos(self, movie_id: int) -> list[Video]:
        return (await self.fetch_detail_bundle(movie_id)).videos

    async def _load_cached_page(self, page_number: int) -> MovieListPage | None:
        entry = await self.cache.get_page(page_number)
        if entry is None:
            return None
        if is_expired(entry.saved_at, self.list_expiry, self._clock()):
            return None
        try:
            return codec.decode_page(entry.payload)
        except _DECODE_ERRORS:
            logger.warning("Discarding undecodable cached page %s", page_number)
            return None

    async def _load_cached_bundle(self, movie_id: int) -> MovieDetailBundle | None:
        entry = await self.cache.get_detail(movie_id)
        if entry is None:
            return None
        if is_expired(entry.saved_at, self.detail_expiry, self._clock()):
            return None
        try:
            return codec.decode_bundle(entry.payload)
        except _DECODE_ERRORS:
            logger.warning("Discarding undecodable cached bundle %s", movie_id)
            return None
