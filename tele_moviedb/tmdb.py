"""TMDB API client.

Requests are plain blocking `requests.get` calls run on a worker thread.
Every failure is raised as one of the `NetworkError` kinds in `errors`.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Callable, TypeVar

import requests

from . import config
from .errors import DecodingFailure, HttpStatusError, InvalidResponse, InvalidURL
from .models.movie import MovieDetail, MovieListPage, Review, Video, results_of

logger = logging.getLogger(__name__)

TMDB_USER_AGENT = os.environ.get(
    "TMDB_USER_AGENT",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
)

DISCOVER_MOVIES = "/discover/movie"
POPULAR_MOVIES = "/movie/popular"
SEARCH_MOVIES = "/search/movie"
MOVIE_DETAILS = "/movie/{movie_id}"
MOVIE_REVIEWS = "/movie/{movie_id}/reviews"
MOVIE_VIDEOS = "/movie/{movie_id}/videos"

T = TypeVar("T")


class TmdbClient:
    """Typed access to the TMDB endpoints the bot needs."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.api_key = config.TMDB_API_KEY if api_key is None else api_key
        self.base_url = (base_url or config.TMDB_BASE_URL).rstrip("/")
        self.timeout = config.TMDB_TIMEOUT_S if timeout is None else timeout

    def _fetch(self, path: str, params: dict[str, str] | None = None) -> Any:
        if not self.base_url.startswith(("http://", "https://")):
            raise InvalidURL(f"{self.base_url}{path}")
        url = f"{self.base_url}{path}"
        payload = {"api_key": self.api_key}
        if params:
            payload.update(params)
        headers = {"User-Agent": TMDB_USER_AGENT, "Accept": "application/json"}
        try:
            resp = requests.get(
                url, params=payload, headers=headers, timeout=self.timeout
            )
        except (
            requests.exceptions.InvalidURL,
            requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema,
        ) as exc:
            raise InvalidURL(str(exc)) from exc
        except requests.RequestException as exc:
            logger.warning("TMDB request failed: %s %s", path, exc)
            raise InvalidResponse(str(exc)) from exc
        if not resp.ok:
            snippet = resp.text[:500].replace("\n", " ")
            logger.warning("TMDB HTTP %s for %s: %s", resp.status_code, path, snippet)
            raise HttpStatusError(resp.status_code, snippet)
        try:
            return resp.json()
        except ValueError as exc:
            raise DecodingFailure(f"invalid JSON from {path}: {exc}") from exc

    async def _get(
        self,
        path: str,
        decode: Callable[[Any], T],
        params: dict[str, str] | None = None,
    ) -> T:
        data = await asyncio.to_thread(self._fetch, path, params)
        try:
            return decode(data)
        except (KeyError, TypeError, ValueError) as exc:
            raise DecodingFailure(f"{path}: {exc!r}") from exc

    async def discover_movies(self, page: int = 1) -> MovieListPage:
        return await self._get(
            DISCOVER_MOVIES, MovieListPage.from_dict, {"page": str(page)}
        )

    async def popular_movies(self, page: int = 1) -> MovieListPage:
        return await self._get(
            POPULAR_MOVIES, MovieListPage.from_dict, {"page": str(page)}
        )

    async def search_movies(self, query: str, page: int = 1) -> MovieListPage:
        params = {"page": str(page)}
        if query.strip():
            params["query"] = query
        return await self._get(SEARCH_MOVIES, MovieListPage.from_dict, params)

    async def movie_details(self, movie_id: int) -> MovieDetail:
        return await self._get(
            MOVIE_DETAILS.format(movie_id=movie_id), MovieDetail.from_dict
        )

    async def movie_reviews(self, movie_id: int) -> list[Review]:
        return await self._get(
            MOVIE_REVIEWS.format(movie_id=movie_id),
            lambda data: results_of(data, Review),
        )

    async def movie_videos(self, movie_id: int) -> list[Video]:
        return await self._get(
            MOVIE_VIDEOS.format(movie_id=movie_id),
            lambda data: results_of(data, Video),
        )
