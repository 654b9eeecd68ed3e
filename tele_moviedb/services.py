"""Service wiring.

The cache store, TMDB client, repository and favorites store are built once
at startup and handed to the bot through `Application.bot_data`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from . import config
from .cache_store import CacheStore
from .favorites import FavoritesStore
from .repository import MovieRepository
from .tmdb import TmdbClient

logger = logging.getLogger(__name__)

SERVICES_KEY = "services"


@dataclass
class Services:
    repository: MovieRepository
    favorites: FavoritesStore
    cache: CacheStore

    def close(self) -> None:
        self.cache.close()
        self.favorites.close()


def build_services(settings: config.Settings | None = None) -> Services:
    settings = settings or config.settings
    cache = CacheStore(settings.CACHE_DB_PATH)
    client = TmdbClient(
        api_key=settings.TMDB_API_KEY,
        base_url=settings.TMDB_BASE_URL,
        timeout=settings.TMDB_TIMEOUT_S,
    )
    repository = MovieRepository(
        client,
        cache,
        list_expiry=timedelta(seconds=settings.LIST_CACHE_TTL_S),
        detail_expiry=timedelta(seconds=settings.DETAIL_CACHE_TTL_S),
    )
    favorites = FavoritesStore(settings.CACHE_DB_PATH)
    logger.info(
        "Services ready (cache=%s, list ttl=%ss, detail ttl=%ss)",
        settings.CACHE_DB_PATH,
        settings.LIST_CACHE_TTL_S,
        settings.DETAIL_CACHE_TTL_S,
    )
    return Services(repository=repository, favorites=favorites, cache=cache)
