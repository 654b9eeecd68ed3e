"""Central configuration for tele_moviedb."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Set

logger = logging.getLogger(__name__)


def _split_ints(s: str) -> Set[int]:
    """Parse comma-separated string into a set of integers.

    Args:
        s: Comma-separated string of integers (e.g., "123,456,789")

    Returns:
        Set of parsed integers. Invalid entries are silently skipped.

    Example:
        >>> _split_ints("123,456,invalid,789")
        {123, 456, 789}
    """
    out = set()
    for part in (s or "").split(","):
        p = part.strip()
        if p.isdigit():
            out.add(int(p))
    return out


def _float_env(name: str, default: float) -> float:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass
class Settings:
    """Configuration settings for tele_moviedb.

    All settings are loaded from environment variables with sensible defaults.
    """

    BOT_TOKEN: str | None
    ALLOWED_CHAT_IDS: Set[int]
    ALLOW_ALL_CHATS: bool
    RATE_LIMIT_S: float
    TMDB_API_KEY: str
    TMDB_BASE_URL: str
    TMDB_IMAGE_BASE_URL: str
    TMDB_TIMEOUT_S: float
    CACHE_DB_PATH: str
    LIST_CACHE_TTL_S: float
    DETAIL_CACHE_TTL_S: float


def _read_settings() -> Settings:
    """Read all configuration from environment variables.

    Returns:
        Settings object with all configuration values.

    Note:
        Invalid numeric values fall back to the defaults.
    """
    token = os.environ.get("BOT_TOKEN") or None
    allowed = _split_ints(os.environ.get("ALLOWED_CHAT_IDS", ""))
    allow_all = (os.environ.get("ALLOW_ALL_CHATS") or "").strip().lower() in {
        "1",
        "true",
        "yes",
    }
    rate_limit = _float_env("RATE_LIMIT_S", 1.0)

    # TMDB
    api_key = (os.environ.get("TMDB_API_KEY") or "").strip()
    base_url = (
        os.environ.get("TMDB_BASE_URL") or "https://api.themoviedb.org/3"
    ).rstrip("/")
    image_base_url = (
        os.environ.get("TMDB_IMAGE_BASE_URL") or "https://image.tmdb.org/t/p/w500"
    ).rstrip("/")
    timeout = _float_env("TMDB_TIMEOUT_S", 12.0)

    # Response cache
    cache_db_path = os.environ.get("CACHE_DB_PATH") or "data/moviedb.sqlite3"
    list_ttl = _float_env("LIST_CACHE_TTL_S", 300.0)
    detail_ttl = _float_env("DETAIL_CACHE_TTL_S", 3600.0)

    return Settings(
        BOT_TOKEN=token,
        ALLOWED_CHAT_IDS=allowed,
        ALLOW_ALL_CHATS=allow_all,
        RATE_LIMIT_S=rate_limit,
        TMDB_API_KEY=api_key,
        TMDB_BASE_URL=base_url,
        TMDB_IMAGE_BASE_URL=image_base_url,
        TMDB_TIMEOUT_S=timeout,
        CACHE_DB_PATH=cache_db_path,
        LIST_CACHE_TTL_S=list_ttl,
        DETAIL_CACHE_TTL_S=detail_ttl,
    )


settings = _read_settings()


def validate_settings() -> None:
    """Validate critical configuration and log warnings for issues."""
    if settings.BOT_TOKEN is None:
        logger.error("BOT_TOKEN environment variable is not set")
    if not settings.TMDB_API_KEY:
        logger.error("TMDB_API_KEY is not set; TMDB requests will be rejected.")
    if settings.ALLOW_ALL_CHATS:
        logger.warning("ALLOW_ALL_CHATS is set; the bot answers every chat.")
    elif not settings.ALLOWED_CHAT_IDS:
        logger.warning(
            "ALLOWED_CHAT_IDS is empty; guarded commands will be unauthorized."
        )


# Exported constants
TOKEN: str | None = settings.BOT_TOKEN
ALLOWED: set[int] = settings.ALLOWED_CHAT_IDS
ALLOW_ALL_CHATS: bool = settings.ALLOW_ALL_CHATS
RATE_LIMIT_S: float = settings.RATE_LIMIT_S
TMDB_API_KEY: str = settings.TMDB_API_KEY
TMDB_BASE_URL: str = settings.TMDB_BASE_URL
TMDB_IMAGE_BASE_URL: str = settings.TMDB_IMAGE_BASE_URL
TMDB_TIMEOUT_S: float = settings.TMDB_TIMEOUT_S
CACHE_DB_PATH: str = settings.CACHE_DB_PATH
LIST_CACHE_TTL_S: float = settings.LIST_CACHE_TTL_S
DETAIL_CACHE_TTL_S: float = settings.DETAIL_CACHE_TTL_S
