"""Expiry rules for cached TMDB responses."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

MOVIE_LIST_EXPIRY = timedelta(seconds=300)
MOVIE_DETAIL_EXPIRY = timedelta(seconds=3600)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_expired(saved_at: datetime | None, expiry: timedelta, now: datetime) -> bool:
    """Return True when a cache entry must not be served.

    An absent timestamp counts as expired. An entry exactly `expiry` old is
    still valid.
    """
    if saved_at is None:
        return True
    return now - saved_at > expiry


def is_expired_now(saved_at: datetime | None, expiry: timedelta) -> bool:
    return is_expired(saved_at, expiry, utcnow())
