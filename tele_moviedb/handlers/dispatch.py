"""Dispatch layer: applies rate limiting then calls the real handlers."""

from __future__ import annotations

from .common import rate_limit
from . import meta, movies


# Meta
cmd_start = rate_limit(meta.cmd_start, name="start")
cmd_help = rate_limit(meta.cmd_help, name="help")
cmd_cache = rate_limit(meta.cmd_cache, name="cache")
cmd_metrics = rate_limit(meta.cmd_metrics, name="metrics")

# Browse
cmd_discover = rate_limit(movies.cmd_discover, name="discover")
cmd_popular = rate_limit(movies.cmd_popular, name="popular")
cmd_search = rate_limit(movies.cmd_search, name="search")
cmd_movie = rate_limit(movies.cmd_movie, name="movie")

# Favorites
cmd_favorites = rate_limit(movies.cmd_favorites, name="favorites")
cmd_fav = rate_limit(movies.cmd_fav, name="fav")
