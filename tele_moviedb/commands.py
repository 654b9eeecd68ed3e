"""Command registry (single source of truth for help + wiring)."""

from __future__ import annotations

from .models.command_spec import CommandSpec, Group


_BROWSE_COMMANDS = (
    CommandSpec(
        "discover",
        "Browse",
        "/discover [page]",
        "browse movies (cached for 5 minutes)",
        "cmd_discover",
        aliases=("movies",),
    ),
    CommandSpec(
        "popular",
        "Browse",
        "/popular [page]",
        "popular movies right now",
        "cmd_popular",
    ),
    CommandSpec(
        "search",
        "Browse",
        "/search <query>",
        "search movies by title",
        "cmd_search",
    ),
    CommandSpec(
        "movie",
        "Browse",
        "/movie <id>",
        "details, reviews and trailer",
        "cmd_movie",
    ),
)

_FAVORITES_COMMANDS = (
    CommandSpec(
        "favorites",
        "Favorites",
        "/favorites",
        "your saved movies",
        "cmd_favorites",
        aliases=("favs",),
    ),
    CommandSpec(
        "fav",
        "Favorites",
        "/fav <id>",
        "add or remove a favorite",
        "cmd_fav",
    ),
)

_INFO_COMMANDS = (
    CommandSpec("start", "Info", "/start", "show help", "cmd_start"),
    CommandSpec("help", "Info", "/help", "this menu", "cmd_help"),
    CommandSpec(
        "cache",
        "Info",
        "/cache",
        "response cache status",
        "cmd_cache",
    ),
    CommandSpec(
        "metrics",
        "Info",
        "/metrics",
        "command metrics summary",
        "cmd_metrics",
    ),
)


COMMANDS: tuple[CommandSpec, ...] = (
    *_BROWSE_COMMANDS,
    *_FAVORITES_COMMANDS,
    *_INFO_COMMANDS,
)


GROUP_ORDER: tuple[Group, ...] = (
    "Browse",
    "Favorites",
    "Info",
)
