"""Logging helpers for tele_moviedb

LOG_LEVEL sets the root level. CACHE_LOG_LEVEL, when set, overrides the
level of the cache and repository loggers so hit/miss tracing can be turned
on without flooding the rest of the output.
"""
import logging
import os

_CACHE_LOGGERS = (
    "tele_moviedb.cache_store",
    "tele_moviedb.repository",
)
_QUIET_LOGGERS = ("httpx", "httpcore", "telegram", "urllib3")


def _level(name: str | None, default: int) -> int:
    if not name:
        return default
    return getattr(logging, name.strip().upper(), default)


def setup_logging(level: str | None = None) -> None:
    root_level = _level(level or os.environ.get("LOG_LEVEL"), logging.INFO)

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(root_level)

    cache_level = os.environ.get("CACHE_LOG_LEVEL")
    if cache_level:
        for name in _CACHE_LOGGERS:
            logging.getLogger(name).setLevel(_level(cache_level, root_level))

    # Request logs from the HTTP stacks are noise at INFO
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["setup_logging"]
