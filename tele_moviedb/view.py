"""View layer for formatting Telegram messages (HTML)."""

from __future__ import annotations

import html
import math
import time

from .errors import describe_error, recovery_hint
from .models.favorite import FavoriteMovie
from .models.movie import MovieDetailBundle, MovieListPage

_OVERVIEW_MAX = 600
_REVIEW_MAX = 300
_REVIEWS_SHOWN = 3


def bold(text: str) -> str:
    return f"<b>{html.escape(str(text))}</b>"


def code(text: str) -> str:
    return f"<code>{html.escape(str(text))}</code>"


def italic(text: str) -> str:
    return f"<i>{html.escape(str(text))}</i>"


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit].rsplit(" ", 1)[0] + "..."


def chunk(msg: str, size: int = 4000) -> list[str]:
    """Split message into chunks ensuring no chunk exceeds size limit."""
    if len(msg) <= size:
        return [msg]

    lines = msg.splitlines()
    chunks: list[str] = []
    current = ""
    for line in lines:
        if len(line) > size:
            if current:
                chunks.append(current)
                current = ""
            start = 0
            while start < len(line):
                chunks.append(line[start : start + size])
                start += size
            continue
        added_length = len(line) + (1 if current else 0)
        if len(current) + added_length > size and current:
            chunks.append(current)
            current = line
        else:
            current = f"{current}\n{line}" if current else line
    if current:
        chunks.append(current)
    return chunks


def render_movie_list(title: str, page: MovieListPage) -> str:
    if not page.items:
        return "<i>No results found.</i>"
    lines = [
        f"{bold(title)} {italic(f'page {page.page_number}/{max(page.total_pages, 1)}')}"
    ]
    for idx, movie in enumerate(page.items, start=1):
        name = html.escape(movie.title)
        suffix = f" ({html.escape(movie.year)})" if movie.year else ""
        lines.append(f"{idx}. {name}{suffix} - ⭐ {movie.rating_text}")
    return "\n".join(lines)


def render_movie_detail(bundle: MovieDetailBundle, is_favorite: bool = False) -> str:
    detail = bundle.detail
    heading = bold(detail.title)
    if is_favorite:
        heading = f"❤️ {heading}"
    lines = [heading]
    if detail.tagline:
        lines.append(italic(detail.tagline))
    lines.extend(
        [
            f"Release: {html.escape(detail.release_text)}",
            f"Rating: {detail.rating_text}",
            f"Runtime: {detail.runtime_text}",
            f"Genres: {html.escape(detail.genre_text) or '-'}",
        ]
    )
    if detail.overview:
        lines.append("")
        lines.append(html.escape(_truncate(detail.overview, _OVERVIEW_MAX)))

    if bundle.reviews:
        lines.append("")
        lines.append(bold(f"Reviews ({len(bundle.reviews)})"))
        for review in bundle.reviews[:_REVIEWS_SHOWN]:
            lines.append(
                f"• {bold(review.author)} {italic(review.date_text)}\n"
                f"{html.escape(_truncate(review.content, _REVIEW_MAX))}"
            )

    trailer = bundle.trailer
    links = [f'<a href="https://www.themoviedb.org/movie/{detail.id}">TMDB</a>']
    if trailer and trailer.youtube_url:
        links.append(f'<a href="{html.escape(trailer.youtube_url)}">Trailer</a>')
    lines.append("")
    lines.append(" | ".join(links))
    return "\n".join(lines)


def render_favorites(favorites: list[FavoriteMovie]) -> str:
    if not favorites:
        return "<i>No favorites yet. Use /fav &lt;id&gt; to add one.</i>"
    lines = [bold(f"Favorites ({len(favorites)}):")]
    for fav in favorites:
        year = (fav.release_date or "").split("-")[0]
        suffix = f" ({html.escape(year)})" if year else ""
        name = html.escape(fav.title)
        lines.append(f"{code(fav.movie_id)} {name}{suffix} - ⭐ {fav.rating_text}")
    return "\n".join(lines)


def render_error(exc: BaseException) -> str:
    return (
        f"❌ Error: {html.escape(describe_error(exc))}\n"
        f"{italic(recovery_hint(exc))}"
    )


def render_cache_status(
    db_path: str,
    counts: dict[str, int] | None,
    list_ttl_s: float,
    detail_ttl_s: float,
) -> str:
    lines = [bold("Response cache:"), f"Path: {code(db_path)}"]
    if counts is None:
        lines.append(italic("Unavailable; every request goes to TMDB."))
    else:
        lines.append(f"List pages: {counts.get('cached_movie_pages', 0)}")
        lines.append(f"Detail bundles: {counts.get('cached_movie_details', 0)}")
    lines.append(f"TTL: lists {list_ttl_s:g}s, details {detail_ttl_s:g}s")
    return "\n".join(lines)


def _format_timestamp(ts: float | None) -> str:
    if not ts:
        return "never"
    return time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(ts))


def _p95(samples: list[float]) -> float:
    if not samples:
        return 0.0
    ordered = sorted(samples)
    idx = max(0, math.ceil(0.95 * len(ordered)) - 1)
    return ordered[idx]


def render_command_metrics(metrics: dict) -> str:
    if not metrics:
        return "<i>No command metrics recorded yet.</i>"

    lines = [bold("Command Metrics:")]
    for name in sorted(metrics.keys()):
        entry = metrics[name]
        avg = (entry.total_latency_s / entry.count) if entry.count else 0.0
        p95 = _p95(entry.latencies_s)
        last_run = _format_timestamp(entry.last_run_ts)
        line = (
            f"{code(name)} runs {entry.count} ok {entry.success} err {entry.error} "
            f"rl {entry.rate_limited} avg {avg * 1000:.1f}ms "
            f"p95 {p95 * 1000:.1f}ms max {entry.max_latency_s * 1000:.1f}ms "
            f"last {html.escape(last_run)}"
        )
        lines.append(line)
    return "\n".join(lines)
