"""Callback query handlers for inline keyboard buttons."""

from __future__ import annotations

import logging
import time

from telegram import InlineKeyboardButton, InlineKeyboardMarkup
from telegram.constants import ParseMode
from telegram.error import BadRequest

from .. import view
from ..models.bot_state import BotState
from ..models.list_session import ListKind
from ..models.movie import MovieDetailBundle, MovieListPage, MovieSummary
from ..repository import MovieRepository
from ..services import Services
from .common import allowed, get_services, get_state, reply_error

logger = logging.getLogger(__name__)

_CAPTION_MAX = 1024


async def _safe_edit_message_text(query, text: str, **kwargs) -> None:
    try:
        await query.edit_message_text(text, **kwargs)
    except BadRequest as exc:
        if "Message is not modified" in str(exc):
            return
        raise


def listing_title(kind: ListKind, query: str | None) -> str:
    if kind == "discover":
        return "Discover Movies"
    if kind == "popular":
        return "Popular Movies"
    return f"Search: {query or ''}".strip()


async def load_listing(
    repository: MovieRepository, kind: ListKind, query: str | None, page: int
) -> MovieListPage:
    if kind == "discover":
        return await repository.fetch_list_page(page)
    if kind == "popular":
        return await repository.fetch_popular(page)
    if kind == "search":
        return await repository.search_movies(query or "", page)
    raise ValueError(f"Unsupported listing: {kind}")


def build_list_keyboard(
    key: str, items: list[MovieSummary], page: int, total_pages: int
) -> InlineKeyboardMarkup:
    buttons: list[list[InlineKeyboardButton]] = []
    for idx, movie in enumerate(items, start=1):
        label = f"{idx}. {movie.title}"
        if len(label) > 60:
            label = f"{label[:57]}..."
        buttons.append(
            [InlineKeyboardButton(label, callback_data=f"mlinfo:{movie.id}")]
        )
    nav_row: list[InlineKeyboardButton] = []
    if page > 1:
        nav_row.append(
            InlineKeyboardButton("⬅️ Prev", callback_data=f"mlpage:{key}:{page - 1}")
        )
    nav_row.append(
        InlineKeyboardButton(
            f"📄 {page}/{max(total_pages, 1)}",
            callback_data=f"mlpage:{key}:{page}",
        )
    )
    if page < total_pages:
        nav_row.append(
            InlineKeyboardButton("Next ➡️", callback_data=f"mlpage:{key}:{page + 1}")
        )
    buttons.append(nav_row)
    return InlineKeyboardMarkup(buttons)


def build_detail_keyboard(movie_id: int, is_favorite: bool) -> InlineKeyboardMarkup:
    label = "💔 Remove favorite" if is_favorite else "❤️ Add favorite"
    return InlineKeyboardMarkup(
        [[InlineKeyboardButton(label, callback_data=f"favtoggle:{movie_id}")]]
    )


async def send_listing(
    message, state: BotState, page: MovieListPage, kind: ListKind, query: str | None
) -> None:
    key = state.new_session_key()
    state.store_list_session(key, kind, query, page.page_number, page.total_pages)
    msg = view.render_movie_list(listing_title(kind, query), page)
    if not page.items:
        await message.reply_text(msg, parse_mode=ParseMode.HTML)
        return
    keyboard = build_list_keyboard(key, page.items, page.page_number, page.total_pages)
    await message.reply_text(
        msg[:4000], parse_mode=ParseMode.HTML, reply_markup=keyboard
    )


async def send_movie_detail(
    message, services: Services, bundle: MovieDetailBundle
) -> None:
    detail = bundle.detail
    is_favorite = await services.favorites.is_favorite(detail.id)
    msg = view.render_movie_detail(bundle, is_favorite=is_favorite)
    keyboard = build_detail_keyboard(detail.id, is_favorite)

    # Poster with caption when the text fits, otherwise plain text
    poster_url = detail.poster_url
    if poster_url and len(msg) <= _CAPTION_MAX:
        try:
            await message.reply_photo(
                photo=poster_url,
                caption=msg,
                parse_mode=ParseMode.HTML,
                reply_markup=keyboard,
            )
            return
        except Exception as img_err:
            logger.debug("Failed to send poster image: %s", img_err)

    parts = view.chunk(msg)
    for part in parts[:-1]:
        await message.reply_text(
            part, parse_mode=ParseMode.HTML, disable_web_page_preview=True
        )
    await message.reply_text(
        parts[-1],
        parse_mode=ParseMode.HTML,
        disable_web_page_preview=True,
        reply_markup=keyboard,
    )


async def handle_callback_query(update, context) -> None:
    query = update.callback_query
    await query.answer()

    data = query.data or ""

    if not allowed(update):
        await _safe_edit_message_text(query, "⛔ Not authorized")
        return

    try:
        if data.startswith("mlpage:"):
            await _handle_list_page(query, context, data)
        elif data.startswith("mlinfo:"):
            await _handle_movie_info(query, context, data)
        elif data.startswith("favtoggle:"):
            await _handle_favorite_toggle(query, context, data)
        else:
            await _safe_edit_message_text(query, "❓ Unknown action")
    except Exception as e:
        await reply_error("callback", data, e, query.message.reply_text)


def _parse_list_page_payload(data: str) -> tuple[str, int] | None:
    payload = data[len("mlpage:") :]
    parts = payload.split(":")
    if len(parts) != 2:
        return None
    key = parts[0]
    try:
        page = int(parts[1])
    except ValueError:
        return None
    return key, max(1, page)


def _parse_movie_id(data: str, prefix: str) -> int | None:
    raw = data[len(prefix) :]
    if not raw.isdigit():
        return None
    return int(raw)


async def _handle_list_page(query, context, data: str) -> None:
    payload = _parse_list_page_payload(data)
    if not payload:
        await query.message.reply_text("❌ Invalid page request.")
        return
    key, page_number = payload
    state: BotState = get_state(context.application)
    session = state.get_list_session(key)
    if not session:
        await query.message.reply_text("❌ Listing expired. Re-run the command.")
        return

    services = get_services(context)
    page = await load_listing(
        services.repository, session.kind, session.query, page_number
    )

    session.page = page.page_number
    session.total_pages = page.total_pages
    session.updated_at = time.monotonic()
    state.list_sessions[key] = session

    msg = view.render_movie_list(listing_title(session.kind, session.query), page)
    keyboard = build_list_keyboard(key, page.items, page.page_number, page.total_pages)
    await _safe_edit_message_text(
        query, msg[:4000], parse_mode=ParseMode.HTML, reply_markup=keyboard
    )


async def _handle_movie_info(query, context, data: str) -> None:
    movie_id = _parse_movie_id(data, "mlinfo:")
    if movie_id is None:
        await query.message.reply_text("❌ Invalid movie id.")
        return
    services = get_services(context)
    bundle = await services.repository.fetch_detail_bundle(movie_id)
    await send_movie_detail(query.message, services, bundle)


async def _handle_favorite_toggle(query, context, data: str) -> None:
    movie_id = _parse_movie_id(data, "favtoggle:")
    if movie_id is None:
        await query.message.reply_text("❌ Invalid movie id.")
        return
    services = get_services(context)
    detail = await services.repository.fetch_movie_detail(movie_id)
    now_favorite = await services.favorites.toggle(detail)
    try:
        await query.edit_message_reply_markup(
            reply_markup=build_detail_keyboard(movie_id, now_favorite)
        )
    except BadRequest as exc:
        if "Message is not modified" not in str(exc):
            raise
