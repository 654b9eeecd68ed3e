"""Movie command handlers (listings, details, favorites)."""

from __future__ import annotations

from telegram.constants import ParseMode

from .. import view
from ..models.list_session import ListKind
from .callbacks import load_listing, send_listing, send_movie_detail
from .common import get_services, get_state, guard, parse_positive_int, reply_error


async def _cmd_listing(update, context, kind: ListKind, usage: str) -> None:
    if not await guard(update, context):
        return
    page_number = parse_positive_int(context.args[0] if context.args else None, 1)
    if page_number is None:
        await update.message.reply_text(f"Usage: {usage}")
        return
    services = get_services(context)
    try:
        page = await load_listing(services.repository, kind, None, page_number)
    except Exception as e:
        await reply_error(
            kind,
            f"{kind} page {page_number} failed",
            e,
            update.message.reply_text,
            context=context,
        )
        return
    await send_listing(update.message, get_state(context.application), page, kind, None)


async def cmd_discover(update, context) -> None:
    await _cmd_listing(update, context, "discover", "/discover [page]")


async def cmd_popular(update, context) -> None:
    await _cmd_listing(update, context, "popular", "/popular [page]")


async def cmd_search(update, context) -> None:
    if not await guard(update, context):
        return
    query = " ".join(context.args or []).strip()
    if not query:
        await update.message.reply_text("Usage: /search <query>")
        return
    services = get_services(context)
    try:
        page = await load_listing(services.repository, "search", query, 1)
    except Exception as e:
        await reply_error(
            "search",
            f"search failed for query: {query}",
            e,
            update.message.reply_text,
            context=context,
        )
        return
    await send_listing(
        update.message, get_state(context.application), page, "search", query
    )


async def cmd_movie(update, context) -> None:
    if not await guard(update, context):
        return
    movie_id = parse_positive_int(context.args[0] if context.args else "")
    if movie_id is None:
        await update.message.reply_text("Usage: /movie <id>")
        return
    services = get_services(context)
    try:
        bundle = await services.repository.fetch_detail_bundle(movie_id)
    except Exception as e:
        await reply_error(
            "movie",
            f"detail failed for movie {movie_id}",
            e,
            update.message.reply_text,
            context=context,
        )
        return
    await send_movie_detail(update.message, services, bundle)


async def cmd_favorites(update, context) -> None:
    if not await guard(update, context):
        return
    services = get_services(context)
    favorites = await services.favorites.list_all()
    await update.message.reply_text(
        view.render_favorites(favorites), parse_mode=ParseMode.HTML
    )


async def cmd_fav(update, context) -> None:
    if not await guard(update, context):
        return
    movie_id = parse_positive_int(context.args[0] if context.args else "")
    if movie_id is None:
        await update.message.reply_text("Usage: /fav <id>")
        return
    services = get_services(context)
    try:
        detail = await services.repository.fetch_movie_detail(movie_id)
    except Exception as e:
        await reply_error(
            "fav",
            f"detail failed for movie {movie_id}",
            e,
            update.message.reply_text,
            context=context,
        )
        return
    now_favorite = await services.favorites.toggle(detail)
    title = view.bold(detail.title)
    if now_favorite:
        msg = f"❤️ Added {title} to favorites."
    else:
        msg = f"💔 Removed {title} from favorites."
    await update.message.reply_text(msg, parse_mode=ParseMode.HTML)
