from __future__ import annotations

import logging

from telegram.constants import ParseMode

from .. import view
from ..commands import COMMANDS, GROUP_ORDER
from .common import get_services, get_state, guard

logger = logging.getLogger(__name__)


def _render_help() -> str:
    by_group: dict[str, list[str]] = {}
    for spec in COMMANDS:
        usage = spec.usage
        if spec.aliases:
            usage += " (" + ", ".join(f"/{a}" for a in spec.aliases) + ")"
        by_group.setdefault(spec.group, []).append(f"{usage} – {spec.description}")
    lines: list[str] = ["Hi! I browse TMDB movies. Commands:\n"]
    for group in GROUP_ORDER:
        entries = by_group.get(group, [])
        if not entries:
            continue
        lines.append(group)
        lines.extend(entries)
        lines.append("")
    return "\n".join(lines).strip()


async def cmd_start(update, context) -> None:
    if not await guard(update, context):
        return
    await update.message.reply_text(_render_help())


async def cmd_help(update, context) -> None:
    await cmd_start(update, context)


async def cmd_cache(update, context) -> None:
    if not await guard(update, context):
        return
    services = get_services(context)
    repository = services.repository
    counts = await services.cache.row_counts()
    msg = view.render_cache_status(
        services.cache.db_path,
        counts,
        repository.list_expiry.total_seconds(),
        repository.detail_expiry.total_seconds(),
    )
    await update.message.reply_text(msg, parse_mode=ParseMode.HTML)


async def cmd_metrics(update, context) -> None:
    if not await guard(update, context):
        return
    state = get_state(context.application)
    msg = view.render_command_metrics(state.command_metrics)
    await update.message.reply_text(msg, parse_mode=ParseMode.HTML)
