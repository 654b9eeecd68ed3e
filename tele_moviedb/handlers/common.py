"""Shared handler helpers: auth guard, rate limit, error replies."""

from __future__ import annotations

import functools
import logging
import time
from typing import TYPE_CHECKING, Callable

from telegram.constants import ParseMode

from .. import config, view
from ..models.bot_state import BOT_STATE_KEY, BotState
from ..services import SERVICES_KEY, Services

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from telegram import Update
    from telegram.ext import ContextTypes


# Global rate limit (seconds) for all commands.
_last_command_ts = 0.0


def get_state(app) -> BotState:
    """Retrieve or initialize the bot state from application data.

    Args:
        app: The Telegram Application instance

    Returns:
        BotState object holding listing sessions and command metrics.
    """
    return app.bot_data.setdefault(BOT_STATE_KEY, BotState())


def get_services(context) -> Services:
    """Return the services built at startup.

    Raises:
        RuntimeError: if the application was started without services.
    """
    services = context.application.bot_data.get(SERVICES_KEY)
    if services is None:
        raise RuntimeError("services are not configured")
    return services


async def reply_error(
    command: str,
    message: str,
    exc: Exception,
    reply,
    log: logging.Logger | None = None,
    context=None,
) -> None:
    """Log a failed command and tell the user what went wrong.

    When `context` is given the failure is also noted on the bot state, so
    `rate_limit` counts the command as an error rather than a success.
    """
    (log or logger).exception("%s: %s", command, message)
    if context is not None:
        get_state(context.application).note_failure(command, str(exc))
    await reply(view.render_error(exc), parse_mode=ParseMode.HTML)


def allowed(update: "Update") -> bool:
    """Check if the update sender may use the bot.

    Args:
        update: Telegram Update object containing chat information

    Returns:
        True if ALLOW_ALL_CHATS is set or the chat is on ALLOWED_CHAT_IDS.
        An empty allow-list without ALLOW_ALL_CHATS rejects every chat.
    """
    if config.ALLOW_ALL_CHATS:
        return True
    if not config.ALLOWED or not update.effective_chat:
        return False
    return update.effective_chat.id in config.ALLOWED


async def guard(update: "Update", context: "ContextTypes.DEFAULT_TYPE") -> bool:
    """Guard function to check authorization before executing commands.

    Args:
        update: Telegram Update object
        context: Telegram context object

    Returns:
        True if authorized, False otherwise. Sends unauthorized message on failure.
    """
    if allowed(update):
        return True
    if update and update.effective_chat:
        await update.effective_chat.send_message("⛔ Not authorized")
    return False


def parse_positive_int(raw: str | None, default: int | None = None) -> int | None:
    if raw is None:
        return default
    raw = raw.strip()
    if not raw.isdigit():
        return None
    value = int(raw)
    return value if value > 0 else None


def rate_limit(func: Callable, name: str | None = None) -> Callable:
    """Decorator to enforce global rate limiting on command handlers.

    Args:
        func: The async command handler function to wrap

    Returns:
        Wrapped function that enforces rate limiting based on config.RATE_LIMIT_S

    Note:
        Uses a global timestamp check. Rate limit applies across all commands.
        If rate limit is exceeded, sends a message to the user with wait time.
    """

    command_name = name or func.__name__.removeprefix("cmd_")

    @functools.wraps(func)
    async def wrapper(
        update: "Update", context: "ContextTypes.DEFAULT_TYPE", *args, **kwargs
    ):
        global _last_command_ts
        now = time.monotonic()
        elapsed = now - _last_command_ts

        if elapsed < config.RATE_LIMIT_S:
            try:
                if update and getattr(update, "effective_message", None):
                    await update.effective_message.reply_text(
                        f"⏱ Rate limit: please wait {config.RATE_LIMIT_S - elapsed:.1f}s",
                    )
            except Exception as e:
                logger.debug("rate-limit notice failed to send: %s", e)
            get_state(context.application).record_rate_limited(command_name)
            return

        _last_command_ts = now
        state = get_state(context.application)
        state.pop_failure(command_name)
        start = time.perf_counter()
        try:
            result = await func(update, context, *args, **kwargs)
        except Exception as e:
            latency_s = time.perf_counter() - start
            state.record_command(command_name, latency_s, ok=False, error_msg=str(e))
            raise
        latency_s = time.perf_counter() - start
        # Handlers that reply with an error themselves leave a pending failure
        failure = state.pop_failure(command_name)
        state.record_command(
            command_name, latency_s, ok=failure is None, error_msg=failure
        )
        return result

    return wrapper
