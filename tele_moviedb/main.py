"""Entrypoint for running the movie bot from the package.

This module builds the services, wires up the Application, registers
handlers and runs polling.
"""

from __future__ import annotations

import logging

from telegram import BotCommand
from telegram.ext import Application, CallbackQueryHandler, CommandHandler

from . import config
from .commands import COMMANDS
from .handlers import dispatch
from .handlers.callbacks import handle_callback_query
from .logger import setup_logging
from .models.bot_state import BOT_STATE_KEY, BotState
from .services import SERVICES_KEY, Services, build_services

logger = logging.getLogger(__name__)


def build_application(services: Services) -> Application:
    if config.TOKEN is None:
        raise RuntimeError("BOT_TOKEN environment variable is not set")

    app = Application.builder().token(config.TOKEN).build()

    app.bot_data.setdefault(BOT_STATE_KEY, BotState())
    app.bot_data[SERVICES_KEY] = services

    for spec in COMMANDS:
        fn = getattr(dispatch, spec.handler)
        triggers = [spec.name, *spec.aliases]
        app.add_handler(CommandHandler(triggers, fn))

    app.add_handler(CallbackQueryHandler(handle_callback_query))

    return app


async def register_bot_commands(app: Application) -> None:
    """Register bot commands for Telegram autocomplete."""
    try:
        bot_commands = [BotCommand(spec.name, spec.description) for spec in COMMANDS]
        await app.bot.set_my_commands(bot_commands)
        logger.info("Registered %d commands for autocomplete", len(bot_commands))
    except Exception as e:
        logger.warning("Failed to register bot commands: %s", e)


def run() -> None:
    setup_logging()
    config.validate_settings()
    logger.info("Starting tele_moviedb")
    services = build_services()
    app = build_application(services)
    app.post_init = register_bot_commands
    try:
        app.run_polling(stop_signals=None)
    finally:
        services.close()


if __name__ == "__main__":
    run()
