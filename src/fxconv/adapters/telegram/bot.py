# src/fxconv/adapters/telegram/bot.py
"""
Telegram Bot - Application Builder

This module builds the Telegram application: it stores the shared rate store
and preferences in bot_data, registers the handlers, and publishes the
command list to Telegram once the bot is initialized.

Files that USE this module:
- fxconv.app (build_application at startup)

Files that this module USES:
- fxconv.adapters.telegram.handlers (build_handlers, on_error)
"""

from __future__ import annotations

import logging

from telegram import BotCommand
from telegram.error import TelegramError
from telegram.ext import Application

from fxconv.adapters.telegram.handlers import build_handlers, on_error
from fxconv.application.preferences import Preferences
from fxconv.application.rate_store import RateStore

logger = logging.getLogger(__name__)

BOT_COMMANDS = [
    BotCommand("start", "Show selection and actions"),
    BotCommand("convert", "Convert an amount: /convert 100 USD EUR"),
    BotCommand("from", "Select the currency to convert from"),
    BotCommand("to", "Select the currency to convert to"),
    BotCommand("swap", "Swap 'from' and 'to'"),
    BotCommand("refresh", "Fetch the latest rates"),
    BotCommand("setdefault", "Make 'from' the default currency"),
    BotCommand("favorite", "Add 'to' to favorites"),
    BotCommand("currencies", "List available currencies"),
    BotCommand("apikey", "Replace the ExchangeRate-API key"),
]


async def _post_init(application: Application) -> None:
    try:
        await application.bot.set_my_commands(BOT_COMMANDS)
    except TelegramError as e:
        logger.warning("Could not publish bot commands: %s", e)


def build_application(
    bot_token: str,
    store: RateStore,
    preferences: Preferences,
    owner_username: str,
) -> Application:
    """
    Build the Telegram bot application.
    
    Args:
        bot_token: Telegram bot token
        store: Rate store shared by all chats
        preferences: Loaded user preferences
        owner_username: Only this Telegram user may use the bot
        
    Returns:
        Configured Application instance
    """
    app = Application.builder().token(bot_token).post_init(_post_init).build()
    app.bot_data["store"] = store
    app.bot_data["preferences"] = preferences
    app.bot_data["owner_username"] = owner_username
    
    for h in build_handlers():
        app.add_handler(h)
    app.add_error_handler(on_error)
    return app
