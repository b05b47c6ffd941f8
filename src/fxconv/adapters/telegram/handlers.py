# src/fxconv/adapters/telegram/handlers.py
"""
Telegram Handlers - Command Processing and User Interaction

This module contains the chat front end of the converter. Commands and
inline buttons map onto the converter actions (convert, swap, refresh,
set default, add favorite), a plain number converts with the current
selection, and /apikey replaces the ExchangeRate-API key. Only the owner
may use the bot.

Shared objects live in application.bot_data:
- "store": RateStore
- "preferences": Preferences
- "owner_username": username allowed to use the bot
Each chat keeps its own ConverterSession in chat_data["session"].

Files that USE this module:
- fxconv.adapters.telegram.bot (build_handlers registers these handlers)

Files that this module USES:
- fxconv.application (RateStore, Preferences, ConverterSession)
- fxconv.adapters.formatting.formatter (reply texts)
- fxconv.adapters.providers.exchangerate_api (provider for a new API key)
- fxconv.shared.rate_limiter (command throttling)
- fxconv.shared.validators (amount, currency code, and API key validation)
"""
from __future__ import annotations

import logging
import math
from typing import Optional

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.error import TelegramError
from telegram.ext import CallbackQueryHandler, CommandHandler, ContextTypes, MessageHandler, filters

from fxconv.adapters.formatting.formatter import (
    format_choices,
    format_conversion,
    format_status,
    format_update_times,
)
from fxconv.adapters.providers.exchangerate_api import ExchangeRateAPIProvider
from fxconv.application.preferences import Preferences
from fxconv.application.rate_store import RateStore
from fxconv.application.session import ConverterSession
from fxconv.domain.errors import RatesUnavailableError, UnknownCurrencyError
from fxconv.shared.rate_limiter import RATE_LIMITS, rate_limiter
from fxconv.shared.validators import (
    normalize_currency_code,
    sanitize_user_input,
    validate_amount,
    validate_api_key,
)

logger = logging.getLogger(__name__)

ACTION_CONVERT = "act_convert"
ACTION_SWAP = "act_swap"
ACTION_REFRESH = "act_refresh"
ACTION_DEFAULT = "act_default"
ACTION_FAVORITE = "act_favorite"

HELP_TEXT = (
    "Send an amount to convert it, or use:\n"
    "/convert <amount> [FROM] [TO]\n"
    "/from <CODE>, /to <CODE>, /swap\n"
    "/refresh - fetch the latest rates\n"
    "/setdefault - make 'from' the default currency\n"
    "/favorite - pin 'to' at the top of the list\n"
    "/currencies - list available currencies\n"
    "/apikey <key> - replace the ExchangeRate-API key"
)


def action_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup([
        [
            InlineKeyboardButton("Convert", callback_data=ACTION_CONVERT),
            InlineKeyboardButton("Swap", callback_data=ACTION_SWAP),
            InlineKeyboardButton("Refresh Rates", callback_data=ACTION_REFRESH),
        ],
        [
            InlineKeyboardButton("Set Default", callback_data=ACTION_DEFAULT),
            InlineKeyboardButton("Add to Favorites", callback_data=ACTION_FAVORITE),
        ],
    ])


def _store(context: ContextTypes.DEFAULT_TYPE) -> RateStore:
    return context.application.bot_data["store"]


def _preferences(context: ContextTypes.DEFAULT_TYPE) -> Preferences:
    return context.application.bot_data["preferences"]


def _session(context: ContextTypes.DEFAULT_TYPE) -> ConverterSession:
    """Return the chat's session, creating it on first use."""
    session = context.chat_data.get("session")
    if session is None:
        session = ConverterSession(_store(context), _preferences(context))
        context.chat_data["session"] = session
    session.ensure_selection()
    return session


def _is_owner(update: Update, context: ContextTypes.DEFAULT_TYPE) -> bool:
    """
    Check if the user sending the update is the owner.
    
    Returns:
        True if the username matches the configured owner username
    """
    owner = (context.application.bot_data.get("owner_username") or "").lstrip("@").lower()
    user = update.effective_user
    if not owner or user is None:
        return False
    return (user.username or "").lstrip("@").lower() == owner


def _check_rate_limit(update: Update, limit_type: str) -> Optional[int]:
    """
    Check the user's rate limit bucket for `limit_type`.
    
    Returns:
        None if allowed, otherwise seconds to wait
    """
    config = RATE_LIMITS.get(limit_type)
    if not config:
        return None
    
    user_id = update.effective_user.id if update.effective_user else 0
    identifier = f"{limit_type}:user:{user_id}"
    if rate_limiter.is_allowed(identifier, config):
        return None
    
    wait = rate_limiter.retry_after(identifier, config)
    logger.warning("Rate limit exceeded for %s (retry after %ss)", identifier, wait)
    return wait


async def _reply(update: Update, text: str, keyboard: bool = True) -> None:
    await update.effective_message.reply_text(
        text, reply_markup=action_keyboard() if keyboard else None
    )


async def _send(update: Update, context: ContextTypes.DEFAULT_TYPE, text: str, keyboard: bool = True) -> None:
    """Send without quoting, for when the triggering message may be gone."""
    await context.bot.send_message(
        chat_id=update.effective_chat.id,
        text=text,
        reply_markup=action_keyboard() if keyboard else None,
    )


async def _guard(update: Update, context: ContextTypes.DEFAULT_TYPE) -> bool:
    """Owner check plus command throttling; replies when the update is refused."""
    if not _is_owner(update, context):
        user = update.effective_user
        logger.info("Ignoring update from non-owner %s", user.username if user else None)
        await _reply(update, "⚠️ This converter is private.", keyboard=False)
        return False
    
    wait = _check_rate_limit(update, "user_command")
    if wait is not None:
        await _reply(update, f"⏰ Too many requests. Please try again in {wait}s.", keyboard=False)
        return False
    return True


def _conversion_text(session: ConverterSession, amount: float) -> str:
    try:
        conversion = session.convert(amount)
    except RatesUnavailableError as e:
        return f"Conversion error: {e}"
    if not math.isfinite(conversion.result):
        return "Amount is too large to convert"
    return format_conversion(conversion)


async def _refresh_text(update: Update, context: ContextTypes.DEFAULT_TYPE) -> str:
    wait = _check_rate_limit(update, "refresh")
    if wait is not None:
        return f"⏰ Rates were refreshed recently. Try again in {wait}s."
    
    store = _store(context)
    if await store.refresh_async():
        _session(context)
        return "✅ Rates updated successfully\n" + format_update_times(store)
    return "❌ Failed to update rates\n" + format_update_times(store)


def _set_default_text(session: ConverterSession) -> str:
    code = session.set_default()
    if code is None:
        return "No currency selected yet."
    return f"{code} set as default 'from' currency"


def _add_favorite_text(session: ConverterSession) -> str:
    code = session.to_currency
    if code is None:
        return "No currency selected yet."
    if session.add_favorite():
        return f"{code} added to favorites"
    return f"{code} is already in favorites"


# --- /start: status and action keyboard ---
async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not await _guard(update, context):
        return
    session = _session(context)
    await _reply(update, f"{format_status(session)}\n\n{HELP_TEXT}")


# --- /convert <amount> [FROM] [TO] ---
async def convert_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /convert - convert an amount, optionally choosing both currencies.
    
    Examples: "/convert 100", "/convert 100 usd eur".
    """
    if not await _guard(update, context):
        return
    
    args = context.args or []
    amount = validate_amount(args[0]) if args else None
    if amount is None:
        await _reply(update, "Please enter a valid number, e.g. /convert 100 USD EUR", keyboard=False)
        return
    
    session = _session(context)
    try:
        if len(args) > 1:
            session.select_from(args[1])
        if len(args) > 2:
            session.select_to(args[2])
    except UnknownCurrencyError:
        await _reply(update, f"Unknown currency: {sanitize_user_input(' '.join(args[1:3]), 20)}", keyboard=False)
        return
    
    await _reply(update, _conversion_text(session, amount))


async def _select(update: Update, context: ContextTypes.DEFAULT_TYPE, side: str) -> None:
    if not await _guard(update, context):
        return
    
    code = normalize_currency_code(context.args[0]) if context.args else None
    if code is None:
        await _reply(update, f"Usage: /{side} <CODE>, e.g. /{side} EUR", keyboard=False)
        return
    
    session = _session(context)
    try:
        if side == "from":
            session.select_from(code)
        else:
            session.select_to(code)
    except UnknownCurrencyError:
        await _reply(update, f"{code} is not an available currency. See /currencies", keyboard=False)
        return
    
    await _reply(update, format_status(session))


async def from_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await _select(update, context, "from")


async def to_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await _select(update, context, "to")


async def swap_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not await _guard(update, context):
        return
    session = _session(context)
    session.swap()
    await _reply(update, format_status(session))


async def refresh_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not await _guard(update, context):
        return
    await _reply(update, await _refresh_text(update, context))


async def setdefault_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not await _guard(update, context):
        return
    await _reply(update, _set_default_text(_session(context)))


async def favorite_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not await _guard(update, context):
        return
    await _reply(update, _add_favorite_text(_session(context)))


async def currencies_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not await _guard(update, context):
        return
    session = _session(context)
    text = format_choices(session.choices(), session.preferences.favorites)
    await _reply(update, text, keyboard=False)


# --- /apikey <key>: replace the ExchangeRate-API key ---
async def apikey_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /apikey - try a new ExchangeRate-API key and store it if it works.
    
    The message carrying the key is deleted from the chat. The new key is
    only saved after a successful refresh with it; otherwise the previous
    provider is restored.
    """
    if not await _guard(update, context):
        return
    
    key = (context.args[0] if context.args else "").strip()
    
    try:
        await update.effective_message.delete()
    except TelegramError as e:
        logger.warning("Could not delete message containing API key: %s", e)
    
    if not validate_api_key(key):
        await _send(update, context, "Usage: /apikey <ExchangeRate-API key>", keyboard=False)
        return
    
    store = _store(context)
    preferences = _preferences(context)
    previous = store.provider
    store.set_provider(ExchangeRateAPIProvider(api_key=key))
    
    if not await store.refresh_async():
        store.set_provider(previous)
        await _send(update, context, "❌ Could not fetch rates with that key; keeping the previous one.", keyboard=False)
        return
    
    preferences.set_credential(key)
    if preferences.save():
        logger.info("API key replaced and saved")
        await _send(update, context, "✅ API key saved. Rates updated.\n" + format_update_times(store))
    else:
        await _send(update, context, "⚠️ API key works but could not be saved to disk.")


# --- Plain text: treat as an amount ---
async def amount_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not await _guard(update, context):
        return
    
    amount = validate_amount(update.effective_message.text or "")
    if amount is None:
        await _reply(update, "Please enter a valid number", keyboard=False)
        return
    
    await _reply(update, _conversion_text(_session(context), amount))


async def action_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle the inline action buttons."""
    query = update.callback_query
    await query.answer()
    
    if not await _guard(update, context):
        return
    
    session = _session(context)
    action = query.data
    
    if action == ACTION_CONVERT:
        if session.last_amount is None:
            text = "Send an amount first, e.g. 100"
        else:
            text = _conversion_text(session, session.last_amount)
    elif action == ACTION_SWAP:
        session.swap()
        text = format_status(session)
    elif action == ACTION_REFRESH:
        text = await _refresh_text(update, context)
    elif action == ACTION_DEFAULT:
        text = _set_default_text(session)
    elif action == ACTION_FAVORITE:
        text = _add_favorite_text(session)
    else:
        logger.warning("Unknown action: %s", action)
        text = "Unknown action"
    
    await _reply(update, text)


async def on_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    logger.error("Unhandled error while processing update", exc_info=context.error)


def build_handlers():
    """
    Build and return list of Telegram bot handlers.
    
    Returns:
        List of handler instances for registration with bot
    """
    return [
        CommandHandler(["start", "help"], start),
        CommandHandler("convert", convert_cmd),
        CommandHandler("from", from_cmd),
        CommandHandler("to", to_cmd),
        CommandHandler("swap", swap_cmd),
        CommandHandler("refresh", refresh_cmd),
        CommandHandler("setdefault", setdefault_cmd),
        CommandHandler("favorite", favorite_cmd),
        CommandHandler("currencies", currencies_cmd),
        CommandHandler("apikey", apikey_cmd),
        CallbackQueryHandler(action_callback, pattern="^act_"),
        MessageHandler(filters.TEXT & ~filters.COMMAND, amount_message),
    ]
