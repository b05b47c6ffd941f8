# src/fxconv/app.py
"""
Application Entry Point - Startup and Wiring

This module serves as the composition root for the converter. It loads the
preferences, resolves the ExchangeRate-API key, builds the rate store (which
performs the initial refresh), and starts the Telegram front end.

Files that USE this module:
- fxconv.__main__ (python -m fxconv)
- the fxconv console script

Files that this module USES:
- fxconv.shared.logging_conf (setup_logging for logging configuration)
- fxconv.config (settings for configuration management)
- fxconv.application (Preferences, RateStore)
- fxconv.adapters.providers.exchangerate_api (ExchangeRateAPIProvider)
- fxconv.adapters.telegram.bot (build_application)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations for forward references

import getpass  # Read the API key without echoing it
import logging  # Standard library for logging messages and errors
import os  # Operating system interface for the working directory
import sys  # System-specific parameters and functions for exit codes
from typing import Callable, Optional, Tuple  # Type hints

from fxconv.adapters.providers.exchangerate_api import ExchangeRateAPIProvider
from fxconv.application.preferences import Preferences
from fxconv.application.rate_store import RateStore
from fxconv.domain.errors import MissingCredentialError
from fxconv.shared.logging_conf import setup_logging

logger = logging.getLogger(__name__)

Prompt = Callable[[], Optional[str]]


def terminal_prompt() -> Optional[str]:
    """
    Ask for the API key on the terminal.
    
    Returns:
        The typed key, or None when stdin is not interactive or input is aborted
    """
    if not sys.stdin or not sys.stdin.isatty():
        return None
    try:
        return getpass.getpass("Please enter your ExchangeRate-API key: ")
    except (EOFError, KeyboardInterrupt):
        return None


def resolve_credential(
    preferences: Preferences,
    fallback_key: str = "",
    prompt: Optional[Prompt] = None,
) -> str:
    """
    Return the API key to use, obtaining and saving one if none is stored.
    
    Order: stored key, then `fallback_key` (FXCONV_API_KEY), then `prompt`.
    
    Args:
        preferences: Loaded preferences (updated and saved with a new key)
        fallback_key: Key from configuration
        prompt: Callable asking the user for a key
        
    Returns:
        Non-empty API key
        
    Raises:
        MissingCredentialError: If no key could be obtained
    """
    if preferences.has_credential:
        return preferences.credential
    
    key = (fallback_key or "").strip()
    source = "configuration"
    if not key and prompt is not None:
        key = (prompt() or "").strip()
        source = "prompt"
    
    if not key:
        raise MissingCredentialError(
            "A valid ExchangeRate-API key is required. Set FXCONV_API_KEY or run interactively."
        )
    
    preferences.set_credential(key)
    preferences.save()
    logger.info("API key obtained from %s and saved", source)
    return key


def bootstrap(settings, prompt: Optional[Prompt] = terminal_prompt) -> Tuple[Preferences, RateStore]:
    """
    Load preferences and build the rate store.
    
    The store performs its initial refresh here. A failed refresh is logged
    and is not fatal: the bot starts and /refresh can be retried.
    
    Raises:
        MissingCredentialError: If no API key is stored, configured, or typed
    """
    preferences = Preferences.load(settings.preferences_file)
    key = resolve_credential(preferences, settings.api_key, prompt)
    
    provider = ExchangeRateAPIProvider(api_key=key)
    store = RateStore(provider, reference_currency=settings.reference_currency)
    if not store.has_rates:
        logger.warning("Initial rate refresh failed; conversions are unavailable until /refresh succeeds")
    return preferences, store


def main() -> None:
    """
    Initialize and start the converter.
    
    This function:
    1. Sets up logging
    2. Checks the Telegram configuration
    3. Loads preferences, resolves the API key, and fetches rates
    4. Starts the bot polling loop
    """
    # Import settings here so a bad .env surfaces after logging is usable
    from fxconv.config import settings
    
    setup_logging(
        level=logging.INFO,
        log_file=settings.log_file,
        log_dir=settings.log_dir,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
        log_stdout=settings.log_stdout,
    )
    logger.info("Working directory: %s", os.getcwd())
    
    if not settings.bot_token:
        raise RuntimeError("BOT_TOKEN missing")
    if not settings.owner_username:
        raise RuntimeError("OWNER_USERNAME missing")
    
    try:
        preferences, store = bootstrap(settings)
    except MissingCredentialError as e:
        logger.error("%s", e)
        sys.exit(1)
    
    from fxconv.adapters.telegram.bot import build_application
    
    app = build_application(
        bot_token=settings.bot_token,
        store=store,
        preferences=preferences,
        owner_username=settings.owner_username,
    )
    
    logger.info(
        "Starting bot polling… reference=%s, currencies=%d, owner=@%s",
        store.reference_currency,
        len(store.list_currencies()),
        settings.owner_username,
    )
    try:
        app.run_polling(drop_pending_updates=True)
    except KeyboardInterrupt:
        logger.info("Bot stopped by user (KeyboardInterrupt)")
    except Exception as e:
        logger.exception("Unexpected error during bot operation: %s (type: %s)", e, type(e).__name__)
        raise


if __name__ == "__main__":
    main()
