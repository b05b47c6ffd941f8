# src/fxconv/adapters/telegram/__init__.py
"""
Telegram Adapters - Chat Interface

This package contains the Telegram front end:
- Application builder
- Command and button handlers
"""

from fxconv.adapters.telegram.bot import build_application
from fxconv.adapters.telegram.handlers import build_handlers

__all__ = [
    "build_application",
    "build_handlers",
]
