# src/fxconv/__init__.py
"""
FXConv - Personal Currency Converter

Converts amounts between currencies using the latest ExchangeRate-API rates,
with a persisted default currency and favorites list, driven from a private
Telegram chat.
"""

__version__ = "1.0.0"
__author__ = "Masih Sadri"
