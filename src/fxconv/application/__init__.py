# src/fxconv/application/__init__.py
"""
Application Layer - Use Cases and Services

This package contains the rate store, user preferences, and the
converter session that orchestrates them.
"""

from fxconv.application.preferences import Preferences
from fxconv.application.rate_store import RateStore
from fxconv.application.session import ConverterSession

__all__ = [
    "Preferences",
    "RateStore",
    "ConverterSession",
]
