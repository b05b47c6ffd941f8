# src/fxconv/adapters/__init__.py
"""
Adapters Layer - External Interfaces

This package contains all adapters for external systems:
- Providers (rate APIs)
- Telegram (chat interface)
- Persistence (preference storage)
- Formatting (output)
"""

__all__ = []
