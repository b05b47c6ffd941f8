# src/fxconv/shared/__init__.py
"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation
- Rate limiting
- Logging configuration
"""

from fxconv.shared.validators import (
    normalize_currency_code,
    sanitize_user_input,
    validate_amount,
    validate_api_key,
    validate_bot_token,
    validate_currency_code,
)
from fxconv.shared.rate_limiter import rate_limiter, RATE_LIMITS

__all__ = [
    "validate_bot_token",
    "validate_api_key",
    "validate_currency_code",
    "normalize_currency_code",
    "validate_amount",
    "sanitize_user_input",
    "rate_limiter",
    "RATE_LIMITS",
]
