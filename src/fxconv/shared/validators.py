# src/fxconv/shared/validators.py
"""
Input Validation Utilities - Configuration and User Input Validation

This module provides validation functions for the converter. It validates
bot tokens, API keys, currency codes and the amounts users type, so that
malformed input is rejected at the presentation boundary and never reaches
the rate store.

Files that USE this module:
- fxconv.config.settings (uses validation functions in Settings field validators)
- fxconv.adapters.telegram.handlers (validates amounts and currency codes)

Files that this module USES:
- None (pure utility functions)
"""
import math
import re
from typing import Optional


def validate_bot_token(token: str) -> bool:
    """
    Validate Telegram bot token format.
    
    Args:
        token: Bot token to validate
        
    Returns:
        True if valid, False otherwise
    """
    if not token:
        return False
    
    # Bot tokens should be in format: 123456789:ABCDEFghijklmnopQRSTUVwxyz
    pattern = r'^\d{8,10}:[A-Za-z0-9_-]{35}$'
    return bool(re.match(pattern, token))


def validate_api_key(api_key: str, min_length: int = 10) -> bool:
    """
    Validate API key format.
    
    ExchangeRate-API keys are opaque alphanumeric strings; anything with
    whitespace or a path separator would break the request URL.
    
    Args:
        api_key: API key to validate
        min_length: Minimum length requirement
        
    Returns:
        True if valid, False otherwise
    """
    if not api_key:
        return False
    
    return len(api_key) >= min_length and bool(re.match(r'^[A-Za-z0-9_-]+$', api_key))


def validate_currency_code(code: str) -> bool:
    """Return True for a three-letter ISO 4217 style code (case-insensitive)."""
    if not code:
        return False
    return bool(re.match(r'^[A-Za-z]{3}$', code))


def normalize_currency_code(code: str) -> Optional[str]:
    """
    Normalize user-typed currency code.
    
    Args:
        code: Raw code such as " eur"
        
    Returns:
        Upper-case code, or None if the input is not a valid code
    """
    cleaned = (code or "").strip()
    if not validate_currency_code(cleaned):
        return None
    return cleaned.upper()


def validate_amount(value: str) -> Optional[float]:
    """
    Parse an amount typed by the user.
    
    Accepts plain decimal numbers with an optional thousands separator
    ("1,250.50"). Rejects NaN and infinity.
    
    Args:
        value: Raw text
        
    Returns:
        Parsed float, or None if the text is not a usable amount
    """
    if not value:
        return None
    
    cleaned = value.strip().replace(",", "")
    if not cleaned:
        return None
    
    try:
        amount = float(cleaned)
    except ValueError:
        return None
    
    if not math.isfinite(amount):
        return None
    return amount


def sanitize_user_input(text: str, max_length: int = 1000) -> str:
    """
    Sanitize user input text.
    
    Args:
        text: Input text to sanitize
        max_length: Maximum allowed length
        
    Returns:
        Sanitized text
    """
    if not text:
        return ""
    
    # Remove potentially dangerous characters
    sanitized = re.sub(r'[<>"\']', '', text)
    
    # Limit length
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length]
    
    return sanitized.strip()
