# src/fxconv/adapters/formatting/formatter.py
"""
Message Formatter - Text Formatting and Presentation

This module handles all text formatting for chat messages: conversion
results, rate update times, the current selection, and currency listings.
Rounding for display happens here and nowhere else.

Files that USE this module:
- fxconv.adapters.telegram.handlers (uses formatter functions for replies)
- tests.test_formatter (unit tests)

Files that this module USES:
- fxconv.domain.models (Conversion)
- fxconv.application (RateStore, ConverterSession for status display)
"""
from __future__ import annotations

import math

from decimal import Context, Decimal, ROUND_HALF_EVEN  # Precise decimal rounding for display
from typing import List, Optional, Sequence

from fxconv.application.rate_store import RateStore
from fxconv.application.session import ConverterSession
from fxconv.domain.models import Conversion

# Wide enough to quantize any finite float without InvalidOperation
_DISPLAY_CONTEXT = Context(prec=400)


def format_amount(value: float, max_decimals: int = 2) -> str:
    """
    Format a number with at most `max_decimals` decimals.
    
    Trailing zeros are dropped, halves round to even, and there is no
    thousands separator: 90.0 -> "90", 111.1111 -> "111.11". Infinity and
    NaN are shown as Python prints them.
    
    Args:
        value: Number to format
        max_decimals: Maximum number of decimal places
        
    Returns:
        Formatted number
    """
    if not math.isfinite(value):
        return str(value)
    quantum = Decimal(1).scaleb(-max_decimals)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_EVEN, context=_DISPLAY_CONTEXT)
    text = format(rounded, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("", "-0"):
        text = "0"
    return text


def format_conversion(conversion: Conversion) -> str:
    """Format a conversion as "100 USD = 90 EUR"."""
    return (
        f"{format_amount(conversion.amount, max_decimals=6)} {conversion.from_currency} = "
        f"{format_amount(conversion.result)} {conversion.to_currency}"
    )


def format_update_times(store: RateStore) -> str:
    return f"Last update: {store.last_updated()}\nNext update: {store.next_update()}"


def format_status(session: ConverterSession) -> str:
    """
    Format the current selection and rate update times.
    
    Args:
        session: Converter session of the chat
        
    Returns:
        Multi-line status text
    """
    lines = [
        f"From: {session.from_currency or 'N/A'}",
        f"To: {session.to_currency or 'N/A'}",
    ]
    default = session.preferences.default_currency
    if default:
        lines.append(f"Default 'from': {default}")
    if session.preferences.favorites:
        lines.append(f"Favorites: {', '.join(session.preferences.favorites)}")
    lines.append("")
    lines.append(format_update_times(session.store))
    return "\n".join(lines)


def format_choices(choices: Sequence[str], favorites: Sequence[str] = (), per_line: int = 10,
                   limit: Optional[int] = None) -> str:
    """
    Format currency codes for a chat message.
    
    Favorites are listed on their own line (marked with a star) and then
    left out of the remaining codes.
    
    Args:
        choices: Codes to list, in display order
        favorites: Pinned codes
        per_line: Codes per line
        limit: Maximum number of non-favorite codes to show
        
    Returns:
        Formatted text, or a notice when there is nothing to list
    """
    pinned = set(favorites)
    rest: List[str] = [code for code in dict.fromkeys(choices) if code not in pinned]
    if not rest and not favorites:
        return "No currencies available yet. Try /refresh."
    
    lines = []
    if favorites:
        lines.append("★ " + " ".join(favorites))
    
    hidden = 0
    if limit is not None and len(rest) > limit:
        hidden = len(rest) - limit
        rest = rest[:limit]
    
    for i in range(0, len(rest), per_line):
        lines.append(" ".join(rest[i:i + per_line]))
    if hidden:
        lines.append(f"… and {hidden} more")
    return "\n".join(lines)
