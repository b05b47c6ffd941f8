# src/fxconv/adapters/formatting/__init__.py
"""
Formatting Adapters - Output Formatting

This package contains formatters for converter output.
"""

from fxconv.adapters.formatting.formatter import (
    format_amount,
    format_choices,
    format_conversion,
    format_status,
    format_update_times,
)

__all__ = [
    "format_amount",
    "format_choices",
    "format_conversion",
    "format_status",
    "format_update_times",
]
