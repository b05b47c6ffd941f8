# src/fxconv/adapters/persistence/__init__.py
"""
Persistence Adapters - Data Storage

This package contains adapters for persisting data:
- File-based preference storage (JSON)
"""

from fxconv.adapters.persistence.preferences_store import (
    PreferencesRecord,
    load_record,
    preferences_path,
    save_record,
)

__all__ = [
    "PreferencesRecord",
    "load_record",
    "preferences_path",
    "save_record",
]
