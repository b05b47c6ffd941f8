# src/fxconv/application/preferences.py
"""
Preferences - User Preference State

This module holds the user's default "from" currency, favorite currencies,
and the ExchangeRate-API key. It is loaded once at startup and passed
explicitly to whoever needs it; every mutation made from the chat is
followed by save().

Files that USE this module:
- fxconv.app (loads preferences and resolves the credential)
- fxconv.application.session (reads choices, sets default, adds favorites)
- fxconv.adapters.telegram.handlers (stores a new API key)

Files that this module USES:
- fxconv.adapters.persistence.preferences_store (load_record, save_record)
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from fxconv.adapters.persistence.preferences_store import (
    PreferencesRecord,
    load_record,
    preferences_path,
    save_record,
)

logger = logging.getLogger(__name__)


class Preferences:
    """Default currency, favorites (newest first), and API credential."""

    def __init__(
        self,
        default_currency: Optional[str] = None,
        favorites: Optional[Iterable[str]] = None,
        credential: str = "",
        path: Optional[Path] = None,
    ):
        self.default_currency = default_currency or None
        self.favorites: List[str] = list(dict.fromkeys(favorites or []))
        self.credential = credential or ""
        self.path = preferences_path(path)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Preferences":
        """
        Load preferences from disk.
        
        Never raises: a missing or unreadable file gives empty defaults.
        """
        record = load_record(path)
        return cls(
            default_currency=record.default_from_currency or None,
            favorites=record.favorite_currencies,
            credential=record.api_key,
            path=path,
        )

    def to_record(self) -> PreferencesRecord:
        return PreferencesRecord(
            default_from_currency=self.default_currency or "",
            favorite_currencies=list(self.favorites),
            api_key=self.credential,
        )

    def save(self) -> bool:
        """
        Overwrite the preference file with the current state.
        
        Returns:
            True on success; False if the write failed (in-memory state is kept)
        """
        try:
            save_record(self.to_record(), self.path)
            return True
        except OSError as e:
            logger.error("Failed to save preferences to %s: %s", self.path, e)
            return False

    @property
    def has_credential(self) -> bool:
        return bool(self.credential.strip())

    def set_default_currency(self, code: Optional[str]) -> None:
        self.default_currency = code or None

    def set_credential(self, value: str) -> None:
        self.credential = (value or "").strip()

    def add_favorite(self, code: str) -> bool:
        """
        Pin a currency at the top of the favorites.
        
        Returns:
            False (and no change) if already a favorite, True if added
        """
        if code in self.favorites:
            return False
        self.favorites.insert(0, code)
        return True

    def currency_choices(self, available: Iterable[str]) -> List[str]:
        """Favorites first, followed by every available currency."""
        return list(self.favorites) + list(available)

    def __repr__(self) -> str:
        return (
            f"Preferences(default_currency={self.default_currency!r}, "
            f"favorites={self.favorites!r}, credential={'***' if self.credential else ''!r})"
        )
