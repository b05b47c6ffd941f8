# src/fxconv/application/session.py
"""
Converter Session - Selection State and User Actions

This module keeps the "from"/"to" currency selection for one conversation
and implements the user actions of the converter: convert, swap, set the
default currency, and add a favorite. It works on the rate store and the
preferences passed in and knows nothing about Telegram.

Files that USE this module:
- fxconv.adapters.telegram.handlers (one session per chat)
- fxconv.adapters.formatting.formatter (status display)
- tests.test_session (unit tests)

Files that this module USES:
- fxconv.application.preferences (Preferences)
- fxconv.application.rate_store (RateStore)
- fxconv.domain (Conversion, UnknownCurrencyError)
"""
from __future__ import annotations

import logging
from typing import List, Optional

from fxconv.application.preferences import Preferences
from fxconv.application.rate_store import RateStore
from fxconv.domain.errors import UnknownCurrencyError
from fxconv.domain.models import Conversion

logger = logging.getLogger(__name__)


class ConverterSession:
    """Currency selection plus the actions available on it."""

    def __init__(self, store: RateStore, preferences: Preferences):
        self.store = store
        self.preferences = preferences
        self.from_currency: Optional[str] = None
        self.to_currency: Optional[str] = None
        self.last_amount: Optional[float] = None
        self.reset_selection()

    def choices(self) -> List[str]:
        """Favorites first, then every currency of the loaded table."""
        return self.preferences.currency_choices(self.store.list_currencies())

    def reset_selection(self) -> None:
        """
        Select the default currency (or the first choice) as "from"
        and the first choice as "to".
        """
        choices = self.choices()
        if not choices:
            self.from_currency = self.to_currency = None
            return
        default = self.preferences.default_currency
        self.from_currency = default if default in choices else choices[0]
        self.to_currency = choices[0]

    def ensure_selection(self) -> None:
        """Fill empty selections once rates become available."""
        if self.from_currency is None or self.to_currency is None:
            self.reset_selection()

    def _check(self, code: str) -> str:
        normalized = (code or "").strip().upper()
        if normalized not in self.choices():
            raise UnknownCurrencyError(f"{code!r} is not an available currency")
        return normalized

    def select_from(self, code: str) -> str:
        self.from_currency = self._check(code)
        return self.from_currency

    def select_to(self, code: str) -> str:
        self.to_currency = self._check(code)
        return self.to_currency

    def swap(self) -> None:
        self.from_currency, self.to_currency = self.to_currency, self.from_currency

    def convert(self, amount: float) -> Conversion:
        """
        Convert `amount` from the selected "from" to the selected "to" currency.
        
        Raises:
            RatesUnavailableError: If no rates are loaded or a selection has no rate
        """
        self.ensure_selection()
        from_code = self.from_currency or ""
        to_code = self.to_currency or ""
        result = self.store.convert(amount, from_code, to_code)
        self.last_amount = amount
        return Conversion(
            amount=amount,
            from_currency=from_code,
            to_currency=to_code,
            result=result,
        )

    def set_default(self) -> Optional[str]:
        """Make the "from" selection the default currency and persist it."""
        self.ensure_selection()
        if self.from_currency is None:
            return None
        self.preferences.set_default_currency(self.from_currency)
        self.preferences.save()
        logger.info("Default 'from' currency set to %s", self.from_currency)
        return self.from_currency

    def add_favorite(self) -> bool:
        """
        Add the "to" selection to the favorites and persist it.
        
        Returns:
            False if nothing is selected or it is already a favorite
        """
        self.ensure_selection()
        if self.to_currency is None:
            return False
        added = self.preferences.add_favorite(self.to_currency)
        if added:
            self.preferences.save()
            logger.info("%s added to favorites", self.to_currency)
        return added
