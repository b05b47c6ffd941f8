# src/fxconv/application/rate_store.py
"""
Rate Store - In-Memory Rate Table and Conversion

This module owns the most recently fetched rate table and performs
conversions against it. A refresh replaces the table wholesale; a failed
refresh keeps the previous table and is reported as False, never raised.

Files that USE this module:
- fxconv.app (constructs the store and performs the initial refresh)
- fxconv.application.session (conversions and currency lists)
- fxconv.adapters.telegram.handlers (refresh and update times)
- fxconv.adapters.formatting.formatter (update times)

Files that this module USES:
- fxconv.adapters.providers.base (RateProvider interface)
- fxconv.domain (RateTable, errors)
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from fxconv.adapters.providers.base import RateProvider
from fxconv.domain.errors import DomainError, RatesUnavailableError
from fxconv.domain.models import NOT_AVAILABLE, RateTable

logger = logging.getLogger(__name__)


class RateStore:
    """
    Holds rates against one reference currency.
    
    Rates mean "units of currency X per 1 unit of the reference currency",
    so converting between any two loaded currencies is a single ratio.
    """

    def __init__(self, provider: RateProvider, reference_currency: str = "USD", refresh_on_init: bool = True):
        """
        Args:
            provider: Source of rate tables
            reference_currency: Base currency requested from the provider
            refresh_on_init: Fetch rates immediately (result only logged)
        """
        self.provider = provider
        self.reference_currency = reference_currency.upper()
        self._table: Optional[RateTable] = None
        if refresh_on_init:
            self.refresh()

    @property
    def table(self) -> Optional[RateTable]:
        return self._table

    @property
    def has_rates(self) -> bool:
        return self._table is not None

    def set_provider(self, provider: RateProvider) -> None:
        """Swap the provider (e.g. after a new API key); the current table stays."""
        self.provider = provider

    def refresh(self) -> bool:
        """
        Fetch a new rate table from the provider.
        
        Returns:
            True if the table was replaced, False if the old one was kept
        """
        logger.info("Refreshing rates for %s", self.reference_currency)
        try:
            table = self.provider.latest(self.reference_currency)
        except DomainError as e:
            logger.warning("Failed to refresh rates: %s", e)
            return False
        except Exception:
            logger.exception("Unexpected error refreshing rates")
            return False

        if not isinstance(table, RateTable) or len(table) == 0:
            logger.warning("Provider returned no rates, keeping previous table")
            return False

        self._table = table
        logger.info(
            "Rates updated (%d currencies). Last update: %s, Next update: %s",
            len(table), table.last_updated, table.next_update,
        )
        return True

    async def refresh_async(self) -> bool:
        """Run refresh() in a worker thread so the event loop is not blocked."""
        return await asyncio.to_thread(self.refresh)

    def convert(self, amount: float, from_currency: str, to_currency: str) -> float:
        """
        Convert `amount` of `from_currency` into `to_currency`.
        
        No rounding is applied.
        
        Raises:
            RatesUnavailableError: If no table is loaded or a code is not in it
        """
        logger.info("Converting %s from %s to %s", amount, from_currency, to_currency)
        table = self._table
        if table is None or from_currency not in table or to_currency not in table:
            logger.warning("Exchange rates not available for %s or %s", from_currency, to_currency)
            raise RatesUnavailableError(from_currency, to_currency)

        result = amount * (table.rate(to_currency) / table.rate(from_currency))
        logger.info("Conversion result: %s", result)
        return result

    def list_currencies(self) -> List[str]:
        """Sorted currency codes of the current table (empty before the first refresh)."""
        if self._table is None:
            return []
        return sorted(self._table.rates)

    def last_updated(self) -> str:
        return (self._table.last_updated if self._table else None) or NOT_AVAILABLE

    def next_update(self) -> str:
        return (self._table.next_update if self._table else None) or NOT_AVAILABLE
