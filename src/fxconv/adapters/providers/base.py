# src/fxconv/adapters/providers/base.py
"""
Base Provider Interface for Exchange Rate Providers

This module defines the abstract base class for rate providers.
It establishes the contract that provider implementations must follow.

Files that USE this module:
- fxconv.adapters.providers.exchangerate_api (ExchangeRateAPIProvider implements RateProvider)
- fxconv.application.rate_store (RateStore depends on RateProvider)
- tests.test_rate_store (fake providers)

Files that this module USES:
- fxconv.domain.models (RateTable returned by providers)
"""
from abc import ABC, abstractmethod

from fxconv.domain.models import RateTable


class RateProvider(ABC):
    @abstractmethod
    def latest(self, base: str) -> RateTable:
        """
        Return the latest rates of every available currency against `base`.
        
        Raises:
            ProviderUnavailableError: On any transport, HTTP, or payload failure
        """
        raise NotImplementedError
