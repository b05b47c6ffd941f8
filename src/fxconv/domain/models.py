# src/fxconv/domain/models.py
"""
Domain Models - Pure Business Objects

This module contains domain models representing core business concepts:
- Rate tables fetched from the provider
- Conversion results

Files that USE this module:
- fxconv.application.* (rate store and session use domain models)
- fxconv.adapters.* (providers create rate tables, formatter renders conversions)
- tests.* (tests use domain models for test data)

Files that this module USES:
- fxconv.domain.errors (InvalidRateError for rate validation)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

import math  # Finite checks for rate values
from dataclasses import dataclass, field  # Decorators for creating data classes
from types import MappingProxyType  # Read-only view over the rates mapping
from typing import Mapping  # Type hints for mappings

from fxconv.domain.errors import InvalidRateError

NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class RateTable:
    """
    Snapshot of rates against a single reference currency.
    
    Attributes:
        base: Reference currency code every rate is expressed against
        rates: Currency code -> units of that currency per 1 unit of base
        last_updated: Provider timestamp of this snapshot (UTC string)
        next_update: Provider timestamp of the next snapshot (UTC string)
    """
    base: str
    rates: Mapping[str, float] = field(default_factory=dict)
    last_updated: str = NOT_AVAILABLE
    next_update: str = NOT_AVAILABLE

    def __post_init__(self) -> None:
        checked = {}
        for code, value in self.rates.items():
            rate = float(value)
            if not math.isfinite(rate) or rate <= 0:
                raise InvalidRateError(f"Rate for {code} must be positive, got {value!r}")
            checked[code] = rate
        object.__setattr__(self, "rates", MappingProxyType(checked))

    def rate(self, code: str) -> float:
        """Return the rate for `code`; raises KeyError if absent."""
        return self.rates[code]

    def __contains__(self, code: object) -> bool:
        return code in self.rates

    def __len__(self) -> int:
        return len(self.rates)


@dataclass(frozen=True)
class Conversion:
    """
    Result of converting an amount between two currencies.
    
    Attributes:
        amount: Amount in the source currency
        from_currency: Source currency code
        to_currency: Target currency code
        result: Unrounded amount in the target currency
    """
    amount: float
    from_currency: str
    to_currency: str
    result: float
