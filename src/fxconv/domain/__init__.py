# src/fxconv/domain/__init__.py
"""
Domain Layer - Pure Business Objects

This package contains domain models and business rules.
No dependencies on infrastructure or external systems.
"""

from fxconv.domain.models import (
    NOT_AVAILABLE,
    Conversion,
    RateTable,
)
from fxconv.domain.errors import (
    DomainError,
    InvalidRateError,
    MissingCredentialError,
    ProviderUnavailableError,
    RatesUnavailableError,
    UnknownCurrencyError,
)

__all__ = [
    "NOT_AVAILABLE",
    "RateTable",
    "Conversion",
    "DomainError",
    "InvalidRateError",
    "MissingCredentialError",
    "ProviderUnavailableError",
    "RatesUnavailableError",
    "UnknownCurrencyError",
]
